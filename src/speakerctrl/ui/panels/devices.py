"""Devices panel - checkable speaker list plus the manual add form."""

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from speakerctrl.models.device import Device

_ADD_LABEL = "Add Speaker"
_ADD_BUSY_LABEL = "Adding..."


def describe_device(device: Device) -> str:
    """Return the list row text for a device."""
    parts = [device.display_name, device.address]
    if device.model:
        parts.append(device.model)
    text = " - ".join(p for p in parts if p)
    if device.group_name:
        text += f"  [{device.group_name}]"
    return text


class DevicesPanel(QWidget):
    """Left panel showing the speaker directory.

    Each speaker is a checkable row; checking a row toggles it in the
    selection. The panel only renders snapshots it is given.

    Example:
        panel = DevicesPanel()
        panel.set_devices(directory.all())
        panel.selection_toggled.connect(lambda name: print(name))
    """

    selection_toggled = Signal(str)  # device name
    add_requested = Signal(str, str)  # ip, name

    def __init__(self) -> None:
        """Initialize the devices panel."""
        super().__init__()
        self._selected: set[str] = set()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._header = QLabel("Speakers")
        self._header.setStyleSheet("font-weight: bold;")
        layout.addWidget(self._header)

        self._list = QListWidget()
        self._list.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self._list, 1)

        self._empty_label = QLabel("No speakers discovered yet.")
        layout.addWidget(self._empty_label)

        # Manual add form
        form_box = QGroupBox("Add Speaker Manually")
        form = QFormLayout(form_box)
        self._name_input = QLineEdit()
        self._name_input.setPlaceholderText("Enter speaker name")
        self._ip_input = QLineEdit()
        self._ip_input.setPlaceholderText("Enter IP (e.g., 192.168.1.100)")
        self._add_btn = QPushButton(_ADD_LABEL)
        self._add_btn.clicked.connect(self._on_add_clicked)
        form.addRow("Speaker Name:", self._name_input)
        form.addRow("IP Address:", self._ip_input)
        form.addRow(self._add_btn)
        layout.addWidget(form_box)

    @property
    def device_count(self) -> int:
        """Return the number of rows shown."""
        return self._list.count()

    def item_for(self, name: str) -> QListWidgetItem | None:
        """Return the row for a device name, if shown."""
        for row in range(self._list.count()):
            item = self._list.item(row)
            if item.data(Qt.ItemDataRole.UserRole) == name:
                return item
        return None

    def set_devices(self, devices: list[Device]) -> None:
        """Rebuild the list from a directory snapshot.

        Args:
            devices: Devices in display order.
        """
        self._list.blockSignals(True)
        try:
            self._list.clear()
            for device in devices:
                item = QListWidgetItem(describe_device(device))
                item.setData(Qt.ItemDataRole.UserRole, device.name)
                item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
                checked = device.name in self._selected
                item.setCheckState(Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
                self._list.addItem(item)
        finally:
            self._list.blockSignals(False)
        self._empty_label.setVisible(not devices)

    def set_selection(self, names: list[str]) -> None:
        """Reflect the selection snapshot in the check boxes.

        Args:
            names: Selected device names.
        """
        self._selected = set(names)
        self._list.blockSignals(True)
        try:
            for row in range(self._list.count()):
                item = self._list.item(row)
                checked = item.data(Qt.ItemDataRole.UserRole) in self._selected
                item.setCheckState(Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
        finally:
            self._list.blockSignals(False)

    def set_add_busy(self, busy: bool) -> None:
        """Disable the add button while a request is in flight."""
        self._add_btn.setEnabled(not busy)
        self._add_btn.setText(_ADD_BUSY_LABEL if busy else _ADD_LABEL)

    def clear_form(self) -> None:
        """Reset the add form."""
        self._name_input.clear()
        self._ip_input.clear()

    @Slot(QListWidgetItem)
    def _on_item_changed(self, item: QListWidgetItem) -> None:
        name = item.data(Qt.ItemDataRole.UserRole)
        if name:
            self.selection_toggled.emit(str(name))

    @Slot()
    def _on_add_clicked(self) -> None:
        self.add_requested.emit(self._ip_input.text(), self._name_input.text())
