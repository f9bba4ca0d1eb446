"""Grouping panel - create a group from the selection or dissolve groups."""

from PySide6.QtCore import Signal, Slot
from PySide6.QtWidgets import (
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from speakerctrl.core.coordinator import ALL_GROUPS

_CREATE_LABEL = "Create Group"
_CREATE_BUSY_LABEL = "Creating..."
_UNGROUP_LABEL = "Ungroup"
_UNGROUP_BUSY_LABEL = "Ungrouping..."


class GroupingPanel(QWidget):
    """Right panel with the group and ungroup controls.

    Example:
        panel = GroupingPanel()
        panel.set_groups(directory.group_names())
        panel.create_requested.connect(lambda name: print(name))
    """

    create_requested = Signal(str)  # group name (may be empty)
    ungroup_requested = Signal(str)  # group name or ALL_GROUPS, "" if none chosen

    def __init__(self) -> None:
        """Initialize the grouping panel."""
        super().__init__()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # Create group
        create_box = QGroupBox("Create Group")
        create_layout = QVBoxLayout(create_box)
        self._selection_label = QLabel()
        create_layout.addWidget(self._selection_label)
        self._group_name_input = QLineEdit()
        self._group_name_input.setPlaceholderText("Group name (optional)")
        create_layout.addWidget(self._group_name_input)
        self._create_btn = QPushButton(_CREATE_LABEL)
        self._create_btn.clicked.connect(self._on_create_clicked)
        create_layout.addWidget(self._create_btn)
        layout.addWidget(create_box)

        # Ungroup
        ungroup_box = QGroupBox("Ungroup")
        ungroup_layout = QHBoxLayout(ungroup_box)
        self._group_combo = QComboBox()
        ungroup_layout.addWidget(self._group_combo, 1)
        self._ungroup_btn = QPushButton(_UNGROUP_LABEL)
        self._ungroup_btn.clicked.connect(self._on_ungroup_clicked)
        ungroup_layout.addWidget(self._ungroup_btn)
        layout.addWidget(ungroup_box)

        layout.addStretch()

        self.set_groups([])
        self.set_selection_count(0)

    @property
    def group_name(self) -> str:
        """Return the group name typed by the user (trimmed)."""
        return self._group_name_input.text().strip()

    def set_group_name(self, name: str) -> None:
        """Prefill the group name field."""
        self._group_name_input.setText(name)

    def selected_group(self) -> str:
        """Return the chosen ungroup selector, or "" if none."""
        data = self._group_combo.currentData()
        return str(data) if data else ""

    def set_groups(self, names: list[str]) -> None:
        """Rebuild the group selector, keeping the current choice if it still exists.

        Args:
            names: Group names derived from the directory.
        """
        current = self.selected_group()
        self._group_combo.blockSignals(True)
        try:
            self._group_combo.clear()
            self._group_combo.addItem("Select a group...", "")
            self._group_combo.addItem("All groups", ALL_GROUPS)
            for name in names:
                self._group_combo.addItem(name, name)
            index = self._group_combo.findData(current) if current else 0
            self._group_combo.setCurrentIndex(max(index, 0))
        finally:
            self._group_combo.blockSignals(False)

    def set_selection_count(self, count: int) -> None:
        """Show how many speakers are selected."""
        noun = "speaker" if count == 1 else "speakers"
        self._selection_label.setText(f"{count} {noun} selected")

    def set_create_busy(self, busy: bool) -> None:
        """Disable the create button while a request is in flight."""
        self._create_btn.setEnabled(not busy)
        self._create_btn.setText(_CREATE_BUSY_LABEL if busy else _CREATE_LABEL)

    def set_ungroup_busy(self, busy: bool) -> None:
        """Disable the ungroup button while a request is in flight."""
        self._ungroup_btn.setEnabled(not busy)
        self._ungroup_btn.setText(_UNGROUP_BUSY_LABEL if busy else _UNGROUP_LABEL)

    @Slot()
    def _on_create_clicked(self) -> None:
        self.create_requested.emit(self.group_name)

    @Slot()
    def _on_ungroup_clicked(self) -> None:
        self.ungroup_requested.emit(self.selected_group())
