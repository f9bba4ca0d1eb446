"""Main application window.

Layout:
+--------------------------------+
| Speakers        | Grouping     |
| (checkable list | (create /    |
|  + add form)    |  ungroup)    |
+--------------------------------+
| response message               |
+--------------------------------+
| status bar: connection  [Refresh]
"""

import logging

from PySide6.QtCore import Signal, Slot
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from speakerctrl.api.errors import FailureKind
from speakerctrl.core.coordinator import Action, CommandCoordinator, CommandResult
from speakerctrl.models.device import Device
from speakerctrl.ui.panels.devices import DevicesPanel
from speakerctrl.ui.panels.grouping import GroupingPanel

logger = logging.getLogger(__name__)

# Message colors keyed by message type
_MESSAGE_COLORS = {
    "success": "#2e7d32",
    "error": "#c62828",
    "info": "#455a64",
}

_STATUS_CONNECTED_STYLE = "background-color: #2e7d32; color: white; padding: 2px 8px;"
_STATUS_DISCONNECTED_STYLE = "background-color: #c62828; color: white; padding: 2px 8px;"

# Prefixes for backend text responses (response, transport error)
_RESULT_PREFIXES = {
    Action.CREATE_GROUP: ("Group creation response", "Error creating group"),
    Action.DISSOLVE_GROUP: ("Ungroup response", "Error ungrouping"),
    Action.ADD_DEVICE: ("", "Error adding speaker"),
}


def format_result(result: CommandResult) -> str:
    """Return the text shown to the user for a command result."""
    if result.kind is FailureKind.VALIDATION:
        return result.message
    response_prefix, error_prefix = _RESULT_PREFIXES.get(result.action, ("", ""))
    prefix = error_prefix if result.is_error else response_prefix
    return f"{prefix}: {result.message}" if prefix else result.message


class MainWindow(QMainWindow):
    """Main application window.

    The window renders snapshots from the coordinator's DirectoryStore and
    SelectionTracker and turns clicks into action requests. It holds no
    business state of its own.

    Example:
        window = MainWindow(coordinator)
        window.action_requested.connect(lambda action, args: worker.submit(action, *args))
        window.show()
    """

    action_requested = Signal(object, object)  # Action, tuple of arguments

    def __init__(self, coordinator: CommandCoordinator | None = None) -> None:
        """Initialize the main window.

        Args:
            coordinator: Optional coordinator to render and report for.
        """
        super().__init__()
        self._coordinator = coordinator

        self._setup_ui()
        self._connect_panels()
        if coordinator is not None:
            self.bind(coordinator)

    @property
    def devices_panel(self) -> DevicesPanel:
        """Return the speakers panel."""
        return self._devices_panel

    @property
    def grouping_panel(self) -> GroupingPanel:
        """Return the grouping panel."""
        return self._grouping_panel

    @property
    def message_text(self) -> str:
        """Return the current response message."""
        return self._message_label.text()

    @property
    def status_text(self) -> str:
        """Return the connection status text."""
        return self._status_label.text()

    def _setup_ui(self) -> None:
        """Set up the user interface."""
        self.setWindowTitle("SpeakerCTRL")
        self.setMinimumSize(720, 480)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)

        splitter = QSplitter()
        self._devices_panel = DevicesPanel()
        self._grouping_panel = GroupingPanel()
        splitter.addWidget(self._devices_panel)
        splitter.addWidget(self._grouping_panel)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 0)
        main_layout.addWidget(splitter, 1)

        message_row = QHBoxLayout()
        self._message_label = QLabel()
        self._message_label.setWordWrap(True)
        message_row.addWidget(self._message_label, 1)
        main_layout.addLayout(message_row)

        # Connection status (right side of status bar)
        self._status_label = QLabel("Connecting...")
        self.statusBar().addPermanentWidget(self._status_label)

        self._refresh_btn = QPushButton("Refresh")
        self._refresh_btn.clicked.connect(self._on_refresh_clicked)
        self.statusBar().addPermanentWidget(self._refresh_btn)

    def _connect_panels(self) -> None:
        """Turn panel signals into action requests."""
        self._devices_panel.selection_toggled.connect(self._on_selection_toggled)
        self._devices_panel.add_requested.connect(self._on_add_requested)
        self._grouping_panel.create_requested.connect(self._on_create_requested)
        self._grouping_panel.ungroup_requested.connect(self._on_ungroup_requested)

    def bind(self, coordinator: CommandCoordinator) -> None:
        """Subscribe to the coordinator's stores and command signals.

        Args:
            coordinator: The coordinator to render.
        """
        self._coordinator = coordinator
        coordinator.directory.devices_changed.connect(self._on_devices_changed)
        coordinator.selection.selection_changed.connect(self._on_selection_changed)
        coordinator.connection_changed.connect(self.set_connection_status)
        coordinator.command_started.connect(self._on_command_started)
        coordinator.command_finished.connect(self._on_command_finished)

        # Render whatever is already known
        self._on_devices_changed(coordinator.directory.all())
        self._on_selection_changed(coordinator.selection.snapshot())

    def show_message(self, message: str, message_type: str = "info") -> None:
        """Show a response message.

        Args:
            message: Text to show.
            message_type: "success", "error" or "info".
        """
        color = _MESSAGE_COLORS.get(message_type, _MESSAGE_COLORS["info"])
        self._message_label.setStyleSheet(f"color: {color};")
        self._message_label.setText(message)

    @Slot(bool, str)
    def set_connection_status(self, connected: bool, message: str) -> None:
        """Update the connection indicator.

        Args:
            connected: Whether the backend is reachable.
            message: Status text.
        """
        self._status_label.setText(message)
        self._status_label.setStyleSheet(
            _STATUS_CONNECTED_STYLE if connected else _STATUS_DISCONNECTED_STYLE
        )

    def _request(self, action: Action, *args: object) -> None:
        self.action_requested.emit(action, args)

    @Slot()
    def _on_refresh_clicked(self) -> None:
        self._request(Action.REFRESH)

    @Slot(str)
    def _on_selection_toggled(self, name: str) -> None:
        self._request(Action.TOGGLE_SELECTION, name)

    @Slot(str, str)
    def _on_add_requested(self, ip: str, name: str) -> None:
        self._request(Action.ADD_DEVICE, ip, name or None)

    @Slot(str)
    def _on_create_requested(self, group_name: str) -> None:
        self._request(Action.CREATE_GROUP, group_name)

    @Slot(str)
    def _on_ungroup_requested(self, selector: str) -> None:
        self._request(Action.DISSOLVE_GROUP, selector)

    @Slot(object)
    def _on_devices_changed(self, devices: list[Device]) -> None:
        self._devices_panel.set_devices(devices)
        # Derived from the snapshot; the store may already be newer
        self._grouping_panel.set_groups(sorted({d.group_name for d in devices if d.group_name}))

    @Slot(object)
    def _on_selection_changed(self, names: list[str]) -> None:
        self._devices_panel.set_selection(names)
        self._grouping_panel.set_selection_count(len(names))

    def _set_busy(self, action: Action, busy: bool) -> None:
        if action is Action.CREATE_GROUP:
            self._grouping_panel.set_create_busy(busy)
        elif action is Action.DISSOLVE_GROUP:
            self._grouping_panel.set_ungroup_busy(busy)
        elif action is Action.ADD_DEVICE:
            self._devices_panel.set_add_busy(busy)

    @Slot(object)
    def _on_command_started(self, action: Action) -> None:
        self._set_busy(action, True)

    @Slot(object)
    def _on_command_finished(self, result: CommandResult) -> None:
        self._set_busy(result.action, False)
        self.show_message(format_result(result), "error" if result.is_error else "success")
        if result.action is Action.ADD_DEVICE and result.success:
            self._devices_panel.clear_form()
