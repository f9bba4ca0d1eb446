"""Tests for the main window."""

from PySide6.QtCore import Qt
from pytestqt.qtbot import QtBot

from speakerctrl.api.errors import FailureKind
from speakerctrl.core.coordinator import ALL_GROUPS, Action, CommandCoordinator, CommandResult
from speakerctrl.models.device import Device
from speakerctrl.ui.main_window import MainWindow, format_result


class TestFormatResult:
    """Test user-facing result text."""

    def test_validation_is_bare(self) -> None:
        """Test local rejections show the message alone."""
        result = CommandResult(
            Action.CREATE_GROUP, False, "You need at least 2 speakers to create a group",
            FailureKind.VALIDATION,
        )
        assert format_result(result) == "You need at least 2 speakers to create a group"

    def test_group_response(self) -> None:
        """Test backend text is shown verbatim after a prefix."""
        result = CommandResult(Action.CREATE_GROUP, True, "OK")
        assert format_result(result) == "Group creation response: OK"

    def test_group_error(self) -> None:
        """Test failure prefix for grouping."""
        result = CommandResult(Action.DISSOLVE_GROUP, False, "No group", FailureKind.REJECTED)
        assert format_result(result) == "Error ungrouping: No group"

    def test_add_success_unprefixed(self) -> None:
        """Test the add confirmation stands alone."""
        result = CommandResult(Action.ADD_DEVICE, True, "Added speaker: Office (192.168.1.30)")
        assert format_result(result) == "Added speaker: Office (192.168.1.30)"

    def test_add_error(self) -> None:
        """Test failure prefix for adding."""
        result = CommandResult(Action.ADD_DEVICE, False, "busy", FailureKind.REJECTED)
        assert format_result(result) == "Error adding speaker: busy"


class TestMainWindowCreation:
    """Test MainWindow construction."""

    def test_creation(self, qtbot: QtBot) -> None:
        """Test that the window can be created without a coordinator."""
        window = MainWindow()
        qtbot.addWidget(window)
        assert window.windowTitle() == "SpeakerCTRL"
        assert window.status_text == "Connecting..."

    def test_has_panels(self, qtbot: QtBot) -> None:
        """Test that both panels exist."""
        window = MainWindow()
        qtbot.addWidget(window)
        assert window.devices_panel is not None
        assert window.grouping_panel is not None

    def test_connection_status(self, qtbot: QtBot) -> None:
        """Test the status indicator text."""
        window = MainWindow()
        qtbot.addWidget(window)
        window.set_connection_status(True, "Connected")
        assert window.status_text == "Connected"
        window.set_connection_status(False, "Server Unreachable")
        assert window.status_text == "Server Unreachable"


class TestMainWindowRendering:
    """Test that the window follows the coordinator's state."""

    def test_initial_render(
        self, qtbot: QtBot, coordinator: CommandCoordinator, sample_devices: list[Device]
    ) -> None:
        """Test state that exists before binding is rendered."""
        coordinator.directory.replace(sample_devices)
        coordinator.selection.toggle("Kitchen")

        window = MainWindow(coordinator)
        qtbot.addWidget(window)

        assert window.devices_panel.device_count == 3
        item = window.devices_panel.item_for("Kitchen")
        assert item is not None
        assert item.checkState() == Qt.CheckState.Checked

    def test_directory_updates(
        self, qtbot: QtBot, coordinator: CommandCoordinator, sample_devices: list[Device]
    ) -> None:
        """Test devices and group choices follow the directory."""
        window = MainWindow(coordinator)
        qtbot.addWidget(window)

        coordinator.directory.replace(sample_devices)

        assert window.devices_panel.device_count == 3
        combo = window.grouping_panel._group_combo
        assert [combo.itemData(i) for i in range(combo.count())] == ["", ALL_GROUPS, "Downstairs"]

    def test_selection_updates(self, qtbot: QtBot, coordinator: CommandCoordinator) -> None:
        """Test the selection count follows the tracker."""
        window = MainWindow(coordinator)
        qtbot.addWidget(window)
        coordinator.selection.toggle("Kitchen")
        coordinator.selection.toggle("Bedroom")
        assert window.grouping_panel._selection_label.text() == "2 speakers selected"

    def test_connection_signal(self, qtbot: QtBot, coordinator: CommandCoordinator) -> None:
        """Test connectivity changes reach the status bar."""
        window = MainWindow(coordinator)
        qtbot.addWidget(window)
        coordinator.connection_changed.emit(False, "Server Unreachable")
        assert window.status_text == "Server Unreachable"


class TestMainWindowCommands:
    """Test command requests and result display."""

    def test_panel_requests(self, qtbot: QtBot) -> None:
        """Test panel signals become action requests."""
        window = MainWindow()
        qtbot.addWidget(window)
        received: list[tuple[object, object]] = []
        window.action_requested.connect(lambda action, args: received.append((action, args)))

        window.devices_panel.selection_toggled.emit("Kitchen")
        window.devices_panel.add_requested.emit("192.168.1.30", "")
        window.grouping_panel.create_requested.emit("Downstairs")
        window.grouping_panel.ungroup_requested.emit(ALL_GROUPS)

        assert received == [
            (Action.TOGGLE_SELECTION, ("Kitchen",)),
            (Action.ADD_DEVICE, ("192.168.1.30", None)),
            (Action.CREATE_GROUP, ("Downstairs",)),
            (Action.DISSOLVE_GROUP, (ALL_GROUPS,)),
        ]

    def test_refresh_button(self, qtbot: QtBot) -> None:
        """Test the refresh button requests a refresh."""
        window = MainWindow()
        qtbot.addWidget(window)
        with qtbot.waitSignal(window.action_requested, timeout=1000) as blocker:
            qtbot.mouseClick(window._refresh_btn, Qt.MouseButton.LeftButton)
        assert blocker.args == [Action.REFRESH, ()]

    def test_busy_until_finished(self, qtbot: QtBot, coordinator: CommandCoordinator) -> None:
        """Test the button is busy between start and finish."""
        window = MainWindow(coordinator)
        qtbot.addWidget(window)
        button = window.grouping_panel._create_btn

        coordinator.command_started.emit(Action.CREATE_GROUP)
        assert not button.isEnabled()

        coordinator.command_finished.emit(CommandResult(Action.CREATE_GROUP, True, "OK"))
        assert button.isEnabled()
        assert window.message_text == "Group creation response: OK"

    def test_failure_message(self, qtbot: QtBot, coordinator: CommandCoordinator) -> None:
        """Test a failure is shown as an error."""
        window = MainWindow(coordinator)
        qtbot.addWidget(window)
        coordinator.command_finished.emit(
            CommandResult(Action.CREATE_GROUP, False, "Speaker busy", FailureKind.REJECTED)
        )
        assert window.message_text == "Error creating group: Speaker busy"
        assert "#c62828" in window._message_label.styleSheet()

    def test_add_success_clears_form(self, qtbot: QtBot, coordinator: CommandCoordinator) -> None:
        """Test the add form is reset after a successful add."""
        window = MainWindow(coordinator)
        qtbot.addWidget(window)
        window.devices_panel._ip_input.setText("192.168.1.30")

        coordinator.command_finished.emit(
            CommandResult(Action.ADD_DEVICE, True, "Added speaker: Office (192.168.1.30)")
        )

        assert window.devices_panel._ip_input.text() == ""

    def test_add_failure_keeps_form(self, qtbot: QtBot, coordinator: CommandCoordinator) -> None:
        """Test the add form is kept after a failure."""
        window = MainWindow(coordinator)
        qtbot.addWidget(window)
        window.devices_panel._ip_input.setText("999.1.1.1")

        coordinator.command_finished.emit(
            CommandResult(
                Action.ADD_DEVICE, False, "Please enter a valid IP address (e.g., 192.168.1.100)",
                FailureKind.VALIDATION,
            )
        )

        assert window.devices_panel._ip_input.text() == "999.1.1.1"
        assert window.message_text == "Please enter a valid IP address (e.g., 192.168.1.100)"
