"""Command coordinator - turns user intent into backend calls.

The coordinator owns the DirectoryStore and SelectionTracker. It fetches the
directory, issues add/group/ungroup commands, reports each outcome as a
CommandResult, and re-fetches the directory after a short delay so local
state converges on whatever the backend actually did.

All coroutines run on a single asyncio loop. Overlapping refreshes are not
cancelled: each successful response replaces the snapshot when it arrives,
so the last response to arrive wins until the next refresh.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from PySide6.QtCore import QObject, Signal

from speakerctrl.api.client import SpeakerApiClient
from speakerctrl.api.errors import FailureKind, SpeakerControlError, ValidationError
from speakerctrl.api.protocol import is_valid_ipv4
from speakerctrl.core.directory import DirectoryStore
from speakerctrl.core.selection import SelectionTracker
from speakerctrl.models.device import Device

logger = logging.getLogger(__name__)

# Selector value meaning "dissolve every group"
ALL_GROUPS = "all"

# Grouping fewer speakers than this is rejected locally
MIN_GROUP_SIZE = 2

DEFAULT_RECONCILIATION_DELAY = 1.0

STATUS_CONNECTED = "Connected"
STATUS_UNREACHABLE = "Server Unreachable"
STATUS_ERROR = "Connection Error"


def validate_address(address: str) -> str:
    """Return the trimmed address, or raise if it is not a dotted-quad IPv4.

    Raises:
        ValidationError: If the address is not four octets 0-255.
    """
    address = address.strip()
    if not is_valid_ipv4(address):
        raise ValidationError("Please enter a valid IP address (e.g., 192.168.1.100)")
    return address


def validate_group_members(names: Iterable[str]) -> list[str]:
    """Return the distinct names in order, or raise if too few to group.

    Raises:
        ValidationError: If fewer than MIN_GROUP_SIZE distinct names remain.
    """
    members = list(dict.fromkeys(names))
    if len(members) < MIN_GROUP_SIZE:
        raise ValidationError("You need at least 2 speakers to create a group")
    return members


def validate_group_selector(selector: str | None) -> str | None:
    """Map an ungroup selector to a group name, None meaning every group.

    Raises:
        ValidationError: If no group was chosen.
    """
    if not selector or not selector.strip():
        raise ValidationError("Please select a group to ungroup")
    return None if selector == ALL_GROUPS else selector


class Action(Enum):
    """User actions understood by the coordinator's dispatch table."""

    REFRESH = "refresh"
    CHECK_CONNECTION = "check_connection"
    TOGGLE_SELECTION = "toggle_selection"
    CLEAR_SELECTION = "clear_selection"
    ADD_DEVICE = "add_device"
    CREATE_GROUP = "create_group"
    DISSOLVE_GROUP = "dissolve_group"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command.

    Attributes:
        action: The command that ran.
        success: Whether the backend reported success.
        message: User-facing text (backend text verbatim where available).
        kind: Failure classification, None on success.
        device: Device returned by add-device, if any.
    """

    action: Action
    success: bool
    message: str = ""
    kind: FailureKind | None = None
    device: Device | None = None

    @property
    def is_error(self) -> bool:
        """Return True if the command failed."""
        return not self.success


class CommandCoordinator(QObject):
    """Coordinates directory refreshes and grouping commands.

    Signals are emitted on the thread running the event loop; Qt queues them
    to receivers living in the GUI thread.

    Example:
        coordinator = CommandCoordinator(SpeakerApiClient(url))
        coordinator.command_finished.connect(show_result)
        await coordinator.refresh_directory()
        coordinator.selection.toggle("Kitchen")
        coordinator.selection.toggle("Living Room")
        await coordinator.create_group("Downstairs")
    """

    # True=backend reachable, plus status text for display
    connection_changed = Signal(bool, str)

    # Optimistic UI feedback: started before the request, finished on every path
    command_started = Signal(object)  # Action
    command_finished = Signal(object)  # CommandResult

    def __init__(
        self,
        client: SpeakerApiClient,
        directory: DirectoryStore | None = None,
        selection: SelectionTracker | None = None,
        reconciliation_delay: float = DEFAULT_RECONCILIATION_DELAY,
    ) -> None:
        """Initialize the coordinator.

        Args:
            client: Backend API client.
            directory: Directory store (a new one if omitted).
            selection: Selection tracker (a new one if omitted).
            reconciliation_delay: Seconds to wait before re-fetching after a command.
        """
        super().__init__()
        self._client = client
        self._directory = directory if directory is not None else DirectoryStore()
        self._selection = selection if selection is not None else SelectionTracker()
        self._reconciliation_delay = reconciliation_delay
        self._connected: bool | None = None
        self._status_text = ""
        self._pending: set[asyncio.Task[bool]] = set()

        self._handlers: dict[Action, Callable[..., Awaitable[object]]] = {
            Action.REFRESH: self.refresh_directory,
            Action.CHECK_CONNECTION: self.check_connection,
            Action.TOGGLE_SELECTION: self.toggle_selection,
            Action.CLEAR_SELECTION: self.clear_selection,
            Action.ADD_DEVICE: self.add_device,
            Action.CREATE_GROUP: self.create_group,
            Action.DISSOLVE_GROUP: self.dissolve_group,
        }

    @property
    def client(self) -> SpeakerApiClient:
        """Return the backend API client."""
        return self._client

    @property
    def directory(self) -> DirectoryStore:
        """Return the directory store."""
        return self._directory

    @property
    def selection(self) -> SelectionTracker:
        """Return the selection tracker."""
        return self._selection

    @property
    def reconciliation_delay(self) -> float:
        """Return the delay in seconds before a post-command refresh."""
        return self._reconciliation_delay

    @reconciliation_delay.setter
    def reconciliation_delay(self, seconds: float) -> None:
        self._reconciliation_delay = max(0.0, seconds)

    @property
    def is_connected(self) -> bool | None:
        """Return last known connectivity, or None before the first probe."""
        return self._connected

    @property
    def status_text(self) -> str:
        """Return the last connectivity status text."""
        return self._status_text

    @property
    def pending_refreshes(self) -> int:
        """Return the number of scheduled reconciliation refreshes not yet done."""
        return len(self._pending)

    async def dispatch(self, action: Action, *args: object) -> object:
        """Run the handler registered for an action.

        Args:
            action: The user action.
            *args: Positional arguments for the handler.

        Returns:
            Whatever the handler returns.

        Raises:
            KeyError: If no handler is registered for the action.
        """
        handler = self._handlers[action]
        logger.debug("Dispatching %s%r", action.value, args)
        return await handler(*args)

    def _set_connection(self, connected: bool, text: str) -> None:
        """Record connectivity and emit if it changed."""
        if connected == self._connected and text == self._status_text:
            return
        self._connected = connected
        self._status_text = text
        self.connection_changed.emit(connected, text)

    def _report_failure(self, action: Action, error: SpeakerControlError) -> CommandResult:
        """Convert a classified error into a result, flagging lost connectivity."""
        logger.warning("%s failed (%s): %s", action.value, error.kind.value, error.message)
        if error.kind is FailureKind.UNREACHABLE:
            self._set_connection(False, STATUS_UNREACHABLE)
        return CommandResult(action, False, error.message, error.kind)

    def _validation_failure(self, action: Action, error: ValidationError) -> CommandResult:
        """Report a local validation failure; no request is issued."""
        logger.info("%s rejected locally: %s", action.value, error.message)
        result = CommandResult(action, False, error.message, error.kind)
        self.command_finished.emit(result)
        return result

    # Directory synchronization

    async def refresh_directory(self) -> bool:
        """Fetch the directory and replace local state with it.

        On failure the previous snapshot and selection are left untouched.

        Returns:
            True if the snapshot was replaced.
        """
        try:
            devices = await self._client.get_speakers()
        except SpeakerControlError as e:
            logger.warning("Directory refresh failed (%s): %s", e.kind.value, e.message)
            status = STATUS_UNREACHABLE if e.kind is FailureKind.UNREACHABLE else STATUS_ERROR
            self._set_connection(False, status)
            return False

        self._directory.replace(devices)
        self._selection.prune(self._directory.names())
        self._set_connection(True, STATUS_CONNECTED)
        return True

    async def check_connection(self) -> bool:
        """Probe the backend liveness endpoint.

        Returns:
            True if the backend answered at all.
        """
        try:
            response = await self._client.check_status()
        except SpeakerControlError as e:
            logger.warning("Status probe failed: %s", e.message)
            self._set_connection(False, STATUS_UNREACHABLE)
            return False
        logger.debug("Status probe answered %d", response.status)
        self._set_connection(True, STATUS_CONNECTED)
        return True

    def schedule_refresh(self, delay: float | None = None) -> "asyncio.Task[bool]":
        """Schedule a fire-and-forget directory refresh.

        Args:
            delay: Seconds to wait, defaulting to the reconciliation delay.

        Returns:
            The scheduled task.
        """
        wait = self._reconciliation_delay if delay is None else delay
        task = asyncio.create_task(self._refresh_after(wait))
        self._pending.add(task)
        task.add_done_callback(self._on_refresh_done)
        return task

    async def _refresh_after(self, delay: float) -> bool:
        await asyncio.sleep(delay)
        return await self.refresh_directory()

    def _on_refresh_done(self, task: "asyncio.Task[bool]") -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Scheduled refresh crashed", exc_info=error)

    async def wait_idle(self) -> None:
        """Wait until every scheduled refresh has run."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def cancel_pending(self) -> None:
        """Cancel scheduled refreshes (shutdown)."""
        for task in list(self._pending):
            task.cancel()

    # Selection

    async def toggle_selection(self, name: str) -> bool:
        """Toggle a device in the selection.

        Returns:
            True if the device is now selected.
        """
        return self._selection.toggle(name)

    async def clear_selection(self) -> None:
        """Deselect every device."""
        self._selection.clear()

    # Commands

    async def add_device(self, address: str, display_name: str | None = None) -> CommandResult:
        """Register a speaker with the backend by IP address.

        Args:
            address: Dotted-quad IPv4 address.
            display_name: Optional name, passed through unmodified.

        Returns:
            The command result.
        """
        try:
            address = validate_address(address)
        except ValidationError as e:
            return self._validation_failure(Action.ADD_DEVICE, e)

        self.command_started.emit(Action.ADD_DEVICE)
        try:
            device = await self._client.add_speaker(address, display_name or None)
        except SpeakerControlError as e:
            result = self._report_failure(Action.ADD_DEVICE, e)
        else:
            logger.info("Added speaker %s (%s)", device.name, device.ip)
            result = CommandResult(
                Action.ADD_DEVICE, True, f"Added speaker: {device.name} ({device.ip})", device=device
            )

        self.schedule_refresh()
        self.command_finished.emit(result)
        return result

    async def create_group(
        self, group_name: str = "", selected_names: Iterable[str] | None = None
    ) -> CommandResult:
        """Ask the backend to group the selected speakers.

        The selection is left as is afterwards.

        Args:
            group_name: Requested group name, may be empty.
            selected_names: Speakers to group, defaulting to the current selection.

        Returns:
            The command result; message is the backend's text verbatim.
        """
        source = self._selection.snapshot() if selected_names is None else selected_names
        try:
            names = validate_group_members(source)
        except ValidationError as e:
            return self._validation_failure(Action.CREATE_GROUP, e)

        self.command_started.emit(Action.CREATE_GROUP)
        logger.info("Creating group %r from %s", group_name, names)
        try:
            text = await self._client.create_group(names)
        except SpeakerControlError as e:
            result = self._report_failure(Action.CREATE_GROUP, e)
        else:
            result = CommandResult(Action.CREATE_GROUP, True, text)

        # A failed call may still have partly applied on the backend
        self.schedule_refresh()
        self.command_finished.emit(result)
        return result

    async def dissolve_group(self, group_selector: str | None) -> CommandResult:
        """Ask the backend to dissolve one group or all of them.

        Args:
            group_selector: Group name, or ALL_GROUPS.

        Returns:
            The command result; message is the backend's text verbatim.
        """
        try:
            group_name = validate_group_selector(group_selector)
        except ValidationError as e:
            return self._validation_failure(Action.DISSOLVE_GROUP, e)

        self.command_started.emit(Action.DISSOLVE_GROUP)
        logger.info("Dissolving %s", f"group {group_name!r}" if group_name else "all groups")
        try:
            text = await self._client.ungroup(group_name)
        except SpeakerControlError as e:
            result = self._report_failure(Action.DISSOLVE_GROUP, e)
        else:
            result = CommandResult(Action.DISSOLVE_GROUP, True, text)

        self.schedule_refresh()
        self.command_finished.emit(result)
        return result
