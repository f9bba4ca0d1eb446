"""QThread worker hosting the asyncio loop the coordinator runs on.

Qt widgets must run in the main thread, but the coordinator is asyncio
based. This worker runs one event loop in a background thread, polls the
directory on a timer, and accepts user actions from the main thread.
Coordinator signals reach the GUI through Qt's queued connections.
"""

import asyncio
import logging
from contextlib import suppress

from PySide6.QtCore import QThread, Signal

from speakerctrl.core.coordinator import Action, CommandCoordinator

logger = logging.getLogger(__name__)


class SpeakerWorker(QThread):
    """Background thread running the coordinator's event loop.

    Example:
        worker = SpeakerWorker(coordinator, poll_interval=15)
        worker.error_occurred.connect(lambda e: print(f"Error: {e}"))
        worker.start()
        worker.submit(Action.CREATE_GROUP, "Downstairs")
    """

    # Unexpected exception from a dispatched action
    error_occurred = Signal(object)

    def __init__(self, coordinator: CommandCoordinator, poll_interval: float = 15.0) -> None:
        """Initialize the worker.

        Args:
            coordinator: Coordinator whose coroutines run on this thread's loop.
            poll_interval: Seconds between directory refreshes, 0 to disable polling.
        """
        super().__init__()
        self._coordinator = coordinator
        self._poll_interval = poll_interval
        self._loop: asyncio.AbstractEventLoop | None = None
        self._wake: asyncio.Event | None = None
        self._should_run = True

    @property
    def coordinator(self) -> CommandCoordinator:
        """Return the coordinator."""
        return self._coordinator

    @property
    def poll_interval(self) -> float:
        """Return the poll interval in seconds (0 = disabled)."""
        return self._poll_interval

    @property
    def is_running_loop(self) -> bool:
        """Return True if the event loop is up and accepting actions."""
        return self._loop is not None and self._loop.is_running()

    def set_poll_interval(self, seconds: float) -> None:
        """Change the poll interval; takes effect after the current wait."""
        self._poll_interval = max(0.0, seconds)

    def submit(self, action: Action, *args: object) -> bool:
        """Queue a user action on the worker loop.

        Thread-safe call from main thread.

        Args:
            action: The user action.
            *args: Handler arguments.

        Returns:
            True if the action was queued.
        """
        if not self.is_running_loop or self._loop is None:
            logger.debug("Dropping %s: worker loop not running", action.value)
            return False
        asyncio.run_coroutine_threadsafe(self._safe_dispatch(action, args), self._loop)
        return True

    async def _safe_dispatch(self, action: Action, args: tuple[object, ...]) -> None:
        """Dispatch an action, reporting unexpected errors."""
        try:
            await self._coordinator.dispatch(action, *args)
        except Exception as e:
            logger.exception("Action %s crashed", action.value)
            self.error_occurred.emit(e)

    def stop(self) -> None:
        """Signal the worker to stop (called from main thread)."""
        self._should_run = False
        if self._loop and self._loop.is_running() and self._wake:
            self._loop.call_soon_threadsafe(self._wake.set)

    def run(self) -> None:
        """Run the worker thread (entry point)."""
        # Create new event loop for this thread
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        try:
            self._loop.run_until_complete(self._poll_loop())
        except Exception as e:
            logger.exception("Worker loop crashed")
            self.error_occurred.emit(e)
        finally:
            self._coordinator.cancel_pending()
            with suppress(Exception):
                self._loop.run_until_complete(self._coordinator.wait_idle())
            self._loop.close()
            self._loop = None
            self._wake = None

    async def _sync(self, check_first: bool = False) -> None:
        """Run one polling tick; unexpected errors are reported and polling goes on."""
        try:
            if check_first:
                await self._coordinator.check_connection()
            await self._coordinator.refresh_directory()
        except Exception as e:
            logger.exception("Directory poll crashed")
            self.error_occurred.emit(e)

    async def _poll_loop(self) -> None:
        """Probe the backend, then refresh the directory on every tick."""
        self._wake = asyncio.Event()

        if not self._should_run:
            return
        await self._sync(check_first=True)

        while self._should_run:
            timeout = self._poll_interval if self._poll_interval > 0 else None
            with suppress(TimeoutError):
                await asyncio.wait_for(self._wake.wait(), timeout=timeout)
            if not self._should_run:
                break
            self._wake.clear()
            await self._sync()
