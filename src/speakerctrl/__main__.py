"""Main entry point for the SpeakerCTRL application."""

import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from speakerctrl.api.client import SpeakerApiClient
from speakerctrl.core.config import (
    ConfigManager,
    clamp_delay,
    clamp_poll_interval,
    clamp_timeout,
)
from speakerctrl.core.coordinator import Action, CommandCoordinator, CommandResult
from speakerctrl.core.worker import SpeakerWorker
from speakerctrl.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the command line parser."""
    parser = argparse.ArgumentParser(
        prog="speakerctrl",
        description="SpeakerCTRL - group networked speakers",
    )
    parser.add_argument(
        "--url", default=None, help="backend URL (default: saved setting or http://localhost:8888)",
    )
    parser.add_argument(
        "--poll", type=int, default=None, help="directory poll interval in seconds, 0 disables",
    )
    parser.add_argument(
        "--delay", type=float, default=None, help="reconciliation delay after commands, seconds",
    )
    parser.add_argument(
        "--timeout", type=int, default=None, help="per-request timeout in seconds",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser


def resolve_options(
    parsed: argparse.Namespace, config: ConfigManager
) -> tuple[str, int, int, float]:
    """Merge command line flags over saved settings.

    Flags are clamped to the same ranges the settings use.

    Returns:
        (base_url, request_timeout, poll_interval, reconciliation_delay)
    """
    base_url: str = parsed.url or config.get_base_url()
    timeout = (
        clamp_timeout(parsed.timeout) if parsed.timeout is not None else config.get_request_timeout()
    )
    poll_interval = (
        clamp_poll_interval(parsed.poll) if parsed.poll is not None else config.get_poll_interval()
    )
    delay = (
        clamp_delay(parsed.delay) if parsed.delay is not None else config.get_reconciliation_delay()
    )
    return base_url, timeout, poll_interval, delay


def main() -> int:
    """Run the SpeakerCTRL application.

    Returns:
        Exit code (0 for success).
    """
    QApplication.setApplicationName("SpeakerCTRL")
    QApplication.setOrganizationName("SpeakerCTRL")

    app = QApplication(sys.argv)
    parsed = build_parser().parse_args(app.arguments()[1:])

    logging.basicConfig(
        level=logging.DEBUG if parsed.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = ConfigManager()
    base_url, timeout, poll_interval, delay = resolve_options(parsed, config)
    logger.info("Using backend %s (poll %ss, delay %ss)", base_url, poll_interval, delay)

    # Create core components
    client = SpeakerApiClient(base_url, timeout=timeout)
    coordinator = CommandCoordinator(client, reconciliation_delay=delay)
    worker = SpeakerWorker(coordinator, poll_interval=poll_interval)

    window = MainWindow(coordinator)
    window.setWindowTitle(f"SpeakerCTRL - {base_url}")
    window.grouping_panel.set_group_name(config.get_last_group_name())

    def on_action_requested(action: object, args: object) -> None:
        if not isinstance(action, Action) or not isinstance(args, tuple):
            logger.error("Ignoring malformed action request: %r %r", action, args)
            return
        if action is Action.CREATE_GROUP and args:
            config.set_last_group_name(str(args[0]))
        if not worker.submit(action, *args):
            window.show_message("Not connected to the worker yet, try again", "error")

    def on_command_finished(result: CommandResult) -> None:
        logger.info(
            "%s -> %s: %s", result.action.value, "ok" if result.success else "error", result.message
        )

    def on_error(err: object) -> None:
        logger.error("Error: %s", err)
        window.statusBar().showMessage(f"Error: {err}", 5000)

    window.action_requested.connect(on_action_requested)
    coordinator.command_finished.connect(on_command_finished)
    worker.error_occurred.connect(on_error)

    window.show()
    worker.start()

    exit_code = app.exec()

    # Cleanup
    worker.stop()
    worker.wait()
    config.sync()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
