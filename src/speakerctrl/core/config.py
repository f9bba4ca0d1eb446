"""Configuration manager using QSettings for persistent storage."""

import logging

from PySide6.QtCore import QSettings

from speakerctrl.api.client import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

# Settings keys
_KEY_BASE_URL = "server/base_url"
_KEY_REQUEST_TIMEOUT = "server/request_timeout"

# Synchronization
_KEY_POLL_INTERVAL = "sync/poll_interval"
_KEY_RECONCILIATION_DELAY = "sync/reconciliation_delay"

# UI
_KEY_LAST_GROUP_NAME = "ui/last_group_name"

# Limits
_TIMEOUT_RANGE = (1, 60)
_POLL_RANGE = (5, 300)
_DELAY_RANGE = (0.0, 30.0)


def clamp_timeout(seconds: int) -> int:
    """Clamp a request timeout to 1-60 seconds."""
    return max(_TIMEOUT_RANGE[0], min(_TIMEOUT_RANGE[1], seconds))


def clamp_poll_interval(seconds: int) -> int:
    """Clamp a poll interval; 0 (polling disabled) is kept as is."""
    if seconds <= 0:
        return 0
    return max(_POLL_RANGE[0], min(_POLL_RANGE[1], seconds))


def clamp_delay(seconds: float) -> float:
    """Clamp a reconciliation delay to 0-30 seconds."""
    return max(_DELAY_RANGE[0], min(_DELAY_RANGE[1], float(seconds)))


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\SpeakerCTRL\\SpeakerCTRL
    - macOS: ~/Library/Preferences/com.SpeakerCTRL.SpeakerCTRL.plist
    - Linux: ~/.config/SpeakerCTRL/SpeakerCTRL.conf

    Example:
        config = ConfigManager()
        client = SpeakerApiClient(config.get_base_url(), config.get_request_timeout())
    """

    def __init__(self, organization: str = "SpeakerCTRL", application: str = "SpeakerCTRL") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Server settings -------------------------------------------------------

    def get_base_url(self) -> str:
        """Return the backend root URL.

        Returns:
            URL string (default "http://localhost:8888").
        """
        value = self._settings.value(_KEY_BASE_URL, DEFAULT_BASE_URL, str)
        url = str(value).strip() if value else ""
        if not url.startswith(("http://", "https://")):
            if url:
                logger.warning("Ignoring invalid backend URL in settings: %r", url)
            return DEFAULT_BASE_URL
        return url

    def set_base_url(self, url: str) -> None:
        """Set the backend root URL.

        Args:
            url: URL with http:// or https:// scheme.
        """
        self._settings.setValue(_KEY_BASE_URL, url.strip())

    def get_request_timeout(self) -> int:
        """Return the per-request timeout in seconds.

        Returns:
            Timeout in seconds (default 10).
        """
        value = self._settings.value(_KEY_REQUEST_TIMEOUT, 10, int)
        return clamp_timeout(int(value))  # type: ignore[arg-type]

    def set_request_timeout(self, seconds: int) -> None:
        """Set the per-request timeout.

        Args:
            seconds: Timeout in seconds (1-60).
        """
        self._settings.setValue(_KEY_REQUEST_TIMEOUT, clamp_timeout(seconds))

    # -- Synchronization settings ----------------------------------------------

    def get_poll_interval(self) -> int:
        """Return the directory poll interval in seconds.

        Returns:
            Interval in seconds (default 15, 0 means polling is disabled).
        """
        value = self._settings.value(_KEY_POLL_INTERVAL, 15, int)
        return clamp_poll_interval(int(value))  # type: ignore[arg-type]

    def set_poll_interval(self, seconds: int) -> None:
        """Set the directory poll interval.

        Args:
            seconds: Interval in seconds (5-300), or 0 to disable polling.
        """
        self._settings.setValue(_KEY_POLL_INTERVAL, clamp_poll_interval(seconds))

    def get_reconciliation_delay(self) -> float:
        """Return the delay before re-fetching the directory after a command.

        Returns:
            Delay in seconds (default 1.0).
        """
        value = self._settings.value(_KEY_RECONCILIATION_DELAY, 1.0, float)
        return clamp_delay(float(value))  # type: ignore[arg-type]

    def set_reconciliation_delay(self, seconds: float) -> None:
        """Set the reconciliation delay.

        Args:
            seconds: Delay in seconds (0-30).
        """
        self._settings.setValue(_KEY_RECONCILIATION_DELAY, clamp_delay(seconds))

    # -- UI settings -------------------------------------------------------------

    def get_last_group_name(self) -> str:
        """Return the group name typed last time.

        Returns:
            Group name, or empty string.
        """
        value = self._settings.value(_KEY_LAST_GROUP_NAME, "", str)
        return str(value) if value else ""

    def set_last_group_name(self, name: str) -> None:
        """Remember the group name typed in the grouping panel.

        Args:
            name: Group name.
        """
        self._settings.setValue(_KEY_LAST_GROUP_NAME, name)

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
