"""Directory store holding the last known snapshot of the speaker directory.

The backend is the only source of truth for which speakers exist and how
they are grouped, so the snapshot is always replaced wholesale, never patched
field by field.
"""

import logging
from collections.abc import Iterable

from PySide6.QtCore import QObject, Signal

from speakerctrl.models.device import Device

logger = logging.getLogger(__name__)


class DirectoryStore(QObject):
    """Last known directory snapshot, keyed by device name.

    Iteration order is the order of the most recent replace() input, so
    rendering and tests are deterministic. When the input contains the same
    name more than once, the last record wins and keeps the position of the
    first occurrence.

    Example:
        store = DirectoryStore()
        store.devices_changed.connect(lambda devices: render(devices))
        store.replace(devices)
    """

    devices_changed = Signal(object)  # list[Device]

    def __init__(self) -> None:
        """Initialize an empty store."""
        super().__init__()
        self._devices: dict[str, Device] = {}
        # List cache to avoid repeated list() conversions
        self._devices_cache: list[Device] | None = None

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, name: object) -> bool:
        return name in self._devices

    def replace(self, devices: Iterable[Device]) -> None:
        """Replace the whole snapshot with a new one.

        Args:
            devices: Devices of the new snapshot.
        """
        new_devices: dict[str, Device] = {}
        for device in devices:
            if device.name in new_devices:
                logger.debug("Duplicate device name %r in directory, keeping last", device.name)
            new_devices[device.name] = device

        self._devices = new_devices
        self._devices_cache = None
        logger.debug("Directory replaced: %d device(s)", len(new_devices))
        self.devices_changed.emit(self.all())

    def all(self) -> list[Device]:
        """Return all devices in snapshot order (cached)."""
        if self._devices_cache is None:
            self._devices_cache = list(self._devices.values())
        return self._devices_cache

    def is_empty(self) -> bool:
        """Return True if the snapshot holds no devices."""
        return not self._devices

    def get(self, name: str) -> Device | None:
        """Get a device by name.

        Args:
            name: The device name to look up.

        Returns:
            The Device if found, else None.
        """
        return self._devices.get(name)

    def names(self) -> set[str]:
        """Return the set of device names in the snapshot."""
        return set(self._devices)

    def group_names(self) -> list[str]:
        """Return the distinct group names reported by the backend, sorted."""
        return sorted({d.group_name for d in self._devices.values() if d.group_name})

    def members_of(self, group_name: str) -> list[Device]:
        """Return devices currently assigned to a group.

        Args:
            group_name: The group name.

        Returns:
            Devices in the group, in snapshot order.
        """
        return [d for d in self._devices.values() if d.group_name == group_name]
