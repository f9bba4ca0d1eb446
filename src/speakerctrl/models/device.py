"""Device model representing one controllable speaker."""

import logging
from dataclasses import dataclass
from typing import Any, cast

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Device:
    """A speaker known to the backend directory.

    Attributes:
        name: Unique key within a directory snapshot.
        ip: IPv4 address of the speaker.
        port: Control port reported by the backend (0 if unknown).
        mac: Hardware identifier (empty string if unavailable).
        model: Optional model label.
        group_name: Name of the group the backend currently assigns, if any.
    """

    name: str
    ip: str = ""
    port: int = 0
    mac: str = ""
    model: str | None = None
    group_name: str | None = None

    @property
    def display_name(self) -> str:
        """Return name or IP as fallback for display."""
        return self.name or self.ip

    @property
    def is_grouped(self) -> bool:
        """Return True if the backend reports a group for this device."""
        return bool(self.group_name)

    @property
    def address(self) -> str:
        """Return the device address (ip:port)."""
        if self.port:
            return f"{self.ip}:{self.port}"
        return self.ip

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Device":
        """Build a Device from a backend record.

        Args:
            data: Decoded JSON object, e.g.
                {"name": "Kitchen", "ip": "192.168.1.20", "port": 55001,
                 "mac": "AA:BB:CC:DD:EE:FF", "model": "HW-Q90R",
                 "groupName": "Downstairs"}

        Returns:
            The parsed Device.

        Raises:
            ValueError: If the record has no non-empty string name.
        """
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"Device record without a name: {data!r}")

        port_val = data.get("port", 0)
        try:
            port = int(port_val) if port_val not in (None, "") else 0
        except (TypeError, ValueError):
            port = 0

        model = data.get("model")
        group_name = data.get("groupName")

        return cls(
            name=name,
            ip=str(data.get("ip") or ""),
            port=port,
            mac=str(data.get("mac") or ""),
            model=str(model) if model else None,
            group_name=str(group_name) if group_name else None,
        )


def parse_device_list(data: object) -> list[Device]:
    """Parse a GET /speakers payload into devices.

    Records that are not objects or lack a name are skipped with a warning;
    the rest are kept in response order.

    Args:
        data: Decoded JSON body.

    Returns:
        List of Device in response order.

    Raises:
        ValueError: If the payload is not a JSON array.
    """
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of speakers, got {type(data).__name__}")

    devices: list[Device] = []
    for raw in cast(list[object], data):
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object speaker record: %r", raw)
            continue
        try:
            devices.append(Device.from_dict(cast(dict[str, Any], raw)))
        except ValueError as e:
            logger.warning("Skipping invalid speaker record: %s", e)
    return devices
