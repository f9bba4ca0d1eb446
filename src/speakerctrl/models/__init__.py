"""Data models for the speaker directory."""

from speakerctrl.models.device import Device, parse_device_list

__all__ = ["Device", "parse_device_list"]
