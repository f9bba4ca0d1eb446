"""Core business logic layer.

This module contains the reconciliation layer between the polled backend
directory and local user intent, plus the Qt plumbing that hosts it.

Classes:
    DirectoryStore: Last known directory snapshot.
    SelectionTracker: Devices marked for grouping.
    CommandCoordinator: Issues commands and reconciles state.
    SpeakerWorker: QThread hosting the coordinator's event loop.
    ConfigManager: QSettings wrapper for configuration.
"""

from speakerctrl.core.config import ConfigManager
from speakerctrl.core.coordinator import ALL_GROUPS, Action, CommandCoordinator, CommandResult
from speakerctrl.core.directory import DirectoryStore
from speakerctrl.core.selection import SelectionTracker
from speakerctrl.core.worker import SpeakerWorker

__all__ = [
    "ALL_GROUPS",
    "Action",
    "CommandCoordinator",
    "CommandResult",
    "ConfigManager",
    "DirectoryStore",
    "SelectionTracker",
    "SpeakerWorker",
]
