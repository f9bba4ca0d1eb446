"""UI panels for the main window."""

from speakerctrl.ui.panels.devices import DevicesPanel
from speakerctrl.ui.panels.grouping import GroupingPanel

__all__ = ["DevicesPanel", "GroupingPanel"]
