"""SpeakerCTRL - desktop controller for grouping networked speakers."""

__version__ = "0.1.0"
