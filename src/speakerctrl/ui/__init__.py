"""Qt user interface for SpeakerCTRL."""
