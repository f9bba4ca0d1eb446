"""HTTP API client for the speaker backend."""

from speakerctrl.api.client import SpeakerApiClient
from speakerctrl.api.errors import (
    FailureKind,
    ProtocolError,
    RejectedError,
    SpeakerControlError,
    UnreachableError,
    ValidationError,
)
from speakerctrl.api.protocol import HttpResponse

__all__ = [
    "SpeakerApiClient",
    "HttpResponse",
    "FailureKind",
    "SpeakerControlError",
    "ValidationError",
    "UnreachableError",
    "RejectedError",
    "ProtocolError",
]
