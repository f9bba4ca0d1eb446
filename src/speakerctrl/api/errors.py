"""Failure taxonomy shared by the API client and the command coordinator."""

from enum import Enum


class FailureKind(Enum):
    """Classification of a failed command."""

    VALIDATION = "validation"  # local precondition, no request issued
    UNREACHABLE = "unreachable"  # transport-level failure
    REJECTED = "rejected"  # backend answered with a non-success status
    PROTOCOL = "protocol"  # success status, body did not match the expected shape


class SpeakerControlError(Exception):
    """Base class for every classified command failure.

    Attributes:
        kind: The failure classification.
        message: User-facing message.
    """

    kind: FailureKind = FailureKind.PROTOCOL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SpeakerControlError):
    """Input rejected locally before any request was issued."""

    kind = FailureKind.VALIDATION


class UnreachableError(SpeakerControlError):
    """The backend could not be reached (connection refused, DNS, timeout)."""

    kind = FailureKind.UNREACHABLE


class RejectedError(SpeakerControlError):
    """The backend answered with a non-success HTTP status.

    Attributes:
        status: HTTP status code returned by the backend.
    """

    kind = FailureKind.REJECTED

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status = status


class ProtocolError(SpeakerControlError):
    """The backend answered successfully but the body was not understood."""

    kind = FailureKind.PROTOCOL
