"""Tests for HTTP response helpers and address validation."""

import pytest

from speakerctrl.api.errors import (
    FailureKind,
    ProtocolError,
    RejectedError,
    UnreachableError,
    ValidationError,
)
from speakerctrl.api.protocol import HttpResponse, is_valid_ipv4, parse_error_message


class TestHttpResponse:
    """Test HttpResponse."""

    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_is_success(self, status: int) -> None:
        """Test 2xx statuses are successes."""
        assert HttpResponse(status).is_success

    @pytest.mark.parametrize("status", [199, 301, 404, 500])
    def test_is_not_success(self, status: int) -> None:
        """Test other statuses are not."""
        assert not HttpResponse(status).is_success

    def test_is_ok_only_200(self) -> None:
        """Test is_ok is strict about 200."""
        assert HttpResponse(200).is_ok
        assert not HttpResponse(204).is_ok

    def test_json(self) -> None:
        """Test JSON decoding of the body."""
        assert HttpResponse(200, '{"a": 1}').json() == {"a": 1}

    def test_json_invalid(self) -> None:
        """Test invalid JSON raises ValueError."""
        with pytest.raises(ValueError):
            HttpResponse(200, "OK").json()


class TestParseErrorMessage:
    """Test extracting messages from failed responses."""

    def test_structured_message(self) -> None:
        """Test the message field is used when present."""
        assert parse_error_message(HttpResponse(500, '{"message":"busy"}')) == "busy"

    def test_plain_text(self) -> None:
        """Test plain text bodies are returned raw."""
        assert parse_error_message(HttpResponse(500, "Speaker offline")) == "Speaker offline"

    def test_json_without_message(self) -> None:
        """Test JSON without a message falls back to the raw body."""
        body = '{"error": "nope"}'
        assert parse_error_message(HttpResponse(400, body)) == body

    def test_empty_body(self) -> None:
        """Test an empty body falls back to the status line."""
        assert parse_error_message(HttpResponse(503, "")) == "HTTP 503 Service Unavailable"

    def test_unknown_status(self) -> None:
        """Test an unknown status code still yields a message."""
        assert parse_error_message(HttpResponse(599, "")) == "HTTP 599 Unknown error"


class TestIsValidIpv4:
    """Test dotted-quad validation."""

    @pytest.mark.parametrize("address", ["192.168.1.100", "0.0.0.0", "255.255.255.255", "10.0.0.1"])
    def test_valid(self, address: str) -> None:
        """Test valid addresses."""
        assert is_valid_ipv4(address)

    @pytest.mark.parametrize(
        "address",
        [
            "999.1.1.1",
            "256.0.0.1",
            "1.2.3",
            "1.2.3.4.5",
            "",
            "a.b.c.d",
            "1.2.3.-4",
            "1..2.3",
            "speaker.local",
            "1.2.3.4 ",
            "١.٢.٣.٤",
        ],
    )
    def test_invalid(self, address: str) -> None:
        """Test invalid addresses."""
        assert not is_valid_ipv4(address)


class TestErrors:
    """Test the failure taxonomy."""

    def test_kinds(self) -> None:
        """Test each error carries its classification."""
        assert ValidationError("x").kind is FailureKind.VALIDATION
        assert UnreachableError("x").kind is FailureKind.UNREACHABLE
        assert RejectedError("x", 500).kind is FailureKind.REJECTED
        assert ProtocolError("x").kind is FailureKind.PROTOCOL

    def test_rejected_carries_status(self) -> None:
        """Test RejectedError keeps the HTTP status."""
        error = RejectedError("busy", 503)
        assert error.status == 503
        assert error.message == "busy"
        assert str(error) == "busy"
