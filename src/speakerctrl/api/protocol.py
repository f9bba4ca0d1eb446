"""HTTP response types and body parsing for the speaker backend."""

import json
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast

# Dotted-quad IPv4 has exactly four octets
_IPV4_OCTETS = 4
_OCTET_MAX = 255

PARSE_FAILURE_MESSAGE = "Unable to parse server response"


@dataclass(frozen=True)
class HttpResponse:
    """A completed HTTP exchange with the backend.

    Attributes:
        status: HTTP status code.
        body: Response body decoded as UTF-8 text.
    """

    status: int
    body: str = ""

    @property
    def is_success(self) -> bool:
        """Return True for any 2xx status."""
        return 200 <= self.status < 300  # noqa: PLR2004

    @property
    def is_ok(self) -> bool:
        """Return True only for HTTP 200 (text endpoints use this)."""
        return self.status == HTTPStatus.OK

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        return json.loads(self.body)


def parse_error_message(response: HttpResponse) -> str:
    """Extract a user-facing message from a failed response.

    The backend answers errors either as {"message": "..."} or as plain
    text. Falls back to the raw body, then to the status phrase, so the
    result is never empty.

    Args:
        response: The failed response.

    Returns:
        The message to show to the user.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        message = cast(dict[str, Any], data).get("message")
        if isinstance(message, str) and message:
            return message

    if response.body.strip():
        return response.body

    try:
        phrase = HTTPStatus(response.status).phrase
    except ValueError:
        phrase = "Unknown error"
    return f"HTTP {response.status} {phrase}"


def is_valid_ipv4(address: str) -> bool:
    """Check that an address is four dot-separated decimal octets 0-255.

    Args:
        address: Candidate address, e.g. "192.168.1.100".

    Returns:
        True if the address is a syntactically valid IPv4 address.
    """
    parts = address.split(".")
    if len(parts) != _IPV4_OCTETS:
        return False
    for part in parts:
        if not part.isascii() or not part.isdigit():
            return False
        if int(part) > _OCTET_MAX:
            return False
    return True
