"""HTTP client for the speaker discovery/control backend.

The backend exposes a small REST-ish surface:

    GET  /speakers                      -> JSON array of speaker records
    POST /addSpeaker?ip=..&name=..      -> {"speaker": {...}} or error
    POST /group  {"speakerName": [...]} -> plain text
    GET  /ungroup[?group_name=..]       -> plain text
    GET  /status                        -> liveness probe

Requests are made with urllib in the event loop's default executor so the
loop never blocks on network I/O.
"""

import asyncio
import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping, Sequence
from typing import Any, cast

from speakerctrl.api.errors import ProtocolError, RejectedError, UnreachableError
from speakerctrl.api.protocol import PARSE_FAILURE_MESSAGE, HttpResponse, parse_error_message
from speakerctrl.models.device import Device, parse_device_list

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8888"

USER_AGENT = "SpeakerCTRL/0.1"


class SpeakerApiClient:
    """Async client for the speaker backend HTTP API.

    Every method raises a SpeakerControlError subclass on failure:
    UnreachableError for transport problems, RejectedError for non-success
    statuses and ProtocolError for bodies that do not match the expected shape.

    Example:
        client = SpeakerApiClient("http://192.168.1.10:8888")
        devices = await client.get_speakers()
        await client.create_group([d.name for d in devices[:2]])
    """

    _DEFAULT_TIMEOUT: float = 10.0

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = _DEFAULT_TIMEOUT) -> None:
        """Initialize the client.

        Args:
            base_url: Backend root URL, e.g. "http://localhost:8888".
            timeout: Per-request timeout in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        """Return the backend root URL."""
        return self._base_url

    @property
    def timeout(self) -> float:
        """Return the per-request timeout in seconds."""
        return self._timeout

    def build_url(self, path: str, params: Mapping[str, str] | None = None) -> str:
        """Return the absolute URL for a backend path with optional query."""
        url = f"{self._base_url}{path}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"
        return url

    async def _request(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> HttpResponse:
        """Issue one request and return the response, whatever its status.

        Raises:
            UnreachableError: If no HTTP response was received.
        """
        url = self.build_url(path, params)
        data = json.dumps(json_body).encode("utf-8") if json_body is not None else None
        logger.debug("%s %s", method, url)

        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(None, self._fetch_blocking, method, url, data)
        except urllib.error.URLError as e:
            raise UnreachableError(f"Server unreachable: {e.reason}") from e
        except (TimeoutError, OSError, http.client.HTTPException) as e:
            # HTTPException covers peers that answer with something other than HTTP
            raise UnreachableError(f"Server unreachable: {e}") from e

        logger.debug("%s %s -> %d", method, url, response.status)
        return response

    def _fetch_blocking(self, method: str, url: str, data: bytes | None) -> HttpResponse:
        """Perform the HTTP exchange (blocking).

        Non-2xx statuses are returned as responses, not raised.

        Args:
            method: HTTP method.
            url: Absolute URL.
            data: Request body, or None.

        Returns:
            The HttpResponse.
        """
        headers = {"User-Agent": USER_AGENT}
        if data is not None:
            headers["Content-Type"] = "application/json"
        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                return HttpResponse(response.status, response.read().decode("utf-8", "replace"))
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", "replace") if e.fp is not None else ""
            e.close()
            return HttpResponse(e.code, body)

    # Backend API methods

    async def get_speakers(self) -> list[Device]:
        """Fetch the full speaker directory (GET /speakers).

        Returns:
            Devices in backend order.
        """
        response = await self._request("GET", "/speakers")
        if not response.is_success:
            raise RejectedError(parse_error_message(response), response.status)
        try:
            return parse_device_list(response.json())
        except ValueError as e:
            logger.warning("Malformed speaker directory: %s", e)
            raise ProtocolError(PARSE_FAILURE_MESSAGE) from e

    async def add_speaker(self, ip: str, name: str | None = None) -> Device:
        """Register a speaker by address (POST /addSpeaker).

        Args:
            ip: IPv4 address of the speaker.
            name: Optional display name, passed through unmodified.

        Returns:
            The Device record returned by the backend.
        """
        params = {"ip": ip}
        if name:
            params["name"] = name
        response = await self._request("POST", "/addSpeaker", params=params)
        if not response.is_success:
            raise RejectedError(parse_error_message(response), response.status)
        try:
            data = response.json()
            speaker = cast(dict[str, Any], data)["speaker"]
            return Device.from_dict(speaker)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Malformed addSpeaker response: %r", response.body)
            raise ProtocolError(PARSE_FAILURE_MESSAGE) from e

    async def create_group(self, speaker_names: Sequence[str]) -> str:
        """Group speakers together (POST /group).

        Args:
            speaker_names: Names of the speakers to group.

        Returns:
            The backend's response text.
        """
        response = await self._request(
            "POST", "/group", json_body={"speakerName": list(speaker_names)}
        )
        if not response.is_ok:
            raise RejectedError(response.body, response.status)
        return response.body

    async def ungroup(self, group_name: str | None = None) -> str:
        """Dissolve one group, or every group when no name is given (GET /ungroup).

        Args:
            group_name: Group to dissolve, or None for all groups.

        Returns:
            The backend's response text.
        """
        params = {"group_name": group_name} if group_name else None
        response = await self._request("GET", "/ungroup", params=params)
        if not response.is_ok:
            raise RejectedError(response.body, response.status)
        return response.body

    async def check_status(self) -> HttpResponse:
        """Probe the backend (GET /status).

        Any HTTP response, including 404, means the server is reachable.

        Returns:
            The probe response.
        """
        return await self._request("GET", "/status")
