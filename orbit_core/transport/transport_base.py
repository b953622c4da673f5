from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import json

from orbit_core.errors import ParseError

Headers = Dict[str, str]


@dataclass(frozen=True)
class HttpResponse:
    status: int
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        try:
            return json.loads(self.text)
        except ValueError as e:
            raise ParseError(f"unparsable response body (status={self.status})") from e

    def json_or_none(self) -> Any:
        """Parsed body, or None when the body is empty or not JSON."""
        if not self.text:
            return None
        try:
            return json.loads(self.text)
        except ValueError:
            return None


class BaseTransport:
    """
    Request/response contract used by the identity manager and store client.

    Bodies are JSON; a token, when given, is sent as a bearer credential.
    Transport failures raise NetworkError; HTTP status handling is the
    caller's concern.
    """
    name: str = "base"

    def post_json(self, path: str, body: Any, token: Optional[str] = None) -> HttpResponse:
        raise NotImplementedError

    def get_json(self, path: str, token: Optional[str] = None) -> HttpResponse:
        raise NotImplementedError

    def close(self) -> None:
        return

    @staticmethod
    def headers_for(token: Optional[str] = None) -> Headers:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers
