# orbit_core/transport/transport_http.py
from __future__ import annotations
from typing import Any, Optional
import requests

from orbit_core.constants import DEFAULT_HTTP_TIMEOUT
from orbit_core.errors import NetworkError
from orbit_core.logger import get_logger
from orbit_core.transport.transport_base import BaseTransport, HttpResponse

log = get_logger("Orbit.Transport.HTTP")


class HTTPAdapter(BaseTransport):
    """
    JSON-over-HTTP transport for the Orbit backend and its path store.

    `path` may be a backend-relative path ("/register", "users/<pub>/nfts")
    or an absolute URL.
    """
    name = "http"

    def __init__(self, base_url: str, timeout: float = DEFAULT_HTTP_TIMEOUT, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, body: Any = None, token: Optional[str] = None) -> HttpResponse:
        url = self.url_for(path)
        headers = self.headers_for(token)
        log.debug(f"[HTTP {method}] → {url} | auth={'yes' if token else 'no'}")
        try:
            if method == "POST":
                res = self.session.post(url, json=body, headers=headers, timeout=self.timeout)
            else:
                res = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            log.error(f"[HTTP {method}] {url} failed: {e}")
            raise NetworkError("Network error") from e

        if res.ok:
            log.info(f"[HTTP {method}] {url} {res.status_code} {res.reason}")
        else:
            log.error(f"[HTTP {method}] {url} {res.status_code}: {res.text}")
        return HttpResponse(status=res.status_code, text=res.text)

    def post_json(self, path: str, body: Any, token: Optional[str] = None) -> HttpResponse:
        return self._send("POST", path, body=body, token=token)

    def get_json(self, path: str, token: Optional[str] = None) -> HttpResponse:
        return self._send("GET", path, token=token)

    def close(self) -> None:
        self.session.close()
