# orbit_core/transport/__init__.py
import os
from orbit_core.constants import (
    ENV_BACKEND_URL, ENV_HTTP_TIMEOUT, DEFAULT_BACKEND_URL, DEFAULT_HTTP_TIMEOUT,
)
from orbit_core.transport.transport_base import BaseTransport, HttpResponse
from orbit_core.transport.transport_http import HTTPAdapter


def transport_factory(config: dict = None) -> HTTPAdapter:
    """HTTP transport against ORBIT_BACKEND_URL unless `config` says otherwise."""
    config = config or {}
    base_url = config.get("backend_url") or os.getenv(ENV_BACKEND_URL, DEFAULT_BACKEND_URL)
    timeout = float(config.get("timeout") or os.getenv(ENV_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT))
    return HTTPAdapter(base_url, timeout=timeout)


__all__ = ["BaseTransport", "HttpResponse", "HTTPAdapter", "transport_factory"]
