import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import pytest
import requests

from orbit_core.crypto import CryptoProvider
from orbit_core.identity import IdentityManager
from orbit_core.storage import InMemorySessionStore, Session, SessionKeys
from orbit_core.transport.transport_http import HTTPAdapter

BASE = "http://orbit.test"


@dataclass
class Call:
    method: str
    url: str
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self.reason = "OK" if 200 <= status_code < 300 else "ERROR"
        if text is None:
            text = "" if body is None else json.dumps(body)
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400


class FakeHTTP:
    """Stands in for requests.Session; routes by (method, url)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def route(self, method, path, status=200, body=None, text=None, error=None):
        url = path if path.startswith("http") else f"{BASE}/{path.lstrip('/')}"
        self.routes[(method, url)] = (status, body, text, error)

    def _dispatch(self, method, url, body=None, headers=None):
        self.calls.append(Call(method, url, body, dict(headers or {})))
        if (method, url) not in self.routes:
            return FakeResponse(404, text="not found")
        status, resp_body, text, error = self.routes[(method, url)]
        if error is not None:
            raise error
        return FakeResponse(status, resp_body, text)

    def post(self, url, json=None, headers=None, timeout=None):
        return self._dispatch("POST", url, json, headers)

    def get(self, url, headers=None, timeout=None):
        return self._dispatch("GET", url, None, headers)

    def close(self):
        pass

    def calls_to(self, path):
        return [c for c in self.calls if c.url == f"{BASE}/{path.lstrip('/')}"]


@pytest.fixture
def fake_http():
    return FakeHTTP()


@pytest.fixture
def transport(fake_http):
    return HTTPAdapter(BASE, session=fake_http)


@pytest.fixture
def crypto():
    c = CryptoProvider()
    c.ensure_ready()
    return c


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def manager(store, transport, crypto):
    return IdentityManager(BASE, store=store, transport=transport, crypto=crypto)


@pytest.fixture
def alice_keys(crypto):
    return crypto.key_pair_from_credentials("alice", "pw1").encoded()


@pytest.fixture
def alice_session(alice_keys):
    return Session(alias="alice", token="T1", keys=alice_keys)


@pytest.fixture
def network_down():
    return requests.ConnectionError("connection refused")


@pytest.fixture
def base_url():
    return BASE
