"""
orbit_core.store_client
-----------------------
Path-addressed client for the Orbit store.

A StoreClient is scoped either to the root (`base_path == ""`) or to one
user's namespace (`users/<pub>`). `get()` returns immutable Node builders;
reads are anonymous GETs, writes are POSTs carrying the stored session's
bearer token.

    client = build("https://orbit.example", pub)
    client.get("nfts").get("1000").put({"id": "1000"})
    client.get("nfts").set({"id": "1000"})        # stored at users/<pub>/<sha256 of item>
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from orbit_core.constants import USERS_PREFIX
from orbit_core.errors import (
    OrbitError, Unauthenticated, HttpError, FetchFailed, ParseError, ParseFailed,
)
from orbit_core.logger import get_logger
from orbit_core.result import Result
from orbit_core.storage.provider import SessionStore
from orbit_core.storage.providers.memory_provider import InMemorySessionStore
from orbit_core.transport.transport_base import BaseTransport
from orbit_core.transport.transport_http import HTTPAdapter
from orbit_core.utils import content_key, join_path

log = get_logger("Orbit.Store")


class _NoValue:
    """Passed to once() callbacks when the loaded body holds no records."""

    def __repr__(self):
        return "NO_VALUE"

    def __bool__(self):
        return False


NO_VALUE = _NoValue()


_default_transports = {}


def default_transport(base_url: str) -> HTTPAdapter:
    """One shared HTTPAdapter per backend URL for clients built without a transport."""
    key = base_url.rstrip("/")
    if key not in _default_transports:
        _default_transports[key] = HTTPAdapter(key)
    return _default_transports[key]


def user_base_path(user_pub: Optional[str]) -> str:
    return f"{USERS_PREFIX}/{user_pub}" if user_pub else ""


@dataclass(frozen=True)
class StoreClient:
    base_url: str
    base_path: str = ""
    session_store: SessionStore = field(default_factory=InMemorySessionStore, repr=False, compare=False)
    transport: Optional[BaseTransport] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.transport is None:
            object.__setattr__(self, "transport", default_transport(self.base_url))

    def get(self, path: str) -> "Node":
        return Node(client=self, path=join_path(self.base_path, path))

    def user(self, user_pub: str) -> "StoreClient":
        """Same backend, scoped to `user_pub`'s namespace. `self` is unchanged."""
        return build(self.base_url, user_pub, session_store=self.session_store, transport=self.transport)

    def url_for(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path}"


@dataclass(frozen=True)
class Node:
    client: StoreClient
    path: str

    def get(self, key: str) -> "Node":
        return Node(client=self.client, path=join_path(self.path, key))

    @property
    def url(self) -> str:
        return self.client.url_for(self.path)

    def put(self, data: Any) -> Result:
        """
        Write `data` at this path with the session's bearer token.

        Without a stored session this fails with Unauthenticated and sends
        nothing.
        """
        token = self.client.session_store.token()
        if not token:
            log.warning(f"[PUT] {self.path} refused: no active session")
            return Result.failure(Unauthenticated("No active session token"))

        try:
            res = self.client.transport.post_json(self.url, data, token=token)
        except OrbitError as e:
            return Result.failure(e)

        if not res.ok:
            return Result.failure(HttpError(res.text or "Unknown error", status=res.status))
        log.info(f"[PUT] {self.path} stored")
        return Result.success(res.json_or_none())

    def set(self, item: Any) -> Result:
        """
        Content-addressed put at the client scope: the item is stored at
        `<base_path>/<sha256 of item>`, so the same item always lands on the
        same path whichever node it is set from.
        """
        return self.client.get(content_key(item)).put(item)

    def load(self) -> Any:
        res = self.client.transport.get_json(self.url)
        if not res.ok:
            raise FetchFailed("Failed to fetch data", status=res.status)
        try:
            return res.json()
        except ParseError as e:
            raise ParseFailed("Failed to parse response") from e

    def once(self, callback: Callable[[Any], Any]) -> None:
        try:
            records = self.load()
        except OrbitError:
            log.exception(f"[ONCE] load failed for {self.path}")
            return
        if isinstance(records, (list, tuple)) and records:
            callback(records[0])
        else:
            callback(NO_VALUE)


def build(base_url: str, user_pub: Optional[str] = None,
          session_store: Optional[SessionStore] = None,
          transport: Optional[BaseTransport] = None) -> StoreClient:
    kwargs = {}
    if session_store is not None:
        kwargs["session_store"] = session_store
    return StoreClient(base_url=base_url, base_path=user_base_path(user_pub), transport=transport, **kwargs)
