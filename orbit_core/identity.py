"""
orbit_core.identity
-------------------
Identity & session lifecycle for Orbit clients.

An identity is an Ed25519 key pair derived from (alias, password). Logging in
is a two-hop exchange with the backend:

1. POST /request-token {alias}            -> short-lived bootstrap token
2. POST /register or /authenticate        -> session token (bearer)

On success the session `{alias, token, keys}` is written to the session
store and the client registry is rescoped to `users/<pub>`. A failure at
any step leaves both exactly as they were.
"""

from __future__ import annotations
from typing import Any, Optional
from urllib.parse import quote
import os

from orbit_core.constants import (
    ENV_BACKEND_URL, DEFAULT_BACKEND_URL,
    REQUEST_TOKEN_ENDPOINT, REGISTER_ENDPOINT, AUTHENTICATE_ENDPOINT,
    ACL_ENDPOINT, ADD_WRITE_ACCESS_ENDPOINT,
)
from orbit_core.crypto import CryptoProvider, provider as default_crypto
from orbit_core.errors import (
    OrbitError, HttpError, ParseError, Unauthenticated, NoActiveSession, IdentityMismatch,
)
from orbit_core.logger import get_logger
from orbit_core.registry import ClientRegistry
from orbit_core.result import Result
from orbit_core.storage import load_session_store
from orbit_core.storage.models import AuthResult, Session, SessionKeys
from orbit_core.storage.provider import SessionStore
from orbit_core.storage.providers.memory_provider import InMemorySessionStore
from orbit_core.store_client import Node, StoreClient
from orbit_core.transport import transport_factory
from orbit_core.transport.transport_base import BaseTransport, HttpResponse
from orbit_core.transport.transport_http import HTTPAdapter

log = get_logger("Orbit.Identity")


def _error_detail(res: HttpResponse, default: str) -> str:
    data = res.json_or_none()
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return default


def _field(data: Any, name: str) -> Any:
    if not isinstance(data, dict) or not data.get(name):
        raise ParseError(f"response is missing '{name}'")
    return data[name]


class IdentityManager:
    """
    Owns the session slot and the client registry; the only component that
    mutates either.
    """

    def __init__(self, backend_url: str, store: Optional[SessionStore] = None,
                 registry: Optional[ClientRegistry] = None,
                 transport: Optional[BaseTransport] = None,
                 crypto: Optional[CryptoProvider] = None):
        self.backend_url = backend_url.rstrip("/")
        self.store = store or InMemorySessionStore()
        self.transport = transport or HTTPAdapter(self.backend_url)
        self.registry = registry or ClientRegistry(self.backend_url, self.store, self.transport)
        self.crypto = crypto or default_crypto
        # Pick up a session persisted by an earlier process
        self.recall()

    @classmethod
    def from_env(cls, config: dict = None) -> "IdentityManager":
        config = config or {}
        backend_url = config.get("backend_url") or os.getenv(ENV_BACKEND_URL, DEFAULT_BACKEND_URL)
        transport = transport_factory({**config, "backend_url": backend_url})
        return cls(backend_url, store=load_session_store(config), transport=transport)

    # ------------------------------------------------------------------
    # Backend hops
    # ------------------------------------------------------------------
    def _post(self, endpoint: str, body: dict, token: Optional[str], failure: str) -> Any:
        res = self.transport.post_json(endpoint, body, token=token)
        if not res.ok:
            raise HttpError(_error_detail(res, failure), status=res.status)
        return res.json()

    def _request_bootstrap_token(self, alias: str) -> str:
        data = self._post(REQUEST_TOKEN_ENDPOINT, {"alias": alias}, None,
                          "Failed to obtain temporary token.")
        return _field(data, "token")

    def _open_session(self, session: Session) -> None:
        self.store.save(session)
        self.registry.set_active_identity(session.pub)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def create(self, alias: str, password: str) -> Result:
        """Register `alias` with the key pair derived from (alias, password)."""
        try:
            self.crypto.ensure_ready()
            keys = self.crypto.key_pair_from_credentials(alias, password).encoded()
            hashed = self.crypto.hash_password(password)

            bootstrap = self._request_bootstrap_token(alias)
            data = self._post(
                REGISTER_ENDPOINT,
                {"alias": alias, "publicKey": keys.pub, "hashedPassword": hashed},
                bootstrap,
                "Registration failed.",
            )
            token = _field(data, "token")
        except OrbitError as e:
            log.error(f"[CREATE] failed for alias={alias}: {e}")
            return Result.failure(e)

        self._open_session(Session(alias=alias, token=token, keys=keys))
        log.info(f"[CREATE] registered alias={alias} pub={keys.pub}")
        return Result.success(AuthResult(token=token, keys=keys))

    def auth(self, alias: str, password: str) -> Result:
        """
        Log in as `alias`.

        The session keeps the locally derived keys. A backend-reported
        publicKey that disagrees with them fails the login.
        """
        try:
            self.crypto.ensure_ready()
            keys = self.crypto.key_pair_from_credentials(alias, password).encoded()

            bootstrap = self._request_bootstrap_token(alias)
            data = self._post(
                AUTHENTICATE_ENDPOINT,
                {"alias": alias, "pass": password},
                bootstrap,
                "Authentication failed.",
            )
            token = _field(data, "token")
            reported = data.get("publicKey")
            if reported and reported != keys.pub:
                raise IdentityMismatch(f"backend key for alias={alias} does not match derived key")
        except OrbitError as e:
            log.error(f"[AUTH] failed for alias={alias}: {e}")
            return Result.failure(e)

        self._open_session(Session(alias=alias, token=token, keys=keys))
        log.info(f"[AUTH] logged in alias={alias} pub={keys.pub}")
        return Result.success(AuthResult(token=token, keys=keys))

    def recall(self) -> Optional[Session]:
        session = self.store.load()
        if session:
            self.registry.set_active_identity(session.pub)
            return session
        self.registry.reset_active_identity()
        return None

    def logout(self) -> None:
        self.store.clear()
        self.registry.reset_active_identity()
        log.info("[LOGOUT] session cleared")

    # ------------------------------------------------------------------
    # Session accessors
    # ------------------------------------------------------------------
    def public_key(self) -> Optional[str]:
        session = self.store.load()
        return session.pub if session else None

    def require_public_key(self) -> str:
        pub = self.public_key()
        if pub is None:
            raise NoActiveSession("No active session found")
        return pub

    def pair(self) -> Optional[SessionKeys]:
        session = self.recall()
        return session.keys if session else None

    @property
    def client(self) -> StoreClient:
        return self.registry.current

    def get(self, path: str) -> Node:
        """Node at `path` inside the logged-in user's namespace."""
        session = self.store.load()
        if not session:
            raise NoActiveSession("User is not logged in")
        return self.registry.current.user(session.pub).get(path)

    # ------------------------------------------------------------------
    # ACL
    # ------------------------------------------------------------------
    def exists(self, alias: str) -> bool:
        try:
            res = self.transport.get_json(f"{ACL_ENDPOINT}/{quote(alias, safe='')}",
                                          token=self.store.token())
        except OrbitError:
            log.exception(f"[ACL] existence check failed for alias={alias}")
            return False
        data = res.json_or_none()
        return res.ok and isinstance(data, dict) and bool(data.get("exists"))

    def add_write_access(self, path: str, public_key: str) -> Result:
        """Grant `public_key` (or PUBLIC_GRANT for everyone) write access to `path`."""
        token = self.store.token()
        if not token:
            return Result.failure(Unauthenticated("No active session token"))
        try:
            res = self.transport.post_json(ADD_WRITE_ACCESS_ENDPOINT,
                                           {"path": path, "publicKey": public_key}, token=token)
        except OrbitError as e:
            log.error(f"[ACL] grant on {path} failed: {e}")
            return Result.failure(e)
        if not res.ok:
            err = HttpError(_error_detail(res, f"HTTP error! status: {res.status}"), status=res.status)
            log.error(f"[ACL] grant on {path} failed: {err}")
            return Result.failure(err)
        log.info(f"[ACL] write access on {path} granted to {public_key}")
        return Result.success(None)
