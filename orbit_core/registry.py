# orbit_core/registry.py
from __future__ import annotations
from typing import Optional

from orbit_core.logger import get_logger
from orbit_core.storage.provider import SessionStore
from orbit_core.store_client import StoreClient, build
from orbit_core.transport.transport_base import BaseTransport
from orbit_core.transport.transport_http import HTTPAdapter

log = get_logger("Orbit.Registry")


class ClientRegistry:
    """
    Holds the one "current" StoreClient.

    The scope always mirrors the stored session: `users/<pub>` while someone
    is logged in, the root otherwise. Only IdentityManager should call the
    two mutators.
    """

    def __init__(self, base_url: str, session_store: SessionStore,
                 transport: Optional[BaseTransport] = None):
        self.base_url = base_url
        self.session_store = session_store
        self.transport = transport or HTTPAdapter(base_url)
        self._current = self._build()

    def _build(self, user_pub: Optional[str] = None) -> StoreClient:
        return build(self.base_url, user_pub, session_store=self.session_store, transport=self.transport)

    @property
    def current(self) -> StoreClient:
        return self._current

    def set_active_identity(self, user_pub: str) -> StoreClient:
        self._current = self._build(user_pub)
        log.debug(f"[REGISTRY] scoped to {self._current.base_path}")
        return self._current

    def reset_active_identity(self) -> StoreClient:
        self._current = self._build()
        log.debug("[REGISTRY] reset to root scope")
        return self._current
