# orbit_core/storage/__init__.py

from __future__ import annotations

from .models import KeyPair, Session, SessionKeys, AuthResult
from .provider import SessionStore
from .providers.memory_provider import InMemorySessionStore
from .providers.sqlite_provider import SQLiteSessionStore
from orbit_core.constants import ENV_SESSION_PROVIDER, ENV_DB_PATH, DEFAULT_DB_PATH
import os


def load_session_store(config: dict | None = None) -> SessionStore:
    """
    Factory resolver for the session slot backend.

        - memory (default): process-scoped
        - sqlite: file-backed
    """
    config = config or {}
    provider = config.get("provider") or os.getenv(ENV_SESSION_PROVIDER, "memory")

    if provider == "memory":
        return InMemorySessionStore()

    if provider == "sqlite":
        db_path = config.get("sqlite_path") or os.getenv(ENV_DB_PATH, DEFAULT_DB_PATH)
        return SQLiteSessionStore(db_path)

    raise ValueError(f"Unknown session provider: {provider}")


__all__ = [
    "KeyPair",
    "Session",
    "SessionKeys",
    "AuthResult",
    "SessionStore",
    "InMemorySessionStore",
    "SQLiteSessionStore",
    "load_session_store",
]
