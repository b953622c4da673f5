# orbit_core/storage/provider.py
from __future__ import annotations
from typing import Optional
import json

from orbit_core.constants import SESSION_KEY
from orbit_core.logger import get_logger
from orbit_core.storage.models import Session

log = get_logger("Orbit.Storage")


class SessionStore:
    """
    Single-slot session persistence.

    Providers implement the raw slot (`_read` / `_write` / `_delete`) under
    `key`; encoding and corrupt-record handling live here.
    """
    name: str = "base"

    def __init__(self, key: str = SESSION_KEY):
        self.key = key

    def _read(self) -> Optional[str]:
        raise NotImplementedError

    def _write(self, raw: str) -> None:
        raise NotImplementedError

    def _delete(self) -> None:
        raise NotImplementedError

    def load(self) -> Optional[Session]:
        raw = self._read()
        if raw is None:
            return None
        try:
            return Session.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            log.warning(f"[SESSION] discarding unreadable record in {self.name} store: {e}")
            return None

    def save(self, session: Session) -> None:
        self._write(json.dumps(session.to_dict(), separators=(",", ":")))

    def clear(self) -> None:
        self._delete()

    def token(self) -> Optional[str]:
        session = self.load()
        return session.token if session else None

    def close(self) -> None:
        return
