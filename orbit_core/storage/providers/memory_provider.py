from typing import Optional

from orbit_core.constants import SESSION_KEY
from orbit_core.storage.provider import SessionStore


class InMemorySessionStore(SessionStore):
    """Process-scoped slot; gone when the process exits."""
    name = "memory"

    def __init__(self, key: str = SESSION_KEY):
        super().__init__(key)
        self._slots = {}

    def _read(self) -> Optional[str]:
        return self._slots.get(self.key)

    def _write(self, raw: str) -> None:
        self._slots[self.key] = raw

    def _delete(self) -> None:
        self._slots.pop(self.key, None)
