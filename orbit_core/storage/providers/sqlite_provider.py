from __future__ import annotations
from typing import Optional
import sqlite3, os

from orbit_core.constants import DEFAULT_DB_PATH, SESSION_KEY
from orbit_core.storage.provider import SessionStore
from orbit_core.utils import now_ts


class SQLiteSessionStore(SessionStore):
    """Session slot kept in a small key/value table, so it survives restarts."""
    name = "sqlite"

    def __init__(self, path=DEFAULT_DB_PATH, key: str = SESSION_KEY):
        super().__init__(key)
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        os.makedirs(dir_path, exist_ok=True)
        self.db = sqlite3.connect(path, check_same_thread=False)
        self._init()

    def _init(self) -> None:
        self.db.execute("""CREATE TABLE IF NOT EXISTS session_slot(
            slot_key TEXT PRIMARY KEY,
            record TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )""")
        self.db.commit()

    def _read(self) -> Optional[str]:
        cur = self.db.execute("SELECT record FROM session_slot WHERE slot_key=?", (self.key,))
        row = cur.fetchone()
        if not row: return None
        return row[0]

    def _write(self, raw: str) -> None:
        self.db.execute(
            "INSERT INTO session_slot(slot_key,record,updated_at) VALUES(?,?,?) "
            "ON CONFLICT(slot_key) DO UPDATE SET record=excluded.record, updated_at=excluded.updated_at",
            (self.key, raw, now_ts())
        )
        self.db.commit()

    def _delete(self) -> None:
        self.db.execute("DELETE FROM session_slot WHERE slot_key=?", (self.key,))
        self.db.commit()

    def close(self):
        self.db.close()
