"""
SQLite-backed conversation memory.

Messages are stored per thread; the A2A `contextId` is used as the thread id
so that follow-up requests on the same context see the earlier turns.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    thread_id TEXT NOT NULL,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_messages_thread ON messages (thread_id, id);
"""


class ConversationMemory:
    """Thread-safe message store. The database is opened on first use."""

    def __init__(self, db_path: str = "planner_memory.db") -> None:
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.executescript(_SCHEMA)
            logger.info("memory.opened", extra={"db_path": self.db_path})
        return self._conn

    def recall(self, thread_id: str, limit: int = 10) -> List[Dict[str, str]]:
        """Return the last `limit` messages of a thread, oldest first."""
        if limit <= 0:
            return []
        with self._lock:
            rows = self._connection().execute(
                "SELECT role, content FROM messages WHERE thread_id = ? ORDER BY id DESC LIMIT ?",
                (thread_id, limit),
            ).fetchall()
        return [{"role": role, "content": content} for role, content in reversed(rows)]

    def append(self, thread_id: str, messages: Iterable[Dict[str, str]]) -> int:
        now = datetime.now(timezone.utc).isoformat()
        rows = [(thread_id, m["role"], m.get("content") or "", now) for m in messages]
        with self._lock:
            conn = self._connection()
            with conn:
                conn.executemany(
                    "INSERT INTO messages (thread_id, role, content, created_at) VALUES (?, ?, ?, ?)",
                    rows,
                )
        return len(rows)

    def clear(self, thread_id: str) -> int:
        with self._lock:
            conn = self._connection()
            with conn:
                cur = conn.execute("DELETE FROM messages WHERE thread_id = ?", (thread_id,))
        return cur.rowcount

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
