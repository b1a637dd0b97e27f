"""
Simulation State Store — durable holder of the one simulation record.

Read by: Simulation engine (every operation)
Written by: Simulation engine (act, bootstrap, reset)

Behavioral Contract:
- Exactly one logical record exists. It is seeded with the initial world
  state and an empty history the first time the store is opened.
- read() before the first write returns the seeded record.
- write() replaces world state and history together; a reader never sees
  one updated without the other.
- write() and reset() refresh the last-modified timestamp.
- Any storage failure raises StoreUnavailableError; no partial record is
  ever returned.
"""

import copy
import json
import logging
import sqlite3
import threading
from datetime import datetime
from typing import Optional, Protocol

from microsim.errors import StoreUnavailableError
from microsim.models.conversation import ConversationHistory, ConversationTurn
from microsim.models.record import PersistedRecord
from microsim.world.seed import initial_state

logger = logging.getLogger("StateStore")

RECORD_ID = 1


class StateStore(Protocol):
    """Protocol for the simulation record store — pluggable backend."""

    def read(self) -> PersistedRecord: ...

    def write(self, world_state: dict, chat_history: ConversationHistory) -> None: ...

    def reset(self) -> None: ...


def _initial_record() -> PersistedRecord:
    return PersistedRecord(
        world_state=initial_state(),
        chat_history=[],
        updated_at=datetime.utcnow(),
    )


class InMemoryStateStore:
    """
    Process-local store. Used by tests and when no durability is wanted.
    Records are deep-copied in and out so callers never alias stored state.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._record = _initial_record()

    def read(self) -> PersistedRecord:
        with self._lock:
            return self._record.model_copy(deep=True)

    def write(self, world_state: dict, chat_history: ConversationHistory) -> None:
        record = PersistedRecord(
            world_state=copy.deepcopy(world_state),
            chat_history=[t.model_copy() for t in chat_history],
            updated_at=datetime.utcnow(),
        )
        with self._lock:
            self._record = record

    def reset(self) -> None:
        with self._lock:
            self._record = _initial_record()


class SQLiteStateStore:
    """
    Single-row SQLite store.
    The row is keyed by a fixed id and holds world state and chat history as
    JSON text.
    """

    def __init__(self, db_path: str = "database.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._init_schema()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot open state store at {db_path}: {e}") from e

    def _init_schema(self) -> None:
        """Create the simulation table and seed it if the record is absent."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS simulation (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                world_state TEXT NOT NULL,
                chat_history TEXT NOT NULL DEFAULT '[]',
                updated_at TEXT NOT NULL
            )
        """)
        existing = self._conn.execute(
            "SELECT id FROM simulation WHERE id = ?", (RECORD_ID,)
        ).fetchone()
        if existing is None:
            self._conn.execute(
                "INSERT INTO simulation (id, world_state, chat_history, updated_at) "
                "VALUES (?, ?, '[]', ?)",
                (RECORD_ID, json.dumps(initial_state(), ensure_ascii=False), _now()),
            )
            logger.info("Seeded simulation record in %s", self.db_path)
        self._conn.commit()

    def read(self) -> PersistedRecord:
        """Get the current record. A missing row reads as the initial record."""
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT world_state, chat_history, updated_at FROM simulation WHERE id = ?",
                    (RECORD_ID,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot read simulation record: {e}") from e

        if row is None:
            return _initial_record()
        return PersistedRecord(
            world_state=json.loads(row["world_state"]),
            chat_history=[
                ConversationTurn.model_validate(t) for t in json.loads(row["chat_history"])
            ],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def write(self, world_state: dict, chat_history: ConversationHistory) -> None:
        """Replace world state and chat history in one transaction."""
        history_json = json.dumps(
            [t.to_message() for t in chat_history], ensure_ascii=False
        )
        self._update(json.dumps(world_state, ensure_ascii=False), history_json)

    def reset(self) -> None:
        """Restore the initial world state and clear the history."""
        self._update(json.dumps(initial_state(), ensure_ascii=False), "[]")
        logger.info("Simulation record reset")

    def _update(self, state_json: str, history_json: str) -> None:
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "UPDATE simulation SET world_state = ?, chat_history = ?, updated_at = ? "
                    "WHERE id = ?",
                    (state_json, history_json, _now(), RECORD_ID),
                )
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot write simulation record: {e}") from e

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()


def _now() -> str:
    return datetime.utcnow().isoformat()


def open_store(db_path: Optional[str]) -> StateStore:
    """Open the store for a configured path; empty path means in-memory."""
    if not db_path:
        return InMemoryStateStore()
    return SQLiteStateStore(db_path)
