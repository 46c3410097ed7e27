"""
SQLite document store adapter.

Stores schemaless JSON documents grouped by collection, the way the admin
panel's hosted document database does. Only the operations the redirect
layer and its fixtures need are provided.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL,
    UNIQUE (collection, id)
);
"""


class SQLiteDocumentStore:
    def __init__(self, db_path: str, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    def ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.executescript(SCHEMA)
            conn.commit()
        finally:
            conn.close()

    def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = uuid4().hex
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT INTO documents (collection, id, data, created_at) VALUES (?, ?, ?, ?)",
                (collection, doc_id, json.dumps(data), datetime.now(UTC).isoformat()),
            )
            conn.commit()
            return doc_id
        finally:
            conn.close()

    def list_all(self, collection: str) -> list[dict[str, Any]]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT id, data FROM documents WHERE collection = ? ORDER BY seq",
                (collection,),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _map_row(self, row: sqlite3.Row) -> dict[str, Any]:
        data = json.loads(row["data"])
        return {**data, "id": row["id"]}


# --- Initialization ---


@dataclass(frozen=True)
class Initialized:
    """Store client is ready."""

    store: SQLiteDocumentStore


@dataclass(frozen=True)
class NotConfigured:
    """Store client could not be set up; reads are unavailable."""

    reason: str


StoreInit = Initialized | NotConfigured


def initialize_document_store(db_path: str | None, timeout: float = 5.0) -> StoreInit:
    """
    Set up the document store client.

    Returns NotConfigured instead of raising when the location is missing
    or the database cannot be opened. Each failed attempt logs once.
    """
    if not db_path:
        logger.warning("Document store location not configured. Redirects will not work.")
        return NotConfigured(reason="document store location not set")

    store = SQLiteDocumentStore(db_path, timeout=timeout)
    try:
        store.ensure_schema()
    except sqlite3.Error as e:
        logger.error("Failed to initialize document store at %s: %s", db_path, e)
        return NotConfigured(reason=str(e))

    return Initialized(store=store)
