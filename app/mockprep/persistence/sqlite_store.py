"""
SQLite-backed document store. One row per document, the document body as
JSON; datetimes round-trip as ISO-8601 strings tagged in the body.
"""

from __future__ import annotations
import json
import sqlite3
import threading
from datetime import datetime
from typing import Any, Callable, Optional

from ..errors import PersistenceError
from .document_store import MonotonicClock, stamp, utc_now

_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    body TEXT NOT NULL,
    PRIMARY KEY (collection, id)
)
"""

_DT_TAG = "__datetime__"


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return {_DT_TAG: value.isoformat()}
    raise TypeError(f"Not JSON serializable: {type(value)!r}")


def _decode(obj: dict) -> Any:
    if len(obj) == 1 and _DT_TAG in obj:
        return datetime.fromisoformat(obj[_DT_TAG])
    return obj


class SQLiteDocumentStore:
    def __init__(
        self, path: str, clock: Optional[Callable[[], datetime]] = None
    ) -> None:
        self.path = path
        self._clock = MonotonicClock(clock or utc_now)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(path, check_same_thread=False)
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error as e:
            raise PersistenceError(
                "Could not open the interview database", detail=str(e)
            ) from e

    def _load(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        row = self._conn.execute(
            "SELECT body FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id),
        ).fetchone()
        return json.loads(row[0], object_hook=_decode) if row else None

    def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            try:
                return self._load(collection, doc_id)
            except sqlite3.Error as e:
                raise PersistenceError(
                    "Could not read the interview", detail=str(e)
                ) from e

    def upsert(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        *,
        merge: bool = True,
    ) -> None:
        stamped = stamp(fields, self._clock())
        with self._lock:
            try:
                with self._conn:
                    current = self._load(collection, doc_id) if merge else None
                    body = {**(current or {}), **stamped}
                    self._conn.execute(
                        "INSERT OR REPLACE INTO documents (collection, id, body) "
                        "VALUES (?, ?, ?)",
                        (collection, doc_id, json.dumps(body, default=_encode)),
                    )
            except sqlite3.Error as e:
                raise PersistenceError(
                    "Could not save the interview", detail=str(e)
                ) from e

    def query(self, collection: str, field: str, value: Any) -> list[dict[str, Any]]:
        with self._lock:
            try:
                rows = self._conn.execute(
                    "SELECT body FROM documents WHERE collection = ?", (collection,)
                ).fetchall()
            except sqlite3.Error as e:
                raise PersistenceError(
                    "Could not list interviews", detail=str(e)
                ) from e
        docs = [json.loads(r[0], object_hook=_decode) for r in rows]
        return [d for d in docs if d.get(field) == value]

    def close(self) -> None:
        self._conn.close()
