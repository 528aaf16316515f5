"""
Purpose: Document storage keyed by (collection, id).
Why: Reopen interviews, edit them, list them per user.

What is inside:
- SERVER_TIMESTAMP: sentinel the store replaces with its own clock at write time.
- InMemoryDocumentStore: dict-backed store with get/upsert/query.
  SQLiteDocumentStore (sqlite_store.py) keeps the same contract on disk.

Testing:
In-memory: simple state tests with an injected clock.
SQLite: tmp DB fixture.
"""

from __future__ import annotations
import copy
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional


class _ServerTimestamp:
    """Singleton; survives copy/deepcopy so identity checks keep working."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


SERVER_TIMESTAMP = _ServerTimestamp()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MonotonicClock:
    """Wraps a clock so consecutive readings strictly increase."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            now = self._clock()
            if self._last is not None and now <= self._last:
                now = self._last + timedelta(microseconds=1)
            self._last = now
            return now


def stamp(fields: dict[str, Any], now: datetime) -> dict[str, Any]:
    """Replace SERVER_TIMESTAMP sentinels with `now`."""
    return {k: (now if v is SERVER_TIMESTAMP else v) for k, v in fields.items()}


class InMemoryDocumentStore:
    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._docs: dict[str, dict[str, dict[str, Any]]] = {}
        self._clock = MonotonicClock(clock or utc_now)
        self._lock = threading.Lock()

    def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            doc = self._docs.get(collection, {}).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def upsert(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        *,
        merge: bool = True,
    ) -> None:
        stamped = stamp(copy.deepcopy(fields), self._clock())
        with self._lock:
            docs = self._docs.setdefault(collection, {})
            if merge and doc_id in docs:
                docs[doc_id].update(stamped)
            else:
                docs[doc_id] = stamped

    def query(self, collection: str, field: str, value: Any) -> list[dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(d)
                for d in self._docs.get(collection, {}).values()
                if d.get(field) == value
            ]
