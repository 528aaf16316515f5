"""
Purpose: Commit generated question sets as interview records.

Identifier policy: reuse the id in edit mode, mint a uuid4 hex in create mode.
Merge policy: field-level merge into whatever is stored at that id.
Timestamps: the store stamps createdAt/updatedAt with its own clock.
createdAt is written only when the stored record does not already have one,
so repeated saves never move it.
"""

from __future__ import annotations
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence

from ..errors import PersistenceError
from ..interfaces import DocumentStore
from ..models import FormInput, GeneratedQuestion, InterviewRecord
from .document_store import SERVER_TIMESTAMP

logger = logging.getLogger(__name__)

COLLECTION = "interviews"
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def mint_id() -> str:
    return uuid.uuid4().hex


class InterviewRepository:
    def __init__(self, store: DocumentStore, *, collection: str = COLLECTION):
        self.store = store
        self.collection = collection

    def load(self, interview_id: str) -> Optional[InterviewRecord]:
        doc = self.store.get(self.collection, interview_id)
        if doc is None:
            return None
        doc.setdefault("id", interview_id)
        return InterviewRecord.from_document(doc)

    def list_for_owner(self, owner_id: str) -> list[InterviewRecord]:
        """Newest update first."""
        docs = self.store.query(self.collection, "userId", owner_id)
        records = [InterviewRecord.from_document(d) for d in docs if d.get("id")]
        return sorted(
            records,
            key=lambda r: r.updated_at or _EPOCH,
            reverse=True,
        )

    def upsert(
        self,
        form: FormInput,
        questions: Sequence[GeneratedQuestion],
        owner_id: Optional[str],
        interview_id: Optional[str] = None,
    ) -> str:
        """Create or update one record; returns its id."""
        if not owner_id:
            raise PersistenceError("No signed-in user to own the interview")

        record_id = interview_id or mint_id()
        try:
            existing = (
                self.store.get(self.collection, record_id) if interview_id else None
            )
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(
                "Could not read the interview", detail=str(e)
            ) from e
        if existing and existing.get("userId") and existing["userId"] != owner_id:
            raise PersistenceError(
                "Interview belongs to another user",
                detail=f"id={record_id}",
            )

        payload = {
            "id": record_id,
            "userId": owner_id,
            **form.to_fields(),
            "questions": [q.to_dict() for q in questions],
            "updatedAt": SERVER_TIMESTAMP,
        }
        if not existing or existing.get("createdAt") is None:
            payload["createdAt"] = SERVER_TIMESTAMP

        try:
            self.store.upsert(self.collection, record_id, payload, merge=True)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError("Could not save the interview", detail=str(e)) from e
        logger.info(
            "%s interview %s (%d questions)",
            "Updated" if existing else "Created",
            record_id,
            len(questions),
        )
        return record_id
