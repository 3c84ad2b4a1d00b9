"""Curation note ledger gating the curation -> ready_for_publication edge."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, rbac, schemas
from ..auth import Actor
from ..database import atomic
from ..errors import NotFound
from .documents import lock_document

# purpose: accumulate library curation findings and expose the unresolved gate
# status: active
# depends_on: services.documents.lock_document


def count_unresolved(db: Session, document_id: UUID) -> int:
    return (
        db.query(func.count(models.CurationNote.id))
        .filter(
            models.CurationNote.document_id == document_id,
            models.CurationNote.resolved.is_(False),
        )
        .scalar()
        or 0
    )


def _lock_note(db: Session, note_id: UUID) -> models.CurationNote:
    note = db.get(models.CurationNote, note_id)
    if note is None:
        raise NotFound(f"Curation note {note_id} not found")
    # serialise with transitions on the owning document before touching the note
    lock_document(db, note.document_id)
    db.refresh(note)
    return note


def add_note(
    db: Session,
    document_id: UUID,
    payload: schemas.CurationNoteCreate,
    *,
    actor: Actor,
) -> models.CurationNote:
    rbac.ensure_curator(actor)
    now = datetime.now(timezone.utc)
    with atomic(db):
        document = lock_document(db, document_id)
        if document is None:
            raise NotFound(f"Document {document_id} not found")
        note = models.CurationNote(
            document_id=document.id,
            curator_id=actor.id,
            note_type=payload.note_type,
            text=payload.text,
            resolved=False,
            created_at=now,
            updated_at=now,
        )
        db.add(note)
    db.refresh(note)
    return note


def resolve_note(db: Session, note_id: UUID, *, actor: Actor) -> models.CurationNote:
    """Mark a note resolved; resolving twice is a no-op."""

    rbac.ensure_curator(actor)
    with atomic(db):
        note = _lock_note(db, note_id)
        if not note.resolved:
            now = datetime.now(timezone.utc)
            note.resolved = True
            note.resolved_at = now
            note.updated_at = now
    db.refresh(note)
    return note


def update_note(
    db: Session,
    note_id: UUID,
    payload: schemas.CurationNoteUpdate,
    *,
    actor: Actor,
) -> models.CurationNote:
    rbac.ensure_curator(actor)
    with atomic(db):
        note = _lock_note(db, note_id)
        note.text = payload.text
        note.updated_at = datetime.now(timezone.utc)
    db.refresh(note)
    return note


def list_notes(
    db: Session,
    document_id: UUID,
    *,
    unresolved_only: bool = False,
) -> list[models.CurationNote]:
    query = db.query(models.CurationNote).filter(models.CurationNote.document_id == document_id)
    if unresolved_only:
        query = query.filter(models.CurationNote.resolved.is_(False))
    return query.order_by(models.CurationNote.created_at.asc()).all()
