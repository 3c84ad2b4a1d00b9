"""Document registration, scoped reads and listing."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.orm import Query, Session

from .. import models, rbac, schemas, states
from ..auth import Actor
from ..database import atomic
from ..errors import NotFound, Unauthorized, ValidationError
from . import revisions

# purpose: read-side document access plus the submission seam that seeds the workflow
# status: active

LIST_MAX_LIMIT = int(os.getenv("WORKFLOW_LIST_MAX_LIMIT", "100"))


def lock_document(db: Session, document_id: UUID) -> models.Document | None:
    """Load a document with a row lock held until the transaction ends."""

    return (
        db.query(models.Document)
        .filter(models.Document.id == document_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )


def get_document(db: Session, document_id: UUID) -> models.Document:
    document = db.get(models.Document, document_id)
    if document is None:
        raise NotFound(f"Document {document_id} not found")
    return document


def get_visible_document(db: Session, document_id: UUID, actor: Actor) -> models.Document:
    document = get_document(db, document_id)
    if not rbac.can_view_document(actor, document):
        raise Unauthorized("Document not accessible")
    return document


def scope_query(query: Query, actor_id: UUID, role: str) -> Query:
    """Restrict a Document query to what the role may see."""

    if role == "student":
        return query.filter(models.Document.owner_id == actor_id)
    if role == "faculty":
        return query.filter(models.Document.adviser_id == actor_id)
    if role in {"librarian", "admin"}:
        return query
    raise ValidationError(f"Unknown role {role!r}")


def register_document(
    db: Session,
    payload: schemas.DocumentCreate,
    *,
    actor: Actor,
) -> models.Document:
    """Create a submission in the initial status; no ledger row is written."""

    owner_id = payload.owner_id or actor.id
    if not actor.is_admin and owner_id != actor.id:
        raise Unauthorized("Documents may only be submitted by their owner")
    if actor.role not in {"student", "admin"}:
        raise Unauthorized("Only students or administrators may submit documents")
    now = datetime.now(timezone.utc)
    document = models.Document(
        title=payload.title,
        abstract=payload.abstract,
        program=payload.program,
        year=payload.year,
        status=states.INITIAL_STATUS,
        owner_id=owner_id,
        adviser_id=payload.adviser_id,
        created_at=now,
        updated_at=now,
    )
    with atomic(db):
        db.add(document)
    db.refresh(document)
    return document


def assign_adviser(
    db: Session,
    document_id: UUID,
    adviser_id: UUID,
    *,
    actor: Actor,
) -> models.Document:
    """Point a document at its reviewing faculty member."""

    if actor.role not in {"librarian", "admin"}:
        raise Unauthorized("Only library staff may assign advisers")
    with atomic(db):
        document = lock_document(db, document_id)
        if document is None:
            raise NotFound(f"Document {document_id} not found")
        if document.status in states.TERMINAL_STATUSES:
            raise ValidationError("Cannot reassign a closed document")
        document.adviser_id = adviser_id
    db.refresh(document)
    return document


def list_documents(
    db: Session,
    *,
    actor_id: UUID,
    role: str,
    status_filter: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> list[models.Document]:
    """Return the role-scoped page ordered by workflow position then recency."""

    if status_filter is not None and not states.is_known_status(status_filter):
        raise ValidationError(f"Unknown status {status_filter!r}")
    limit = max(1, min(int(limit), LIST_MAX_LIMIT))
    offset = max(0, int(offset))

    position = sa.case(
        {status: states.workflow_position(status) for status in states.STATUSES},
        value=models.Document.status,
        else_=0,
    )
    query = scope_query(db.query(models.Document), actor_id, role)
    if status_filter:
        query = query.filter(models.Document.status == status_filter)
    return (
        query.order_by(position.asc(), models.Document.updated_at.desc(), models.Document.id.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def workflow_status(db: Session, document_id: UUID, actor: Actor) -> schemas.WorkflowStatusOut:
    """Summarise a document's ledger, open reviews and outstanding revisions."""

    document = get_visible_document(db, document_id, actor)
    history = (
        db.query(models.TransitionRecord)
        .filter(models.TransitionRecord.document_id == document.id)
        .order_by(models.TransitionRecord.sequence.desc())
        .all()
    )
    open_reviews = (
        db.query(models.DocumentReview)
        .filter(
            models.DocumentReview.document_id == document.id,
            models.DocumentReview.status != "completed",
        )
        .order_by(models.DocumentReview.created_at.asc())
        .all()
    )
    now = datetime.now(timezone.utc)
    pending_revisions = [
        revisions.to_schema(request, now=now)
        for request in revisions.list_revision_requests(db, document.id)
        if request.status in revisions.OPEN_STATUSES
    ]
    return schemas.WorkflowStatusOut(
        document_id=document.id,
        current_status=document.status,
        submitted_at=document.created_at,
        last_updated=document.updated_at,
        published_at=document.published_at,
        history=[schemas.TransitionRecordOut.model_validate(record) for record in history],
        open_reviews=[schemas.ReviewOut.model_validate(review) for review in open_reviews],
        pending_revisions=pending_revisions,
    )
