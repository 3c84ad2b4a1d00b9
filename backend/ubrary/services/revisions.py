"""Revision request tracking for documents sent back to their authors."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import Actor
from ..database import atomic
from ..errors import NotFound, Unauthorized, ValidationError

# purpose: track author revision obligations between needs_revision and re-review
# inputs: document ids, reviewer and author actors, optional deadlines
# outputs: RevisionRequest rows whose overdue state is derived lazily on read
# status: active

OPEN_STATUSES = frozenset({"pending", "in_progress"})


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def effective_status(request: models.RevisionRequest, *, now: datetime | None = None) -> str:
    """Return the stored status, or ``overdue`` once an open request passes its deadline."""

    current = now or datetime.now(timezone.utc)
    deadline = _as_utc(request.deadline)
    if request.status in OPEN_STATUSES and deadline is not None and _as_utc(current) > deadline:
        return "overdue"
    return request.status


def to_schema(request: models.RevisionRequest, *, now: datetime | None = None) -> schemas.RevisionRequestOut:
    payload = schemas.RevisionRequestOut.model_validate(request)
    return payload.model_copy(update={"status": effective_status(request, now=now)})


def build_revision_request(
    document: models.Document,
    payload: schemas.RevisionRequestCreate,
    *,
    actor: Actor,
    now: datetime,
) -> models.RevisionRequest:
    """Validate ``payload`` and return an unsaved request; the caller owns the transaction."""

    if not payload.reason or not payload.reason.strip():
        raise ValidationError("A revision request needs a reason")
    if not actor.is_admin and document.adviser_id != actor.id:
        raise Unauthorized("Only the document adviser may request revisions")
    return models.RevisionRequest(
        document_id=document.id,
        requested_by=actor.id,
        requested_from=payload.requested_from or document.owner_id,
        reason=payload.reason.strip(),
        specific_requirements=payload.specific_requirements,
        deadline=_as_utc(payload.deadline),
        status="pending",
        created_at=now,
        updated_at=now,
    )


def create_revision_request(
    db: Session,
    document_id: UUID,
    payload: schemas.RevisionRequestCreate,
    *,
    actor: Actor,
) -> models.RevisionRequest:
    """Record what the author must change on a document already sent back.

    To open a request together with the ``needs_revision`` transition, pass it to
    ``ledger.request_transition`` instead so both land in one transaction.
    """

    document = db.get(models.Document, document_id)
    if document is None:
        raise NotFound(f"Document {document_id} not found")
    request = build_revision_request(
        document, payload, actor=actor, now=datetime.now(timezone.utc)
    )
    with atomic(db):
        db.add(request)
    db.refresh(request)
    return request


def get_for_transition(db: Session, transition_id: UUID) -> models.RevisionRequest | None:
    return (
        db.query(models.RevisionRequest)
        .filter(models.RevisionRequest.transition_id == transition_id)
        .one_or_none()
    )


def get_revision_request(db: Session, request_id: UUID) -> models.RevisionRequest:
    request = db.get(models.RevisionRequest, request_id)
    if request is None:
        raise NotFound(f"Revision request {request_id} not found")
    return request


def start_revision_request(
    db: Session,
    request_id: UUID,
    *,
    actor: Actor,
) -> models.RevisionRequest:
    """Move a request from pending to in_progress on behalf of the author."""

    with atomic(db):
        request = (
            db.query(models.RevisionRequest)
            .filter(models.RevisionRequest.id == request_id)
            .with_for_update()
            .populate_existing()
            .one_or_none()
        )
        if request is None:
            raise NotFound(f"Revision request {request_id} not found")
        if not actor.is_admin and request.requested_from != actor.id:
            raise Unauthorized("Only the addressee may start a revision request")
        if request.status != "pending":
            raise ValidationError(f"Revision request is already {request.status}")
        request.status = "in_progress"
        request.updated_at = datetime.now(timezone.utc)
    db.refresh(request)
    return request


def complete_open_requests(db: Session, document_id: UUID, *, now: datetime | None = None) -> int:
    """Close every open request once the document is back under review."""

    completed_at = now or datetime.now(timezone.utc)
    with atomic(db):
        requests = (
            db.query(models.RevisionRequest)
            .filter(
                models.RevisionRequest.document_id == document_id,
                models.RevisionRequest.status.in_(sorted(OPEN_STATUSES)),
            )
            .all()
        )
        for request in requests:
            request.status = "completed"
            request.completed_at = completed_at
            request.updated_at = completed_at
    return len(requests)


def list_revision_requests(db: Session, document_id: UUID) -> list[models.RevisionRequest]:
    return (
        db.query(models.RevisionRequest)
        .filter(models.RevisionRequest.document_id == document_id)
        .order_by(models.RevisionRequest.created_at.asc())
        .all()
    )
