"""Audit ledger: the single entry point that changes a document's status."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

import sqlalchemy as sa
from prometheus_client import Counter
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, notify, rbac, schemas, states
from ..auth import Actor
from ..database import atomic
from ..errors import Conflict, NotFound, ValidationError, WorkflowError
from . import curation, revisions
from .documents import lock_document

# purpose: perform one atomic status transition and append its TransitionRecord
# inputs: document id, target status, acting identity, optimistic expected status
# outputs: immutable TransitionRecord rows; Document.status mirrors the newest one
# status: active
# depends_on: states, rbac, services.curation, services.revisions

logger = logging.getLogger(__name__)

TRANSITION_OUTCOMES = Counter(
    "workflow_transitions_total",
    "Document transition attempts by outcome",
    ["outcome", "to_status"],
)

Notifier = Callable[[models.Document, models.TransitionRecord], object]


def _next_sequence(db: Session, document_id: UUID) -> int:
    latest = (
        db.query(sa.func.max(models.TransitionRecord.sequence))
        .filter(models.TransitionRecord.document_id == document_id)
        .scalar()
    )
    return 1 if latest is None else latest + 1


def _check_gates(db: Session, document: models.Document, target_status: str, reason: str | None) -> None:
    if target_status == states.NEEDS_REVISION and not (reason and reason.strip()):
        raise ValidationError("A reason is required when requesting revisions")
    if target_status == states.READY_FOR_PUBLICATION:
        unresolved = curation.count_unresolved(db, document.id)
        if unresolved:
            raise ValidationError(f"unresolved curation notes ({unresolved})")


def request_transition(
    db: Session,
    *,
    document_id: UUID,
    target_status: str,
    actor: Actor,
    expected_status: str,
    reason: str | None = None,
    comments: str | None = None,
    revision_request: schemas.RevisionRequestCreate | None = None,
    notifier: Notifier | None = notify.notify_transition,
) -> models.TransitionRecord:
    """Move a document along one edge of the status graph.

    The document row is locked and its status compared with ``expected_status``
    before anything else is evaluated; the write itself is a compare-and-set on
    the same value, so of two racing callers holding the same token exactly one
    commits and the other receives :class:`Conflict`. Every failure leaves the
    document and its history untouched.

    ``revision_request`` is only accepted with ``needs_revision``; the request row
    is written in the same transaction and linked to the new ledger record.
    """

    now = datetime.now(timezone.utc)
    try:
        with atomic(db):
            document = lock_document(db, document_id)
            if document is None:
                raise NotFound(f"Document {document_id} not found")
            if document.status != expected_status:
                raise Conflict()
            from_status = document.status
            rbac.ensure_authorized(actor, document, target_status)
            states.ensure_edge(from_status, target_status)
            # notes are read under the document lock taken above
            _check_gates(db, document, target_status, reason)
            revision = None
            if revision_request is not None:
                if target_status != states.NEEDS_REVISION:
                    raise ValidationError("A revision request can only accompany needs_revision")
                revision = revisions.build_revision_request(
                    document, revision_request, actor=actor, now=now
                )

            values: dict[str, object] = {"status": target_status, "updated_at": now}
            if target_status == states.PUBLISHED:
                values["published_at"] = now
            result = db.execute(
                sa.update(models.Document)
                .where(
                    models.Document.id == document.id,
                    models.Document.status == from_status,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise Conflict()
            if target_status == states.READY_FOR_PUBLICATION:
                # SQLite takes no row lock on SELECT; recount once the write lock is held
                _check_gates(db, document, target_status, reason)

            record = models.TransitionRecord(
                document_id=document.id,
                sequence=_next_sequence(db, document.id),
                from_status=from_status,
                to_status=target_status,
                actor_id=actor.id,
                reason=reason,
                comments=comments,
                created_at=now,
            )
            db.add(record)
            try:
                db.flush()
            except IntegrityError as exc:
                raise Conflict() from exc
            if revision is not None:
                revision.transition_id = record.id
                db.add(revision)
    except WorkflowError as exc:
        TRANSITION_OUTCOMES.labels(exc.code, target_status).inc()
        logger.info(
            "Transition of %s to %s by %s refused: %s (%s)",
            document_id,
            target_status,
            actor.id,
            exc.code,
            exc,
        )
        raise

    TRANSITION_OUTCOMES.labels("committed", target_status).inc()
    db.refresh(document)
    db.refresh(record)
    logger.info(
        "Document %s moved %s -> %s by %s (sequence %s)",
        document.id,
        record.from_status,
        record.to_status,
        actor.id,
        record.sequence,
    )
    _after_commit(db, document, record, notifier)
    return record


def _after_commit(
    db: Session,
    document: models.Document,
    record: models.TransitionRecord,
    notifier: Notifier | None,
) -> None:
    """Follow-ups that must never undo a committed transition."""

    if record.to_status == states.UNDER_REVIEW:
        try:
            closed = revisions.complete_open_requests(db, document.id, now=record.created_at)
            if closed:
                logger.info("Completed %s revision request(s) for %s", closed, document.id)
        except WorkflowError:
            logger.warning(
                "Could not complete revision requests for %s", document.id, exc_info=True
            )
    if notifier is None:
        return
    try:
        notifier(document, record)
    except Exception:
        logger.warning("Notification for document %s failed", document.id, exc_info=True)


def get_history(db: Session, document_id: UUID) -> list[models.TransitionRecord]:
    """Return the ledger for a document, oldest first."""

    if db.get(models.Document, document_id) is None:
        raise NotFound(f"Document {document_id} not found")
    return (
        db.query(models.TransitionRecord)
        .filter(models.TransitionRecord.document_id == document_id)
        .order_by(models.TransitionRecord.sequence.asc())
        .all()
    )


def replay_status(db: Session, document_id: UUID) -> str:
    """Rebuild a document's status purely from its ledger."""

    history = get_history(db, document_id)
    return states.replay((record.from_status, record.to_status) for record in history)


def is_consistent(db: Session, document_id: UUID) -> bool:
    """True when the cached status equals the newest ledger entry (or pending with none)."""

    document = db.get(models.Document, document_id)
    if document is None:
        raise NotFound(f"Document {document_id} not found")
    latest = (
        db.query(models.TransitionRecord)
        .filter(models.TransitionRecord.document_id == document_id)
        .order_by(models.TransitionRecord.sequence.desc())
        .first()
    )
    expected = latest.to_status if latest is not None else states.INITIAL_STATUS
    return document.status == expected

