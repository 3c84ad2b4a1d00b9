"""Workflow transition and ledger endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from .. import pubsub, schemas
from ..auth import Actor, get_current_actor
from ..database import get_db
from ..services import documents, ledger, revisions

router = APIRouter(prefix="/api/documents", tags=["workflow"])

# purpose: expose the single authoritative status transition entry point
# status: active
# depends_on: services.ledger, services.revisions, pubsub


@router.post(
    "/{document_id}/transitions",
    response_model=schemas.TransitionOut,
    status_code=status.HTTP_201_CREATED,
)
def request_transition(
    document_id: UUID,
    payload: schemas.TransitionRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> schemas.TransitionOut:
    """Move a document along one edge; the body carries the caller's last-seen status."""

    record = ledger.request_transition(
        db,
        document_id=document_id,
        target_status=payload.target_status,
        actor=actor,
        expected_status=payload.expected_status,
        reason=payload.reason,
        comments=payload.comments,
        revision_request=payload.revision_request,
    )
    revision = revisions.get_for_transition(db, record.id)
    revision_out = revisions.to_schema(revision) if revision is not None else None

    document = documents.get_document(db, document_id)
    record_out = schemas.TransitionRecordOut.model_validate(record)
    background_tasks.add_task(
        pubsub.publish_document_event,
        document_id,
        {"type": "document.transition", **record_out.model_dump()},
    )
    return schemas.TransitionOut(
        record=record_out,
        document=schemas.DocumentOut.model_validate(document),
        revision_request=revision_out,
    )


@router.get("/{document_id}/history", response_model=list[schemas.TransitionRecordOut])
def get_history(
    document_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    documents.get_visible_document(db, document_id, actor)
    return ledger.get_history(db, document_id)
