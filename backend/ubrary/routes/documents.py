from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth import Actor, get_current_actor
from ..database import get_db
from .. import schemas
from ..services import documents

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.post("", response_model=schemas.DocumentOut, status_code=status.HTTP_201_CREATED)
def register_document(
    payload: schemas.DocumentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return documents.register_document(db, payload, actor=actor)


@router.get("", response_model=list[schemas.DocumentOut])
def list_documents(
    status_filter: schemas.DocumentStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=20, ge=1),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return documents.list_documents(
        db,
        actor_id=actor.id,
        role=actor.role,
        status_filter=status_filter,
        limit=limit,
        offset=offset,
    )


@router.get("/{document_id}", response_model=schemas.DocumentOut)
def get_document(
    document_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return documents.get_visible_document(db, document_id, actor)


@router.patch("/{document_id}/adviser", response_model=schemas.DocumentOut)
def assign_adviser(
    document_id: UUID,
    payload: schemas.AdviserAssignment,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return documents.assign_adviser(db, document_id, payload.adviser_id, actor=actor)


@router.get("/{document_id}/workflow", response_model=schemas.WorkflowStatusOut)
def get_workflow_status(
    document_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return documents.workflow_status(db, document_id, actor)
