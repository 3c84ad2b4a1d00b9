from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..auth import Actor, get_current_actor
from ..database import get_db
from ..services import documents, revisions

router = APIRouter(prefix="/api", tags=["revisions"])


@router.post(
    "/documents/{document_id}/revision-requests",
    response_model=schemas.RevisionRequestOut,
    status_code=status.HTTP_201_CREATED,
)
def create_revision_request(
    document_id: UUID,
    payload: schemas.RevisionRequestCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    request = revisions.create_revision_request(db, document_id, payload, actor=actor)
    return revisions.to_schema(request)


@router.get(
    "/documents/{document_id}/revision-requests",
    response_model=list[schemas.RevisionRequestOut],
)
def list_revision_requests(
    document_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    documents.get_visible_document(db, document_id, actor)
    return [revisions.to_schema(request) for request in revisions.list_revision_requests(db, document_id)]


@router.get("/revision-requests/{request_id}", response_model=schemas.RevisionRequestOut)
def get_revision_request(
    request_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    request = revisions.get_revision_request(db, request_id)
    if actor.id not in {request.requested_by, request.requested_from}:
        documents.get_visible_document(db, request.document_id, actor)
    return revisions.to_schema(request)


@router.post("/revision-requests/{request_id}/start", response_model=schemas.RevisionRequestOut)
def start_revision_request(
    request_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    request = revisions.start_revision_request(db, request_id, actor=actor)
    return revisions.to_schema(request)
