from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..auth import Actor, get_current_actor
from ..database import get_db
from ..services import curation, documents

router = APIRouter(prefix="/api", tags=["curation"])


@router.post(
    "/documents/{document_id}/curation-notes",
    response_model=schemas.CurationNoteOut,
    status_code=status.HTTP_201_CREATED,
)
def add_curation_note(
    document_id: UUID,
    payload: schemas.CurationNoteCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return curation.add_note(db, document_id, payload, actor=actor)


@router.get(
    "/documents/{document_id}/curation-notes",
    response_model=list[schemas.CurationNoteOut],
)
def list_curation_notes(
    document_id: UUID,
    unresolved_only: bool = False,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    documents.get_visible_document(db, document_id, actor)
    return curation.list_notes(db, document_id, unresolved_only=unresolved_only)


@router.patch("/curation-notes/{note_id}", response_model=schemas.CurationNoteOut)
def update_curation_note(
    note_id: UUID,
    payload: schemas.CurationNoteUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return curation.update_note(db, note_id, payload, actor=actor)


@router.post("/curation-notes/{note_id}/resolve", response_model=schemas.CurationNoteOut)
def resolve_curation_note(
    note_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return curation.resolve_note(db, note_id, actor=actor)
