from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..auth import Actor, get_current_actor
from ..database import get_db
from ..services import documents, reviews

router = APIRouter(prefix="/api", tags=["reviews"])


@router.post(
    "/documents/{document_id}/reviews",
    response_model=schemas.ReviewOut,
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    document_id: UUID,
    payload: schemas.ReviewCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return reviews.create_review(db, document_id, payload, actor=actor)


@router.get("/documents/{document_id}/reviews", response_model=list[schemas.ReviewOut])
def list_reviews(
    document_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    documents.get_visible_document(db, document_id, actor)
    return reviews.list_reviews(db, document_id)


@router.patch("/reviews/{review_id}", response_model=schemas.ReviewOut)
def update_review(
    review_id: UUID,
    payload: schemas.ReviewUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return reviews.update_review(db, review_id, payload, actor=actor)
