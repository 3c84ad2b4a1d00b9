"""Advisory review records attached to documents."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import Actor
from ..database import atomic
from ..errors import NotFound, Unauthorized, ValidationError

# purpose: capture reviewer scores and recommendations without moving document status
# status: active


def _validate_score(score: int | None) -> None:
    if score is not None and not 1 <= score <= 5:
        raise ValidationError("Review score must be between 1 and 5")


def create_review(
    db: Session,
    document_id: UUID,
    payload: schemas.ReviewCreate,
    *,
    actor: Actor,
) -> models.DocumentReview:
    _validate_score(payload.score)
    document = db.get(models.Document, document_id)
    if document is None:
        raise NotFound(f"Document {document_id} not found")
    if not actor.is_admin and not (actor.role == "faculty" and document.adviser_id == actor.id):
        raise Unauthorized("Only the document adviser may open a review")
    now = datetime.now(timezone.utc)
    review = models.DocumentReview(
        document_id=document.id,
        reviewer_id=actor.id,
        review_type=payload.review_type,
        status="pending",
        comments=payload.comments,
        recommendations=payload.recommendations,
        score=payload.score,
        created_at=now,
        updated_at=now,
    )
    with atomic(db):
        db.add(review)
    db.refresh(review)
    return review


def update_review(
    db: Session,
    review_id: UUID,
    payload: schemas.ReviewUpdate,
    *,
    actor: Actor,
) -> models.DocumentReview:
    _validate_score(payload.score)
    with atomic(db):
        review = db.get(models.DocumentReview, review_id)
        if review is None:
            raise NotFound(f"Review {review_id} not found")
        if not actor.is_admin and review.reviewer_id != actor.id:
            raise Unauthorized("Only the reviewer may update this review")
        if review.status == "completed":
            raise ValidationError("Completed reviews are read-only")
        now = datetime.now(timezone.utc)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(review, field, value)
        review.updated_at = now
        if review.status == "completed":
            review.completed_at = now
    db.refresh(review)
    return review


def list_reviews(db: Session, document_id: UUID) -> list[models.DocumentReview]:
    return (
        db.query(models.DocumentReview)
        .filter(models.DocumentReview.document_id == document_id)
        .order_by(models.DocumentReview.created_at.asc())
        .all()
    )
