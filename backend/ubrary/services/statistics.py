"""Read-only status projections for dashboards."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas, states
from .documents import scope_query
from .revisions import OPEN_STATUSES

# purpose: grouped counts over current Document.status keyed by actor role
# inputs: actor id and role from the identity collaborator
# outputs: status -> count maps with every status present
# status: active


def count_by_status(db: Session, actor_id: UUID, role: str) -> dict[str, int]:
    """Return a count for every workflow status within the role's scope."""

    query = scope_query(
        db.query(models.Document.status, func.count(models.Document.id)),
        actor_id,
        role,
    )
    rows = query.group_by(models.Document.status).all()
    counts = {status: 0 for status in states.STATUSES}
    for status, total in rows:
        counts[status] = counts.get(status, 0) + total
    return counts


def status_summary(db: Session, actor_id: UUID, role: str) -> schemas.StatusCountsOut:
    counts = count_by_status(db, actor_id, role)
    return schemas.StatusCountsOut(
        actor_id=actor_id,
        role=role,
        counts=counts,
        total=sum(counts.values()),
    )


def reviewer_workload(db: Session, actor_id: UUID) -> schemas.WorkloadOut:
    """Summarise what is waiting on a faculty member."""

    advised = dict(
        db.query(models.Document.status, func.count(models.Document.id))
        .filter(
            models.Document.adviser_id == actor_id,
            models.Document.status.in_([states.PENDING, states.UNDER_REVIEW]),
        )
        .group_by(models.Document.status)
        .all()
    )
    open_reviews = (
        db.query(func.count(models.DocumentReview.id))
        .filter(
            models.DocumentReview.reviewer_id == actor_id,
            models.DocumentReview.status.in_(["pending", "in_progress"]),
        )
        .scalar()
    )
    open_requests = (
        db.query(func.count(models.RevisionRequest.id))
        .filter(
            models.RevisionRequest.requested_by == actor_id,
            models.RevisionRequest.status.in_(sorted(OPEN_STATUSES)),
        )
        .scalar()
    )
    return schemas.WorkloadOut(
        actor_id=actor_id,
        advised_pending=advised.get(states.PENDING, 0),
        advised_under_review=advised.get(states.UNDER_REVIEW, 0),
        open_reviews=open_reviews or 0,
        open_revision_requests=open_requests or 0,
    )
