import uuid
import sqlalchemy as sa
from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from .database import Base

# purpose: persistence gateway tables for the document workflow engine
# status: active


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    __tablename__ = "documents"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    abstract = Column(Text)
    program = Column(String)
    year = Column(Integer)
    # denormalised cache of the newest TransitionRecord.to_status
    status = Column(String(32), nullable=False, default="pending", index=True)
    owner_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    adviser_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    published_at = Column(DateTime(timezone=True), nullable=True)

    history = relationship(
        "TransitionRecord",
        back_populates="document",
        order_by="TransitionRecord.sequence",
    )
    revision_requests = relationship(
        "RevisionRequest",
        back_populates="document",
        order_by="RevisionRequest.created_at",
    )
    curation_notes = relationship(
        "CurationNote",
        back_populates="document",
        order_by="CurationNote.created_at",
    )
    reviews = relationship(
        "DocumentReview",
        back_populates="document",
        order_by="DocumentReview.created_at",
    )


class TransitionRecord(Base):
    __tablename__ = "document_workflow_history"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    sequence = Column(Integer, nullable=False)
    from_status = Column(String(32), nullable=True)
    to_status = Column(String(32), nullable=False)
    actor_id = Column(UUID(as_uuid=True), nullable=False)
    reason = Column(Text)
    comments = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    document = relationship("Document", back_populates="history")

    __table_args__ = (
        sa.UniqueConstraint("document_id", "sequence", name="uq_workflow_history_document_sequence"),
    )


class RevisionRequest(Base):
    __tablename__ = "document_revision_requests"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    requested_by = Column(UUID(as_uuid=True), nullable=False)
    requested_from = Column(UUID(as_uuid=True), nullable=False, index=True)
    # ledger row that sent the document back, when opened with the transition
    transition_id = Column(
        UUID(as_uuid=True),
        ForeignKey("document_workflow_history.id", ondelete="RESTRICT"),
        nullable=True,
        unique=True,
    )
    reason = Column(Text, nullable=False)
    specific_requirements = Column(Text)
    deadline = Column(DateTime(timezone=True), nullable=True)
    # stored lifecycle; "overdue" is derived on read from the deadline
    status = Column(String(32), nullable=False, default="pending", index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    document = relationship("Document", back_populates="revision_requests")


class CurationNote(Base):
    __tablename__ = "document_curation_notes"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    curator_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    note_type = Column(String(32), nullable=False)
    text = Column(Text, nullable=False)
    resolved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    document = relationship("Document", back_populates="curation_notes")


class DocumentReview(Base):
    __tablename__ = "document_reviews"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    reviewer_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    review_type = Column(String(32), nullable=False)
    status = Column(String(32), nullable=False, default="pending", index=True)
    comments = Column(Text)
    recommendations = Column(Text)
    score = Column(Integer)
    is_approved = Column(Boolean)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    document = relationship("Document", back_populates="reviews")

    __table_args__ = (
        sa.CheckConstraint("score IS NULL OR (score >= 1 AND score <= 5)", name="ck_document_reviews_score"),
    )
