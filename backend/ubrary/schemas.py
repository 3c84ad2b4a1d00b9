"""Pydantic schemas for the document workflow API."""

# purpose: request and response contracts for FastAPI surfaces and services
# status: active

from datetime import datetime
from typing import Optional, Literal, Dict, List
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID


DocumentStatus = Literal[
    "pending",
    "under_review",
    "needs_revision",
    "approved",
    "curation",
    "ready_for_publication",
    "published",
    "rejected",
]
NoteType = Literal["metadata", "content", "formatting", "accessibility", "final_check"]
RevisionStatus = Literal["pending", "in_progress", "completed", "overdue"]
ReviewType = Literal["initial", "revision", "final"]
ReviewStatus = Literal["pending", "in_progress", "completed", "rejected"]


class DocumentCreate(BaseModel):
    title: str = Field(min_length=1)
    abstract: Optional[str] = None
    program: Optional[str] = None
    year: Optional[int] = None
    owner_id: Optional[UUID] = None
    adviser_id: Optional[UUID] = None


class AdviserAssignment(BaseModel):
    adviser_id: UUID


class DocumentOut(BaseModel):
    id: UUID
    title: str
    abstract: Optional[str] = None
    program: Optional[str] = None
    year: Optional[int] = None
    status: DocumentStatus
    owner_id: UUID
    adviser_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    published_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class RevisionRequestCreate(BaseModel):
    requested_from: Optional[UUID] = None
    reason: str = Field(min_length=1)
    specific_requirements: Optional[str] = None
    deadline: Optional[datetime] = None


class RevisionRequestOut(BaseModel):
    id: UUID
    document_id: UUID
    requested_by: UUID
    requested_from: UUID
    transition_id: Optional[UUID] = None
    reason: str
    specific_requirements: Optional[str] = None
    deadline: Optional[datetime] = None
    status: RevisionStatus
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class TransitionRequest(BaseModel):
    target_status: DocumentStatus
    expected_status: DocumentStatus
    reason: Optional[str] = None
    comments: Optional[str] = None
    revision_request: Optional[RevisionRequestCreate] = None


class TransitionRecordOut(BaseModel):
    id: UUID
    document_id: UUID
    sequence: int
    from_status: Optional[DocumentStatus] = None
    to_status: DocumentStatus
    actor_id: UUID
    reason: Optional[str] = None
    comments: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class TransitionOut(BaseModel):
    record: TransitionRecordOut
    document: DocumentOut
    revision_request: Optional[RevisionRequestOut] = None


class CurationNoteCreate(BaseModel):
    note_type: NoteType
    text: str = Field(min_length=1)


class CurationNoteUpdate(BaseModel):
    text: str = Field(min_length=1)


class CurationNoteOut(BaseModel):
    id: UUID
    document_id: UUID
    curator_id: UUID
    note_type: NoteType
    text: str
    resolved: bool
    created_at: datetime
    updated_at: datetime
    resolved_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ReviewCreate(BaseModel):
    review_type: ReviewType
    comments: Optional[str] = None
    recommendations: Optional[str] = None
    score: Optional[int] = None


class ReviewUpdate(BaseModel):
    status: Optional[ReviewStatus] = None
    comments: Optional[str] = None
    recommendations: Optional[str] = None
    score: Optional[int] = None
    is_approved: Optional[bool] = None


class ReviewOut(BaseModel):
    id: UUID
    document_id: UUID
    reviewer_id: UUID
    review_type: ReviewType
    status: ReviewStatus
    comments: Optional[str] = None
    recommendations: Optional[str] = None
    score: Optional[int] = None
    is_approved: Optional[bool] = None
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class WorkflowStatusOut(BaseModel):
    document_id: UUID
    current_status: DocumentStatus
    submitted_at: datetime
    last_updated: datetime
    published_at: Optional[datetime] = None
    history: List[TransitionRecordOut] = Field(default_factory=list)
    open_reviews: List[ReviewOut] = Field(default_factory=list)
    pending_revisions: List[RevisionRequestOut] = Field(default_factory=list)


class StatusCountsOut(BaseModel):
    actor_id: UUID
    role: str
    counts: Dict[str, int]
    total: int


class WorkloadOut(BaseModel):
    actor_id: UUID
    advised_pending: int = 0
    advised_under_review: int = 0
    open_reviews: int = 0
    open_revision_requests: int = 0


class ErrorOut(BaseModel):
    detail: str
    error: str
    retryable: bool = False
