from __future__ import annotations

from dataclasses import dataclass

from . import models, states
from .auth import Actor
from .errors import Unauthorized

# purpose: declarative capability table gating document status transitions
# status: active


@dataclass(frozen=True)
class Capability:
    """Grant of a set of edges to a role and/or a relationship with the document."""

    key: str
    edges: frozenset[tuple[str, str]] | None
    roles: frozenset[str] | None = None
    relationship: str | None = None

    def covers(self, from_status: str, to_status: str) -> bool:
        return self.edges is None or (from_status, to_status) in self.edges


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str
    capability: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


_LIBRARY_EDGES = frozenset(
    {
        (states.APPROVED, states.CURATION),
        (states.CURATION, states.READY_FOR_PUBLICATION),
        (states.READY_FOR_PUBLICATION, states.PUBLISHED),
    }
)

_ADVISER_EDGES = frozenset(
    {
        (states.PENDING, states.UNDER_REVIEW),
        (states.UNDER_REVIEW, states.APPROVED),
        (states.UNDER_REVIEW, states.PUBLISHED),
        (states.UNDER_REVIEW, states.NEEDS_REVISION),
        (states.UNDER_REVIEW, states.REJECTED),
    }
)

_OWNER_EDGES = frozenset({(states.NEEDS_REVISION, states.PENDING)})

# evaluated in order; first match wins
CAPABILITIES: tuple[Capability, ...] = (
    Capability(key="admin_override", edges=None, roles=frozenset({"admin"})),
    Capability(key="library_curation", edges=_LIBRARY_EDGES, roles=frozenset({"librarian", "admin"})),
    Capability(key="adviser_review", edges=_ADVISER_EDGES, roles=frozenset({"faculty"}), relationship="adviser"),
    Capability(key="owner_resubmission", edges=_OWNER_EDGES, relationship="owner"),
)


def _has_relationship(actor: Actor, document: models.Document, relationship: str | None) -> bool:
    if relationship is None:
        return True
    if relationship == "adviser":
        return document.adviser_id is not None and document.adviser_id == actor.id
    if relationship == "owner":
        return document.owner_id == actor.id
    return False


def authorize(actor: Actor, document: models.Document, target_status: str) -> AccessDecision:
    """Map (actor, document, requested transition) to an allow/deny decision."""

    edge = (document.status, target_status)
    for capability in CAPABILITIES:
        if capability.roles is not None and actor.role not in capability.roles:
            continue
        if not _has_relationship(actor, document, capability.relationship):
            continue
        if capability.covers(*edge):
            return AccessDecision(True, f"granted by {capability.key}", capability.key)
    return AccessDecision(
        False,
        f"{actor.role} {actor.id} may not move document {document.id} from {edge[0]} to {edge[1]}",
    )


def ensure_authorized(actor: Actor, document: models.Document, target_status: str) -> AccessDecision:
    decision = authorize(actor, document, target_status)
    if not decision.allowed:
        raise Unauthorized(decision.reason)
    return decision


def can_curate(actor: Actor) -> bool:
    return actor.role in {"librarian", "admin"}


def ensure_curator(actor: Actor) -> None:
    if not can_curate(actor):
        raise Unauthorized("Curation notes are restricted to library staff")


def can_view_document(actor: Actor, document: models.Document) -> bool:
    if actor.role in {"librarian", "admin"}:
        return True
    if actor.role == "faculty":
        return document.adviser_id == actor.id
    return document.owner_id == actor.id
