"""Document status graph and edge validation."""

from __future__ import annotations

from typing import Iterable

from .errors import InvalidTransition

# purpose: single authoritative table of document status edges
# status: active

PENDING = "pending"
UNDER_REVIEW = "under_review"
NEEDS_REVISION = "needs_revision"
APPROVED = "approved"
CURATION = "curation"
READY_FOR_PUBLICATION = "ready_for_publication"
PUBLISHED = "published"
REJECTED = "rejected"

# listing order, pending first
STATUSES: tuple[str, ...] = (
    PENDING,
    UNDER_REVIEW,
    NEEDS_REVISION,
    APPROVED,
    CURATION,
    READY_FOR_PUBLICATION,
    PUBLISHED,
    REJECTED,
)

INITIAL_STATUS = PENDING
TERMINAL_STATUSES = frozenset({PUBLISHED, REJECTED})

_EDGES: dict[str, frozenset[str]] = {
    PENDING: frozenset({UNDER_REVIEW}),
    UNDER_REVIEW: frozenset({APPROVED, PUBLISHED, NEEDS_REVISION, REJECTED}),
    NEEDS_REVISION: frozenset({PENDING, UNDER_REVIEW}),
    APPROVED: frozenset({CURATION}),
    CURATION: frozenset({READY_FOR_PUBLICATION}),
    READY_FOR_PUBLICATION: frozenset({PUBLISHED}),
    PUBLISHED: frozenset(),
    REJECTED: frozenset(),
}

STATUS_LABELS: dict[str, str] = {
    PENDING: "submitted for review",
    UNDER_REVIEW: "moved to review",
    NEEDS_REVISION: "marked for revision",
    APPROVED: "approved for curation",
    CURATION: "moved to curation",
    READY_FOR_PUBLICATION: "ready for publication",
    PUBLISHED: "approved and published - now visible to all users",
    REJECTED: "rejected",
}


def is_known_status(value: str | None) -> bool:
    return value in _EDGES


def workflow_position(status: str) -> int:
    """Return the 1-based listing rank of a status, 0 when unknown."""

    try:
        return STATUSES.index(status) + 1
    except ValueError:
        return 0


def allowed_targets(from_status: str) -> frozenset[str]:
    """Return every status reachable in one step, including the reject override."""

    if from_status not in _EDGES:
        return frozenset()
    targets = set(_EDGES[from_status])
    if from_status not in TERMINAL_STATUSES:
        targets.add(REJECTED)
    return frozenset(targets)


def is_override_edge(from_status: str, to_status: str) -> bool:
    """True when the edge exists only through the universal reject override."""

    return (
        to_status == REJECTED
        and from_status not in TERMINAL_STATUSES
        and to_status not in _EDGES.get(from_status, frozenset())
    )


def validate_edge(from_status: str, to_status: str) -> bool:
    """Pure lookup against the status graph."""

    return to_status in allowed_targets(from_status)


def ensure_edge(from_status: str, to_status: str) -> None:
    if not validate_edge(from_status, to_status):
        raise InvalidTransition(f"Cannot move document from {from_status} to {to_status}")


def replay(transitions: Iterable[tuple[str | None, str]]) -> str:
    """Rebuild a status by folding (from, to) pairs from the initial state.

    Raises :class:`InvalidTransition` on the first edge that does not chain from
    the replayed status or is absent from the graph.
    """

    current = INITIAL_STATUS
    for from_status, to_status in transitions:
        if from_status is not None and from_status != current:
            raise InvalidTransition(
                f"History out of order: expected from {current}, found {from_status}"
            )
        ensure_edge(current, to_status)
        current = to_status
    return current
