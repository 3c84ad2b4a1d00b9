"""Identity collaborator seam: the caller supplies an authenticated actor."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from fastapi import Header, HTTPException, status

# purpose: trust the upstream identity provider's (actor id, role) per request
# status: active

ROLES = ("student", "faculty", "librarian", "admin")


@dataclass(frozen=True)
class Actor:
    id: UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def build_actor(actor_id: str | UUID, role: str) -> Actor:
    """Normalise raw identity values, raising ``ValueError`` when malformed."""

    normalized_role = (role or "").strip().lower()
    if normalized_role not in ROLES:
        raise ValueError(f"Unknown role {role!r}")
    return Actor(id=UUID(str(actor_id)), role=normalized_role)


def get_current_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
) -> Actor:
    if not x_actor_id or not x_actor_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    try:
        return build_actor(x_actor_id, x_actor_role)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid actor identity",
        ) from exc
