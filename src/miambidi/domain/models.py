"""Domain models for users."""

from dataclasses import dataclass
from uuid import UUID

from miambidi.domain.families import Role


@dataclass(frozen=True)
class UserRecord:
    """Represents an authenticated user and their current family role."""

    id: UUID
    display_name: str
    email: str | None = None
    family_id: UUID | None = None
    role: Role | None = None
