"""User-related business logic."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from miambidi.domain.families import Role
from miambidi.domain.models import UserRecord
from miambidi.errors import NotFoundError


class UserRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user profile, if present."""

    def set_membership(
        self, user_id: UUID, family_id: UUID | None, role: Role | None
    ) -> None:
        """Update the user's current family and role."""


@dataclass
class UserService:
    """Application service for user lookups."""

    repository: UserRepository

    def get_user(self, user_id: UUID) -> UserRecord:
        """Return the authenticated user's profile or raise NotFoundError."""
        user = self.repository.get_user(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user
