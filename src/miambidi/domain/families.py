"""Domain models for families and their members."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID


class Role(str, Enum):
    """Role of a member inside a family."""

    ADMIN = "admin"
    MEMBER = "member"


@dataclass(frozen=True)
class MemberPreferences:
    """Food preferences of a family member."""

    dietary_restrictions: frozenset[str] = frozenset()
    allergies: frozenset[str] = frozenset()
    favorite_categories: frozenset[str] = frozenset()
    disliked_foods: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Family:
    """The sharing unit for recipes, ingredients and meal plans."""

    id: UUID
    name: str
    admin_id: UUID
    member_ids: frozenset[UUID] = field(default_factory=frozenset)
    created_by: UUID | None = None


@dataclass(frozen=True)
class FamilyMember:
    """Per-family profile of a member."""

    id: UUID
    family_id: UUID
    display_name: str
    role: Role = Role.MEMBER
    email: str | None = None
    age: int | None = None
    preferences: MemberPreferences = field(default_factory=MemberPreferences)
    added_by: UUID | None = None


@dataclass(frozen=True)
class MemberProfile:
    """User input describing a member to add."""

    display_name: str
    email: str | None = None
    age: int | None = None
    preferences: MemberPreferences = field(default_factory=MemberPreferences)
