"""Family roster management."""

import logging
from dataclasses import dataclass, fields, replace
from typing import Protocol
from uuid import UUID, uuid4

from miambidi.domain.families import (
    Family,
    FamilyMember,
    MemberPreferences,
    MemberProfile,
    Role,
)
from miambidi.domain.models import UserRecord
from miambidi.errors import DenialReason, NotFoundError, PermissionDeniedError

_logger = logging.getLogger(__name__)

MEMBER_FIELDS = frozenset({"display_name", "email", "age", "preferences"})
PREFERENCE_FIELDS = frozenset(item.name for item in fields(MemberPreferences))


@dataclass(frozen=True)
class FamilyRoster:
    """Snapshot of a family and its members.

    Mutations return a new roster and never leave the family without an admin.
    """

    family: Family
    members: dict[UUID, FamilyMember]

    def member(self, member_id: UUID) -> FamilyMember:
        """Return a member or raise NotFoundError."""
        member = self.members.get(member_id)
        if member is None:
            raise NotFoundError("member", member_id)
        return member

    def admin_ids(self) -> frozenset[UUID]:
        return frozenset(
            member.id for member in self.members.values() if member.role == Role.ADMIN
        )

    def is_admin(self, user_id: UUID) -> bool:
        return user_id in self.admin_ids()

    def add_member(
        self, actor_id: UUID, profile: MemberProfile, member_id: UUID | None = None
    ) -> tuple["FamilyRoster", FamilyMember]:
        """Add a member with the ``member`` role."""
        self._require_admin(actor_id)
        member = FamilyMember(
            id=member_id or uuid4(),
            family_id=self.family.id,
            display_name=profile.display_name.strip(),
            role=Role.MEMBER,
            email=profile.email,
            age=profile.age,
            preferences=profile.preferences,
            added_by=actor_id,
        )
        if member.id in self.members:
            raise ValueError(f"Member already in family: {member.id}")
        return self._with_member(member), member

    def remove_member(self, actor_id: UUID, member_id: UUID) -> "FamilyRoster":
        """Remove another member, refusing to remove the last admin."""
        if actor_id == member_id:
            raise PermissionDeniedError(DenialReason.SELF_REMOVAL)
        self._require_admin(actor_id)
        return self._without(member_id)

    def join(self, user: UserRecord) -> tuple["FamilyRoster", FamilyMember]:
        """Add an account as a plain member keyed by its user id."""
        if user.id in self.members:
            raise ValueError(f"Member already in family: {user.id}")
        member = FamilyMember(
            id=user.id,
            family_id=self.family.id,
            display_name=user.display_name,
            role=Role.MEMBER,
            email=user.email,
            added_by=user.id,
        )
        return self._with_member(member), member

    def leave(self, member_id: UUID) -> "FamilyRoster":
        """Remove the member on their own request."""
        return self._without(member_id)

    def change_role(self, actor_id: UUID, member_id: UUID, role: Role) -> "FamilyRoster":
        """Change a member's role, refusing to demote the last admin."""
        self._require_admin(actor_id)
        member = self.member(member_id)
        if member.role == Role.ADMIN and role != Role.ADMIN:
            self._require_other_admin(member_id)
        return _reassign_admin(self._with_member(replace(member, role=role)))

    def update_member(
        self, actor_id: UUID, member_id: UUID, changes: dict[str, object]
    ) -> tuple["FamilyRoster", FamilyMember]:
        """Update a profile; members edit themselves, admins edit anyone."""
        unknown = set(changes) - MEMBER_FIELDS
        if unknown:
            raise ValueError(f"Unsupported member fields: {sorted(unknown)}")
        if actor_id != member_id and not self.is_admin(actor_id):
            raise PermissionDeniedError(DenialReason.SELF_OR_ADMIN_REQUIRED)
        member = self.member(member_id)
        values = _checked_member_changes(changes)
        preferences = values.get("preferences")
        if isinstance(preferences, dict):
            values["preferences"] = _merge_preferences(member.preferences, preferences)
        updated = replace(member, **values)
        return self._with_member(updated), updated

    def rename(self, actor_id: UUID, name: str) -> "FamilyRoster":
        """Rename the family."""
        self._require_admin(actor_id)
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Family name must not be empty")
        return replace(self, family=replace(self.family, name=cleaned))

    def _require_admin(self, actor_id: UUID) -> None:
        if not self.is_admin(actor_id):
            raise PermissionDeniedError(DenialReason.ADMIN_REQUIRED)

    def _require_other_admin(self, member_id: UUID) -> None:
        if not self.admin_ids() - {member_id}:
            raise PermissionDeniedError(DenialReason.LAST_ADMIN)

    def _with_member(self, member: FamilyMember) -> "FamilyRoster":
        members = {**self.members, member.id: member}
        family = replace(self.family, member_ids=frozenset(members))
        return FamilyRoster(family=family, members=members)

    def _without(self, member_id: UUID) -> "FamilyRoster":
        member = self.member(member_id)
        if member.role == Role.ADMIN:
            self._require_other_admin(member_id)
        members = {key: value for key, value in self.members.items() if key != member_id}
        family = replace(self.family, member_ids=frozenset(members))
        return _reassign_admin(FamilyRoster(family=family, members=members))


def _reassign_admin(roster: FamilyRoster) -> FamilyRoster:
    admins = roster.admin_ids()
    if roster.family.admin_id in admins or not admins:
        return roster
    new_admin = min(admins, key=str)
    return replace(roster, family=replace(roster.family, admin_id=new_admin))


def _checked_member_changes(changes: dict[str, object]) -> dict[str, object]:
    values = dict(changes)
    if "display_name" in values:
        name = values["display_name"]
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Member display name must be a non-empty string")
        values["display_name"] = name.strip()
    email = values.get("email")
    if email is not None and not isinstance(email, str):
        raise ValueError("Member email must be a string")
    age = values.get("age")
    if age is not None and (isinstance(age, bool) or not isinstance(age, int) or age < 0):
        raise ValueError("Member age must be a non-negative integer")
    if "preferences" in values and not isinstance(
        values["preferences"], dict | MemberPreferences
    ):
        raise ValueError("Member preferences must be a mapping")
    return values


def _merge_preferences(
    current: MemberPreferences, changes: dict[str, object]
) -> MemberPreferences:
    unknown = set(changes) - PREFERENCE_FIELDS
    if unknown:
        raise ValueError(f"Unsupported preference fields: {sorted(unknown)}")
    values = {}
    for key, value in changes.items():
        if isinstance(value, str) or not isinstance(value, list | tuple | set | frozenset):
            raise ValueError(f"Preference {key} must be a list of strings")
        values[key] = frozenset(str(item) for item in value)
    return replace(current, **values)


class FamilyRepository(Protocol):
    """Persistence interface for families and members."""

    def get_family(self, family_id: UUID) -> Family | None:
        """Return a family by id, if present."""

    def list_members(self, family_id: UUID) -> list[FamilyMember]:
        """Return the members of a family."""

    def save_family(self, family: Family) -> None:
        """Insert or replace a family."""

    def save_member(self, member: FamilyMember) -> None:
        """Insert or replace a member profile."""

    def delete_member(self, family_id: UUID, member_id: UUID) -> None:
        """Delete a member profile."""


class MembershipRepository(Protocol):
    """Keeps the user profile's family and role in sync."""

    def set_membership(
        self, user_id: UUID, family_id: UUID | None, role: Role | None
    ) -> None:
        """Update the user's current family and role."""


@dataclass
class FamilyService:
    """Application service for family operations."""

    repository: FamilyRepository
    membership_repository: MembershipRepository

    def get_roster(self, family_id: UUID) -> FamilyRoster:
        """Return the family roster or raise NotFoundError."""
        family = self.repository.get_family(family_id)
        if family is None:
            raise NotFoundError("family", family_id)
        members = {member.id: member for member in self.repository.list_members(family_id)}
        return FamilyRoster(family=family, members=members)

    def find_family(self, user: UserRecord) -> Family | None:
        """Return the user's current family, if any."""
        if user.family_id is None:
            return None
        return self.repository.get_family(user.family_id)

    def create_family(self, user: UserRecord, name: str) -> FamilyRoster:
        """Create a family with the user as its admin."""
        _require_no_family(user)
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Family name must not be empty")
        family = Family(
            id=uuid4(),
            name=cleaned,
            admin_id=user.id,
            member_ids=frozenset({user.id}),
            created_by=user.id,
        )
        admin = FamilyMember(
            id=user.id,
            family_id=family.id,
            display_name=user.display_name,
            role=Role.ADMIN,
            email=user.email,
            added_by=user.id,
        )
        self.repository.save_family(family)
        self.repository.save_member(admin)
        self.membership_repository.set_membership(user.id, family.id, Role.ADMIN)
        _logger.info("Family created: id=%s admin=%s", family.id, user.id)
        return FamilyRoster(family=family, members={admin.id: admin})

    def join_family(self, user: UserRecord, family_id: UUID) -> FamilyRoster:
        """Add the user's account to an existing family as a member."""
        _require_no_family(user)
        roster, member = self.get_roster(family_id).join(user)
        self.repository.save_member(member)
        self.repository.save_family(roster.family)
        self.membership_repository.set_membership(user.id, family_id, Role.MEMBER)
        _logger.info("Family joined: family=%s user=%s", family_id, user.id)
        return roster

    def leave_family(self, user: UserRecord) -> None:
        """Remove the user from their current family."""
        if user.family_id is None:
            raise PermissionDeniedError(DenialReason.FAMILY_REQUIRED)
        roster = self.get_roster(user.family_id).leave(user.id)
        self.repository.delete_member(user.family_id, user.id)
        self.repository.save_family(roster.family)
        self.membership_repository.set_membership(user.id, None, None)
        _logger.info("Family left: family=%s user=%s", user.family_id, user.id)

    def add_member(
        self, user: UserRecord, family_id: UUID, profile: MemberProfile
    ) -> FamilyMember:
        """Add a member to the family."""
        roster, member = self.get_roster(family_id).add_member(user.id, profile)
        self.repository.save_member(member)
        self.repository.save_family(roster.family)
        _logger.info("Member added: family=%s member=%s", family_id, member.id)
        return member

    def remove_member(self, user: UserRecord, family_id: UUID, member_id: UUID) -> None:
        """Remove a member from the family."""
        roster = self.get_roster(family_id).remove_member(user.id, member_id)
        self.repository.delete_member(family_id, member_id)
        self.repository.save_family(roster.family)
        self.membership_repository.set_membership(member_id, None, None)
        _logger.info("Member removed: family=%s member=%s", family_id, member_id)

    def change_role(
        self, user: UserRecord, family_id: UUID, member_id: UUID, role: Role
    ) -> FamilyMember:
        """Change a member's role."""
        roster = self.get_roster(family_id).change_role(user.id, member_id, role)
        member = roster.member(member_id)
        self.repository.save_member(member)
        self.repository.save_family(roster.family)
        self.membership_repository.set_membership(member_id, family_id, role)
        _logger.info(
            "Member role changed: family=%s member=%s role=%s",
            family_id,
            member_id,
            role.value,
        )
        return member

    def update_member(
        self,
        user: UserRecord,
        family_id: UUID,
        member_id: UUID,
        changes: dict[str, object],
    ) -> FamilyMember:
        """Update a member profile."""
        _, member = self.get_roster(family_id).update_member(user.id, member_id, changes)
        self.repository.save_member(member)
        return member

    def rename_family(self, user: UserRecord, family_id: UUID, name: str) -> Family:
        """Rename the family."""
        roster = self.get_roster(family_id).rename(user.id, name)
        self.repository.save_family(roster.family)
        return roster.family


def _require_no_family(user: UserRecord) -> None:
    if user.family_id is not None:
        raise PermissionDeniedError(DenialReason.ALREADY_IN_FAMILY)
