"""Read and edit rules for recipes and ingredients.

Every check is a pure function of the acting user, the user's current family and
the entity. A missing permission yields False; callers decide which error to
raise, usually with the reason returned by ``edit_denial_reason``.
"""

from typing import Protocol
from uuid import UUID

from miambidi.domain.families import Family, Role
from miambidi.domain.models import UserRecord
from miambidi.domain.recipes import ImportRecord, Recipe, Visibility
from miambidi.errors import DenialReason


class ScopedEntity(Protocol):
    """Anything carrying a visibility tier and an owner."""

    @property
    def visibility(self) -> Visibility: ...

    @property
    def created_by(self) -> UUID | None: ...

    @property
    def family_id(self) -> UUID | None: ...

    @property
    def imported_from(self) -> ImportRecord | None: ...

    @property
    def editors(self) -> frozenset[UUID]: ...


def belongs_to(user: UserRecord, family: Family | None) -> bool:
    """Return True when ``family`` is the user's current family."""
    return family is not None and user.family_id == family.id


def is_family_admin(user: UserRecord, family: Family | None) -> bool:
    """Return True when the user is an admin of their current family."""
    return belongs_to(user, family) and user.role == Role.ADMIN


def can_view(user: UserRecord, family: Family | None, entity: ScopedEntity) -> bool:
    """Return True when the user may read the entity."""
    if entity.visibility == Visibility.PUBLIC:
        return True
    if entity.visibility == Visibility.FAMILY:
        if belongs_to(user, family) and entity.family_id == family.id:
            return True
    elif entity.visibility == Visibility.PRIVATE:
        if entity.created_by == user.id:
            return True
        if entity.imported_from and entity.imported_from.imported_by == user.id:
            return True
    # Edit rights always imply read rights.
    return can_edit(user, family, entity)


def can_edit(user: UserRecord, family: Family | None, entity: ScopedEntity) -> bool:
    """Return True when the user may modify the entity."""
    if entity.created_by == user.id:
        return True
    if user.id in entity.editors:
        return True
    return _admin_grant(user, family, entity)


def can_manage(user: UserRecord, family: Family | None, entity: ScopedEntity) -> bool:
    """Return True when the user may change visibility of or delete the entity.

    Unlike ``can_edit`` the ownership allow-list is not consulted: only the
    creator and family admins manage an entity's lifecycle.
    """
    if entity.created_by == user.id:
        return True
    return _admin_grant(user, family, entity)


def _admin_grant(user: UserRecord, family: Family | None, entity: ScopedEntity) -> bool:
    if not is_family_admin(user, family):
        return False
    if entity.family_id == family.id:
        return True
    # Any family admin may edit a public entity.
    return entity.visibility == Visibility.PUBLIC


def edit_denial_reason(entity: ScopedEntity) -> DenialReason:
    """Return the tier-specific reason for a refused edit."""
    if not isinstance(entity, Recipe):
        return DenialReason.EDIT_INGREDIENT
    if entity.imported_from is not None:
        if entity.visibility == Visibility.FAMILY:
            return DenialReason.EDIT_IMPORTED_FAMILY_RECIPE
        if entity.visibility == Visibility.PRIVATE:
            return DenialReason.EDIT_IMPORTED_PRIVATE_RECIPE
        return DenialReason.EDIT_RECIPE
    return {
        Visibility.PUBLIC: DenialReason.EDIT_PUBLIC_RECIPE,
        Visibility.FAMILY: DenialReason.EDIT_FAMILY_RECIPE,
        Visibility.PRIVATE: DenialReason.EDIT_PRIVATE_RECIPE,
    }[entity.visibility]
