"""Error kinds raised by the core services.

Core code only carries a machine-readable reason; the API layer turns it into
French text for the user.
"""

from enum import Enum


class DenialReason(str, Enum):
    """Why an action was refused."""

    ADMIN_REQUIRED = "admin_required"
    LAST_ADMIN = "last_admin"
    SELF_REMOVAL = "self_removal"
    ALREADY_IN_FAMILY = "already_in_family"
    SELF_OR_ADMIN_REQUIRED = "self_or_admin_required"
    FAMILY_REQUIRED = "family_required"
    NOT_FAMILY_MEMBER = "not_family_member"
    RECIPE_NOT_VISIBLE = "recipe_not_visible"
    EDIT_IMPORTED_FAMILY_RECIPE = "edit_imported_family_recipe"
    EDIT_IMPORTED_PRIVATE_RECIPE = "edit_imported_private_recipe"
    EDIT_PUBLIC_RECIPE = "edit_public_recipe"
    EDIT_FAMILY_RECIPE = "edit_family_recipe"
    EDIT_PRIVATE_RECIPE = "edit_private_recipe"
    EDIT_RECIPE = "edit_recipe"
    EDIT_INGREDIENT = "edit_ingredient"
    DELETE_INGREDIENT = "delete_ingredient"
    MANAGE_RECIPE = "manage_recipe"


class MiamBidiError(Exception):
    """Base class for domain errors."""


class PermissionDeniedError(MiamBidiError):
    """The acting user lacks the role or ownership required."""

    def __init__(self, reason: DenialReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


class NotFoundError(MiamBidiError):
    """A referenced entity does not exist in the current snapshot."""

    def __init__(self, kind: str, key: object) -> None:
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key
