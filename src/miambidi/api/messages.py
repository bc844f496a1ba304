"""French user-facing messages for domain errors."""

from miambidi.errors import DenialReason, NotFoundError, PermissionDeniedError

DENIAL_MESSAGES: dict[DenialReason, str] = {
    DenialReason.ADMIN_REQUIRED: "Seuls les admins peuvent gérer la famille",
    DenialReason.LAST_ADMIN: "La famille doit conserver au moins un admin",
    DenialReason.SELF_REMOVAL: "Vous ne pouvez pas vous supprimer de la famille",
    DenialReason.ALREADY_IN_FAMILY: "Vous faites déjà partie d'une famille",
    DenialReason.SELF_OR_ADMIN_REQUIRED: (
        "Seuls le membre lui-même et les admins familiaux peuvent modifier ce profil"
    ),
    DenialReason.FAMILY_REQUIRED: "Aucune famille assignée",
    DenialReason.NOT_FAMILY_MEMBER: "Vous ne faites pas partie de cette famille",
    DenialReason.RECIPE_NOT_VISIBLE: "Vous n'avez pas accès à cette recette",
    DenialReason.EDIT_IMPORTED_FAMILY_RECIPE: (
        "Seuls l'importateur de cette recette familiale et les admins familiaux "
        "peuvent la modifier"
    ),
    DenialReason.EDIT_IMPORTED_PRIVATE_RECIPE: (
        "Seuls l'importateur de cette recette privée et les admins familiaux "
        "peuvent la modifier"
    ),
    DenialReason.EDIT_PUBLIC_RECIPE: (
        "Seuls le créateur de cette recette publique et les admins familiaux "
        "peuvent la modifier"
    ),
    DenialReason.EDIT_FAMILY_RECIPE: (
        "Seuls le créateur de cette recette familiale et les admins familiaux "
        "peuvent la modifier"
    ),
    DenialReason.EDIT_PRIVATE_RECIPE: (
        "Seuls le créateur de cette recette privée et les admins familiaux "
        "peuvent la modifier"
    ),
    DenialReason.EDIT_RECIPE: "Vous n'avez pas la permission de modifier cette recette",
    DenialReason.EDIT_INGREDIENT: (
        "Vous n'avez pas la permission de modifier cet ingrédient"
    ),
    DenialReason.DELETE_INGREDIENT: (
        "Seuls le créateur de l'ingrédient et les admins familiaux peuvent le supprimer"
    ),
    DenialReason.MANAGE_RECIPE: (
        "Seuls le créateur de la recette et les admins familiaux peuvent modifier "
        "la visibilité"
    ),
}

NOT_FOUND_MESSAGES: dict[str, str] = {
    "family": "Famille non trouvée",
    "member": "Membre non trouvé",
    "recipe": "Recette non trouvée",
    "ingredient": "Ingrédient non trouvé",
    "meal": "Aucun repas planifié pour ce créneau",
    "user": "Utilisateur non trouvé",
}


def denial_message(error: PermissionDeniedError) -> str:
    return DENIAL_MESSAGES.get(error.reason, "Permissions insuffisantes")


def not_found_message(error: NotFoundError) -> str:
    return NOT_FOUND_MESSAGES.get(error.kind, "Élément non trouvé")
