"""Tests for the family application service."""

import pytest

from miambidi.domain.families import MemberProfile, Role
from miambidi.errors import DenialReason, NotFoundError, PermissionDeniedError


def test_create_family_makes_creator_admin(
    household, family_service, user_repository
) -> None:
    roster = family_service.create_family(household.loner, "  Camara ")

    assert roster.family.name == "Camara"
    assert roster.family.admin_id == household.loner.id
    assert roster.is_admin(household.loner.id)
    refreshed = user_repository.get_user(household.loner.id)
    assert refreshed.family_id == roster.family.id
    assert refreshed.role == Role.ADMIN
    assert family_service.find_family(refreshed) == roster.family


def test_add_and_remove_member_persist(
    household, family_service, family_repository
) -> None:
    member = family_service.add_member(
        household.admin, household.family.id, MemberProfile(display_name="Kadi", age=7)
    )

    stored = family_repository.get_family(household.family.id)
    assert member.id in stored.member_ids
    assert family_service.get_roster(household.family.id).member(member.id).age == 7

    family_service.remove_member(household.admin, household.family.id, member.id)

    stored = family_repository.get_family(household.family.id)
    assert member.id not in stored.member_ids
    with pytest.raises(NotFoundError):
        family_service.get_roster(household.family.id).member(member.id)


def test_removed_account_loses_family(
    household, family_service, user_repository
) -> None:
    family_service.remove_member(
        household.admin, household.family.id, household.member.id
    )

    refreshed = user_repository.get_user(household.member.id)
    assert refreshed.family_id is None
    assert refreshed.role is None


def test_change_role_syncs_user_profile(
    household, family_service, user_repository
) -> None:
    family_service.change_role(
        household.admin, household.family.id, household.member.id, Role.ADMIN
    )

    assert user_repository.get_user(household.member.id).role == Role.ADMIN


def test_member_cannot_rename_family(household, family_service) -> None:
    with pytest.raises(PermissionDeniedError):
        family_service.rename_family(household.member, household.family.id, "Autre")

    renamed = family_service.rename_family(
        household.admin, household.family.id, "Diallo-Sy"
    )
    assert renamed.name == "Diallo-Sy"


def test_unknown_family_raises_not_found(household, family_service) -> None:
    with pytest.raises(NotFoundError):
        family_service.get_roster(household.loner.id)


def test_create_family_refused_while_in_a_family(
    household, family_service, family_repository, user_repository
) -> None:
    with pytest.raises(PermissionDeniedError) as excinfo:
        family_service.create_family(household.admin, "Autre")
    assert excinfo.value.reason == DenialReason.ALREADY_IN_FAMILY

    assert len(family_repository.families) == 2
    assert user_repository.get_user(household.admin.id).family_id == household.family.id
    assert family_service.get_roster(household.family.id).is_admin(household.admin.id)


def test_join_family_grants_membership(
    household, family_service, user_repository, recipe_service, make_recipe
) -> None:
    recipe = make_recipe(household.admin.id, household.family.id)

    roster = family_service.join_family(household.loner, household.family.id)

    assert roster.member(household.loner.id).role == Role.MEMBER
    refreshed = user_repository.get_user(household.loner.id)
    assert refreshed.family_id == household.family.id
    assert refreshed.role == Role.MEMBER
    family = family_service.find_family(refreshed)
    assert household.loner.id in family.member_ids
    assert recipe_service.view_recipe(refreshed, family, recipe.id) == recipe


def test_join_family_refused_while_in_a_family(household, family_service) -> None:
    with pytest.raises(PermissionDeniedError) as excinfo:
        family_service.join_family(household.member, household.other_family.id)
    assert excinfo.value.reason == DenialReason.ALREADY_IN_FAMILY


def test_join_unknown_family_raises_not_found(household, family_service) -> None:
    with pytest.raises(NotFoundError):
        family_service.join_family(household.loner, household.loner.id)


def test_leave_family_clears_membership(
    household, family_service, user_repository
) -> None:
    family_service.leave_family(household.member)

    refreshed = user_repository.get_user(household.member.id)
    assert refreshed.family_id is None
    assert household.member.id not in family_service.get_roster(
        household.family.id
    ).members


def test_sole_admin_cannot_leave(household, family_service) -> None:
    with pytest.raises(PermissionDeniedError) as excinfo:
        family_service.leave_family(household.admin)
    assert excinfo.value.reason == DenialReason.LAST_ADMIN

    with pytest.raises(PermissionDeniedError) as excinfo:
        family_service.leave_family(household.loner)
    assert excinfo.value.reason == DenialReason.FAMILY_REQUIRED


def test_admin_cannot_remove_own_membership(household, family_service) -> None:
    with pytest.raises(PermissionDeniedError) as excinfo:
        family_service.remove_member(
            household.admin, household.family.id, household.admin.id
        )
    assert excinfo.value.reason == DenialReason.SELF_REMOVAL
