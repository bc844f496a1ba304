"""Family and member endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from miambidi.api.dependencies import Actor, get_actor, get_container
from miambidi.api.schemas import (
    FamilyCreate,
    FamilyRename,
    MemberCreate,
    MemberUpdate,
    RoleChange,
    family_payload,
    member_payload,
)
from miambidi.domain.families import MemberProfile
from miambidi.errors import DenialReason, PermissionDeniedError
from miambidi.services.families import FamilyRoster

router = APIRouter(prefix="/families", tags=["families"])


def _roster_payload(roster: FamilyRoster) -> dict[str, object]:
    members = sorted(roster.members.values(), key=lambda member: member.display_name)
    return {
        "family": family_payload(roster.family),
        "members": [member_payload(member) for member in members],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_family(
    payload: FamilyCreate, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    """Create a family with the caller as admin."""
    roster = get_container(request).family_service.create_family(actor.user, payload.name)
    return _roster_payload(roster)


@router.get("/me")
async def my_family(request: Request, actor: Actor = Depends(get_actor)) -> dict[str, object]:
    """Return the caller's family roster."""
    if actor.family is None:
        raise PermissionDeniedError(DenialReason.FAMILY_REQUIRED)
    roster = get_container(request).family_service.get_roster(actor.family.id)
    return _roster_payload(roster)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def leave_family(request: Request, actor: Actor = Depends(get_actor)) -> None:
    """Leave the caller's current family."""
    get_container(request).family_service.leave_family(actor.user)


@router.post("/{family_id}/join")
async def join_family(
    family_id: UUID, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    """Join an existing family as a member."""
    roster = get_container(request).family_service.join_family(actor.user, family_id)
    return _roster_payload(roster)


@router.patch("/{family_id}")
async def rename_family(
    family_id: UUID,
    payload: FamilyRename,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    family = get_container(request).family_service.rename_family(
        actor.user, family_id, payload.name
    )
    return family_payload(family)


@router.post("/{family_id}/members", status_code=status.HTTP_201_CREATED)
async def add_member(
    family_id: UUID,
    payload: MemberCreate,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    profile = MemberProfile(
        display_name=payload.display_name,
        email=payload.email,
        age=payload.age,
        preferences=payload.preferences.to_domain(),
    )
    member = get_container(request).family_service.add_member(
        actor.user, family_id, profile
    )
    return member_payload(member)


@router.patch("/{family_id}/members/{member_id}")
async def update_member(
    family_id: UUID,
    member_id: UUID,
    payload: MemberUpdate,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    """Update a member profile; preferences are merged."""
    changes = payload.changes()
    member = get_container(request).family_service.update_member(
        actor.user, family_id, member_id, changes
    )
    return member_payload(member)


@router.put("/{family_id}/members/{member_id}/role")
async def change_role(
    family_id: UUID,
    member_id: UUID,
    payload: RoleChange,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    member = get_container(request).family_service.change_role(
        actor.user, family_id, member_id, payload.role
    )
    return member_payload(member)


@router.delete("/{family_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    family_id: UUID,
    member_id: UUID,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> None:
    get_container(request).family_service.remove_member(actor.user, family_id, member_id)
