"""Supabase implementation for families and their members."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from miambidi.domain.families import Family, FamilyMember, MemberPreferences, Role
from miambidi.services.families import FamilyRepository


@dataclass
class SupabaseFamilyRepository(FamilyRepository):
    """Supabase-backed repository for families."""

    client: Client

    def get_family(self, family_id: UUID) -> Family | None:
        """Return a family by id, if present."""
        response = (
            self.client.table("families")
            .select("id, name, admin_id, member_ids, created_by")
            .eq("id", str(family_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        created_by = row.get("created_by")
        return Family(
            id=UUID(row["id"]),
            name=str(row.get("name", "")),
            admin_id=UUID(row["admin_id"]),
            member_ids=frozenset(UUID(value) for value in row.get("member_ids") or []),
            created_by=UUID(created_by) if created_by else None,
        )

    def list_members(self, family_id: UUID) -> list[FamilyMember]:
        """Return the members of a family."""
        response = (
            self.client.table("family_members")
            .select("*")
            .eq("family_id", str(family_id))
            .execute()
        )
        return [_parse_member(row) for row in response.data or []]

    def save_family(self, family: Family) -> None:
        """Insert or replace a family."""
        response = (
            self.client.table("families")
            .upsert(
                {
                    "id": str(family.id),
                    "name": family.name,
                    "admin_id": str(family.admin_id),
                    "member_ids": sorted(str(value) for value in family.member_ids),
                    "created_by": str(family.created_by) if family.created_by else None,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save family")

    def save_member(self, member: FamilyMember) -> None:
        """Insert or replace a member profile."""
        preferences = member.preferences
        response = (
            self.client.table("family_members")
            .upsert(
                {
                    "id": str(member.id),
                    "family_id": str(member.family_id),
                    "display_name": member.display_name,
                    "role": member.role.value,
                    "email": member.email,
                    "age": member.age,
                    "preferences": {
                        "dietary_restrictions": sorted(preferences.dietary_restrictions),
                        "allergies": sorted(preferences.allergies),
                        "favorite_categories": sorted(preferences.favorite_categories),
                        "disliked_foods": sorted(preferences.disliked_foods),
                    },
                    "added_by": str(member.added_by) if member.added_by else None,
                },
                on_conflict="family_id,id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save family member")

    def delete_member(self, family_id: UUID, member_id: UUID) -> None:
        """Delete a member profile."""
        self.client.table("family_members").delete().eq(
            "family_id", str(family_id)
        ).eq("id", str(member_id)).execute()


def _parse_member(row: dict[str, object]) -> FamilyMember:
    """Parse a member row into a domain model."""
    raw_preferences = row.get("preferences") or {}
    added_by = row.get("added_by")
    return FamilyMember(
        id=UUID(row["id"]),
        family_id=UUID(row["family_id"]),
        display_name=str(row.get("display_name", "")),
        role=Role(row.get("role") or Role.MEMBER.value),
        email=row.get("email"),
        age=row.get("age"),
        preferences=MemberPreferences(
            dietary_restrictions=frozenset(raw_preferences.get("dietary_restrictions", [])),
            allergies=frozenset(raw_preferences.get("allergies", [])),
            favorite_categories=frozenset(raw_preferences.get("favorite_categories", [])),
            disliked_foods=frozenset(raw_preferences.get("disliked_foods", [])),
        ),
        added_by=UUID(added_by) if added_by else None,
    )
