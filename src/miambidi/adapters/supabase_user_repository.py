"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from miambidi.domain.families import Role
from miambidi.domain.models import UserRecord
from miambidi.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user profile, if present."""
        response = (
            self.client.table("users")
            .select("id, display_name, email, family_id, role")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        family_id = row.get("family_id")
        role = row.get("role")
        return UserRecord(
            id=UUID(row["id"]),
            display_name=str(row.get("display_name") or ""),
            email=row.get("email"),
            family_id=UUID(family_id) if family_id else None,
            role=Role(role) if role else None,
        )

    def set_membership(
        self, user_id: UUID, family_id: UUID | None, role: Role | None
    ) -> None:
        """Update the user's current family and role."""
        self.client.table("users").update(
            {
                "family_id": str(family_id) if family_id else None,
                "role": role.value if role else None,
            }
        ).eq("id", str(user_id)).execute()
