"""Supabase-backed surgeon repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from or_mastery.adapters.supabase_support import (
    parse_row,
    parse_rows,
    remote_call,
    require_scope,
)
from or_mastery.domain.errors import RemoteError
from or_mastery.domain.models import Surgeon
from or_mastery.services.repositories import SurgeonRepository

_COLUMNS = "id, user_id, first_name, last_name, specialty, photo_url, gloves, gown"


@dataclass
class SupabaseSurgeonRepository(SurgeonRepository):
    """Supabase implementation for surgeon persistence."""

    client: Client

    def list_surgeons(self, user_id: UUID) -> list[Surgeon]:
        """Return the user's surgeons ordered by last name."""
        require_scope(user_id)
        with remote_call("list surgeons"):
            response = (
                self.client.table("surgeons")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .order("last_name")
                .execute()
            )
        return parse_rows(Surgeon, response.data)

    def get_surgeon(self, user_id: UUID, surgeon_id: UUID) -> Surgeon | None:
        """Return one surgeon owned by the user, if present."""
        require_scope(user_id, surgeon_id=surgeon_id)
        with remote_call("load surgeon"):
            response = (
                self.client.table("surgeons")
                .select(_COLUMNS)
                .eq("id", str(surgeon_id))
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return parse_row(Surgeon, response.data[0])

    def create_surgeon(self, user_id: UUID, first_name: str, last_name: str) -> Surgeon:
        """Insert a surgeon and return it."""
        require_scope(user_id)
        with remote_call("create surgeon"):
            response = (
                self.client.table("surgeons")
                .insert(
                    {
                        "user_id": str(user_id),
                        "first_name": first_name,
                        "last_name": last_name,
                    }
                )
                .execute()
            )
        if not response.data:
            raise RemoteError("Failed to create surgeon")
        return parse_row(Surgeon, response.data[0])

    def update_surgeon(
        self, user_id: UUID, surgeon_id: UUID, fields: dict[str, object]
    ) -> Surgeon | None:
        """Update fields on an owned surgeon."""
        require_scope(user_id, surgeon_id=surgeon_id)
        with remote_call("update surgeon"):
            response = (
                self.client.table("surgeons")
                .update(fields)
                .eq("id", str(surgeon_id))
                .eq("user_id", str(user_id))
                .execute()
            )
        if not response.data:
            return None
        return parse_row(Surgeon, response.data[0])

    def delete_surgeon(self, user_id: UUID, surgeon_id: UUID) -> None:
        """Delete one owned surgeon row."""
        require_scope(user_id, surgeon_id=surgeon_id)
        with remote_call("delete surgeon"):
            self.client.table("surgeons").delete().eq("id", str(surgeon_id)).eq(
                "user_id", str(user_id)
            ).execute()
