"""Supabase-backed procedure photo repository."""

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
from or_mastery.domain.models import ProcedurePhoto
from or_mastery.services.repositories import ProcedurePhotoRepository

_COLUMNS = "id, user_id, procedure_id, url, caption, created_at"


@dataclass
class SupabasePhotoRepository(ProcedurePhotoRepository):
    """Supabase implementation for procedure photo metadata."""

    client: Client

    def list_photos(self, user_id: UUID, procedure_id: UUID) -> list[ProcedurePhoto]:
        """Return a procedure's photos, newest first."""
        require_scope(user_id, procedure_id=procedure_id)
        with remote_call("list photos"):
            response = (
                self.client.table("procedure_photos")
                .select(_COLUMNS)
                .eq("procedure_id", str(procedure_id))
                .eq("user_id", str(user_id))
                .order("created_at", desc=True)
                .execute()
            )
        return parse_rows(ProcedurePhoto, response.data)

    def create_photo(
        self, user_id: UUID, procedure_id: UUID, url: str, caption: str | None
    ) -> ProcedurePhoto:
        """Create a photo metadata row and return it."""
        require_scope(user_id, procedure_id=procedure_id)
        with remote_call("save photo"):
            response = (
                self.client.table("procedure_photos")
                .insert(
                    {
                        "user_id": str(user_id),
                        "procedure_id": str(procedure_id),
                        "url": url,
                        "caption": caption,
                    }
                )
                .execute()
            )
        if not response.data:
            raise RemoteError("Failed to save photo")
        return parse_row(ProcedurePhoto, response.data[0])
