"""Supabase-backed procedure repository."""

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
from or_mastery.domain.models import Procedure
from or_mastery.services.repositories import ProcedureRepository

_COLUMNS = (
    "id, user_id, surgeon_id, name, draping, instruments_trays, "
    "workflow_notes, setup_photos, created_at"
)


@dataclass
class SupabaseProcedureRepository(ProcedureRepository):
    """Supabase implementation for procedure persistence."""

    client: Client

    def list_procedures(self, user_id: UUID, surgeon_id: UUID) -> list[Procedure]:
        """Return a surgeon's procedures, newest first."""
        require_scope(user_id, surgeon_id=surgeon_id)
        with remote_call("list procedures"):
            response = (
                self.client.table("procedures")
                .select(_COLUMNS)
                .eq("surgeon_id", str(surgeon_id))
                .eq("user_id", str(user_id))
                .order("created_at", desc=True)
                .execute()
            )
        return parse_rows(Procedure, response.data)

    def get_procedure(
        self, user_id: UUID, procedure_id: UUID, surgeon_id: UUID | None = None
    ) -> Procedure | None:
        """Return one owned procedure, if present."""
        require_scope(user_id, procedure_id=procedure_id)
        with remote_call("load procedure"):
            query = (
                self.client.table("procedures")
                .select(_COLUMNS)
                .eq("id", str(procedure_id))
                .eq("user_id", str(user_id))
            )
            if surgeon_id is not None:
                query = query.eq("surgeon_id", str(surgeon_id))
            response = query.limit(1).execute()
        if not response.data:
            return None
        return parse_row(Procedure, response.data[0])

    def create_procedure(self, user_id: UUID, surgeon_id: UUID, name: str) -> Procedure:
        """Insert a procedure with empty notes and return it."""
        require_scope(user_id, surgeon_id=surgeon_id)
        with remote_call("create procedure"):
            response = (
                self.client.table("procedures")
                .insert(
                    {
                        "user_id": str(user_id),
                        "surgeon_id": str(surgeon_id),
                        "name": name,
                        "draping": "",
                        "instruments_trays": "",
                        "workflow_notes": "",
                    }
                )
                .execute()
            )
        if not response.data:
            raise RemoteError("Failed to create procedure")
        return parse_row(Procedure, response.data[0])

    def update_procedure(
        self,
        user_id: UUID,
        surgeon_id: UUID,
        procedure_id: UUID,
        fields: dict[str, object],
    ) -> Procedure | None:
        """Update fields on an owned procedure."""
        require_scope(user_id, surgeon_id=surgeon_id, procedure_id=procedure_id)
        with remote_call("update procedure"):
            response = (
                self.client.table("procedures")
                .update(fields)
                .eq("id", str(procedure_id))
                .eq("surgeon_id", str(surgeon_id))
                .eq("user_id", str(user_id))
                .execute()
            )
        if not response.data:
            return None
        return parse_row(Procedure, response.data[0])

    def delete_procedure(
        self, user_id: UUID, surgeon_id: UUID, procedure_id: UUID
    ) -> None:
        """Delete one owned procedure row."""
        require_scope(user_id, surgeon_id=surgeon_id, procedure_id=procedure_id)
        with remote_call("delete procedure"):
            self.client.table("procedures").delete().eq("id", str(procedure_id)).eq(
                "surgeon_id", str(surgeon_id)
            ).eq("user_id", str(user_id)).execute()

    def delete_procedures_for_surgeon(self, user_id: UUID, surgeon_id: UUID) -> None:
        """Delete every owned procedure of a surgeon in one call."""
        require_scope(user_id, surgeon_id=surgeon_id)
        with remote_call("delete procedures"):
            self.client.table("procedures").delete().eq(
                "surgeon_id", str(surgeon_id)
            ).eq("user_id", str(user_id)).execute()
