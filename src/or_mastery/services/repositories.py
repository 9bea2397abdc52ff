"""Persistence interfaces for surgeons, procedures, and procedure photos.

Every method takes the owning user id, and child lookups also take the
parent id; implementations filter on all of them.
"""

from typing import Protocol
from uuid import UUID

from or_mastery.domain.models import Procedure, ProcedurePhoto, Surgeon


class SurgeonRepository(Protocol):
    """Persistence interface for surgeons."""

    def list_surgeons(self, user_id: UUID) -> list[Surgeon]:
        """Return the user's surgeons ordered by last name."""

    def get_surgeon(self, user_id: UUID, surgeon_id: UUID) -> Surgeon | None:
        """Return one surgeon owned by the user, if present."""

    def create_surgeon(self, user_id: UUID, first_name: str, last_name: str) -> Surgeon:
        """Insert a surgeon and return it."""

    def update_surgeon(
        self, user_id: UUID, surgeon_id: UUID, fields: dict[str, object]
    ) -> Surgeon | None:
        """Update fields on an owned surgeon; None when no row matched."""

    def delete_surgeon(self, user_id: UUID, surgeon_id: UUID) -> None:
        """Delete one owned surgeon row."""


class ProcedureRepository(Protocol):
    """Persistence interface for procedures."""

    def list_procedures(self, user_id: UUID, surgeon_id: UUID) -> list[Procedure]:
        """Return a surgeon's procedures, newest first."""

    def get_procedure(
        self, user_id: UUID, procedure_id: UUID, surgeon_id: UUID | None = None
    ) -> Procedure | None:
        """Return one owned procedure, optionally also matched on surgeon."""

    def create_procedure(self, user_id: UUID, surgeon_id: UUID, name: str) -> Procedure:
        """Insert a procedure with empty notes and return it."""

    def update_procedure(
        self,
        user_id: UUID,
        surgeon_id: UUID,
        procedure_id: UUID,
        fields: dict[str, object],
    ) -> Procedure | None:
        """Update fields on an owned procedure; None when no row matched."""

    def delete_procedure(
        self, user_id: UUID, surgeon_id: UUID, procedure_id: UUID
    ) -> None:
        """Delete one owned procedure row."""

    def delete_procedures_for_surgeon(self, user_id: UUID, surgeon_id: UUID) -> None:
        """Delete every owned procedure of a surgeon."""


class ProcedurePhotoRepository(Protocol):
    """Persistence interface for procedure photos."""

    def list_photos(self, user_id: UUID, procedure_id: UUID) -> list[ProcedurePhoto]:
        """Return a procedure's photos, newest first."""

    def create_photo(
        self, user_id: UUID, procedure_id: UUID, url: str, caption: str | None
    ) -> ProcedurePhoto:
        """Insert a photo row and return it."""
