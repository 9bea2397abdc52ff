"""Read path for surgeons, procedures, and photos."""

from dataclasses import dataclass
from uuid import UUID

from or_mastery.domain.errors import NotFoundError
from or_mastery.domain.models import (
    Procedure,
    ProcedureDetail,
    ProcedurePhoto,
    Surgeon,
    SurgeonDetail,
)
from or_mastery.domain.outcomes import Outcome
from or_mastery.services.outcomes import attempt
from or_mastery.services.repositories import (
    ProcedurePhotoRepository,
    ProcedureRepository,
    SurgeonRepository,
)


@dataclass
class EntityLoader:
    """Loads entities scoped to one user.

    A query that matches nothing yields ``NotFound``; a collaborator failure
    yields ``Failed`` with its message.
    """

    surgeons: SurgeonRepository
    procedures: ProcedureRepository
    photos: ProcedurePhotoRepository

    def load_surgeons(self, user_id: UUID) -> Outcome[list[Surgeon]]:
        """Return the user's surgeons ordered by last name."""
        return attempt("load_surgeons", lambda: self._surgeons(user_id))

    def load_surgeon(self, user_id: UUID, surgeon_id: UUID) -> Outcome[Surgeon]:
        """Return one surgeon."""
        return attempt("load_surgeon", lambda: self._surgeon(user_id, surgeon_id))

    def load_procedures_for_surgeon(
        self, user_id: UUID, surgeon_id: UUID
    ) -> Outcome[list[Procedure]]:
        """Return a surgeon's procedures, newest first."""
        return attempt(
            "load_procedures_for_surgeon",
            lambda: self._procedures(user_id, surgeon_id),
        )

    def load_surgeon_detail(
        self, user_id: UUID, surgeon_id: UUID
    ) -> Outcome[SurgeonDetail]:
        """Return a surgeon and its procedures."""

        def load() -> SurgeonDetail:
            surgeon = self._surgeon(user_id, surgeon_id)
            return SurgeonDetail(
                surgeon=surgeon, procedures=self._procedures(user_id, surgeon.id)
            )

        return attempt("load_surgeon_detail", load)

    def load_procedure(
        self, user_id: UUID, procedure_id: UUID, surgeon_id: UUID | None = None
    ) -> Outcome[Procedure]:
        """Return one procedure, optionally also matched on its surgeon."""
        return attempt(
            "load_procedure",
            lambda: self._procedure(user_id, procedure_id, surgeon_id),
        )

    def load_photos(
        self, user_id: UUID, procedure_id: UUID
    ) -> Outcome[list[ProcedurePhoto]]:
        """Return a procedure's photos, newest first."""
        return attempt("load_photos", lambda: self._photos(user_id, procedure_id))

    def load_procedure_detail(
        self, user_id: UUID, procedure_id: UUID, surgeon_id: UUID | None = None
    ) -> Outcome[ProcedureDetail]:
        """Return a procedure and its photos."""

        def load() -> ProcedureDetail:
            procedure = self._procedure(user_id, procedure_id, surgeon_id)
            return ProcedureDetail(
                procedure=procedure, photos=self._photos(user_id, procedure.id)
            )

        return attempt("load_procedure_detail", load)

    def _surgeons(self, user_id: UUID) -> list[Surgeon]:
        return self.surgeons.list_surgeons(user_id)

    def _surgeon(self, user_id: UUID, surgeon_id: UUID) -> Surgeon:
        surgeon = self.surgeons.get_surgeon(user_id, surgeon_id)
        if surgeon is None:
            raise NotFoundError("Surgeon not found.")
        return surgeon

    def _procedures(self, user_id: UUID, surgeon_id: UUID) -> list[Procedure]:
        return self.procedures.list_procedures(user_id, surgeon_id)

    def _procedure(
        self, user_id: UUID, procedure_id: UUID, surgeon_id: UUID | None
    ) -> Procedure:
        procedure = self.procedures.get_procedure(user_id, procedure_id, surgeon_id)
        if procedure is None:
            raise NotFoundError("Procedure not found.")
        return procedure

    def _photos(self, user_id: UUID, procedure_id: UUID) -> list[ProcedurePhoto]:
        return self.photos.list_photos(user_id, procedure_id)
