"""Write path for surgeons and procedures."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from or_mastery.domain.errors import NotFoundError, ValidationError
from or_mastery.domain.models import Procedure, Surgeon
from or_mastery.domain.outcomes import Outcome
from or_mastery.services.outcomes import attempt
from or_mastery.services.repositories import ProcedureRepository, SurgeonRepository
from or_mastery.services.session_guard import SessionContext

logger = logging.getLogger(__name__)

SURGEON_FIELDS = {"first_name", "last_name", "specialty", "photo_url", "gloves", "gown"}
_REQUIRED_SURGEON_FIELDS = {"first_name", "last_name"}


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MutationGateway:
    """Creates, updates, and deletes entities for the signed-in user.

    Each operation checks the session itself through the given context and
    scopes every write by the resolved user id.
    """

    surgeons: SurgeonRepository
    procedures: ProcedureRepository
    clock: Callable[[], datetime] = _utcnow

    def create_surgeon(
        self, context: SessionContext, first_name: str, last_name: str
    ) -> Outcome[Surgeon]:
        """Create a surgeon from trimmed first and last names."""

        def create() -> Surgeon:
            first = first_name.strip()
            last = last_name.strip()
            if not first or not last:
                raise ValidationError("Add first and last name.")
            user_id = context.require_user_id()
            return self.surgeons.create_surgeon(user_id, first, last)

        return attempt("create_surgeon", create)

    def create_procedure(
        self, context: SessionContext, surgeon_id: UUID, name: str
    ) -> Outcome[Procedure]:
        """Create a procedure with empty notes under an owned surgeon."""

        def create() -> Procedure:
            clean_name = name.strip()
            if not clean_name:
                raise ValidationError("Enter a procedure name.")
            user_id = context.require_user_id()
            if self.surgeons.get_surgeon(user_id, surgeon_id) is None:
                raise NotFoundError("Surgeon not found.")
            return self.procedures.create_procedure(user_id, surgeon_id, clean_name)

        return attempt("create_procedure", create)

    def update_procedure_text(  # noqa: PLR0913
        self,
        context: SessionContext,
        surgeon_id: UUID,
        procedure_id: UUID,
        draping: str,
        instruments_trays: str,
        workflow_notes: str,
        name: str | None = None,
    ) -> Outcome[Procedure]:
        """Save the procedure's notes, and its name when given."""

        def update() -> Procedure:
            fields: dict[str, object] = {
                "draping": draping,
                "instruments_trays": instruments_trays,
                "workflow_notes": workflow_notes,
            }
            if name is not None:
                clean_name = name.strip()
                if not clean_name:
                    raise ValidationError("Enter a procedure name.")
                fields["name"] = clean_name
            fields["updated_at"] = self.clock().isoformat()
            user_id = context.require_user_id()
            updated = self.procedures.update_procedure(
                user_id, surgeon_id, procedure_id, fields
            )
            if updated is None:
                raise NotFoundError("Procedure not found.")
            return updated

        return attempt("update_procedure_text", update)

    def update_surgeon_field(
        self, context: SessionContext, surgeon_id: UUID, field_name: str, value: str
    ) -> Outcome[Surgeon]:
        """Overwrite one surgeon field; the last write wins."""
        return attempt(
            "update_surgeon_field",
            lambda: self._update_surgeon(context, surgeon_id, {field_name: value}),
        )

    def update_gloves_gown(
        self, context: SessionContext, surgeon_id: UUID, gloves: str, gown: str
    ) -> Outcome[Surgeon]:
        """Save the gloves and gown sizes in one write."""
        return attempt(
            "update_gloves_gown",
            lambda: self._update_surgeon(
                context, surgeon_id, {"gloves": gloves, "gown": gown}
            ),
        )

    def delete_procedure(
        self, context: SessionContext, surgeon_id: UUID, procedure_id: UUID
    ) -> Outcome[None]:
        """Delete a single procedure of a surgeon."""

        def delete() -> None:
            user_id = context.require_user_id()
            self.procedures.delete_procedure(user_id, surgeon_id, procedure_id)

        return attempt("delete_procedure", delete)

    def delete_surgeon(
        self, context: SessionContext, surgeon_id: UUID
    ) -> Outcome[None]:
        """Delete a surgeon after deleting all of its procedures.

        No foreign key cascades in the data store, so procedures go first. If
        that step fails the surgeon row is left in place.
        """

        def delete() -> None:
            user_id = context.require_user_id()
            self.procedures.delete_procedures_for_surgeon(user_id, surgeon_id)
            self.surgeons.delete_surgeon(user_id, surgeon_id)
            logger.info(
                "Deleted surgeon and procedures",
                extra={"user_id": str(user_id), "surgeon_id": str(surgeon_id)},
            )

        return attempt("delete_surgeon", delete)

    def _update_surgeon(
        self, context: SessionContext, surgeon_id: UUID, fields: dict[str, str]
    ) -> Surgeon:
        cleaned: dict[str, object] = {}
        for name, value in fields.items():
            if name not in SURGEON_FIELDS:
                raise ValidationError(f"Unknown surgeon field: {name}")
            if name == "photo_url":
                cleaned[name] = value
                continue
            trimmed = value.strip()
            if name in _REQUIRED_SURGEON_FIELDS and not trimmed:
                raise ValidationError("Add first and last name.")
            cleaned[name] = trimmed
        user_id = context.require_user_id()
        updated = self.surgeons.update_surgeon(user_id, surgeon_id, cleaned)
        if updated is None:
            raise NotFoundError("Surgeon not found.")
        return updated
