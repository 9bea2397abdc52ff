"""Photo uploads for surgeons and procedures."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from or_mastery.domain.errors import NotFoundError, ValidationError
from or_mastery.domain.models import ImageUpload, ProcedurePhoto
from or_mastery.domain.outcomes import Outcome
from or_mastery.services.outcomes import attempt
from or_mastery.services.repositories import (
    ProcedurePhotoRepository,
    ProcedureRepository,
    SurgeonRepository,
)
from or_mastery.services.session_guard import SessionContext

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "jpg"
_EXTENSION_PATTERN = re.compile(r"[a-z0-9]+")


class ObjectStorage(Protocol):
    """Interface to the hosted object store."""

    def upload(  # noqa: PLR0913
        self, bucket: str, key: str, content: bytes, content_type: str, upsert: bool
    ) -> None:
        """Write an object under a key."""

    def public_url(self, bucket: str, key: str) -> str:
        """Return the public URL for a key."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MediaUploader:
    """Validates images, stores them, and records where they live.

    The storage write and the metadata write are not transactional: when the
    second one fails the stored object is left behind and the error is
    returned.
    """

    storage: ObjectStorage
    surgeons: SurgeonRepository
    procedures: ProcedureRepository
    photos: ProcedurePhotoRepository
    surgeon_bucket: str = "surgeon-photos"
    procedure_bucket: str = "procedure-photos"
    clock: Callable[[], datetime] = _utcnow

    def upload_surgeon_photo(
        self, context: SessionContext, surgeon_id: UUID, upload: ImageUpload
    ) -> Outcome[str]:
        """Store a surgeon's photo, replacing any previous one."""

        def run() -> str:
            _require_image(upload)
            user_id = context.require_user_id()
            if self.surgeons.get_surgeon(user_id, surgeon_id) is None:
                raise NotFoundError("Surgeon not found.")
            key = surgeon_photo_key(surgeon_id, upload.filename)
            self.storage.upload(
                self.surgeon_bucket,
                key,
                upload.content,
                upload.content_type,
                upsert=True,
            )
            url = self.storage.public_url(self.surgeon_bucket, key)
            updated = self.surgeons.update_surgeon(
                user_id, surgeon_id, {"photo_url": url}
            )
            if updated is None:
                raise NotFoundError("Surgeon not found.")
            return url

        return attempt("upload_surgeon_photo", run)

    def upload_procedure_photo(  # noqa: PLR0913
        self,
        context: SessionContext,
        surgeon_id: UUID,
        procedure_id: UUID,
        upload: ImageUpload,
        caption: str | None = None,
    ) -> Outcome[ProcedurePhoto]:
        """Store a new setup photo and append it to the procedure."""

        def run() -> ProcedurePhoto:
            _require_image(upload)
            user_id = context.require_user_id()
            if self.procedures.get_procedure(user_id, procedure_id, surgeon_id) is None:
                raise NotFoundError("Procedure not found.")
            key = procedure_photo_key(
                user_id, procedure_id, upload.filename, self.clock()
            )
            self.storage.upload(
                self.procedure_bucket,
                key,
                upload.content,
                upload.content_type,
                upsert=False,
            )
            url = self.storage.public_url(self.procedure_bucket, key)
            logger.info("Stored procedure photo", extra={"key": key})
            return self.photos.create_photo(user_id, procedure_id, url, caption)

        return attempt("upload_procedure_photo", run)


def surgeon_photo_key(surgeon_id: UUID, filename: str) -> str:
    """Return the fixed storage key for a surgeon's photo."""
    return f"{surgeon_id}.{_extension(filename)}"


def procedure_photo_key(
    user_id: UUID, procedure_id: UUID, filename: str, now: datetime
) -> str:
    """Return a fresh storage key for a procedure photo."""
    millis = int(now.timestamp() * 1000)
    return f"{user_id}/{procedure_id}/{millis}_{uuid4().hex[:8]}_{_safe_name(filename)}"


def _require_image(upload: ImageUpload) -> None:
    if not upload.content_type.startswith("image/"):
        raise ValidationError("Please choose an image file.")


def _extension(filename: str) -> str:
    if "." not in filename:
        return DEFAULT_EXTENSION
    extension = filename.rsplit(".", maxsplit=1)[1].strip().lower()
    if _EXTENSION_PATTERN.fullmatch(extension) is None:
        return DEFAULT_EXTENSION
    return extension


def _safe_name(filename: str) -> str:
    cleaned = filename.strip().replace(" ", "_").replace("/", "_").replace("\\", "_")
    return cleaned or "photo"
