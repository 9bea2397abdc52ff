"""Record schemas for surgeons, procedures, and their photos."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Record(BaseModel):
    """Base for rows read from the data store."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Surgeon(_Record):
    """A surgeon profile owned by one user."""

    id: UUID
    user_id: UUID
    first_name: str
    last_name: str
    specialty: str | None = None
    photo_url: str | None = None
    gloves: str | None = None
    gown: str | None = None


class Procedure(_Record):
    """A procedure performed by a surgeon, with its setup notes."""

    id: UUID
    user_id: UUID
    surgeon_id: UUID
    name: str
    draping: str | None = None
    instruments_trays: str | None = None
    workflow_notes: str | None = None
    setup_photos: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    @field_validator("setup_photos", mode="before")
    @classmethod
    def _null_photos(cls, value: object) -> object:
        return [] if value is None else value


class ProcedurePhoto(_Record):
    """A reference photo attached to a procedure."""

    id: UUID
    user_id: UUID
    procedure_id: UUID
    url: str
    caption: str | None = None
    created_at: datetime


class AuthSession(_Record):
    """An authenticated session issued by the identity provider."""

    user_id: UUID
    email: str | None = None
    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None


@dataclass(frozen=True)
class SurgeonDetail:
    """A surgeon together with its procedures, newest first."""

    surgeon: Surgeon
    procedures: list[Procedure]


@dataclass(frozen=True)
class ProcedureDetail:
    """A procedure together with its photos, newest first."""

    procedure: Procedure
    photos: list[ProcedurePhoto]


@dataclass(frozen=True)
class ImageUpload:
    """A local file handed over for upload."""

    filename: str
    content_type: str
    content: bytes
