"""Request bodies accepted by the API."""

from pydantic import BaseModel


class Credentials(BaseModel):
    email: str
    password: str


class MagicLinkRequest(BaseModel):
    email: str


class CreateSurgeonRequest(BaseModel):
    first_name: str
    last_name: str


class SurgeonFieldRequest(BaseModel):
    """Single-field surgeon edit."""

    field: str
    value: str


class GlovesGownRequest(BaseModel):
    gloves: str = ""
    gown: str = ""


class CreateProcedureRequest(BaseModel):
    name: str


class ProcedureTextRequest(BaseModel):
    """Notes editor save; ``name`` is only sent when renaming."""

    draping: str = ""
    instruments_trays: str = ""
    workflow_notes: str = ""
    name: str | None = None
