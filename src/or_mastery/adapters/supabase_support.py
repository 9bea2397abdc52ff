"""Helpers shared by the Supabase adapters."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TypeVar
from uuid import UUID

import httpx
import pydantic
from supabase import PostgrestAPIError, StorageException

from or_mastery.domain.errors import AuthError, RemoteError, ValidationError

RecordT = TypeVar("RecordT", bound=pydantic.BaseModel)


@contextmanager
def remote_call(action: str) -> Iterator[None]:
    """Re-raise data and storage failures as RemoteError, message intact."""
    try:
        yield
    except PostgrestAPIError as exc:
        raise RemoteError(exc.message or f"{action} failed") from exc
    except StorageException as exc:
        raise RemoteError(_storage_message(exc) or f"{action} failed") from exc
    except httpx.HTTPError as exc:
        raise RemoteError(str(exc) or f"{action} failed") from exc


def require_scope(user_id: UUID | None, **parents: UUID | None) -> None:
    """Refuse to build a query that is missing its owner or parent filter."""
    if not user_id:
        raise AuthError()
    for name, value in parents.items():
        if not value:
            raise ValidationError(f"Missing {name.replace('_', ' ')}.")


def parse_row(model: type[RecordT], row: dict[str, object]) -> RecordT:
    """Validate a row against its schema, failing closed."""
    try:
        return model.model_validate(row)
    except pydantic.ValidationError as exc:
        raise RemoteError(f"Malformed {model.__name__.lower()} record") from exc


def parse_rows(
    model: type[RecordT], rows: list[dict[str, object]] | None
) -> list[RecordT]:
    return [parse_row(model, row) for row in rows or []]


def _storage_message(exc: StorageException) -> str | None:
    if exc.args and isinstance(exc.args[0], dict):
        message = exc.args[0].get("message")
        return str(message) if message else None
    return str(exc) or None
