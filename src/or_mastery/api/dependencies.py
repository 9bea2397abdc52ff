"""Request-scoped dependencies shared by the routers."""

from fastapi import Depends, Header, Request, UploadFile

from or_mastery.containers import AppContainer
from or_mastery.domain.models import ImageUpload
from or_mastery.services.session_guard import SessionContext

_BEARER_PREFIX = "bearer "


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def access_token(
    request: Request, authorization: str | None = Header(default=None)
) -> str | None:
    """Return the caller's access token from the bearer header or cookie."""
    if authorization and authorization.lower().startswith(_BEARER_PREFIX):
        token = authorization[len(_BEARER_PREFIX) :].strip()
        if token:
            return token
    container = get_container(request)
    return request.cookies.get(container.settings.access_token_cookie) or None


def session_context(
    request: Request, token: str | None = Depends(access_token)
) -> SessionContext:
    """Session context for the current request."""
    return get_container(request).session_guard.context(token)


async def read_upload(file: UploadFile) -> ImageUpload:
    """Read a multipart file into an upload value."""
    return ImageUpload(
        filename=file.filename or "photo",
        content_type=file.content_type or "",
        content=await file.read(),
    )
