"""Sign-in, sign-up, and sign-out endpoints."""

import asyncio
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from or_mastery.api.dependencies import access_token, get_container
from or_mastery.api.rendering import LOGIN_PATH
from or_mastery.api.schemas import Credentials, MagicLinkRequest
from or_mastery.containers import AppContainer
from or_mastery.domain.models import AuthSession
from or_mastery.domain.outcomes import Failed, Invalid, Ok, Outcome
from or_mastery.services.outcomes import attempt

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get(LOGIN_PATH)
async def login_page(
    request: Request, token: str | None = Depends(access_token)
) -> Response:
    """Login screen; an existing session goes straight home."""
    container = get_container(request)
    outcome = await asyncio.to_thread(
        attempt, "resolve_session", lambda: container.session_guard.resolve(token)
    )
    if isinstance(outcome, Ok) and outcome.value is not None:
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    return JSONResponse({"state": "signed-out"})


@router.post(LOGIN_PATH)
async def login(payload: Credentials, request: Request) -> Response:
    """Sign in with email and password and set the session cookie."""
    container = get_container(request)
    outcome = await asyncio.to_thread(
        attempt,
        "sign_in",
        lambda: container.session_guard.sign_in_with_password(
            payload.email, payload.password
        ),
    )
    if not isinstance(outcome, Ok):
        return _auth_failure(outcome)
    return _signed_in(container, outcome.value)


@router.post("/signup")
async def signup(payload: Credentials, request: Request) -> Response:
    """Create an account, signing in when no confirmation is required."""
    container = get_container(request)
    outcome = await asyncio.to_thread(
        attempt,
        "sign_up",
        lambda: container.session_guard.sign_up(payload.email, payload.password),
    )
    if not isinstance(outcome, Ok):
        return _auth_failure(outcome)
    if outcome.value is None:
        return JSONResponse(
            {"state": "confirm-email"}, status_code=status.HTTP_202_ACCEPTED
        )
    return _signed_in(container, outcome.value)


@router.post(f"{LOGIN_PATH}/magic-link")
async def magic_link(payload: MagicLinkRequest, request: Request) -> Response:
    """Email a one-time sign-in link."""
    container = get_container(request)
    outcome = await asyncio.to_thread(
        attempt,
        "send_magic_link",
        lambda: container.session_guard.send_magic_link(
            payload.email, container.settings.magic_link_redirect
        ),
    )
    if not isinstance(outcome, Ok):
        return _auth_failure(outcome)
    return JSONResponse({"state": "link-sent"}, status_code=status.HTTP_202_ACCEPTED)


@router.post("/logout")
async def logout(
    request: Request, token: str | None = Depends(access_token)
) -> Response:
    """Revoke the session, clear the cookie, and go to the login screen."""
    container = get_container(request)
    outcome = await asyncio.to_thread(
        attempt, "sign_out", lambda: container.session_guard.sign_out(token)
    )
    if isinstance(outcome, Failed):
        logger.warning("Sign out failed: %s", outcome.message)
    response = RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(container.settings.access_token_cookie)
    return response


def _signed_in(container: AppContainer, session: AuthSession) -> Response:
    response = JSONResponse(
        {"state": "signed-in", "user_id": str(session.user_id), "email": session.email}
    )
    response.set_cookie(
        container.settings.access_token_cookie,
        session.access_token,
        httponly=True,
        samesite="lax",
        secure=container.settings.environment == "production",
    )
    return response


def _auth_failure(outcome: Outcome[object]) -> Response:
    if isinstance(outcome, Invalid):
        return JSONResponse(
            {"error": outcome.message},
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    if isinstance(outcome, Failed):
        return JSONResponse(
            {"error": outcome.message}, status_code=status.HTTP_401_UNAUTHORIZED
        )
    return JSONResponse(
        {"error": "Sign in failed"}, status_code=status.HTTP_401_UNAUTHORIZED
    )
