"""JSON rendering of screen state and action outcomes."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse, Response

from or_mastery.domain.outcomes import (
    Failed,
    Invalid,
    NotFound,
    Outcome,
    RequiresAuth,
)
from or_mastery.services.screens import BusyState, ScreenController, ScreenState

T = TypeVar("T")

LOGIN_PATH = "/login"


@asynccontextmanager
async def mounted(
    controller: ScreenController[T],
) -> AsyncIterator[ScreenController[T]]:
    """Mount a controller for the duration of one request."""
    await controller.mount()
    try:
        yield controller
    finally:
        controller.unmount()


def login_redirect() -> RedirectResponse:
    return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)


def screen_body(controller: ScreenController[Any]) -> dict[str, Any]:
    return {
        "state": controller.state.value,
        "busy": controller.busy.value,
        "data": jsonable_encoder(controller.data),
    }


def render_screen(controller: ScreenController[Any]) -> Response:
    """Render the state a controller settled in after mounting."""
    state = controller.state
    if state is ScreenState.REDIRECTING_TO_LOGIN:
        return login_redirect()
    if state is ScreenState.NO_IDENTIFIER:
        return JSONResponse(
            {"state": state.value}, status_code=status.HTTP_400_BAD_REQUEST
        )
    if state is ScreenState.NOT_FOUND:
        return JSONResponse(
            {"state": state.value}, status_code=status.HTTP_404_NOT_FOUND
        )
    if state is ScreenState.LOAD_ERROR:
        return JSONResponse(
            {"state": state.value, "error": controller.error},
            status_code=status.HTTP_502_BAD_GATEWAY,
        )
    return JSONResponse(screen_body(controller))


def render_action(
    controller: ScreenController[Any],
    busy: BusyState,
    outcome: Outcome[Any],
    status_code: int = status.HTTP_200_OK,
) -> Response:
    """Render the result of an action run through a controller."""
    if isinstance(outcome, RequiresAuth):
        return login_redirect()
    if isinstance(outcome, NotFound):
        return JSONResponse(
            {"state": ScreenState.NOT_FOUND.value},
            status_code=status.HTTP_404_NOT_FOUND,
        )
    if isinstance(outcome, Invalid):
        return JSONResponse(
            {"error": outcome.message},
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    if isinstance(outcome, Failed):
        return JSONResponse(
            {"state": busy.value, "error": outcome.message},
            status_code=status.HTTP_502_BAD_GATEWAY,
        )
    if controller.state is not ScreenState.READY:
        return render_screen(controller)
    body = screen_body(controller)
    body["result"] = jsonable_encoder(outcome.value)
    return JSONResponse(body, status_code=status_code)
