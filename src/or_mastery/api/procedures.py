"""Procedure detail, notes editor, photos, and scrub view endpoints."""

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response

from or_mastery.api.dependencies import get_container, read_upload, session_context
from or_mastery.api.rendering import mounted, render_action, render_screen
from or_mastery.api.schemas import ProcedureTextRequest
from or_mastery.domain.errors import ValidationError
from or_mastery.domain.outcomes import Invalid, Ok
from or_mastery.services.screens import (
    BusyState,
    ScreenController,
    ScreenState,
    procedure_screen,
)
from or_mastery.services.scrub import (
    DEFAULT_SPEED,
    SPEED_PRESETS,
    WRAP_PAUSE_SECONDS,
    scrub_panel,
)
from or_mastery.services.session_guard import SessionContext

router = APIRouter(prefix="/procedure", tags=["procedures"])


def _screen(
    request: Request,
    context: SessionContext,
    procedure_id: str | None,
    surgeon_id: str | None,
) -> ScreenController:
    container = get_container(request)
    return procedure_screen(
        context, container.entity_loader, procedure_id, surgeon_id
    )


@router.get("")
async def procedure_detail(
    request: Request,
    procedure_id: str | None = Query(default=None, alias="procedureId"),
    surgeon_id: str | None = Query(default=None, alias="surgeonId"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Show a procedure with its notes and photos."""
    async with mounted(_screen(request, context, procedure_id, surgeon_id)) as screen:
        return render_screen(screen)


@router.put("")
async def save_procedure(
    payload: ProcedureTextRequest,
    request: Request,
    procedure_id: str | None = Query(default=None, alias="procedureId"),
    surgeon_id: str | None = Query(default=None, alias="surgeonId"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Save the notes editor."""
    container = get_container(request)
    async with mounted(_screen(request, context, procedure_id, surgeon_id)) as screen:
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        procedure = screen.data.procedure
        outcome = await screen.perform(
            BusyState.SAVING,
            lambda: container.mutation_gateway.update_procedure_text(
                context,
                procedure.surgeon_id,
                procedure.id,
                draping=payload.draping,
                instruments_trays=payload.instruments_trays,
                workflow_notes=payload.workflow_notes,
                name=payload.name,
            ),
        )
        return render_action(screen, BusyState.SAVING, outcome)


@router.delete("")
async def delete_procedure(
    request: Request,
    procedure_id: str | None = Query(default=None, alias="procedureId"),
    surgeon_id: str | None = Query(default=None, alias="surgeonId"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Delete the procedure and return to its surgeon."""
    container = get_container(request)
    async with mounted(_screen(request, context, procedure_id, surgeon_id)) as screen:
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        procedure = screen.data.procedure
        outcome = await screen.perform(
            BusyState.DELETING,
            lambda: container.mutation_gateway.delete_procedure(
                context, procedure.surgeon_id, procedure.id
            ),
            reload=False,
        )
        if isinstance(outcome, Ok):
            return JSONResponse(
                {"state": "deleted", "next": f"/s?id={procedure.surgeon_id}"}
            )
        return render_action(screen, BusyState.DELETING, outcome)


@router.post("/photos")
async def upload_procedure_photo(  # noqa: PLR0913
    request: Request,
    file: UploadFile = File(...),
    caption: str | None = Form(default=None),
    procedure_id: str | None = Query(default=None, alias="procedureId"),
    surgeon_id: str | None = Query(default=None, alias="surgeonId"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Attach a setup photo to the procedure."""
    container = get_container(request)
    async with mounted(_screen(request, context, procedure_id, surgeon_id)) as screen:
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        procedure = screen.data.procedure
        upload = await read_upload(file)
        clean_caption = caption.strip() if caption else None
        outcome = await screen.perform(
            BusyState.UPLOADING,
            lambda: container.media_uploader.upload_procedure_photo(
                context,
                procedure.surgeon_id,
                procedure.id,
                upload,
                caption=clean_caption or None,
            ),
        )
        return render_action(
            screen, BusyState.UPLOADING, outcome, status_code=status.HTTP_201_CREATED
        )


@router.get("/scrub/{section}")
async def scrub_view(
    section: str,
    request: Request,
    procedure_id: str | None = Query(default=None, alias="procedureId"),
    surgeon_id: str | None = Query(default=None, alias="surgeonId"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Open one notes section in the hands-free scrub view."""
    async with mounted(_screen(request, context, procedure_id, surgeon_id)) as screen:
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        try:
            panel = scrub_panel(screen.data.procedure, section)
        except ValidationError as exc:
            return render_action(screen, BusyState.IDLE, Invalid(exc.message))
        return JSONResponse(
            {
                "state": screen.state.value,
                "section": panel.section,
                "title": panel.title,
                "body": panel.body,
                "scroll": {
                    "enabled": True,
                    "speed": DEFAULT_SPEED,
                    "offset": 0.0,
                    "presets": SPEED_PRESETS,
                    "wrap_pause_seconds": WRAP_PAUSE_SECONDS,
                },
            }
        )
