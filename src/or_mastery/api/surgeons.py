"""Home listing, surgeon detail, and gloves/gown endpoints."""

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response

from or_mastery.api.dependencies import get_container, read_upload, session_context
from or_mastery.api.rendering import mounted, render_action, render_screen
from or_mastery.api.schemas import (
    CreateProcedureRequest,
    CreateSurgeonRequest,
    GlovesGownRequest,
    SurgeonFieldRequest,
)
from or_mastery.domain.outcomes import NotFound, Ok
from or_mastery.services.screens import (
    BusyState,
    ScreenState,
    gloves_gown_screen,
    home_screen,
    parse_identifier,
    surgeon_screen,
)
from or_mastery.services.session_guard import SessionContext

router = APIRouter(tags=["surgeons"])


@router.get("/")
async def home(
    request: Request, context: SessionContext = Depends(session_context)
) -> Response:
    """List the user's surgeons; signed-out visitors get a welcome state."""
    container = get_container(request)
    async with mounted(home_screen(context, container.entity_loader)) as screen:
        if screen.state is ScreenState.REDIRECTING_TO_LOGIN:
            return JSONResponse({"state": "welcome"})
        return render_screen(screen)


@router.post("/surgeons")
async def create_surgeon(
    payload: CreateSurgeonRequest,
    request: Request,
    context: SessionContext = Depends(session_context),
) -> Response:
    """Add a surgeon from the home screen."""
    container = get_container(request)
    async with mounted(home_screen(context, container.entity_loader)) as screen:
        if screen.state is not ScreenState.READY:
            return render_screen(screen)
        outcome = await screen.perform(
            BusyState.SAVING,
            lambda: container.mutation_gateway.create_surgeon(
                context, payload.first_name, payload.last_name
            ),
        )
        return render_action(
            screen, BusyState.SAVING, outcome, status_code=status.HTTP_201_CREATED
        )


@router.get("/s")
async def surgeon_detail(
    request: Request,
    surgeon_id: str | None = Query(default=None, alias="id"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Show a surgeon with its procedures."""
    container = get_container(request)
    screen = surgeon_screen(context, container.entity_loader, surgeon_id)
    async with mounted(screen):
        return render_screen(screen)


@router.patch("/s")
async def update_surgeon_field(
    payload: SurgeonFieldRequest,
    request: Request,
    surgeon_id: str | None = Query(default=None, alias="id"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Overwrite one surgeon field."""
    container = get_container(request)
    screen = surgeon_screen(context, container.entity_loader, surgeon_id)
    async with mounted(screen):
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        surgeon = screen.data.surgeon
        outcome = await screen.perform(
            BusyState.SAVING,
            lambda: container.mutation_gateway.update_surgeon_field(
                context, surgeon.id, payload.field, payload.value
            ),
        )
        return render_action(screen, BusyState.SAVING, outcome)


@router.delete("/s")
async def delete_surgeon(
    request: Request,
    surgeon_id: str | None = Query(default=None, alias="id"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Delete a surgeon and all of its procedures."""
    container = get_container(request)
    screen = surgeon_screen(context, container.entity_loader, surgeon_id)
    async with mounted(screen):
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        surgeon = screen.data.surgeon
        outcome = await screen.perform(
            BusyState.DELETING,
            lambda: container.mutation_gateway.delete_surgeon(context, surgeon.id),
            reload=False,
        )
        if isinstance(outcome, Ok):
            return JSONResponse({"state": "deleted", "next": "/"})
        return render_action(screen, BusyState.DELETING, outcome)


@router.post("/s/photo")
async def upload_surgeon_photo(
    request: Request,
    file: UploadFile = File(...),
    surgeon_id: str | None = Query(default=None, alias="id"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Replace a surgeon's photo."""
    container = get_container(request)
    screen = surgeon_screen(context, container.entity_loader, surgeon_id)
    async with mounted(screen):
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        surgeon = screen.data.surgeon
        upload = await read_upload(file)
        outcome = await screen.perform(
            BusyState.UPLOADING,
            lambda: container.media_uploader.upload_surgeon_photo(
                context, surgeon.id, upload
            ),
        )
        return render_action(screen, BusyState.UPLOADING, outcome)


@router.post("/s/procedures")
async def create_procedure(
    payload: CreateProcedureRequest,
    request: Request,
    surgeon_id: str | None = Query(default=None, alias="id"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Add a procedure to a surgeon."""
    container = get_container(request)
    screen = surgeon_screen(context, container.entity_loader, surgeon_id)
    async with mounted(screen):
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        surgeon = screen.data.surgeon
        outcome = await screen.perform(
            BusyState.SAVING,
            lambda: container.mutation_gateway.create_procedure(
                context, surgeon.id, payload.name
            ),
        )
        return render_action(
            screen, BusyState.SAVING, outcome, status_code=status.HTTP_201_CREATED
        )


@router.delete("/s/procedures/{procedure_id}")
async def delete_procedure(
    procedure_id: str,
    request: Request,
    surgeon_id: str | None = Query(default=None, alias="id"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Delete one procedure from the surgeon screen."""
    container = get_container(request)
    screen = surgeon_screen(context, container.entity_loader, surgeon_id)
    async with mounted(screen):
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        surgeon = screen.data.surgeon
        target = parse_identifier(procedure_id)
        if target is None or all(
            procedure.id != target for procedure in screen.data.procedures
        ):
            return render_action(screen, BusyState.DELETING, NotFound())
        outcome = await screen.perform(
            BusyState.DELETING,
            lambda: container.mutation_gateway.delete_procedure(
                context, surgeon.id, target
            ),
        )
        return render_action(screen, BusyState.DELETING, outcome)


@router.get("/s/gloves")
async def gloves_gown(
    request: Request,
    surgeon_id: str | None = Query(default=None, alias="id"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Show a surgeon's gloves and gown sizes."""
    container = get_container(request)
    screen = gloves_gown_screen(context, container.entity_loader, surgeon_id)
    async with mounted(screen):
        return render_screen(screen)


@router.put("/s/gloves")
async def save_gloves_gown(
    payload: GlovesGownRequest,
    request: Request,
    surgeon_id: str | None = Query(default=None, alias="id"),
    context: SessionContext = Depends(session_context),
) -> Response:
    """Save a surgeon's gloves and gown sizes."""
    container = get_container(request)
    screen = gloves_gown_screen(context, container.entity_loader, surgeon_id)
    async with mounted(screen):
        if screen.state is not ScreenState.READY or screen.data is None:
            return render_screen(screen)
        surgeon = screen.data
        outcome = await screen.perform(
            BusyState.SAVING,
            lambda: container.mutation_gateway.update_gloves_gown(
                context, surgeon.id, payload.gloves, payload.gown
            ),
        )
        return render_action(screen, BusyState.SAVING, outcome)

