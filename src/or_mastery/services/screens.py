"""Screen state machine shared by every page.

A controller resolves the session, loads its entity, and then runs one user
action at a time::

    initializing -> no-identifier | checking-session
    checking-session -> redirecting-to-login | loading-entity
    loading-entity -> not-found | load-error | ready

While ready, the busy sub-state is one of idle, saving, deleting, or
uploading and always falls back to idle when the action finishes.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, TypeVar
from uuid import UUID

from or_mastery.domain.errors import RemoteError
from or_mastery.domain.models import (
    AuthSession,
    ProcedureDetail,
    Surgeon,
    SurgeonDetail,
)
from or_mastery.domain.outcomes import (
    Failed,
    Invalid,
    NotFound,
    Ok,
    Outcome,
    RequiresAuth,
)
from or_mastery.services.loader import EntityLoader
from or_mastery.services.scrub import AutoScroller
from or_mastery.services.session_guard import SessionContext, Subscription

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class ScreenState(StrEnum):
    INITIALIZING = "initializing"
    NO_IDENTIFIER = "no-identifier"
    CHECKING_SESSION = "checking-session"
    REDIRECTING_TO_LOGIN = "redirecting-to-login"
    LOADING_ENTITY = "loading-entity"
    NOT_FOUND = "not-found"
    LOAD_ERROR = "load-error"
    READY = "ready"


class BusyState(StrEnum):
    IDLE = "idle"
    SAVING = "saving"
    DELETING = "deleting"
    UPLOADING = "uploading"


@dataclass
class ScreenController(Generic[T]):
    """Drives one screen from mount to unmount.

    ``load`` receives the resolved user id and returns the screen's data; it
    is None when the screen's identifier is missing.
    """

    context: SessionContext
    load: Callable[[UUID], Outcome[T]] | None
    scroller: AutoScroller | None = None
    state: ScreenState = ScreenState.INITIALIZING
    busy: BusyState = BusyState.IDLE
    data: T | None = None
    error: str | None = None
    user_id: UUID | None = None
    _generation: int = 0
    _mounted: bool = False
    _subscription: Subscription | None = field(default=None, repr=False)

    async def mount(self) -> ScreenState:
        """Resolve the session and load the screen's data."""
        self._mounted = True
        if self.load is None:
            self.state = ScreenState.NO_IDENTIFIER
            return self.state
        await self.refresh()
        return self.state

    async def refresh(self) -> None:
        """Reload from scratch; results of an older refresh are dropped."""
        if self.load is None or not self._mounted:
            return
        self._generation += 1
        generation = self._generation
        self.state = ScreenState.CHECKING_SESSION
        self.error = None
        try:
            session = await asyncio.to_thread(self.context.current_session)
        except RemoteError as exc:
            if self._is_current(generation):
                logger.warning("Session check failed: %s", exc.message)
                self._load_failed(exc.message)
            return
        if not self._is_current(generation):
            return
        if session is None:
            self._require_login()
            return
        self.user_id = session.user_id
        self._watch(session.user_id)
        self.state = ScreenState.LOADING_ENTITY
        outcome = await asyncio.to_thread(self.load, session.user_id)
        if not self._is_current(generation):
            return
        self._apply(outcome)

    async def perform(
        self,
        busy: BusyState,
        action: Callable[[], Outcome[R]],
        *,
        reload: bool = True,
    ) -> Outcome[R]:
        """Run a user action with the screen marked busy.

        Only one action runs at a time; a second one is rejected without
        being started. A successful action reloads the screen unless told
        otherwise.
        """
        if busy is BusyState.IDLE:
            raise ValueError("An action needs a busy state")
        if self.state is ScreenState.REDIRECTING_TO_LOGIN:
            return RequiresAuth()
        if self.state is not ScreenState.READY:
            return Invalid("This screen is not ready.")
        if self.busy is not BusyState.IDLE:
            return Invalid("Another action is already in progress.")
        self.busy = busy
        self.error = None
        try:
            outcome = await asyncio.to_thread(action)
        finally:
            self.busy = BusyState.IDLE
        if not self._mounted:
            return outcome
        if isinstance(outcome, RequiresAuth):
            self._require_login()
        elif isinstance(outcome, Failed | Invalid):
            self.error = outcome.message
        elif isinstance(outcome, Ok) and reload:
            await self.refresh()
        return outcome

    def unmount(self) -> None:
        """Stop listening and ignore anything still in flight."""
        self._mounted = False
        self._generation += 1
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        if self.scroller is not None:
            self.scroller.close()

    def _is_current(self, generation: int) -> bool:
        return self._mounted and generation == self._generation

    def _apply(self, outcome: Outcome[T]) -> None:
        if isinstance(outcome, Ok):
            self.data = outcome.value
            self.state = ScreenState.READY
        elif isinstance(outcome, RequiresAuth):
            self._require_login()
        elif isinstance(outcome, NotFound):
            self.data = None
            self.state = ScreenState.NOT_FOUND
        else:
            self._load_failed(outcome.message)

    def _load_failed(self, message: str) -> None:
        self.data = None
        self.error = message
        self.state = ScreenState.LOAD_ERROR

    def _require_login(self) -> None:
        self.data = None
        self.user_id = None
        self.state = ScreenState.REDIRECTING_TO_LOGIN

    def _watch(self, user_id: UUID) -> None:
        if self._subscription is not None:
            if self._subscription.user_id == user_id:
                return
            self._subscription.unsubscribe()
        self._subscription = self.context.subscribe(user_id, self._on_session_change)

    def _on_session_change(self, session: AuthSession | None) -> None:
        if session is not None or not self._mounted:
            return
        self._generation += 1
        if self.scroller is not None:
            self.scroller.close()
        self._require_login()


def parse_identifier(raw: str | None) -> UUID | None:
    """Parse a route identifier; None when missing or malformed."""
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


def home_screen(
    context: SessionContext, loader: EntityLoader
) -> ScreenController[list[Surgeon]]:
    """Screen listing the user's surgeons."""
    return ScreenController(context=context, load=loader.load_surgeons)


def surgeon_screen(
    context: SessionContext, loader: EntityLoader, surgeon_id: str | None
) -> ScreenController[SurgeonDetail]:
    """Screen showing one surgeon and its procedures."""
    return ScreenController(
        context=context,
        load=_bind(surgeon_id, loader.load_surgeon_detail),
    )


def gloves_gown_screen(
    context: SessionContext, loader: EntityLoader, surgeon_id: str | None
) -> ScreenController[Surgeon]:
    """Screen editing a surgeon's gloves and gown sizes."""
    return ScreenController(
        context=context,
        load=_bind(surgeon_id, loader.load_surgeon),
    )


def procedure_screen(
    context: SessionContext,
    loader: EntityLoader,
    procedure_id: str | None,
    surgeon_id: str | None = None,
) -> ScreenController[ProcedureDetail]:
    """Screen showing one procedure, its photos, and the scrub view."""
    if surgeon_id and parse_identifier(surgeon_id) is None:
        load = _bind(procedure_id, lambda _user_id, _procedure_id: NotFound())
    else:
        parent = parse_identifier(surgeon_id)
        load = _bind(
            procedure_id,
            lambda user_id, entity_id: loader.load_procedure_detail(
                user_id, entity_id, parent
            ),
        )
    return ScreenController(context=context, load=load, scroller=AutoScroller())


def _bind(
    raw_id: str | None, load: Callable[[UUID, UUID], Outcome[T]]
) -> Callable[[UUID], Outcome[T]] | None:
    if not raw_id:
        return None
    entity_id = parse_identifier(raw_id)
    if entity_id is None:
        return lambda _user_id: NotFound()
    return lambda user_id: load(user_id, entity_id)
