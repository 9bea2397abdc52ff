"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from or_mastery.config import Settings
from or_mastery.containers import AppContainer
from or_mastery.domain.errors import RemoteError
from or_mastery.domain.models import AuthSession, Procedure, ProcedurePhoto, Surgeon
from or_mastery.services.loader import EntityLoader
from or_mastery.services.media import MediaUploader, ObjectStorage
from or_mastery.services.mutations import MutationGateway
from or_mastery.services.repositories import (
    ProcedurePhotoRepository,
    ProcedureRepository,
    SurgeonRepository,
)
from or_mastery.services.session_guard import (
    IdentityProvider,
    SessionEvents,
    SessionGuard,
)

TEST_KEY = "eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZV9yb2xlIn0.signature"
BASE_TIME = datetime(2024, 5, 1, 8, 0, tzinfo=UTC)


def _fail(fail_on: set[str], operation: str) -> None:
    if operation in fail_on:
        raise RemoteError(f"{operation} unavailable")


@dataclass
class InMemorySurgeonRepository(SurgeonRepository):
    """In-memory surgeon repository for tests."""

    surgeons: dict[UUID, Surgeon] = field(default_factory=dict)
    calls: list[tuple[str, UUID]] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)

    def add(self, user_id: UUID, first_name: str, last_name: str, **extra) -> Surgeon:
        surgeon = Surgeon(
            id=uuid4(),
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            **extra,
        )
        self.surgeons[surgeon.id] = surgeon
        return surgeon

    def list_surgeons(self, user_id: UUID) -> list[Surgeon]:
        self.calls.append(("list_surgeons", user_id))
        _fail(self.fail_on, "list_surgeons")
        owned = [s for s in self.surgeons.values() if s.user_id == user_id]
        return sorted(owned, key=lambda surgeon: surgeon.last_name)

    def get_surgeon(self, user_id: UUID, surgeon_id: UUID) -> Surgeon | None:
        self.calls.append(("get_surgeon", user_id))
        _fail(self.fail_on, "get_surgeon")
        surgeon = self.surgeons.get(surgeon_id)
        if surgeon is None or surgeon.user_id != user_id:
            return None
        return surgeon

    def create_surgeon(self, user_id: UUID, first_name: str, last_name: str) -> Surgeon:
        self.calls.append(("create_surgeon", user_id))
        _fail(self.fail_on, "create_surgeon")
        return self.add(user_id, first_name, last_name)

    def update_surgeon(
        self, user_id: UUID, surgeon_id: UUID, fields: dict[str, object]
    ) -> Surgeon | None:
        self.calls.append(("update_surgeon", user_id))
        _fail(self.fail_on, "update_surgeon")
        surgeon = self.get_surgeon(user_id, surgeon_id)
        if surgeon is None:
            return None
        updated = surgeon.model_copy(update=fields)
        self.surgeons[surgeon_id] = updated
        return updated

    def delete_surgeon(self, user_id: UUID, surgeon_id: UUID) -> None:
        self.calls.append(("delete_surgeon", user_id))
        _fail(self.fail_on, "delete_surgeon")
        if self.get_surgeon(user_id, surgeon_id) is not None:
            del self.surgeons[surgeon_id]


@dataclass
class InMemoryProcedureRepository(ProcedureRepository):
    """In-memory procedure repository for tests."""

    procedures: dict[UUID, Procedure] = field(default_factory=dict)
    calls: list[tuple[str, UUID]] = field(default_factory=list)
    updates: list[dict[str, object]] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)

    def add(self, user_id: UUID, surgeon_id: UUID, name: str, **extra) -> Procedure:
        procedure = Procedure(
            id=uuid4(),
            user_id=user_id,
            surgeon_id=surgeon_id,
            name=name,
            created_at=BASE_TIME + timedelta(minutes=len(self.procedures)),
            **extra,
        )
        self.procedures[procedure.id] = procedure
        return procedure

    def list_procedures(self, user_id: UUID, surgeon_id: UUID) -> list[Procedure]:
        self.calls.append(("list_procedures", user_id))
        _fail(self.fail_on, "list_procedures")
        owned = [
            p
            for p in self.procedures.values()
            if p.user_id == user_id and p.surgeon_id == surgeon_id
        ]
        return sorted(owned, key=lambda p: p.created_at, reverse=True)

    def get_procedure(
        self, user_id: UUID, procedure_id: UUID, surgeon_id: UUID | None = None
    ) -> Procedure | None:
        self.calls.append(("get_procedure", user_id))
        _fail(self.fail_on, "get_procedure")
        procedure = self.procedures.get(procedure_id)
        if procedure is None or procedure.user_id != user_id:
            return None
        if surgeon_id is not None and procedure.surgeon_id != surgeon_id:
            return None
        return procedure

    def create_procedure(self, user_id: UUID, surgeon_id: UUID, name: str) -> Procedure:
        self.calls.append(("create_procedure", user_id))
        _fail(self.fail_on, "create_procedure")
        return self.add(
            user_id, surgeon_id, name, draping="", instruments_trays="", workflow_notes=""
        )

    def update_procedure(
        self,
        user_id: UUID,
        surgeon_id: UUID,
        procedure_id: UUID,
        fields: dict[str, object],
    ) -> Procedure | None:
        self.calls.append(("update_procedure", user_id))
        _fail(self.fail_on, "update_procedure")
        self.updates.append(fields)
        procedure = self.get_procedure(user_id, procedure_id, surgeon_id)
        if procedure is None:
            return None
        known = {k: v for k, v in fields.items() if k in Procedure.model_fields}
        updated = procedure.model_copy(update=known)
        self.procedures[procedure_id] = updated
        return updated

    def delete_procedure(
        self, user_id: UUID, surgeon_id: UUID, procedure_id: UUID
    ) -> None:
        self.calls.append(("delete_procedure", user_id))
        _fail(self.fail_on, "delete_procedure")
        if self.get_procedure(user_id, procedure_id, surgeon_id) is not None:
            del self.procedures[procedure_id]

    def delete_procedures_for_surgeon(self, user_id: UUID, surgeon_id: UUID) -> None:
        self.calls.append(("delete_procedures_for_surgeon", user_id))
        _fail(self.fail_on, "delete_procedures_for_surgeon")
        for procedure in list(self.procedures.values()):
            if procedure.user_id == user_id and procedure.surgeon_id == surgeon_id:
                del self.procedures[procedure.id]


@dataclass
class InMemoryPhotoRepository(ProcedurePhotoRepository):
    """In-memory procedure photo repository for tests."""

    photos: list[ProcedurePhoto] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)

    def list_photos(self, user_id: UUID, procedure_id: UUID) -> list[ProcedurePhoto]:
        _fail(self.fail_on, "list_photos")
        owned = [
            p
            for p in self.photos
            if p.user_id == user_id and p.procedure_id == procedure_id
        ]
        return sorted(owned, key=lambda p: p.created_at, reverse=True)

    def create_photo(
        self, user_id: UUID, procedure_id: UUID, url: str, caption: str | None
    ) -> ProcedurePhoto:
        _fail(self.fail_on, "create_photo")
        photo = ProcedurePhoto(
            id=uuid4(),
            user_id=user_id,
            procedure_id=procedure_id,
            url=url,
            caption=caption,
            created_at=BASE_TIME + timedelta(minutes=len(self.photos)),
        )
        self.photos.append(photo)
        return photo


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Fake identity provider keyed by access token."""

    sessions: dict[str, AuthSession] = field(default_factory=dict)
    accounts: dict[str, tuple[str, UUID]] = field(default_factory=dict)
    magic_links: list[tuple[str, str | None]] = field(default_factory=list)
    signed_out: list[str] = field(default_factory=list)
    lookups: list[str] = field(default_factory=list)
    require_confirmation: bool = False
    unavailable: bool = False

    def issue(self, user_id: UUID | None = None, email: str | None = None) -> AuthSession:
        session = AuthSession(
            user_id=user_id or uuid4(),
            email=email,
            access_token=f"token-{uuid4().hex}",
        )
        self.sessions[session.access_token] = session
        return session

    def get_user(self, access_token: str) -> AuthSession | None:
        self.lookups.append(access_token)
        if self.unavailable:
            raise RemoteError("Auth service unavailable")
        return self.sessions.get(access_token)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise RemoteError("Invalid login credentials")
        return self.issue(account[1], email)

    def send_magic_link(self, email: str, redirect_to: str | None) -> None:
        self.magic_links.append((email, redirect_to))

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        user_id = uuid4()
        self.accounts[email] = (password, user_id)
        if self.require_confirmation:
            return None
        return self.issue(user_id, email)

    def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)
        self.sessions.pop(access_token, None)


@dataclass
class FakeObjectStorage(ObjectStorage):
    """Fake object store that records uploads."""

    objects: dict[tuple[str, str], bytes] = field(default_factory=dict)
    uploads: list[tuple[str, str, str, bool]] = field(default_factory=list)
    unavailable: bool = False

    def upload(  # noqa: PLR0913
        self, bucket: str, key: str, content: bytes, content_type: str, upsert: bool
    ) -> None:
        if self.unavailable:
            raise RemoteError("Storage unavailable")
        if not upsert and (bucket, key) in self.objects:
            raise RemoteError("The resource already exists")
        self.uploads.append((bucket, key, content_type, upsert))
        self.objects[(bucket, key)] = content

    def public_url(self, bucket: str, key: str) -> str:
        return f"https://storage.example.test/{bucket}/{key}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=TEST_KEY,
        supabase_anon_key=TEST_KEY,
        site_url="https://or.example.test",
    )


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def session_guard(identity: FakeIdentityProvider) -> SessionGuard:
    return SessionGuard(identity=identity, events=SessionEvents())


@pytest.fixture
def session(identity: FakeIdentityProvider) -> AuthSession:
    return identity.issue(email="nurse@example.test")


@pytest.fixture
def surgeon_repository() -> InMemorySurgeonRepository:
    return InMemorySurgeonRepository()


@pytest.fixture
def procedure_repository() -> InMemoryProcedureRepository:
    return InMemoryProcedureRepository()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def loader(
    surgeon_repository: InMemorySurgeonRepository,
    procedure_repository: InMemoryProcedureRepository,
    photo_repository: InMemoryPhotoRepository,
) -> EntityLoader:
    return EntityLoader(
        surgeons=surgeon_repository,
        procedures=procedure_repository,
        photos=photo_repository,
    )


@pytest.fixture
def gateway(
    surgeon_repository: InMemorySurgeonRepository,
    procedure_repository: InMemoryProcedureRepository,
) -> MutationGateway:
    return MutationGateway(
        surgeons=surgeon_repository,
        procedures=procedure_repository,
        clock=lambda: BASE_TIME,
    )


@pytest.fixture
def uploader(
    storage: FakeObjectStorage,
    surgeon_repository: InMemorySurgeonRepository,
    procedure_repository: InMemoryProcedureRepository,
    photo_repository: InMemoryPhotoRepository,
) -> MediaUploader:
    return MediaUploader(
        storage=storage,
        surgeons=surgeon_repository,
        procedures=procedure_repository,
        photos=photo_repository,
        clock=lambda: BASE_TIME,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    session_guard: SessionGuard,
    loader: EntityLoader,
    gateway: MutationGateway,
    uploader: MediaUploader,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        session_guard=session_guard,
        entity_loader=loader,
        mutation_gateway=gateway,
        media_uploader=uploader,
    )
