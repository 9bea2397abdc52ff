"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import Client, ClientOptions, create_client

from or_mastery.adapters.supabase_identity import SupabaseIdentityProvider
from or_mastery.adapters.supabase_photo_repository import SupabasePhotoRepository
from or_mastery.adapters.supabase_procedure_repository import (
    SupabaseProcedureRepository,
)
from or_mastery.adapters.supabase_storage import SupabaseStorage
from or_mastery.adapters.supabase_surgeon_repository import (
    SupabaseSurgeonRepository,
)
from or_mastery.config import Settings
from or_mastery.services.loader import EntityLoader
from or_mastery.services.media import MediaUploader
from or_mastery.services.mutations import MutationGateway
from or_mastery.services.session_guard import SessionEvents, SessionGuard


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_guard: SessionGuard
    entity_loader: EntityLoader
    mutation_gateway: MutationGateway
    media_uploader: MediaUploader


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timeout = resolved_settings.supabase_timeout_seconds
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key,
        options=ClientOptions(
            postgrest_client_timeout=timeout,
            storage_client_timeout=timeout,
        ),
    )

    def anon_client() -> Client:
        return create_client(
            resolved_settings.supabase_url,
            resolved_settings.supabase_anon_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

    surgeon_repository = SupabaseSurgeonRepository(supabase_client)
    procedure_repository = SupabaseProcedureRepository(supabase_client)
    photo_repository = SupabasePhotoRepository(supabase_client)
    session_guard = SessionGuard(
        identity=SupabaseIdentityProvider(supabase_client, anon_client),
        events=SessionEvents(),
    )
    return AppContainer(
        settings=resolved_settings,
        session_guard=session_guard,
        entity_loader=EntityLoader(
            surgeons=surgeon_repository,
            procedures=procedure_repository,
            photos=photo_repository,
        ),
        mutation_gateway=MutationGateway(
            surgeons=surgeon_repository,
            procedures=procedure_repository,
        ),
        media_uploader=MediaUploader(
            storage=SupabaseStorage(supabase_client),
            surgeons=surgeon_repository,
            procedures=procedure_repository,
            photos=photo_repository,
            surgeon_bucket=resolved_settings.surgeon_photos_bucket,
            procedure_bucket=resolved_settings.procedure_photos_bucket,
        ),
    )
