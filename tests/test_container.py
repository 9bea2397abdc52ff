"""Tests for container wiring."""

from or_mastery.adapters.supabase_identity import SupabaseIdentityProvider
from or_mastery.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.session_guard is not None
    assert isinstance(container.session_guard.identity, SupabaseIdentityProvider)
    assert container.media_uploader.surgeon_bucket == "surgeon-photos"
    assert container.media_uploader.procedure_bucket == "procedure-photos"


def test_magic_link_redirect_follows_site_url(settings) -> None:
    assert settings.magic_link_redirect == "https://or.example.test/login"
    assert settings.model_copy(update={"site_url": None}).magic_link_redirect is None
