"""Supabase Auth adapter."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any
from uuid import UUID

import httpx
from supabase import AuthApiError, Client
from supabase import AuthError as SupabaseAuthError

from or_mastery.domain.errors import RemoteError
from or_mastery.domain.models import AuthSession
from or_mastery.services.session_guard import IdentityProvider

# Statuses Supabase Auth returns for a missing, expired, or revoked token.
_REJECTED_TOKEN_STATUSES = {401, 403}


@contextmanager
def _auth_call(action: str) -> Iterator[None]:
    try:
        yield
    except SupabaseAuthError as exc:
        raise RemoteError(exc.message or f"{action} failed") from exc
    except httpx.HTTPError as exc:
        raise RemoteError(str(exc) or f"{action} failed") from exc


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Identity provider backed by Supabase Auth.

    Token checks and sign-out go through the service client. Sign-in flows
    use a fresh anon-key client per call so no session is kept in process.
    """

    client: Client
    client_factory: Callable[[], Client]

    def get_user(self, access_token: str) -> AuthSession | None:
        """Validate an access token with Supabase Auth."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthApiError as exc:
            if exc.status in _REJECTED_TOKEN_STATUSES:
                return None
            raise RemoteError(exc.message or "Session check failed") from exc
        except SupabaseAuthError as exc:
            raise RemoteError(exc.message or "Session check failed") from exc
        except httpx.HTTPError as exc:
            raise RemoteError(str(exc) or "Session check failed") from exc
        if response is None or response.user is None:
            return None
        return AuthSession(
            user_id=UUID(str(response.user.id)),
            email=response.user.email,
            access_token=access_token,
        )

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange email and password for a session."""
        with _auth_call("sign in"):
            response = self.client_factory().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        if response.session is None:
            raise RemoteError("Sign in failed")
        return _parse_session(response.session)

    def send_magic_link(self, email: str, redirect_to: str | None) -> None:
        """Send a one-time sign-in link by email."""
        credentials: dict[str, Any] = {"email": email}
        if redirect_to:
            credentials["options"] = {"email_redirect_to": redirect_to}
        with _auth_call("magic link"):
            self.client_factory().auth.sign_in_with_otp(credentials)

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a user; returns None while email confirmation is pending."""
        with _auth_call("sign up"):
            response = self.client_factory().auth.sign_up(
                {"email": email, "password": password}
            )
        if response.session is None:
            return None
        return _parse_session(response.session)

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        with _auth_call("sign out"):
            self.client.auth.admin.sign_out(access_token)


def _parse_session(session: Any) -> AuthSession:
    return AuthSession(
        user_id=UUID(str(session.user.id)),
        email=session.user.email,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at,
    )
