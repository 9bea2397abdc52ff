"""Session resolution and session-change notifications."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from or_mastery.domain.errors import AuthError, ValidationError
from or_mastery.domain.models import AuthSession

logger = logging.getLogger(__name__)

SessionListener = Callable[[AuthSession | None], None]


class IdentityProvider(Protocol):
    """Interface to the hosted authentication provider."""

    def get_user(self, access_token: str) -> AuthSession | None:
        """Return the session for a token, or None when it is not valid."""

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""

    def send_magic_link(self, email: str, redirect_to: str | None) -> None:
        """Email a one-time sign-in link."""

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Create an account; None when email confirmation is pending."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind the token."""


@dataclass
class Subscription:
    """Handle returned by SessionEvents.subscribe."""

    events: "SessionEvents"
    user_id: UUID
    listener: SessionListener
    active: bool = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self.events._remove(self)


@dataclass
class SessionEvents:
    """In-process fan-out of session changes per user."""

    _subscriptions: dict[UUID, list[Subscription]] = field(default_factory=dict)

    def subscribe(self, user_id: UUID, listener: SessionListener) -> Subscription:
        subscription = Subscription(events=self, user_id=user_id, listener=listener)
        self._subscriptions.setdefault(user_id, []).append(subscription)
        return subscription

    def publish(self, user_id: UUID, session: AuthSession | None) -> None:
        for subscription in list(self._subscriptions.get(user_id, [])):
            subscription.listener(session)

    def listener_count(self, user_id: UUID) -> int:
        return len(self._subscriptions.get(user_id, []))

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._subscriptions.get(subscription.user_id, [])
        if subscription in subscriptions:
            subscriptions.remove(subscription)
        if not subscriptions:
            self._subscriptions.pop(subscription.user_id, None)


@dataclass
class SessionGuard:
    """Resolves sessions and drives sign-in and sign-out."""

    identity: IdentityProvider
    events: SessionEvents = field(default_factory=SessionEvents)

    def resolve(self, access_token: str | None) -> AuthSession | None:
        """Return the current session, or None when there is none.

        Transport failures propagate as RemoteError.
        """
        if not access_token:
            return None
        return self.identity.get_user(access_token)

    def context(self, access_token: str | None) -> "SessionContext":
        """Build the session context handed to a screen."""
        return SessionContext(guard=self, access_token=access_token)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Sign in and notify listeners of the new session."""
        clean_email = email.strip()
        if not clean_email or not password:
            raise ValidationError("Enter your email and password.")
        session = self.identity.sign_in_with_password(clean_email, password)
        logger.info("User signed in", extra={"user_id": str(session.user_id)})
        self.events.publish(session.user_id, session)
        return session

    def send_magic_link(self, email: str, redirect_to: str | None = None) -> None:
        """Send a magic sign-in link."""
        clean_email = email.strip()
        if not clean_email:
            raise ValidationError("Enter your email.")
        self.identity.send_magic_link(clean_email, redirect_to)

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Create an account."""
        clean_email = email.strip()
        if not clean_email or not password:
            raise ValidationError("Enter your email and password.")
        session = self.identity.sign_up(clean_email, password)
        if session is not None:
            self.events.publish(session.user_id, session)
        return session

    def sign_out(self, access_token: str | None) -> None:
        """Revoke the session and tell every listener it is gone."""
        session = self.resolve(access_token)
        if session is None:
            return
        self.identity.sign_out(session.access_token)
        logger.info("User signed out", extra={"user_id": str(session.user_id)})
        self.events.publish(session.user_id, None)


@dataclass
class SessionContext:
    """Session handle passed explicitly into each screen and mutation."""

    guard: SessionGuard
    access_token: str | None

    def current_session(self) -> AuthSession | None:
        return self.guard.resolve(self.access_token)

    def require_user_id(self) -> UUID:
        """Check the session again and return its user id."""
        session = self.current_session()
        if session is None:
            raise AuthError()
        return session.user_id

    def subscribe(self, user_id: UUID, listener: SessionListener) -> Subscription:
        return self.guard.events.subscribe(user_id, listener)
