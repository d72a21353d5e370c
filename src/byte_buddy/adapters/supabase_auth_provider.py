"""Supabase Auth adapter."""

import logging
from dataclasses import dataclass

import httpx
from supabase import AuthError as SupabaseAuthError
from supabase import Client

from byte_buddy.domain.errors import AuthError
from byte_buddy.services.auth import AuthProvider, SessionListener
from byte_buddy.services.feeds import Subscription

AUTH_ERRORS = (SupabaseAuthError, httpx.HTTPError)

_logger = logging.getLogger(__name__)


@dataclass
class _AuthSubscription:
    handle: object
    active: bool = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self.handle.unsubscribe()


@dataclass
class SupabaseAuthProvider(AuthProvider):
    """Email and password authentication through Supabase Auth."""

    client: Client

    def sign_in(self, email: str, password: str) -> str:
        """Sign in with email and password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AUTH_ERRORS as exc:
            raise AuthError(str(exc) or "Sign-in failed") from exc
        if response.user is None:
            raise AuthError("Sign-in failed")
        return str(response.user.id)

    def sign_up(self, email: str, password: str) -> str:
        """Create an account with email and password."""
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except AUTH_ERRORS as exc:
            raise AuthError(str(exc) or "Sign-up failed") from exc
        if response.user is None:
            raise AuthError("Sign-up failed")
        return str(response.user.id)

    def sign_out(self) -> None:
        """Sign out the current session."""
        try:
            self.client.auth.sign_out()
        except AUTH_ERRORS as exc:
            raise AuthError(str(exc) or "Sign-out failed") from exc

    def current_user_id(self) -> str | None:
        """Return the id of the user in the current session."""
        session = self.client.auth.get_session()
        if session is None or session.user is None:
            return None
        return str(session.user.id)

    def on_session_change(self, listener: SessionListener) -> Subscription:
        """Forward auth state changes as user ids."""

        def callback(event: object, session: object) -> None:
            user = getattr(session, "user", None)
            user_id = str(user.id) if user is not None else None
            _logger.info("Auth state changed: event=%s", event)
            listener(user_id)

        return _AuthSubscription(self.client.auth.on_auth_state_change(callback))
