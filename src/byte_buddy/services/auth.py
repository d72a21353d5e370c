"""Authentication service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from byte_buddy.domain.errors import AuthError
from byte_buddy.services.feeds import Subscription
from byte_buddy.services.session import SessionManager
from byte_buddy.services.validation import validate_credentials

SessionListener = Callable[[str | None], None]

_logger = logging.getLogger(__name__)


class AuthProvider(Protocol):
    """Interface for the hosted authentication provider."""

    def sign_in(self, email: str, password: str) -> str:
        """Sign in and return the user id."""

    def sign_up(self, email: str, password: str) -> str:
        """Create an account and return the user id."""

    def sign_out(self) -> None:
        """End the current session."""

    def current_user_id(self) -> str | None:
        """Return the signed-in user id, if any."""

    def on_session_change(self, listener: SessionListener) -> Subscription:
        """Call the listener with the user id (or None) on every change."""


@dataclass
class AuthService:
    """Application service for sign-in, sign-up and sign-out."""

    provider: AuthProvider
    error_message: str | None = None
    _subscription: Subscription | None = field(default=None, repr=False)

    def bind(self, session_manager: SessionManager) -> None:
        """Forward session changes to the session manager."""
        self.unbind()
        self._subscription = self.provider.on_session_change(
            session_manager.on_session_changed
        )
        session_manager.on_session_changed(self.provider.current_user_id())

    def unbind(self) -> None:
        """Stop forwarding session changes."""
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def sign_in(self, email: str, password: str) -> str | None:
        """Validate credentials and sign in."""
        validate_credentials(email, password)
        try:
            user_id = self.provider.sign_in(email, password)
        except AuthError as exc:
            _logger.info("Sign-in rejected: %s", exc)
            self.error_message = str(exc)
            return None
        self.error_message = None
        return user_id

    def sign_up(
        self, email: str, password: str, confirm_password: str | None = None
    ) -> str | None:
        """Validate credentials and create an account."""
        validate_credentials(email, password, confirm_password)
        try:
            user_id = self.provider.sign_up(email, password)
        except AuthError as exc:
            _logger.info("Sign-up rejected: %s", exc)
            self.error_message = str(exc)
            return None
        self.error_message = None
        return user_id

    def sign_out(self) -> bool:
        """End the current session."""
        try:
            self.provider.sign_out()
        except AuthError as exc:
            _logger.warning("Error signing out: %s", exc)
            self.error_message = str(exc)
            return False
        return True

    def current_user_id(self) -> str | None:
        """Return the signed-in user id, if any."""
        return self.provider.current_user_id()
