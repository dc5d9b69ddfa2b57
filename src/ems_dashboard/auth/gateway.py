from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

from ..core.enums import AuthEvent
from .model import AuthSession, AuthUser

logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthEvent, Optional[AuthSession]], None]


class AuthGateway(Protocol):
    """Auth backend: accounts, password check and session tokens."""

    def sign_up(self, email: str, password: str, *, email_confirmed: bool = True) -> AuthUser:
        """Create an account. Raises ValidationError when the email is taken.

        An unconfirmed account comes back with a one-time ``confirmation_token``
        that must be delivered to the address owner.
        """

        raise NotImplementedError

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Check credentials and open a session. Raises AuthenticationError."""

        raise NotImplementedError

    def sign_out(self, access_token: str) -> None:
        raise NotImplementedError

    def get_session(self, access_token: str) -> Optional[AuthSession]:
        """Return the live session for a token, or None if unknown or expired."""

        raise NotImplementedError

    def confirm_email(self, email: str, token: str) -> bool:
        """Mark the email confirmed if ``token`` matches the one issued at sign up."""

        raise NotImplementedError

    def delete_user(self, user_id: str) -> None:
        raise NotImplementedError

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Subscribe to sign-in/sign-out events; returns an unsubscribe function."""

        raise NotImplementedError


class AuthStateNotifier:
    """Listener registry shared by auth gateway implementations."""

    def __init__(self):
        self._listeners: list[AuthListener] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: AuthListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def emit(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(event, session)
        logger.debug("auth event %s delivered to %d listeners", event.value, len(listeners))
