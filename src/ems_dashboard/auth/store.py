from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import today_local
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AuthEvent, AuthState, Role
from ..core.exceptions import AuthenticationError, DomainError, GatewayError, ValidationError
from ..employees.model import Employee, NewEmployee
from ..employees.repository import EmployeeRepository
from .gateway import AuthGateway
from .model import AuthSession, SessionUser
from .profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

RegisteredListener = Callable[[Employee], None]
ConfirmationSender = Callable[[str, str], None]


def log_confirmation_link(email: str, token: str) -> None:
    """Default sender: logs the confirmation link."""

    logger.info("confirmation link for %s: /api/auth/confirm?email=%s&token=%s", email, email, token)


class AuthStore:
    """Tracks the authenticated principal of one browser session.

    States move unauthenticated -> authenticating -> authenticated on a
    successful login and back to unauthenticated on logout, on a failed login,
    or when the backend reports this session signed out.
    """

    def __init__(
        self,
        gateway: AuthGateway,
        profiles: ProfileRepository,
        employees: EmployeeRepository,
        *,
        require_email_confirmation: bool = False,
        on_registered: Iterable[RegisteredListener] = (),
        send_confirmation: ConfirmationSender = log_confirmation_link,
        today: Callable[[], date] = today_local,
    ):
        self._gateway = gateway
        self._profiles = profiles
        self._employees = employees
        self._require_confirmation = bool(require_email_confirmation)
        self._registered_listeners: list[RegisteredListener] = list(on_registered)
        self._send_confirmation = send_confirmation
        self._today = today

        self.state = AuthState.UNAUTHENTICATED
        self.user: Optional[SessionUser] = None
        self.session: Optional[AuthSession] = None
        self.loading = False
        self.error: Optional[str] = None

        self._unsubscribe = gateway.on_auth_state_change(self._on_auth_event)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.session is not None

    @property
    def access_token(self) -> Optional[str]:
        return self.session.access_token if self.session else None

    def close(self) -> None:
        self._unsubscribe()

    def _clear(self) -> None:
        self.user = None
        self.session = None
        self.state = AuthState.UNAUTHENTICATED

    def _on_auth_event(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        if event is not AuthEvent.SIGNED_OUT or session is None or self.session is None:
            return
        if session.access_token == self.session.access_token:
            logger.info("session of %s signed out by backend", self.session.user_id)
            self._clear()

    def restore(self, access_token: Optional[str]) -> Optional[SessionUser]:
        """Recover a previously established session from its access token.

        ``loading`` stays True while the lookup is in flight; route guards must
        wait for it before choosing the login redirect.
        """

        self.loading = True
        try:
            if not access_token:
                return None
            session = self._gateway.get_session(access_token)
            if session is None:
                return None
            principal = self._profiles.get_by_user_id(session.user_id)
            if principal is None:
                return None
            self.user, self.session = principal, session
            self.state = AuthState.AUTHENTICATED
            return principal
        except GatewayError as e:
            logger.warning("session restore failed: %s", e)
            self.error = str(e)
            self._clear()
            return None
        finally:
            self.loading = False

    def login(self, email: str, password: str, role: Role | str) -> SessionUser:
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError(f"Unknown role: {role!r}")

        if self.session is not None:
            # A new login replaces the current session.
            try:
                self.logout()
            except GatewayError as e:
                logger.warning("sign-out of previous session failed: %s", e)

        self.state = AuthState.AUTHENTICATING
        self.error = None
        try:
            session = self._gateway.sign_in((email or "").strip().lower(), password or "")
        except DomainError as e:
            self.error = str(e)
            self._clear()
            raise

        try:
            principal = self._profiles.get_by_user_id(session.user_id)
            if principal is None:
                raise AuthenticationError("No profile found for this account")
            if principal.role is not role:
                raise AuthenticationError(f"This account is not registered as {role.value}")
        except DomainError as e:
            logger.warning("login for %s rejected: %s", email, e)
            self.error = str(e)
            try:
                self._gateway.sign_out(session.access_token)
            finally:
                self._clear()
            raise

        self.user, self.session = principal, session
        self.state = AuthState.AUTHENTICATED
        logger.info("%s signed in as %s", principal.email, role.value)
        return principal

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        department: str,
        position: str,
    ) -> Employee:
        """Create an employee account. Does not sign the caller in.

        The role is always employee. With email confirmation enabled the
        account cannot log in until ``confirm_email`` is called with the token
        handed to ``send_confirmation``.
        """

        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        department = require_non_empty(department, "Department")
        position = require_non_empty(position, "Position")

        if self._employees.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        user = self._gateway.sign_up(email, password, email_confirmed=not self._require_confirmation)
        try:
            self._profiles.create(user_id=user.id, name=name, email=email, role=Role.EMPLOYEE, department=department)
            employee = self._employees.insert(
                NewEmployee(
                    name=name,
                    email=email,
                    department=department,
                    position=position,
                    join_date=self._today().isoformat(),
                    user_id=user.id,
                )
            )
        except DomainError:
            # Profile rows cascade with the auth user.
            self._gateway.delete_user(user.id)
            raise

        for listener in list(self._registered_listeners):
            listener(employee)

        if user.confirmation_token:
            self._send_confirmation(email, user.confirmation_token)

        logger.info("registered employee %s (%s)", employee.id, email)
        return employee

    def subscribe_registered(self, listener: RegisteredListener) -> None:
        self._registered_listeners.append(listener)

    def confirm_email(self, email: str, token: str) -> None:
        email = require_email(email)
        token = require_non_empty(token, "Confirmation token")
        if not self._gateway.confirm_email(email, token):
            logger.warning("rejected confirmation attempt for %s", email)
            raise ValidationError("Invalid confirmation link")
        logger.info("email confirmed for %s", email)

    def logout(self) -> None:
        token = self.access_token
        try:
            if token:
                self._gateway.sign_out(token)
        finally:
            self._clear()
