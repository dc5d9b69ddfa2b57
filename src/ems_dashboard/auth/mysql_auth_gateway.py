from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import AuthEvent
from ..core.exceptions import AuthenticationError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, new_id
from .gateway import AuthGateway, AuthListener, AuthStateNotifier
from .model import AuthSession, AuthUser

logger = logging.getLogger(__name__)


def _to_session(row: dict) -> AuthSession:
    return AuthSession(
        access_token=row["access_token"],
        user_id=str(row["user_id"]),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
    )


class MySQLAuthGateway(AuthGateway):
    def __init__(
        self,
        conn_factory: DatabaseConnection,
        *,
        session_days: int = DEFAULT_SESSION_DAYS,
        now: Callable[[], datetime] = datetime.now,
    ):
        self._conn_factory = conn_factory
        self._session_days = int(session_days)
        self._now = now
        self._notifier = AuthStateNotifier()

    def sign_up(self, email: str, password: str, *, email_confirmed: bool = True) -> AuthUser:
        user = AuthUser(
            id=new_id(),
            email=email,
            password_hash=generate_password_hash(password),
            email_confirmed=email_confirmed,
            confirmation_token=None if email_confirmed else secrets.token_urlsafe(32),
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM auth_users WHERE email=%s", (email,))
            if fetchone(cur):
                raise ValidationError("An account with this email already exists")
            cur.execute(
                """
                INSERT INTO auth_users (id, email, password_hash, email_confirmed, confirmation_token)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (user.id, user.email, user.password_hash, int(user.email_confirmed), user.confirmation_token),
            )
        return user

    def sign_in(self, email: str, password: str) -> AuthSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, password_hash, email_confirmed FROM auth_users WHERE email=%s",
                (email,),
            )
            row = fetchone(cur)
            if not row:
                raise AuthenticationError("Invalid email or password")

            try:
                ok = check_password_hash(row["password_hash"], password)
            except ValueError:
                # e.g. placeholder hashes or corrupted values
                ok = False
            if not ok:
                raise AuthenticationError("Invalid email or password")
            if not row["email_confirmed"]:
                raise AuthenticationError("Email address has not been confirmed")

            now = self._now()
            cur.execute("DELETE FROM auth_sessions WHERE expires_at <= %s", (now,))
            if cur.rowcount:
                logger.info("removed %d expired sessions", cur.rowcount)

            session = AuthSession(
                access_token=secrets.token_urlsafe(32),
                user_id=str(row["id"]),
                created_at=now,
                expires_at=now + timedelta(days=self._session_days),
            )
            cur.execute(
                "INSERT INTO auth_sessions (access_token, user_id, created_at, expires_at) VALUES (%s, %s, %s, %s)",
                (session.access_token, session.user_id, session.created_at, session.expires_at),
            )

        self._notifier.emit(AuthEvent.SIGNED_IN, session)
        return session

    def sign_out(self, access_token: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT access_token, user_id, created_at, expires_at FROM auth_sessions WHERE access_token=%s",
                (access_token,),
            )
            row = fetchone(cur)
            cur.execute("DELETE FROM auth_sessions WHERE access_token=%s", (access_token,))

        if row:
            self._notifier.emit(AuthEvent.SIGNED_OUT, _to_session(row))

    def get_session(self, access_token: str) -> Optional[AuthSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT access_token, user_id, created_at, expires_at FROM auth_sessions WHERE access_token=%s",
                (access_token,),
            )
            row = fetchone(cur)
            if not row:
                return None
            session = _to_session(row)
            if session.is_expired(self._now()):
                cur.execute("DELETE FROM auth_sessions WHERE access_token=%s", (access_token,))
                logger.info("expired session for user %s removed", session.user_id)
                return None
            return session

    def confirm_email(self, email: str, token: str) -> bool:
        if not token:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, confirmation_token FROM auth_users WHERE email=%s", (email,))
            row = fetchone(cur)
            expected = row["confirmation_token"] if row else None
            if not expected or not secrets.compare_digest(expected, token):
                return False
            cur.execute(
                "UPDATE auth_users SET email_confirmed=1, confirmation_token=NULL WHERE id=%s",
                (row["id"],),
            )
            return True

    def delete_user(self, user_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM auth_users WHERE id=%s", (user_id,))

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        return self._notifier.subscribe(callback)
