from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str
    password_hash: str
    email_confirmed: bool = True
    confirmation_token: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    """A backend session; the access token travels in the Flask cookie."""

    access_token: str
    user_id: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class SessionUser:
    """The authenticated principal: identity plus role and profile fields."""

    id: str
    name: str
    email: str
    role: Role
    department: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department,
        }
