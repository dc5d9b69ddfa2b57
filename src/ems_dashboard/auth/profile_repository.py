from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import SessionUser


class ProfileRepository(Protocol):
    """Profile rows hold the role and department of each auth user."""

    def get_by_user_id(self, user_id: str) -> Optional[SessionUser]:
        raise NotImplementedError

    def create(self, *, user_id: str, name: str, email: str, role: Role, department: str) -> SessionUser:
        raise NotImplementedError
