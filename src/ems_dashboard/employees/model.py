from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee row.

    Note: plain data object, no DB access code here.
    """

    id: str
    name: str
    email: str
    department: str
    position: str
    join_date: str
    user_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "position": self.position,
            "join_date": self.join_date,
            "user_id": self.user_id,
        }


@dataclass(frozen=True)
class NewEmployee:
    name: str
    email: str
    department: str
    position: str
    join_date: str
    user_id: Optional[str] = None
