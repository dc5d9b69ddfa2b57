from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, NewEmployee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Note: the store depends on this interface, not on a concrete database.
    """

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def insert(self, data: NewEmployee) -> Employee:
        raise NotImplementedError
