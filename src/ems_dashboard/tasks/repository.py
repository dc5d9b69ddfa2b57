from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import TaskStatus
from .model import NewTask, Task


class TaskRepository(Protocol):
    def list_all(self) -> Sequence[Task]:
        raise NotImplementedError

    def insert(self, data: NewTask) -> Task:
        """Insert a task and return the stored row with its assigned id."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        task_id: str,
        status: TaskStatus,
        completed_date: Optional[str] = None,
    ) -> Optional[Task]:
        """Update status; ``completed_date`` of None keeps the stored value.

        Returns the updated row, or None when no task has that id.
        """

        raise NotImplementedError
