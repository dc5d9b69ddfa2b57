from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import TaskStatus


@dataclass(frozen=True)
class Task:
    """Domain entity: a task assigned by an admin to an employee."""

    id: str
    title: str
    description: str
    assigned_to: str
    assigned_by: str
    status: TaskStatus
    created_date: str
    due_date: str
    completed_date: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "assigned_to": self.assigned_to,
            "assigned_by": self.assigned_by,
            "status": self.status.value,
            "created_date": self.created_date,
            "due_date": self.due_date,
            "completed_date": self.completed_date,
        }


@dataclass(frozen=True)
class NewTask:
    """Insert payload; ``status`` of None means the default (pending)."""

    title: str
    assigned_to: Optional[str]
    assigned_by: str
    due_date: Optional[str]
    description: str = ""
    created_date: Optional[str] = None
    status: Optional[TaskStatus] = None
