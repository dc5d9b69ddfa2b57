from __future__ import annotations

from typing import Optional

from ..common.validators import require_iso_date, require_non_empty
from ..core.exceptions import ValidationError
from .model import NewTask


def parse_new_task(data: dict, *, assigned_by: str, created_date: Optional[str] = None) -> NewTask:
    """Validate the task form before it reaches the store.

    Title, assignee and due date are required. Status is never taken from the
    form: new tasks always start pending.
    """

    if not (data.get("title") or "").strip() or not data.get("assigned_to") or not data.get("due_date"):
        raise ValidationError("Please fill in all required fields")

    return NewTask(
        title=require_non_empty(data["title"], "Title"),
        description=(data.get("description") or "").strip(),
        assigned_to=str(data["assigned_to"]).strip(),
        assigned_by=assigned_by,
        due_date=require_iso_date(str(data["due_date"]), "Due date"),
        created_date=created_date,
    )
