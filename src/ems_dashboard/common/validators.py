from __future__ import annotations

import re
from datetime import datetime

from ..core.constants import DATE_FORMAT, MONTH_FORMAT
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Email is not valid")
    return email


def require_iso_date(value: str, field_name: str) -> str:
    value = require_non_empty(value, field_name)
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")
    return value


def optional_month(value: str | None) -> str | None:
    v = (value or "").strip()
    if not v:
        return None
    try:
        datetime.strptime(v, MONTH_FORMAT)
    except ValueError:
        raise ValidationError("Month must be formatted as YYYY-MM")
    return v
