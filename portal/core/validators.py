import re
from typing import Iterable, Optional

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

PRIORITIES = ("high", "medium", "low")


def require_text(value: Optional[str], field: str) -> str:
    """Strip and reject empty form values."""
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")
    return value.strip()


def require_choice(value: Optional[str], field: str, choices: Iterable[str]) -> str:
    value = require_text(value, field)
    allowed = tuple(choices)
    if value not in allowed:
        raise ValueError(f"{field} must be one of: {', '.join(allowed)}")
    return value


def require_email(value: Optional[str], field: str = "email") -> str:
    value = require_text(value, field)
    if not EMAIL_PATTERN.search(value):
        raise ValueError("Invalid email format")
    return value
