from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_datetime(value: str) -> datetime:
    """Parse a stored timestamp, always returning an aware UTC datetime."""
    normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
    try:
        result = datetime.fromisoformat(normalized)
    except ValueError:
        # Legacy rows written without the 'T' separator
        result = datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
    if result.tzinfo is None:
        return result.replace(tzinfo=timezone.utc)
    return result.astimezone(timezone.utc)


def parse_optional_datetime(value: Optional[str]) -> Optional[datetime]:
    return parse_datetime(value) if value else None
