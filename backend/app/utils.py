"""Small shared helpers: time handling and slugs."""

import re
import secrets
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def slugify(text: str, max_length: int = 60) -> str:
    """'Lisbon Long Weekend!' -> 'lisbon-long-weekend'."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:max_length].rstrip("-") or "untitled"


def unique_slug(text: str) -> str:
    """Slug with a short random suffix, e.g. 'lisbon-long-weekend-3f9a1c'."""
    return f"{slugify(text, max_length=50)}-{secrets.token_hex(3)}"
