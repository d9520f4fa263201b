"""Shared utility functions."""

from app.core.config import settings


def escape_like(value: str) -> str:
    """Escape LIKE wildcard characters (%, _, \\) so they match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def clamp_page_size(limit: int | None) -> int:
    """Return a page size within 1..settings.max_page_size (default when unset)."""
    if not limit or limit < 1:
        return settings.default_page_size
    return min(limit, settings.max_page_size)
