"""Shared Route Dependencies — pagination window for list endpoints."""

from dataclasses import dataclass

from fastapi import Query

from learning_contracts.config import get_settings


@dataclass(frozen=True)
class Page:
    limit: int
    offset: int


def get_page(
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
) -> Page:
    """Resolve limit/offset, defaulting and capping limit from settings."""
    settings = get_settings()
    if limit is None:
        limit = settings.default_page_size
    return Page(limit=min(limit, settings.max_page_size), offset=offset)
