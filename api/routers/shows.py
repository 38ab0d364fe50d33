"""
Paged browse endpoint for ingested shows.
"""
from __future__ import annotations

from fastapi import APIRouter, Query
from pydantic import BaseModel

from api.deps import Store, read_show_rows

PAGE_SIZE = 20

router = APIRouter(prefix="/shows", tags=["shows"])


# --- Pydantic models ---

class CastMember(BaseModel):
    id: int
    name: str
    birthday: str | None = None


class Show(BaseModel):
    id: int
    name: str
    cast: list[CastMember] | None = None


class ShowsPage(BaseModel):
    success: bool
    page: int | None = None
    page_size: int | None = None
    total_pages: float | None = None
    total_results: int
    shows: list[Show]


# --- Endpoints ---

@router.get("", response_model=ShowsPage, response_model_exclude_unset=True)
def list_shows(
    store: Store,
    page: int | None = Query(default=None, ge=1, description="Page number starting from 1"),
) -> ShowsPage:
    """
    List stored shows, PAGE_SIZE per page.

    Without `page` every stored show is returned. `total_pages` is the plain
    ratio total_results / page_size and is not rounded.
    """
    rows = read_show_rows(store)
    if not rows:
        return ShowsPage(success=False, total_results=0, shows=[])

    paged_rows = rows
    if page:
        pointer = (page - 1) * PAGE_SIZE
        paged_rows = rows[pointer : pointer + PAGE_SIZE]

    return ShowsPage(
        success=True,
        page=page,
        page_size=PAGE_SIZE,
        total_pages=len(rows) / PAGE_SIZE,
        total_results=len(rows),
        shows=[Show.model_validate(row) for row in paged_rows],
    )
