"""Routes exposing the client-side catalog filtering step."""

from __future__ import annotations

from fastapi import APIRouter

from src.models.catalog import VisibleItemsRequest, VisibleItemsResponse
from src.services.catalog import view_state

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.post(
    "/visible",
    response_model=VisibleItemsResponse,
    summary="Apply search and price filters to one server page",
)
async def filter_visible_items(payload: VisibleItemsRequest) -> VisibleItemsResponse:
    filters = payload.filters
    return VisibleItemsResponse(
        items=view_state.visible_items(payload.page.rows, filters),
        page=filters.page,
        total_pages=view_state.total_pages(payload.page.total_count, filters.page_size),
        total_count=payload.page.total_count,
    )
