"""
Catalog endpoints.

  GET  /api/items?q=               list items, optionally filtered by title
  POST /api/items/refresh-titles   re-run the title lookup for every item
"""
import logging

from fastapi import APIRouter, Request

from watchgate.schemas.response import CatalogItemOut, CatalogResponse, TitleRefreshResponse
from watchgate.services.catalog import CatalogItem, refresh_titles

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


def _item_out(item: CatalogItem) -> CatalogItemOut:
    return CatalogItemOut(
        id=item.id,
        title=item.title,
        video_id=item.video_id,
        youtube_url=item.youtube_url,
        thumbnail=item.thumbnail,
    )


@router.get("/api/items", response_model=CatalogResponse)
async def list_items(request: Request, q: str = "") -> CatalogResponse:
    """Return catalog items whose title contains *q* (case-insensitive)."""
    items = request.app.state.catalog.filter(q)
    return CatalogResponse(total=len(items), items=[_item_out(i) for i in items])


@router.post("/api/items/refresh-titles", response_model=TitleRefreshResponse)
async def refresh_item_titles(request: Request) -> TitleRefreshResponse:
    state = request.app.state
    updated = await refresh_titles(state.catalog, state.title_fetcher)
    return TitleRefreshResponse(updated=updated)
