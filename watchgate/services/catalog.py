"""
In-memory catalog of gated videos.

Items are built straight from the configured YouTube links so the list can be
served immediately; titles start as a placeholder and are filled in later by
``refresh_titles`` without blocking startup.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import requests

from watchgate.services.youtube_service import extract_video_id, thumbnail_url

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Loading..."
DEFAULT_TITLE = "YouTube Video"


@dataclass
class CatalogItem:
    id: int
    title: str
    video_id: str
    youtube_url: str
    direct_link: str
    thumbnail: str


class Catalog:
    def __init__(self, items: list[CatalogItem]) -> None:
        self._items = list(items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> list[CatalogItem]:
        return list(self._items)

    def get(self, item_id: int) -> CatalogItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)

    def filter(self, term: str | None) -> list[CatalogItem]:
        """Case-insensitive substring match on the title; blank → everything."""
        needle = (term or "").strip().lower()
        if not needle:
            return self.items
        return [item for item in self._items if needle in item.title.lower()]


def build_catalog(links: list[str], direct_link: str) -> Catalog:
    items: list[CatalogItem] = []
    for url in links:
        video_id = extract_video_id(url)
        if not video_id:
            logger.warning("Skipping catalog link without a video id: %s", url)
            continue
        items.append(
            CatalogItem(
                id=len(items) + 1,
                title=PLACEHOLDER_TITLE,
                video_id=video_id,
                youtube_url=url,
                direct_link=direct_link,
                thumbnail=thumbnail_url(video_id),
            )
        )
    logger.info("Catalog built: %d item(s) from %d link(s)", len(items), len(links))
    return Catalog(items)


class TitleFetcher:
    """Looks up video titles through the noembed oEmbed proxy."""

    def __init__(
        self,
        lookup_url: str = "https://noembed.com/embed",
        timeout: float = 3.0,
        session: requests.Session | None = None,
    ) -> None:
        self._lookup_url = lookup_url
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch_title(self, video_id: str) -> str:
        """Return the video's title, or a generic one if the lookup fails."""
        try:
            resp = self._session.get(
                self._lookup_url,
                params={"url": f"https://www.youtube.com/watch?v={video_id}"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.debug("Title lookup failed for %s: %s", video_id, exc)
            return DEFAULT_TITLE

        title = body.get("title") if isinstance(body, dict) else None
        if isinstance(title, str) and title.strip():
            return title
        return DEFAULT_TITLE


async def refresh_titles(catalog: Catalog, fetcher: TitleFetcher) -> int:
    """Fetch every title in parallel and apply them all at once.

    Returns the number of items whose title changed.
    """
    items = catalog.items
    if not items:
        return 0
    loop = asyncio.get_running_loop()
    titles = await asyncio.gather(
        *(loop.run_in_executor(None, fetcher.fetch_title, item.video_id) for item in items)
    )
    changed = 0
    for item, title in zip(items, titles):
        if item.title != title:
            item.title = title
            changed += 1
    logger.info("Titles refreshed: %d of %d changed", changed, len(items))
    return changed
