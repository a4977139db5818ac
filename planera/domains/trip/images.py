"""Photo lookups for destinations, activities and restaurants."""

import logging
from typing import Any

from planera.domains.trip.tools.base import ToolError
from planera.domains.trip.tools.unsplash import UnsplashClient, to_image

logger = logging.getLogger(__name__)

GALLERY_SIZE = 5


class ImageService:
    """Unsplash photos shaped for the app.

    A missing key or a failed search yields no photo rather than an error,
    since every screen that shows one has a placeholder.
    """

    def __init__(self, client: UnsplashClient | None = None) -> None:
        self.client = client or UnsplashClient()

    async def _search(self, query: str, count: int) -> list[dict[str, Any]]:
        if not self.client.is_configured:
            logger.info("UNSPLASH_ACCESS_KEY not set, no photos")
            return []
        try:
            async with self.client:
                photos = await self.client.search_photos(query, per_page=count)
        except ToolError as e:
            logger.warning(f"Unsplash search for {query!r} failed: {e}")
            return []
        return [to_image(photo) for photo in photos]

    async def _first(self, query: str) -> dict[str, Any] | None:
        images = await self._search(query, 1)
        return images[0] if images else None

    async def destination_image(self, destination: str) -> dict[str, Any] | None:
        return await self._first(destination)

    async def destination_gallery(self, destination: str, count: int = GALLERY_SIZE) -> list[dict[str, Any]]:
        return await self._search(destination, count)

    async def activity_image(self, activity: str, destination: str) -> dict[str, Any] | None:
        return await self._first(f"{activity} {destination}")

    async def restaurant_image(self, cuisine: str, destination: str) -> dict[str, Any] | None:
        return await self._first(f"{cuisine} restaurant {destination}")
