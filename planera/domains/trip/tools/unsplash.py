"""Unsplash API client for destination, activity and restaurant photos.

Photos are hotlinked, never re-hosted, and every stored photo carries the
photographer attribution Unsplash requires.
"""

import logging
import random
from typing import Any

import httpx

from planera.core.config import settings
from planera.domains.trip.tools.base import BaseAsyncAPIClient, ToolError

logger = logging.getLogger(__name__)

UTM_PARAMS = "utm_source=planera&utm_medium=referral"
FALLBACK_DESTINATION_IMAGE = "https://images.unsplash.com/photo-1488646953014-85cb44e25828?w=800&q=80"

# Tried in order until one returns photos
DESTINATION_QUERIES = ("{} travel", "{} city", "{} landmark")

_rng = random.Random()


class UnsplashClient(BaseAsyncAPIClient):
    """Async client for the Unsplash API."""

    tool_name = "Unsplash"

    def __init__(
        self,
        access_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_key = access_key or settings.UNSPLASH_ACCESS_KEY
        super().__init__(base_url or settings.UNSPLASH_BASE_URL, transport=transport)

    @property
    def is_configured(self) -> bool:
        return bool(self.access_key)

    async def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Client-ID {self.access_key}",
            "Accept-Version": "v1",
        }

    async def search_photos(self, query: str, per_page: int = 1) -> list[dict[str, Any]]:
        """Landscape photos matching ``query``, most relevant first.

        Results without a usable image URL are dropped.
        """
        response = await self.get(
            "/search/photos",
            params={"query": query, "per_page": per_page, "orientation": "landscape"},
        )
        return [
            photo
            for photo in response.get("results") or []
            if (photo.get("urls") or {}).get("regular")
        ]

    async def destination_photo(
        self,
        destination: str,
        rng: random.Random | None = None,
    ) -> dict[str, Any] | None:
        """A random photo among the top results for the destination.

        Broader queries are tried when the first finds nothing.
        """
        for template in DESTINATION_QUERIES:
            photos = await self.search_photos(template.format(destination), per_page=3)
            if photos:
                return (rng or _rng).choice(photos)
        return None

    async def track_download(self, photo: dict[str, Any]) -> None:
        """Report that a photo was used. Failures are logged only."""
        location = (photo.get("links") or {}).get("download_location")
        if not location:
            return
        if location.startswith(self.base_url):
            location = location[len(self.base_url) :]
        try:
            await self.get(location)
        except ToolError as e:
            logger.warning(f"Unsplash download tracking for {photo.get('id')} failed: {e}")


def to_image(photo: dict[str, Any]) -> dict[str, Any]:
    """Unsplash photo to the stored image shape, attribution included."""
    urls = photo.get("urls") or {}
    user = photo.get("user") or {}
    profile = (user.get("links") or {}).get("html")
    return {
        "url": urls.get("regular"),
        "urlSmall": urls.get("small"),
        "urlThumb": urls.get("thumb"),
        "unsplashPhotoId": photo.get("id"),
        "description": photo.get("description") or photo.get("alt_description"),
        "photographerName": user.get("name"),
        "photographerUsername": user.get("username"),
        "photographerUrl": f"{profile}?{UTM_PARAMS}" if profile else None,
        "unsplashUrl": f"https://unsplash.com/?{UTM_PARAMS}",
    }


def fallback_destination_image() -> dict[str, Any]:
    """Generic travel photo used when Unsplash has nothing."""
    return {"url": FALLBACK_DESTINATION_IMAGE, "unsplashUrl": f"https://unsplash.com/?{UTM_PARAMS}"}
