# dictionary_backend/app/services/pexels_client.py
import logging
from typing import Any, Dict, Optional

import httpx
from fastapi_cache import FastAPICache
from fastapi_cache.decorator import cache

from dictionary_backend.app.core.config import config
from dictionary_backend.app.utils.http_client import get_http_client

logger = logging.getLogger(__name__)

NS_IMAGE_SEARCH = "images:search"

ORIENTATIONS = ("landscape", "portrait", "square")
SIZES = ("large", "medium", "small")


class PexelsConfigError(RuntimeError):
    """Raised when the Pexels API key is not configured."""


class PexelsUnavailable(RuntimeError):
    """Pexels could not be reached or answered with an error."""


def empty_result(page: int = 1, per_page: int = 0) -> Dict[str, Any]:
    return {"total_results": 0, "page": page, "per_page": per_page, "photos": []}


class PexelsClient:

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = api_key if api_key is not None else config.PEXELS_API_KEY
        self.base_url = (base_url or config.PEXELS_API_URL).rstrip("/")
        if not self.api_key:
            raise PexelsConfigError("PEXELS_API_KEY is not set")

    async def fetch(
        self,
        query: str,
        orientation: str = "landscape",
        size: str = "medium",
        page: int = 1,
        per_page: int = 10,
    ) -> Dict[str, Any]:
        """Search photos, raising PexelsUnavailable on any upstream failure."""
        params = {
            "query": query,
            "orientation": orientation,
            "size": size,
            "page": page,
            "per_page": per_page,
        }
        try:
            async with get_http_client(headers={"Authorization": self.api_key}) as client:
                response = await client.get(f"{self.base_url}/search", params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise PexelsUnavailable(f"Pexels search failed for {query!r}: {e}") from e
        except ValueError as e:
            raise PexelsUnavailable(f"Pexels returned invalid JSON for {query!r}") from e

        if not isinstance(data, dict) or not isinstance(data.get("photos"), list):
            raise PexelsUnavailable(f"Unexpected Pexels payload for {query!r}")

        photos = [p for p in data["photos"] if isinstance(p, dict) and isinstance(p.get("src"), dict)]
        return {
            "total_results": int(data.get("total_results") or 0),
            "page": int(data.get("page") or page),
            "per_page": int(data.get("per_page") or per_page),
            "photos": photos,
        }

    async def search(self, query: str, **params) -> Dict[str, Any]:
        """Like ``fetch`` but an outage comes back as an empty result."""
        try:
            return await self.fetch(query, **params)
        except PexelsUnavailable as e:
            logger.warning("%s", e)
            return empty_result(params.get("page", 1), params.get("per_page", 0))


@cache(expire=config.IMAGE_SEARCH_CACHE_SECONDS, namespace=NS_IMAGE_SEARCH)
async def search_photos(
    query: str,
    orientation: str = "landscape",
    size: str = "medium",
    page: int = 1,
    per_page: int = 10,
) -> dict:
    # 失败时抛异常，不会把空结果写进缓存
    client = PexelsClient()
    return await client.fetch(query, orientation=orientation, size=size, page=page, per_page=per_page)


async def search_photos_or_empty(
    query: str,
    orientation: str = "landscape",
    size: str = "medium",
    page: int = 1,
    per_page: int = 10,
) -> dict:
    try:
        return await search_photos(query, orientation, size, page, per_page)
    except PexelsUnavailable as e:
        logger.warning("%s", e)
        return empty_result(page, per_page)


async def invalidate_search_cache():
    """Drop every cached search result."""
    try:
        await FastAPICache.clear(namespace=NS_IMAGE_SEARCH)
    except Exception as e:
        logger.warning("[CACHE] clear failed: %s", e)
