"""TheMealDB HTTP adapter.

Thin wrapper over a shared ``httpx.AsyncClient``: one GET per call, no
retries, no caching. Transport problems become ``NetworkError`` and bodies
that are not JSON become ``DecodeError``.
"""

from typing import Any, Dict, Optional
import logging

import httpx

from app.exceptions import DecodeError, NetworkError

logger = logging.getLogger("dessertbook.mealdb")

FILTER_PATH = "filter.php"
LOOKUP_PATH = "lookup.php"


class MealDBAdapter:
    """Async client for the list-by-category and lookup-by-id endpoints."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @classmethod
    def connect(
        cls,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "MealDBAdapter":
        """Build an adapter with its own client.

        ``timeout`` None keeps the httpx default. ``transport`` lets tests
        plug in ``httpx.MockTransport``.
        """
        kwargs: Dict[str, Any] = {"base_url": base_url}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if transport is not None:
            kwargs["transport"] = transport
        client = httpx.AsyncClient(**kwargs)
        logger.info("MealDB client ready base_url=%s", base_url)
        return cls(client)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        try:
            await self._client.aclose()
            logger.info("MealDB client closed")
        except Exception:
            logger.exception("Error closing MealDB client")

    async def get_json(self, path: str, params: Dict[str, str]) -> Any:
        """Issue a single GET and return the decoded JSON body.

        Raises:
            NetworkError: connection failure, timeout or non-2xx status
            DecodeError: body is not valid JSON
        """
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning("MealDB returned HTTP %d for %s", status_code, exc.request.url)
            raise NetworkError(
                f"Recipe API answered with HTTP {status_code}",
                details={"url": str(exc.request.url), "status_code": status_code},
                code="HTTP_STATUS",
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("MealDB request failed for %s: %s", path, exc)
            raise NetworkError(
                "Could not reach the recipe API",
                details={"path": path, "reason": str(exc) or type(exc).__name__},
                code="TRANSPORT",
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(
                "Response is not valid JSON",
                details={"url": str(response.request.url)},
                code="INVALID_JSON",
            ) from exc

    async def filter_by_category(self, category: str) -> Any:
        return await self.get_json(FILTER_PATH, {"c": category})

    async def lookup(self, meal_id: str) -> Any:
        return await self.get_json(LOOKUP_PATH, {"i": meal_id})
