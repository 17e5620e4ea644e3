"""Generic REST client for the CourseSphere backend."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from coursesphere.core.config import settings
from coursesphere.core.exceptions import ConflictError, ResourceError
from coursesphere.core.logging import get_logger

logger = get_logger(__name__)


class ResourceClient:
    """GET/POST/PUT/DELETE against a JSON REST endpoint.

    Any non-2xx status or transport error raises ``ResourceError``; there are
    no retries and no timeouts beyond the transport's own.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url or settings.API_BASE_URL
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=self.base_url, timeout=None)

    async def __aenter__(self) -> "ResourceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, body: Any) -> Any:
        return await self._request("POST", path, json=body)

    async def put(self, path: str, body: Any) -> Any:
        return await self._request("PUT", path, json=body)

    async def delete(self, path: str) -> Any:
        return await self._request("DELETE", path)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("request failed", method=method, path=path, error=str(e))
            raise ResourceError(method, path, detail=str(e)) from e

        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise ResourceError(
                    method, path, response.status_code, "response was not valid JSON"
                ) from e

        logger.error(
            "request rejected",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        error_cls = ConflictError if response.status_code == 409 else ResourceError
        raise error_cls(method, path, response.status_code, response.text)
