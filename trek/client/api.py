"""Async HTTP client for the Trek API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from trek import schemas

logger = logging.getLogger(__name__)


class TrekAPIError(Exception):
    """Non-2xx response from the Trek API."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = data.get("detail") if isinstance(data, dict) else None
    if isinstance(detail, str):
        return detail
    if detail is not None:
        return str(detail)
    return response.reason_phrase


def _dump(model: schemas.TrekModel, *, sparse: bool = False) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_unset=sparse)


class TrekClient:
    """One coroutine per server operation.

    Pass either ``base_url`` or a ready ``httpx.AsyncClient`` (for example one
    wired to an ``ASGITransport`` in tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        if http is None:
            if base_url is None:
                raise ValueError("Either base_url or http must be given")
            http = httpx.AsyncClient(base_url=base_url)
            self._owns_http = True
        else:
            self._owns_http = False
        self._http = http

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> TrekClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._http.request(method, url, json=json, params=params)
        if response.is_error:
            message = _error_message(response)
            logger.debug("%s %s -> %s %s", method, url, response.status_code, message)
            raise TrekAPIError(response.status_code, message)
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    # Session

    async def sign_in(self, username: str) -> schemas.User:
        data = await self._request("POST", "/auth/sign-in", json={"username": username})
        return schemas.User.model_validate(data)

    async def sign_out(self) -> None:
        await self._request("POST", "/auth/sign-out")

    async def me(self) -> schemas.User:
        return schemas.User.model_validate(await self._request("GET", "/auth/me"))

    # Maps

    async def list_maps(self, user_id: int | None = None) -> list[schemas.Map]:
        params = {"user_id": user_id} if user_id is not None else None
        data = await self._request("GET", "/api/maps", params=params)
        return [schemas.Map.model_validate(item) for item in data]

    async def create_map(self, new: schemas.NewMap) -> schemas.Map:
        data = await self._request("POST", "/api/maps", json=_dump(new))
        return schemas.Map.model_validate(data)

    async def update_map(self, map_id: int, patch: schemas.MapPatch) -> schemas.Map:
        data = await self._request(
            "PATCH", f"/api/maps/{map_id}", json=_dump(patch, sparse=True)
        )
        return schemas.Map.model_validate(data)

    async def delete_map(self, map_id: int) -> None:
        await self._request("DELETE", f"/api/maps/{map_id}")

    # Categories

    async def list_categories(self, map_id: int) -> list[schemas.Category]:
        data = await self._request("GET", f"/api/maps/{map_id}/categories")
        return [schemas.Category.model_validate(item) for item in data]

    async def create_category(self, new: schemas.NewCategory) -> schemas.Category:
        data = await self._request("POST", "/api/categories", json=_dump(new))
        return schemas.Category.model_validate(data)

    async def update_category(
        self, category_id: int, patch: schemas.CategoryPatch
    ) -> schemas.Category:
        data = await self._request(
            "PATCH", f"/api/categories/{category_id}", json=_dump(patch, sparse=True)
        )
        return schemas.Category.model_validate(data)

    async def delete_category(
        self, category_id: int, *, delete_markers: bool = False
    ) -> None:
        params = {"delete_markers": "true"} if delete_markers else None
        await self._request("DELETE", f"/api/categories/{category_id}", params=params)

    # Markers

    async def list_markers(self, map_id: int) -> list[schemas.Marker]:
        data = await self._request("GET", f"/api/maps/{map_id}/markers")
        return [schemas.Marker.model_validate(item) for item in data]

    async def create_marker(self, new: schemas.NewMarker) -> schemas.Marker:
        data = await self._request("POST", "/api/markers", json=_dump(new))
        return schemas.Marker.model_validate(data)

    async def update_marker(
        self, marker_id: int, patch: schemas.MarkerPatch
    ) -> schemas.Marker:
        data = await self._request(
            "PATCH", f"/api/markers/{marker_id}", json=_dump(patch, sparse=True)
        )
        return schemas.Marker.model_validate(data)

    async def delete_marker(self, marker_id: int) -> None:
        await self._request("DELETE", f"/api/markers/{marker_id}")

    # Display

    async def map_types(self) -> dict[str, Any]:
        return await self._request("GET", "/api/map-types")
