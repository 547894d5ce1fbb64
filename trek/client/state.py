"""Client-side state stores.

Each store owns one slice of UI state. List stores patch their in-memory
list after a successful round trip instead of refetching, reconciling by id.
Map-scoped lists are refetched whenever the active map changes, and a
response that arrives after the active map moved on is dropped.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

import httpx

from trek import schemas
from trek.client.api import TrekAPIError, TrekClient
from trek.client.grouping import MarkerGroup, group_markers_by_category
from trek.client.storage import (
    ACTIVE_MAP_KEY,
    ALWAYS_SHOW_LABELS_KEY,
    MAP_TYPE_KEY,
    LocalStorage,
)
from trek.tiles import DEFAULT_MAP_TYPE, MAP_TYPES

logger = logging.getLogger(__name__)

Listener = Callable[[], None]
RecordT = TypeVar("RecordT", schemas.Marker, schemas.Category)


class _Observable:
    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class MapSettingsStore(_Observable):
    """Base layer choice and label visibility, persisted locally."""

    def __init__(self, storage: LocalStorage) -> None:
        super().__init__()
        self._storage = storage

    @property
    def map_type(self) -> str:
        value = self._storage.get(MAP_TYPE_KEY, DEFAULT_MAP_TYPE)
        return value if value in MAP_TYPES else DEFAULT_MAP_TYPE

    def set_map_type(self, map_type: str) -> None:
        if map_type not in MAP_TYPES:
            raise ValueError(f"Unknown map type: {map_type}")
        self._storage.set(MAP_TYPE_KEY, map_type)
        self._notify()

    @property
    def always_show_labels(self) -> bool:
        return bool(self._storage.get(ALWAYS_SHOW_LABELS_KEY, False))

    def set_always_show_labels(self, value: bool) -> None:
        self._storage.set(ALWAYS_SHOW_LABELS_KEY, bool(value))
        self._notify()


class ActiveMapStore(_Observable):
    """The map currently shown, persisted locally."""

    def __init__(self, storage: LocalStorage) -> None:
        super().__init__()
        self._storage = storage
        raw = storage.get(ACTIVE_MAP_KEY)
        self._active: schemas.Map | None = (
            schemas.Map.model_validate(raw) if raw else None
        )

    @property
    def active_map(self) -> schemas.Map | None:
        return self._active

    def set_active_map(self, active: schemas.Map | None) -> None:
        self._active = active
        if active is None:
            self._storage.remove(ACTIVE_MAP_KEY)
        else:
            self._storage.set(ACTIVE_MAP_KEY, active.model_dump(mode="json", by_alias=True))
        self._notify()


class _MapScopedListStore(_Observable, Generic[RecordT], ABC):
    """A list of records belonging to the active map."""

    def __init__(self, client: TrekClient, active_map: ActiveMapStore) -> None:
        super().__init__()
        self._client = client
        self._active_map = active_map
        self._items: list[RecordT] = []
        self._generation = 0
        self._map_epoch = 0
        self._loading = False
        self._pending: asyncio.Task[None] | None = None
        active_map.subscribe(self._on_active_map_changed)

    @property
    def items(self) -> list[RecordT]:
        if self._active_map.active_map is None:
            return []
        return list(self._items)

    @property
    def is_loading(self) -> bool:
        return self._loading

    @abstractmethod
    async def _fetch(self, map_id: int) -> list[RecordT]: ...

    async def refresh(self) -> None:
        """Refetch the list for the active map; failures leave it empty."""
        self._generation += 1
        generation = self._generation
        active = self._active_map.active_map
        if active is None:
            self._items = []
            self._notify()
            return

        self._loading = True
        try:
            items = await self._fetch(active.id)
        except (TrekAPIError, httpx.HTTPError) as exc:
            logger.warning("Failed to load %s for map %s: %s", self._kind, active.id, exc)
            items = []
        finally:
            if generation == self._generation:
                self._loading = False

        if generation != self._generation:
            logger.debug("Dropping stale %s response for map %s", self._kind, active.id)
            return
        self._items = items
        self._notify()

    async def wait_idle(self) -> None:
        """Wait for a refetch scheduled by an active map change."""
        while self._pending is not None and not self._pending.done():
            await self._pending

    def _on_active_map_changed(self) -> None:
        # Invalidate anything in flight for the previous map.
        self._generation += 1
        self._map_epoch += 1
        self._loading = False
        self._items = []
        self._notify()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._pending = loop.create_task(self.refresh())

    def _is_stale(self, epoch: int) -> bool:
        if epoch == self._map_epoch:
            return False
        logger.debug("Dropping %s result for a map that is no longer active", self._kind)
        return True

    def _prepend(self, record: RecordT, epoch: int) -> None:
        if self._is_stale(epoch):
            return
        self._items = [record, *(item for item in self._items if item.id != record.id)]
        self._notify()

    def _replace(self, record: RecordT, epoch: int) -> None:
        if self._is_stale(epoch):
            return
        self._items = [record if item.id == record.id else item for item in self._items]
        self._notify()

    def _remove(self, record_id: int, epoch: int) -> None:
        if self._is_stale(epoch):
            return
        self._items = [item for item in self._items if item.id != record_id]
        self._notify()

    @property
    def _kind(self) -> str:
        return type(self).__name__.removesuffix("Store").lower()


class CategoriesStore(_MapScopedListStore[schemas.Category]):
    @property
    def categories(self) -> list[schemas.Category]:
        return self.items

    async def _fetch(self, map_id: int) -> list[schemas.Category]:
        return await self._client.list_categories(map_id)

    async def create(self, new: schemas.NewCategory) -> schemas.Category:
        epoch = self._map_epoch
        created = await self._client.create_category(new)
        self._prepend(created, epoch)
        return created

    async def update(
        self, category_id: int, patch: schemas.CategoryPatch
    ) -> schemas.Category:
        epoch = self._map_epoch
        updated = await self._client.update_category(category_id, patch)
        self._replace(updated, epoch)
        return updated

    async def delete(self, category_id: int, *, delete_markers: bool = False) -> None:
        epoch = self._map_epoch
        await self._client.delete_category(category_id, delete_markers=delete_markers)
        self._remove(category_id, epoch)


class MarkersStore(_MapScopedListStore[schemas.Marker]):
    def __init__(self, client: TrekClient, active_map: ActiveMapStore) -> None:
        super().__init__(client, active_map)
        self.editing_marker_id: int | None = None

    @property
    def markers(self) -> list[schemas.Marker]:
        return self.items

    @property
    def editing_marker(self) -> schemas.Marker | None:
        if self.editing_marker_id is None:
            return None
        return next(
            (m for m in self.markers if m.id == self.editing_marker_id), None
        )

    def start_edit(self, marker_id: int) -> None:
        self.editing_marker_id = marker_id
        self._notify()

    def stop_edit(self) -> None:
        self.editing_marker_id = None
        self._notify()

    def grouped(self, categories: list[schemas.Category] | None = None) -> list[MarkerGroup]:
        return group_markers_by_category(self.markers, categories or [])

    async def _fetch(self, map_id: int) -> list[schemas.Marker]:
        return await self._client.list_markers(map_id)

    def _on_active_map_changed(self) -> None:
        self.editing_marker_id = None
        super()._on_active_map_changed()

    async def create(self, new: schemas.NewMarker) -> schemas.Marker:
        epoch = self._map_epoch
        created = await self._client.create_marker(new)
        self._prepend(created, epoch)
        return created

    async def update(self, marker_id: int, patch: schemas.MarkerPatch) -> schemas.Marker:
        epoch = self._map_epoch
        updated = await self._client.update_marker(marker_id, patch)
        self._replace(updated, epoch)
        return updated

    async def delete(self, marker_id: int) -> None:
        epoch = self._map_epoch
        await self._client.delete_marker(marker_id)
        if self.editing_marker_id == marker_id:
            self.editing_marker_id = None
        self._remove(marker_id, epoch)

    def forget_category(self, category_id: int) -> None:
        """Mirror ``ON DELETE SET NULL`` locally after a category is deleted."""
        patched: list[schemas.Marker] = []
        for marker in self._items:
            if marker.category_id == category_id:
                marker = marker.model_copy(
                    update={"category_id": None, "category_color": None}
                )
            patched.append(marker)
        self._items = patched
        self._notify()

    def recolor_category(self, category_id: int, color: str | None) -> None:
        self._items = [
            m.model_copy(update={"category_color": color})
            if m.category_id == category_id
            else m
            for m in self._items
        ]
        self._notify()

    def drop_category(self, category_id: int) -> None:
        """Mirror a category delete that took its markers along."""
        self._items = [m for m in self._items if m.category_id != category_id]
        self._notify()


class TrekState:
    """All stores wired together the way the page uses them."""

    def __init__(self, client: TrekClient, storage: LocalStorage) -> None:
        self.client = client
        self.settings = MapSettingsStore(storage)
        self.active_map = ActiveMapStore(storage)
        self.categories = CategoriesStore(client, self.active_map)
        self.markers = MarkersStore(client, self.active_map)

    async def load(self) -> None:
        await asyncio.gather(self.categories.refresh(), self.markers.refresh())

    async def delete_category(
        self, category_id: int, *, delete_markers: bool = False
    ) -> None:
        await self.categories.delete(category_id, delete_markers=delete_markers)
        if delete_markers:
            self.markers.drop_category(category_id)
        else:
            self.markers.forget_category(category_id)

    async def update_category(
        self, category_id: int, patch: schemas.CategoryPatch
    ) -> schemas.Category:
        """Update a category and re-tint its markers when the color changes."""
        updated = await self.categories.update(category_id, patch)
        if "color" in patch.model_fields_set:
            self.markers.recolor_category(category_id, updated.color)
        return updated

