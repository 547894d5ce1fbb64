"""Base tile layer configuration."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

DEFAULT_MAP_TYPE = "osm"

_ESRI_IMAGERY = (
    "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery"
    "/MapServer/tile/{z}/{y}/{x}"
)
_ESRI_ATTRIBUTION = (
    "Tiles &copy; Esri &mdash; Source: Esri, Maxar, Earthstar Geographics, "
    "and the GIS User Community"
)
_CARTO_ATTRIBUTION = "&copy; OpenStreetMap contributors &copy; CARTO"


@dataclass(frozen=True)
class TileSource:
    url: str
    attribution: str
    subdomains: str | None = None


@dataclass(frozen=True)
class GeoJsonOverlay:
    url: str
    style: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MapConfig:
    label: str
    base: TileSource
    # Highest zoom with real imagery; Leaflet upscales beyond it.
    max_native_zoom: int
    overlays: tuple[TileSource, ...] = ()
    geojson: tuple[GeoJsonOverlay, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["overlays"] = list(data["overlays"])
        data["geojson"] = list(data["geojson"])
        return data


MAP_TYPES: dict[str, MapConfig] = {
    "osm": MapConfig(
        label="OpenStreetMap",
        base=TileSource(
            url="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
            attribution="&copy; OpenStreetMap contributors",
            subdomains="abc",
        ),
        max_native_zoom=19,
    ),
    "voyager": MapConfig(
        label="CARTO Voyager",
        base=TileSource(
            url="https://{s}.basemaps.cartocdn.com/rastertiles/voyager/{z}/{x}/{y}{r}.png",
            attribution=_CARTO_ATTRIBUTION,
            subdomains="abcd",
        ),
        max_native_zoom=20,
    ),
    "satellite": MapConfig(
        label="Satellite",
        base=TileSource(url=_ESRI_IMAGERY, attribution=_ESRI_ATTRIBUTION),
        max_native_zoom=21,
    ),
    "hybrid": MapConfig(
        label="Satellite + labels",
        base=TileSource(url=_ESRI_IMAGERY, attribution=_ESRI_ATTRIBUTION),
        overlays=(
            TileSource(
                url="https://{s}.basemaps.cartocdn.com/dark_only_labels/{z}/{x}/{y}{r}.png",
                attribution=_CARTO_ATTRIBUTION,
                subdomains="abcd",
            ),
        ),
        geojson=(
            GeoJsonOverlay(
                url=(
                    "https://raw.githubusercontent.com/datasets/geo-countries"
                    "/master/data/countries.geojson"
                ),
                style={"color": "#ffffff", "weight": 1, "opacity": 0.8},
            ),
        ),
        max_native_zoom=21,
    ),
}


def resolve_map_type(name: str | None) -> str:
    """Return ``name`` if it is a known layer id, otherwise the default."""
    if name and name in MAP_TYPES:
        return name
    return DEFAULT_MAP_TYPE


def preview_tile_url(map_type: str, *, z: int = 3, x: int = 4, y: int = 2) -> str:
    """Fill a layer's base URL template for a single thumbnail tile."""
    source = MAP_TYPES[resolve_map_type(map_type)].base
    subdomain = source.subdomains[0] if source.subdomains else ""
    return (
        source.url.replace("{s}", subdomain)
        .replace("{z}", str(z))
        .replace("{x}", str(x))
        .replace("{y}", str(y))
        .replace("{r}", "")
    )
