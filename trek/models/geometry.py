"""Coordinate helpers and SQLite stand-ins for the PostGIS point functions.

Markers keep their position in a single PostGIS ``geometry(Point, 4326)``
column. The application always writes it through
``ST_SetSRID(ST_MakePoint(lng, lat), 4326)`` and reads it back through
``ST_X``/``ST_Y``, so the stored value never crosses into Python directly.

SQLite has neither PostGIS nor (by default) SpatiaLite. There the column
holds EWKT text and the functions below are registered per connection (see
:func:`trek.database.install_sqlite_support`).
"""

from __future__ import annotations

import math
from typing import Any

SRID_WGS84 = 4326


def round_coordinate(value: float) -> float:
    """Round a coordinate to 6 decimals (~0.11 m), halves towards +inf."""
    return math.floor(float(value) * 1e6 + 0.5) / 1e6


def _strip_srid(ewkt: str) -> str:
    _, _, wkt = ewkt.rpartition(";")
    return wkt.strip()


def _parse_point(ewkt: str | None) -> tuple[float, float] | None:
    if ewkt is None:
        return None
    wkt = _strip_srid(ewkt)
    if not wkt.upper().startswith("POINT"):
        raise ValueError(f"Not a point geometry: {ewkt!r}")
    inner = wkt[wkt.index("(") + 1 : wkt.rindex(")")]
    x_str, y_str = inner.split()
    return float(x_str), float(y_str)


def make_point(x: float | None, y: float | None) -> str | None:
    """SQLite stand-in for ``ST_MakePoint``."""
    if x is None or y is None:
        return None
    return f"POINT({float(x)!r} {float(y)!r})"


def set_srid(geom: str | None, srid: int | None) -> str | None:
    """SQLite stand-in for ``ST_SetSRID``."""
    if geom is None or srid is None:
        return None
    return f"SRID={int(srid)};{_strip_srid(geom)}"


def point_x(geom: str | None) -> float | None:
    """SQLite stand-in for ``ST_X``."""
    parsed = _parse_point(geom)
    return parsed[0] if parsed else None


def point_y(geom: str | None) -> float | None:
    """SQLite stand-in for ``ST_Y``."""
    parsed = _parse_point(geom)
    return parsed[1] if parsed else None


def register_geometry_column(*args: Any) -> int:
    """SQLite stand-in for SpatiaLite's geometry column bookkeeping.

    GeoAlchemy2 calls ``RecoverGeometryColumn`` and ``CreateSpatialIndex``
    after creating a table with a geometry column. Without SpatiaLite there
    is no metadata to maintain, so they only report success.
    """
    return 1
