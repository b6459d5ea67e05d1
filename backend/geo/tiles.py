from __future__ import annotations

import math


_MAX_MERCATOR_LAT = 85.05112878


def lonlat_to_tile_point(
    lon: float, lat: float, extent: int, z: int, x: int, y: int
) -> tuple[int, int]:
    """
    Project lon/lat into the integer coordinate space of tile z/x/y.

    The result is relative to the tile's top-left corner with y pointing down,
    the same space vector tile geometries are encoded in. Points outside the
    tile simply land outside [0, extent).
    """
    lat = max(-_MAX_MERCATOR_LAT, min(_MAX_MERCATOR_LAT, float(lat)))
    lat_rad = math.radians(lat)
    size = float(extent) * float(2**int(z))

    px = (float(lon) + 180.0) / 360.0 * size
    py = (
        (1.0 - math.log(math.tan(lat_rad) + (1.0 / math.cos(lat_rad))) / math.pi)
        / 2.0
        * size
    )
    return (
        int(math.floor(px - float(extent) * int(x))),
        int(math.floor(py - float(extent) * int(y))),
    )


def tile_point_to_lonlat(
    extent: int, z: int, x: int, y: int, px: float, py: float
) -> tuple[float, float]:
    """
    Inverse of lonlat_to_tile_point for a (possibly fractional) tile-local point.
    """
    size = float(extent) * float(2**int(z))
    gx = float(px) + float(extent) * int(x)
    gy = float(py) + float(extent) * int(y)

    lon = gx * 360.0 / size - 180.0
    y2 = 180.0 - gy * 360.0 / size
    lat = 360.0 / math.pi * math.atan(math.exp(y2 * math.pi / 180.0)) - 90.0
    return lon, lat
