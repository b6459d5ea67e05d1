from __future__ import annotations

from functools import lru_cache

from pyproj import Geod


@lru_cache(maxsize=1)
def wgs84_geod() -> Geod:
    return Geod(ellps="WGS84")


def distance_m(a: tuple[float, float], b: tuple[float, float]) -> float:
    """
    Geodesic distance in meters between two (lon, lat) points on the WGS84 ellipsoid.

    Identical points short-circuit to 0.0 so a direct hit never picks up
    floating point noise from the inverse geodesic solution.
    """
    if a == b:
        return 0.0
    _az12, _az21, dist = wgs84_geod().inv(a[0], a[1], b[0], b[1])
    return abs(float(dist))
