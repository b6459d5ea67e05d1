from __future__ import annotations

from dataclasses import dataclass

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry
from shapely.ops import nearest_points


@dataclass(frozen=True)
class ClosestPoint:
    x: float
    y: float
    # Planar distance in the geometry's own units; negative when there is no answer.
    distance: float


def closest_point(geom: BaseGeometry, x: float, y: float) -> ClosestPoint:
    """
    Nearest point on `geom` to (x, y) and the planar distance to it.

    Polygons count their interior, so a point inside one is a direct hit
    (distance 0.0, the input point is returned unchanged).
    """
    if geom is None or geom.is_empty:
        return ClosestPoint(x=float(x), y=float(y), distance=-1.0)

    target = Point(x, y)
    d = float(geom.distance(target))
    if d != d:  # NaN from degenerate input
        return ClosestPoint(x=float(x), y=float(y), distance=-1.0)
    if d == 0.0:
        return ClosestPoint(x=float(x), y=float(y), distance=0.0)

    on_geom, _ = nearest_points(geom, target)
    return ClosestPoint(x=float(on_geom.x), y=float(on_geom.y), distance=d)
