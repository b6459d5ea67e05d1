from __future__ import annotations

from geo.closest import closest_point
from geo.distance import distance_m
from geo.tiles import tile_point_to_lonlat
from query.types import QueryParams
from tiles.types import TileFeature, TileRef


def evaluate_feature(
    feature: TileFeature,
    *,
    query_point: tuple[int, int],
    params: QueryParams,
    tile: TileRef,
    extent: int,
) -> tuple[float, float, float] | None:
    """
    Closest point of `feature` to the query as (lon, lat, meters), or None if rejected.

    `query_point` is the query lon/lat already projected into this layer's tile space.
    A direct hit (planar distance 0) reports the query lon/lat itself at 0 meters.
    """
    if not params.wants_kind(feature.kind):
        return None

    cp = closest_point(feature.geometry, query_point[0], query_point[1])
    if cp.distance < 0.0:
        return None

    if cp.distance == 0.0:
        lon, lat, meters = params.lon, params.lat, 0.0
    else:
        lon, lat = tile_point_to_lonlat(extent, tile.z, tile.x, tile.y, cp.x, cp.y)
        meters = distance_m((params.lon, params.lat), (lon, lat))

    if params.radius is not None and meters > params.radius:
        return None
    return lon, lat, meters
