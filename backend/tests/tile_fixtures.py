from __future__ import annotations

import gzip
from typing import Any, Callable

import mapbox_vector_tile
from mapbox_vector_tile.Mapbox import vector_tile_pb2

from geo.tiles import lonlat_to_tile_point, tile_point_to_lonlat


def feature(geometry: str, properties: dict[str, Any] | None = None, id: int | None = None) -> dict[str, Any]:
    f: dict[str, Any] = {"geometry": geometry, "properties": dict(properties or {})}
    if id is not None:
        f["id"] = id
    return f


def make_tile(layers: dict[str, list[dict[str, Any]]], *, extent: int = 4096, compress: bool = False) -> bytes:
    """
    Encode {layer_name: [feature, ...]} as an MVT, geometry given in tile-space WKT.
    """
    data = mapbox_vector_tile.encode(
        [{"name": name, "features": feats} for name, feats in layers.items()],
        default_options={"y_coord_down": True, "extents": extent},
    )
    return gzip.compress(data) if compress else data


def rewrite_tile(buffer: bytes, edit: Callable[[Any], None]) -> bytes:
    """
    Parse an encoded tile, let `edit` mutate the protobuf message, re-encode it.

    For payloads the encoder cannot produce directly (uint/sint values, repeated keys).
    """
    tile = vector_tile_pb2.tile()
    tile.ParseFromString(buffer)
    edit(tile)
    return tile.SerializeToString()


def tile_entry(buffer: bytes, z: int, x: int, y: int) -> dict[str, Any]:
    return {"buffer": buffer, "z": z, "x": x, "y": y}


def lonlat_of(z: int, x: int, y: int, px: float, py: float, extent: int = 4096) -> tuple[float, float]:
    return tile_point_to_lonlat(extent, z, x, y, px, py)


def point_of(z: int, x: int, y: int, lon: float, lat: float, extent: int = 4096) -> tuple[int, int]:
    return lonlat_to_tile_point(lon, lat, extent, z, x, y)


def tile_for(z: int, lon: float, lat: float) -> tuple[int, int]:
    # With a one-unit extent the tile-local point of tile 0/0 is the tile index itself.
    return lonlat_to_tile_point(lon, lat, 1, z, 0, 0)


def retag_ints(field: str) -> Callable[[Any], None]:
    """
    Edit for `rewrite_tile`: move every `int_value` property value to `field`.
    """

    def edit(tile: Any) -> None:
        for layer in tile.layers:
            for value in layer.values:
                if value.HasField("int_value"):
                    n = value.int_value
                    value.Clear()
                    setattr(value, field, n)

    return edit
