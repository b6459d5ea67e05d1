from __future__ import annotations

import logging
import zlib
from typing import Any, Iterator

from mapbox_vector_tile.decoder import TileData
from mapbox_vector_tile.utils import LINESTRING, POINT, POLYGON
from shapely.geometry import GeometryCollection, shape
from shapely.geometry.base import BaseGeometry

from query.errors import TileDecodeError
from tiles.types import GeometryKind, Property, PropertyValue, TileFeature, TileLayer, TileRef, ValueKind

logger = logging.getLogger(__name__)

_GEOMETRY_KINDS: dict[int, GeometryKind] = {
    POINT: "point",
    LINESTRING: "linestring",
    POLYGON: "polygon",
}

# protobuf Value field -> tagged kind; exactly one is set on a well-formed value.
_VALUE_FIELDS: tuple[tuple[str, ValueKind], ...] = (
    ("string_value", ValueKind.string),
    ("float_value", ValueKind.float),
    ("double_value", ValueKind.double),
    ("int_value", ValueKind.int),
    ("uint_value", ValueKind.uint),
    ("sint_value", ValueKind.sint),
    ("bool_value", ValueKind.boolean),
)


def is_compressed(data: bytes | bytearray | memoryview) -> bool:
    """
    True for gzip (1f 8b) or zlib (78 xx) framed payloads.
    """
    if len(data) < 2:
        return False
    b0, b1 = data[0], data[1]
    if b0 == 0x1F and b1 == 0x8B:
        return True
    return b0 == 0x78 and b1 in (0x01, 0x5E, 0x9C, 0xDA)


def tile_payload(tile: TileRef) -> bytes:
    """
    Raw MVT bytes for a tile, inflating gzip/zlib payloads transparently.

    The returned bytes are the scan's decode buffer; nothing read from them may
    outlive the scan without being materialized.
    """
    data = tile.buffer
    if not is_compressed(data):
        return bytes(data)
    try:
        # wbits | 32 auto-detects gzip vs zlib headers.
        return zlib.decompress(bytes(data), zlib.MAX_WBITS | 32)
    except zlib.error as exc:
        raise TileDecodeError(
            f"failed to decompress tile {tile.z}/{tile.x}/{tile.y}: {exc}",
            z=tile.z,
            x=tile.x,
            y=tile.y,
        ) from exc


def decode_tile(tile: TileRef) -> list[TileLayer]:
    """
    Parse a tile into its layers, in the order they are stored in the payload.

    Features stay in protobuf form until `iter_features` walks them, so feature id
    presence and the exact encoded value kinds survive decoding.
    """
    payload = tile_payload(tile)
    try:
        data = TileData(payload, default_options={"y_coord_down": True})
    except Exception as exc:
        raise TileDecodeError(
            f"failed to decode tile {tile.z}/{tile.x}/{tile.y}: {exc}",
            z=tile.z,
            x=tile.x,
            y=tile.y,
        ) from exc

    layers = [
        TileLayer(name=str(pb.name), extent=int(pb.extent), source=pb, decoder=data)
        for pb in data.tile.layers
    ]
    logger.debug(
        "decoded tile %s/%s/%s: %d layer(s)", tile.z, tile.x, tile.y, len(layers)
    )
    return layers


def property_value(pb_value: Any) -> PropertyValue:
    for field_name, kind in _VALUE_FIELDS:
        if pb_value.HasField(field_name):
            return PropertyValue(kind, getattr(pb_value, field_name))
    raise TileDecodeError("property value has no known type")


def feature_properties(layer: TileLayer, feature: TileFeature) -> tuple[Property, ...]:
    """
    The feature's (key, value) pairs in tag order; repeated keys are kept.
    """
    tags = feature.source.tags
    if len(tags) % 2:
        raise TileDecodeError(f"odd number of tags in layer {layer.name!r}")
    keys = layer.source.keys
    values = layer.source.values
    try:
        return tuple(
            (str(keys[k]), property_value(values[v]))
            for k, v in zip(tags[::2], tags[1::2])
        )
    except IndexError as exc:
        raise TileDecodeError(f"tag index out of range in layer {layer.name!r}") from exc


def _geometry(layer: TileLayer, pb_feature: Any, kind: GeometryKind) -> BaseGeometry:
    if kind == "unknown":
        return GeometryCollection()
    try:
        raw = layer.decoder.parse_geometry(
            geom=pb_feature.geometry,
            ftype=pb_feature.type,
            extent=layer.extent,
            y_coord_down=True,
            transformer=None,
        )
        return shape(raw)
    except Exception as exc:
        raise TileDecodeError(f"malformed feature geometry in layer {layer.name!r}: {exc}") from exc


def iter_features(layer: TileLayer) -> Iterator[TileFeature]:
    for pb_feature in layer.source.features:
        kind = _GEOMETRY_KINDS.get(int(pb_feature.type), "unknown")
        yield TileFeature(
            layer=layer.name,
            kind=kind,
            id=int(pb_feature.id) if pb_feature.HasField("id") else None,
            geometry=_geometry(layer, pb_feature, kind),
            source=pb_feature,
        )
