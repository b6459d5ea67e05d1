from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, TypeAlias, Union

from shapely.geometry.base import BaseGeometry


GeometryKind = Literal["point", "linestring", "polygon", "unknown"]

RawValue: TypeAlias = Union[bool, int, float, str]


class ValueKind(str, Enum):
    """
    Which field of the tile's protobuf Value message carried the value.
    """

    string = "string"
    float = "float"
    double = "double"
    int = "int"
    uint = "uint"
    sint = "sint"
    boolean = "boolean"


@dataclass(frozen=True)
class PropertyValue:
    """
    A tagged vector tile property value.

    Equality includes the kind, so the same number stored as `int_value` and as
    `sint_value` (or `True` and `1`) never compare equal.
    """

    kind: ValueKind
    value: RawValue

    def to_json(self) -> RawValue:
        if self.kind is ValueKind.boolean:
            return bool(self.value)
        if self.kind in (ValueKind.int, ValueKind.uint, ValueKind.sint):
            return int(self.value)
        if self.kind in (ValueKind.float, ValueKind.double):
            return float(self.value)
        return str(self.value)


Property: TypeAlias = tuple[str, PropertyValue]


@dataclass(frozen=True)
class TileRef:
    """
    One caller-supplied tile: address plus the encoded (possibly gzipped) payload.
    """

    z: int
    x: int
    y: int
    buffer: bytes | bytearray | memoryview


@dataclass(frozen=True)
class TileLayer:
    """
    One parsed layer; `source` is the protobuf layer, `decoder` the TileData that owns it.
    """

    name: str
    extent: int
    source: Any
    decoder: Any


@dataclass(frozen=True)
class TileFeature:
    """
    A feature as seen while scanning one layer.

    `source` is the protobuf feature inside the current tile's decode buffer and is
    only valid for the scan. Properties are read from it on demand.
    """

    layer: str
    kind: GeometryKind
    id: int | None
    geometry: BaseGeometry
    source: Any
