from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Literal

from tiles.types import GeometryKind, Property, RawValue


GeometryFilter = Literal["point", "linestring", "polygon"]

DEFAULT_LIMIT = 5
MAX_LIMIT = 1000
MAX_ZOOM = 32

# An empty result slot; anything real sorts ahead of it.
SENTINEL_DISTANCE = sys.float_info.max


@dataclass(frozen=True)
class QueryParams:
    """
    Everything one query needs besides the tiles themselves.

    - radius: meters; None means unbounded
    - layers: empty means every layer
    - geometry: None means any geometry kind
    """

    lon: float
    lat: float
    radius: float | None = None
    limit: int = DEFAULT_LIMIT
    dedupe: bool = True
    layers: frozenset[str] = frozenset()
    geometry: GeometryFilter | None = None

    def wants_layer(self, name: str) -> bool:
        return not self.layers or name in self.layers

    def wants_kind(self, kind: GeometryKind) -> bool:
        return self.geometry is None or self.geometry == kind


@dataclass(frozen=True)
class Candidate:
    """
    A feature that survived filtering and the radius cutoff.
    """

    layer: str
    kind: GeometryKind
    id: int | None
    lon: float
    lat: float
    distance: float
    properties: tuple[Property, ...] = ()


@dataclass
class ResultEntry:
    layer: str = ""
    lon: float = 0.0
    lat: float = 0.0
    distance: float = SENTINEL_DISTANCE
    kind: GeometryKind = "unknown"
    has_id: bool = False
    id: int = 0
    properties: tuple[Property, ...] = ()
    materialized: dict[str, RawValue] | None = field(default=None, repr=False)

    @property
    def filled(self) -> bool:
        return self.distance < SENTINEL_DISTANCE

    def assign(self, c: Candidate) -> None:
        self.layer = c.layer
        self.lon = c.lon
        self.lat = c.lat
        self.distance = c.distance
        self.kind = c.kind
        self.has_id = c.id is not None
        self.id = c.id if c.id is not None else 0
        self.properties = c.properties
        self.materialized = None
