from __future__ import annotations

from query.types import ResultEntry
from tiles.types import GeometryKind, Property


def is_duplicate(
    entry: ResultEntry,
    *,
    layer: str,
    kind: GeometryKind,
    feature_id: int | None,
    properties: tuple[Property, ...],
) -> bool:
    """
    Whether a candidate is the same real-world feature as an existing result.

    Tiles repeat features that cross their edges, and there is no stable id across
    tiles, so identity is layer + geometry kind + id (only when both sides have
    one) + the exact property sequence, order included.
    """
    if not entry.filled:
        return False
    if entry.layer != layer:
        return False
    if entry.kind != kind:
        return False
    if entry.has_id and feature_id is not None and entry.id != feature_id:
        return False
    return entry.properties == properties
