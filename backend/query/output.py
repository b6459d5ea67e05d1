from __future__ import annotations

from typing import Any

from query.results import ResultSet
from query.types import ResultEntry


def entry_to_feature(entry: ResultEntry) -> dict[str, Any]:
    props: dict[str, Any] = dict(entry.materialized or {})
    props["tilequery"] = {
        "distance": entry.distance,
        "geometry": entry.kind,
        "layer": entry.layer,
    }
    return {
        "type": "Feature",
        "id": entry.id,
        "geometry": {"type": "Point", "coordinates": [entry.lon, entry.lat]},
        "properties": props,
    }


def feature_collection(results: ResultSet) -> dict[str, Any]:
    """
    GeoJSON FeatureCollection of the filled result slots, closest first.
    """
    if not results.materialized:
        raise RuntimeError("results must be materialized before serialization")
    return {
        "type": "FeatureCollection",
        "features": [entry_to_feature(e) for e in results.filled()],
    }
