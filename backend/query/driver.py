from __future__ import annotations

import logging
from typing import Sequence

from geo.tiles import lonlat_to_tile_point
from query.evaluate import evaluate_feature
from query.results import ResultSet
from query.types import Candidate, QueryParams
from tiles.decode import decode_tile, feature_properties, iter_features
from tiles.types import TileRef

logger = logging.getLogger(__name__)


def run_query(tiles: Sequence[TileRef], params: QueryParams) -> ResultSet:
    """
    Scan every feature of every (wanted) layer of every tile and keep the closest K.

    Tiles and layers are visited in the order given. That order matters for ties:
    among equally distant results the first one seen keeps its place, while a
    later duplicate at the same distance replaces the earlier one.
    """
    results = ResultSet(limit=params.limit, dedupe=params.dedupe)
    scanned = 0

    for tile in tiles:
        for layer in decode_tile(tile):
            if not params.wants_layer(layer.name):
                logger.debug("skipping layer %r in tile %s/%s/%s", layer.name, tile.z, tile.x, tile.y)
                continue

            query_point = lonlat_to_tile_point(
                params.lon, params.lat, layer.extent, tile.z, tile.x, tile.y
            )
            for feature in iter_features(layer):
                scanned += 1
                hit = evaluate_feature(
                    feature,
                    query_point=query_point,
                    params=params,
                    tile=tile,
                    extent=layer.extent,
                )
                if hit is None:
                    continue
                lon, lat, meters = hit
                results.consider(
                    Candidate(
                        layer=feature.layer,
                        kind=feature.kind,
                        id=feature.id,
                        lon=lon,
                        lat=lat,
                        distance=meters,
                        properties=feature_properties(layer, feature),
                    )
                )

    results.materialize()
    logger.debug("scanned %d feature(s) across %d tile(s), kept %d", scanned, len(tiles), len(results))
    return results
