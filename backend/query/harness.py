from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import ExitStack
from typing import Any, Callable, Sequence

from query.config import worker_count
from query.driver import run_query
from query.errors import QueryValidationError
from query.output import feature_collection
from query.request import parse_request
from query.types import QueryParams
from tiles.types import TileRef

logger = logging.getLogger(__name__)

QueryCallback = Callable[[BaseException | None, dict[str, Any] | None], None]

_POOL: ThreadPoolExecutor | None = None
_POOL_LOCK = threading.RLock()


def get_pool() -> ThreadPoolExecutor:
    global _POOL
    with _POOL_LOCK:
        if _POOL is None:
            _POOL = ThreadPoolExecutor(
                max_workers=worker_count(), thread_name_prefix="tilequery"
            )
        return _POOL


def execute(tiles: Sequence[TileRef], params: QueryParams) -> dict[str, Any]:
    """
    Run one query synchronously and return its FeatureCollection.
    """
    t0 = time.perf_counter()
    results = run_query(tiles, params)
    out = feature_collection(results)
    logger.info(
        "tilequery done: tiles=%d features=%d ms=%.1f",
        len(tiles),
        len(out["features"]),
        (time.perf_counter() - t0) * 1000.0,
    )
    return out


def submit_query(
    tiles: Any, lnglat: Any, options: Any = None
) -> Future[dict[str, Any]]:
    """
    Validate the request on the calling thread, then scan on a worker thread.

    Raises QueryValidationError before anything is queued. Each tile buffer is
    pinned with a memoryview from here until the worker finishes, and the views
    are released whether the query succeeds or fails.
    """
    request = parse_request(tiles, lnglat, options)
    params = request.to_params()

    stack = ExitStack()
    try:
        refs = [
            TileRef(z=t.z, x=t.x, y=t.y, buffer=stack.enter_context(memoryview(t.buffer)))
            for t in request.tiles
        ]
    except BaseException:
        stack.close()
        raise

    def _job() -> dict[str, Any]:
        with stack:
            try:
                return execute(refs, params)
            except Exception:
                logger.exception(
                    "tilequery failed: lnglat=%s tiles=%d", (params.lon, params.lat), len(refs)
                )
                raise

    try:
        return get_pool().submit(_job)
    except BaseException:
        stack.close()
        raise


def vtquery(tiles: Any, lnglat: Any, options: Any, callback: QueryCallback) -> None:
    """
    Callback flavour of submit_query: `callback(error, result)` fires exactly once.

    Validation errors are delivered synchronously on the calling thread; scan
    results and scan errors arrive from the worker thread.
    """
    if not callable(callback):
        raise TypeError("last argument must be a callback function")

    try:
        fut = submit_query(tiles, lnglat, options)
    except QueryValidationError as exc:
        callback(exc, None)
        return

    def _done(f: Future[dict[str, Any]]) -> None:
        exc = f.exception()
        if exc is not None:
            callback(exc, None)
        else:
            callback(None, f.result())

    fut.add_done_callback(_done)
