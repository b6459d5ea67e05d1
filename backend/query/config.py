from __future__ import annotations

import logging
import os


def worker_count() -> int:
    raw = (os.getenv("TILEQUERY_WORKERS") or "").strip()
    if raw:
        try:
            return max(1, min(64, int(raw)))
        except Exception:
            pass
    return max(1, min(8, os.cpu_count() or 1))


def log_level() -> int:
    raw = (os.getenv("TILEQUERY_LOG_LEVEL") or "").strip().upper()
    level = logging.getLevelName(raw) if raw else None
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging() -> None:
    """
    Root logging setup for the HTTP app; library callers keep their own config.
    """
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
