from __future__ import annotations


class TilequeryError(Exception):
    """Base class for everything a query reports back to its caller."""


class QueryValidationError(TilequeryError):
    """The request was rejected before any background work was scheduled."""


class TileDecodeError(TilequeryError):
    """A tile payload could not be decompressed or decoded."""

    def __init__(self, message: str, *, z: int | None = None, x: int | None = None, y: int | None = None):
        super().__init__(message)
        self.z = z
        self.x = x
        self.y = y
