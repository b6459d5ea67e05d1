from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from query.dedupe import is_duplicate
from query.types import Candidate, ResultEntry


def _by_distance(entry: ResultEntry) -> float:
    return entry.distance


@dataclass
class ResultSet:
    """
    Fixed-size top-K slots, always sorted ascending by distance.

    Empty slots carry the sentinel distance and trail the filled ones. Every
    accepted candidate overwrites a slot in place and the slots are re-sorted
    with Python's stable sort, so ties keep their previous relative order.
    """

    limit: int
    dedupe: bool = True
    entries: list[ResultEntry] = field(init=False)
    _materialized: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be 1 or greater")
        self.entries = [ResultEntry() for _ in range(self.limit)]

    @property
    def worst(self) -> ResultEntry:
        return self.entries[-1]

    def consider(self, c: Candidate) -> bool:
        """
        Offer a candidate; returns True if it was stored.

        With dedupe on, the first existing duplicate decides: the candidate replaces
        it when it is at least as close, and is dropped otherwise. Without a
        duplicate, the candidate replaces the worst slot only if strictly closer.
        """
        if self.dedupe:
            for entry in self.entries:
                if not is_duplicate(
                    entry,
                    layer=c.layer,
                    kind=c.kind,
                    feature_id=c.id,
                    properties=c.properties,
                ):
                    continue
                if c.distance <= entry.distance:
                    entry.assign(c)
                    self.entries.sort(key=_by_distance)
                    return True
                return False

        if c.distance < self.worst.distance:
            self.worst.assign(c)
            self.entries.sort(key=_by_distance)
            return True
        return False

    def filled(self) -> Iterator[ResultEntry]:
        for entry in self.entries:
            if entry.filled:
                yield entry

    def materialize(self) -> None:
        """
        Copy every stored property sequence into an owned plain mapping.

        Runs once, after the last tile was scanned and before its decode
        buffers go away. Later calls are no-ops.
        """
        if self._materialized:
            return
        for entry in self.filled():
            entry.materialized = {key: value.to_json() for key, value in entry.properties}
        self._materialized = True

    @property
    def materialized(self) -> bool:
        return self._materialized

    def __len__(self) -> int:
        return sum(1 for _ in self.filled())
