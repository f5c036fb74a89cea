"""Hash-table index of course records.

Records live in a fixed array of buckets; each bucket is a chain of
`(key, record)` entries kept in insertion order. Keys are upper-cased course
codes, so both insertion and lookup are case-insensitive. A separate list of
keys in load order backs `sorted_codes()`, which sorts on demand.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, NamedTuple

from .errors import CourseNotFoundError, CourseValidationError, LoadError, NotLoadedError, RowParseError
from .record import CourseRecord
from .sources import RawRow, parse_row

LOGGER = logging.getLogger(__name__)

BUCKET_COUNT = 17
HASH_MULTIPLIER = 31
_WORD_MASK = 0xFFFFFFFF


def normalize_code(code: str) -> str:
    return code.upper()


def bucket_for(key: str) -> int:
    """Polynomial rolling hash of `key`, wrapped to 32 bits, reduced to a bucket."""
    value = 0
    for char in key:
        value = (value * HASH_MULTIPLIER + ord(char)) & _WORD_MASK
    return value % BUCKET_COUNT


class _Entry(NamedTuple):
    key: str
    record: CourseRecord


class CourseIndex:
    """Course records keyed by normalized code, loaded in bulk and then queried."""

    def __init__(self) -> None:
        self._buckets: List[List[_Entry]] = [[] for _ in range(BUCKET_COUNT)]
        self._order: List[str] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def reset(self) -> None:
        """Drop every record and key; the index reports itself as not loaded."""
        for chain in self._buckets:
            chain.clear()
        self._order.clear()
        self._loaded = False

    def insert(self, record: CourseRecord) -> None:
        """Append `record` to the tail of its bucket's chain.

        An existing entry with the same code is kept; lookups return whichever
        was inserted first.
        """
        key = normalize_code(record.code)
        self._buckets[bucket_for(key)].append(_Entry(key, record))
        self._order.append(key)

    def bulk_load(
        self,
        rows: Iterable[RawRow],
        parse: Callable[[RawRow], CourseRecord] = parse_row,
    ) -> int:
        """Replace the index contents with the records parsed from `rows`.

        A row that fails to parse raises `LoadError` with the row's position.
        Any failure while reading or parsing resets the index, so a failed load
        never leaves partial content.
        Returns the number of records stored.
        """
        self.reset()
        try:
            for row in rows:
                try:
                    record = parse(row)
                except (RowParseError, CourseValidationError) as exc:
                    LOGGER.warning("Rejected %s %d: %s", row.label, row.position, exc)
                    raise LoadError(row.position, exc, row.label) from exc
                self.insert(record)
        except BaseException:
            self.reset()
            raise

        self._loaded = True
        LOGGER.info(
            "Indexed %d course(s) across %d buckets (longest chain %d)",
            len(self),
            BUCKET_COUNT,
            max(self.chain_lengths()),
        )
        return len(self)

    def get(self, code: str) -> CourseRecord:
        """Return the first record stored under `code`, ignoring case."""
        self._require_loaded()
        key = normalize_code(code)
        for entry in self._buckets[bucket_for(key)]:
            if entry.key == key:
                return entry.record
        raise CourseNotFoundError(code)

    def sorted_codes(self) -> List[str]:
        """All stored keys in lexicographic order. Re-sorted on every call."""
        self._require_loaded()
        return sorted(self._order)

    def records(self) -> List[CourseRecord]:
        """Every stored record ordered by code; duplicates keep load order."""
        self._require_loaded()
        entries = [entry for chain in self._buckets for entry in chain]
        entries.sort(key=lambda entry: entry.key)
        return [entry.record for entry in entries]

    def chain_lengths(self) -> List[int]:
        return [len(chain) for chain in self._buckets]

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise NotLoadedError()

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, code: object) -> bool:
        if not isinstance(code, str):
            return False
        key = normalize_code(code)
        return any(entry.key == key for entry in self._buckets[bucket_for(key)])

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"CourseIndex(size={len(self)}, loaded={self._loaded})"
