"""
Record Store - immutable id-keyed collection of loaded records.

Built once at startup and never mutated; worker threads share it.
"""

import logging
from types import MappingProxyType
from typing import Dict, Generic, Iterable, Iterator, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordStore(Generic[T]):
    """
    Lookup table from integer id to record (User or Movie).

    Records are indexed by their ``id`` attribute. When the input contains
    the same id more than once, the last record wins.
    """

    def __init__(self, records: Iterable[T], name: str = "records"):
        """
        Index records by id.

        Args:
            records: Records exposing an integer ``id`` attribute
            name: Label used in log messages (e.g. "users")
        """
        index: Dict[int, T] = {}
        duplicates = 0
        for record in records:
            if record.id in index:
                duplicates += 1
            index[record.id] = record

        self.name = name
        self._records = MappingProxyType(index)

        if duplicates:
            logger.warning(f"{duplicates} duplicate {name} ids replaced by later records")
        logger.debug(f"Indexed {len(index)} {name}")

    def get(self, record_id: int) -> Optional[T]:
        """Retrieve record by id. Returns None if not found."""
        return self._records.get(record_id)

    def __contains__(self, record_id) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[int]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"RecordStore(name={self.name!r}, size={len(self)})"
