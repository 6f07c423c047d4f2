"""
Partitioner.

Splits the ratings sequence into contiguous index ranges ("chunks").
"""

import logging
from typing import List, Tuple

from movielens_olap.errors import InvalidConfig

logger = logging.getLogger(__name__)

Chunk = Tuple[int, int]  # half-open [start, end)


def chunk_count(total_count: int, chunk_size: int) -> int:
    """Number of chunks partition() will produce (ceil division)."""
    if chunk_size <= 0:
        raise InvalidConfig(f"chunk_size must be positive, got {chunk_size}")
    return (total_count + chunk_size - 1) // chunk_size


def partition(total_count: int, chunk_size: int) -> List[Chunk]:
    """
    Split [0, total_count) into ordered, non-overlapping half-open ranges.

    Args:
        total_count: Number of records to cover
        chunk_size: Maximum length of each range

    Returns:
        List of (start, end) tuples in increasing order. Every range has
        length chunk_size except possibly the last. Empty for total_count=0.

    Raises:
        InvalidConfig: If chunk_size <= 0 or total_count < 0
    """
    if chunk_size <= 0:
        raise InvalidConfig(f"chunk_size must be positive, got {chunk_size}")
    if total_count < 0:
        raise InvalidConfig(f"total_count must not be negative, got {total_count}")

    chunks = [
        (start, min(start + chunk_size, total_count))
        for start in range(0, total_count, chunk_size)
    ]

    logger.debug(f"Partitioned {total_count} records into {len(chunks)} chunks of <= {chunk_size}")
    return chunks
