"""
Aggregate Merger.

Combines per-chunk aggregates into one. The result does not depend on
the order of the inputs.
"""

import logging
from typing import Iterable

from movielens_olap.models.aggregate import Aggregate

logger = logging.getLogger(__name__)


def merge(partials: Iterable[Aggregate]) -> Aggregate:
    """
    Sum partial aggregates pair by pair.

    For every (bucket, movie) pair the merged sum is the sum of the
    partial sums and the merged count is the sum of the partial counts.
    Inputs are not modified.

    Args:
        partials: Aggregates in any order (may be empty)

    Returns:
        New merged Aggregate (empty when no partials are given)
    """
    merged = Aggregate()
    merged_count = 0

    for partial in partials:
        for (bucket, movie_id), totals in partial.items():
            merged.add_totals(bucket, movie_id, totals)
        merged_count += 1

    logger.debug(f"Merged {merged_count} partial aggregates into {len(merged)} pairs")
    return merged
