"""
Ranking stage.

Turns the final aggregate into ordered top-N rows, one list per report.
"""

import logging
from collections import OrderedDict
from typing import Dict, List

from movielens_olap.models.aggregate import (
    GENDER,
    GENRE,
    OVERALL,
    Aggregate,
    AgeBucket,
    BucketKey,
    all_bucket_keys,
)
from movielens_olap.models.movie import Movie
from movielens_olap.models.report import ReportRow
from movielens_olap.models.run_config import RunConfig
from movielens_olap.store.record_store import RecordStore

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "<unknown>"

_AGE_REPORT_SUFFIX = {
    AgeBucket.UNDER_18.value: "Under18",
    AgeBucket.AGE_18_TO_29.value: "18to29",
    AgeBucket.AGE_30_PLUS.value: "30plus",
}


def _report_suffix(bucket: BucketKey) -> str:
    if bucket.dimension == OVERALL:
        return "General"
    if bucket.dimension == GENDER:
        return bucket.value
    if bucket.dimension == GENRE:
        return f"Genre_{bucket.value}"
    return f"Age_{_AGE_REPORT_SUFFIX[bucket.value]}"


def rank_top_n(
    aggregate: Aggregate,
    bucket: BucketKey,
    movies: RecordStore[Movie],
    min_count: int,
    top_n: int
) -> List[ReportRow]:
    """
    Rank the movies of one bucket.

    Movies with fewer than min_count ratings in the bucket are dropped.
    The rest are ordered by average descending, then count descending,
    then title ascending (case-sensitive), then movie id.

    Args:
        aggregate: Final merged aggregate
        bucket: Dimension to rank
        movies: Movie store for title lookups
        min_count: Minimum ratings a movie needs to be ranked
        top_n: Maximum number of rows

    Returns:
        Up to top_n rows with ranks starting at 1
    """
    candidates = []
    for movie_id, totals in aggregate.for_bucket(bucket).items():
        if totals.count < min_count:
            continue
        movie = movies.get(movie_id)
        title = movie.title if movie else UNKNOWN_TITLE
        candidates.append((movie_id, title, totals.average, totals.count))

    candidates.sort(key=lambda c: (-c[2], -c[3], c[1], c[0]))

    rows = [
        ReportRow(rank=i, movie_id=movie_id, title=title, average=average, count=count)
        for i, (movie_id, title, average, count) in enumerate(candidates[:top_n], 1)
    ]

    logger.debug(
        f"Ranked {bucket.label}: {len(candidates)} movies with >= {min_count} ratings, "
        f"kept {len(rows)}"
    )
    return rows


def report_buckets(config: RunConfig) -> "OrderedDict[str, BucketKey]":
    """Map report names to the bucket each one ranks, in output order."""
    prefix = f"Top{config.top_n}"
    return OrderedDict(
        (f"{prefix}_{_report_suffix(bucket)}", bucket)
        for bucket in all_bucket_keys(config.target_genres)
    )


def build_report_set(
    aggregate: Aggregate,
    movies: RecordStore[Movie],
    config: RunConfig
) -> Dict[str, List[ReportRow]]:
    """
    Rank every configured report.

    Returns:
        Ordered mapping of report name to ranked rows
    """
    reports = OrderedDict()
    for name, bucket in report_buckets(config).items():
        reports[name] = rank_top_n(
            aggregate,
            bucket,
            movies,
            min_count=config.min_ratings_threshold,
            top_n=config.top_n
        )

    logger.info(f"Ranked {len(reports)} reports (top {config.top_n}, min {config.min_ratings_threshold} ratings)")
    return reports
