"""
Aggregation Scheduler.

Runs the aggregator over every chunk, sequentially or on a thread pool,
and merges the partial results.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, List, Optional, Sequence

from movielens_olap.agents.aggregation import aggregate
from movielens_olap.agents.merger import merge
from movielens_olap.agents.partitioner import partition
from movielens_olap.errors import AggregationFailed, InvalidConfig
from movielens_olap.models.aggregate import Aggregate
from movielens_olap.models.movie import Movie
from movielens_olap.models.rating import Rating
from movielens_olap.models.user import User
from movielens_olap.store.record_store import RecordStore

logger = logging.getLogger(__name__)


class AggregationScheduler:
    """
    Fan-out/fan-in over ratings chunks.

    Each chunk is aggregated into its own private Aggregate. Workers only
    read the ratings list and the record stores; the merge happens after
    every worker has finished.
    """

    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize scheduler.

        Args:
            max_workers: Thread pool cap. None means one thread per chunk.
        """
        if max_workers is not None and max_workers <= 0:
            raise InvalidConfig(f"max_workers must be positive, got {max_workers}")
        self.max_workers = max_workers

    def run(
        self,
        ratings: Sequence[Rating],
        users: RecordStore[User],
        movies: RecordStore[Movie],
        chunk_size: int,
        target_genres: Iterable[str],
        concurrent: bool
    ) -> Aggregate:
        """
        Aggregate all ratings.

        Args:
            ratings: Ordered ratings sequence
            users: User store
            movies: Movie store
            chunk_size: Ratings per chunk
            target_genres: Genres that get their own bucket
            concurrent: Process chunks on a thread pool

        Returns:
            Final merged Aggregate

        Raises:
            InvalidConfig: If chunk_size <= 0 (before any work starts)
            AggregationFailed: If any chunk fails; no partial result is returned
        """
        chunks = partition(len(ratings), chunk_size)
        target_genres = tuple(target_genres)

        if not concurrent or len(chunks) <= 1:
            logger.info(
                f"Processing {len(ratings)} ratings sequentially "
                f"({len(chunks)} chunk(s) of <= {chunk_size})"
            )
            try:
                return aggregate(ratings, (0, len(ratings)), users, movies, target_genres)
            except Exception as e:
                logger.error(f"Sequential aggregation failed: {e}")
                raise AggregationFailed(f"Aggregation failed: {e}", cause=e) from e

        partials = self._run_concurrent(ratings, chunks, users, movies, target_genres)

        logger.info(f"Merging {len(partials)} partial aggregates")
        return merge(partials)

    def _run_concurrent(
        self,
        ratings: Sequence[Rating],
        chunks: List,
        users: RecordStore[User],
        movies: RecordStore[Movie],
        target_genres: tuple
    ) -> List[Aggregate]:
        """Aggregate each chunk on its own worker and collect all results."""
        workers = self.max_workers or len(chunks)
        workers = min(workers, len(chunks))
        logger.info(
            f"Processing {len(ratings)} ratings in {len(chunks)} chunks "
            f"on {workers} worker threads"
        )

        partials = []
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="aggregate") as ex:
            futures = {
                ex.submit(self._aggregate_chunk, ratings, chunk, users, movies, target_genres): chunk
                for chunk in chunks
            }

            for fut in as_completed(futures):
                chunk = futures[fut]
                try:
                    partials.append(fut.result())
                except Exception as e:
                    logger.error(f"Chunk {chunk} failed, aborting run: {e}")
                    for pending in futures:
                        pending.cancel()
                    raise AggregationFailed(
                        f"Aggregation of chunk [{chunk[0]}, {chunk[1]}) failed: {e}",
                        cause=e
                    ) from e

        return partials

    @staticmethod
    def _aggregate_chunk(ratings, chunk, users, movies, target_genres) -> Aggregate:
        start_time = time.perf_counter()
        result = aggregate(ratings, chunk, users, movies, target_genres)
        logger.debug(
            f"Chunk [{chunk[0]}, {chunk[1]}) finished in "
            f"{time.perf_counter() - start_time:.3f}s ({len(result)} pairs)"
        )
        return result
