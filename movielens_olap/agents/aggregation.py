"""
Rating Aggregator.

Computes the multi-dimensional (sum, count) aggregate for one chunk of
the ratings sequence.
"""

import logging
from typing import Iterable, Sequence

from movielens_olap.agents.partitioner import Chunk
from movielens_olap.errors import InvalidConfig
from movielens_olap.models.aggregate import Aggregate, AgeBucket, BucketKey
from movielens_olap.models.movie import Movie
from movielens_olap.models.rating import Rating
from movielens_olap.models.user import Gender, User
from movielens_olap.store.record_store import RecordStore

logger = logging.getLogger(__name__)

_OVERALL = BucketKey.overall()
_GENDER_BUCKETS = {
    Gender.MALE: BucketKey.gender(Gender.MALE),
    Gender.FEMALE: BucketKey.gender(Gender.FEMALE),
}
_AGE_BUCKETS = {bucket: BucketKey.age(bucket) for bucket in AgeBucket}


def aggregate(
    ratings: Sequence[Rating],
    chunk: Chunk,
    users: RecordStore[User],
    movies: RecordStore[Movie],
    target_genres: Iterable[str]
) -> Aggregate:
    """
    Aggregate ratings[start:end] into a fresh Aggregate.

    Every rating whose user and movie both exist contributes to:
    - Overall
    - Gender=Male or Gender=Female (unknown genders contribute to neither)
    - Genre=g for each target genre the movie carries (any letter case)
    - exactly one age bucket

    Ratings referencing an unknown user or movie are skipped silently.
    Reads only its inputs and writes only the returned Aggregate.

    Args:
        ratings: Full ordered ratings sequence
        chunk: Half-open (start, end) index range to process
        users: User store
        movies: Movie store
        target_genres: Genres that get their own bucket

    Returns:
        Aggregate for the chunk

    Raises:
        InvalidConfig: If the chunk lies outside the ratings sequence
    """
    start, end = chunk
    if start < 0 or end < start or end > len(ratings):
        raise InvalidConfig(
            f"Chunk ({start}, {end}) outside ratings range [0, {len(ratings)}]"
        )

    genre_buckets = [(g, BucketKey.genre(g)) for g in target_genres]
    result = Aggregate()
    orphans = 0

    for index in range(start, end):
        rating = ratings[index]
        user = users.get(rating.user_id)
        movie = movies.get(rating.movie_id)
        if user is None or movie is None:
            orphans += 1
            continue

        movie_id = rating.movie_id
        score = rating.score

        result.add(_OVERALL, movie_id, score)

        gender_bucket = _GENDER_BUCKETS.get(user.gender)
        if gender_bucket is not None:
            result.add(gender_bucket, movie_id, score)

        for genre, bucket in genre_buckets:
            if movie.has_genre(genre):
                result.add(bucket, movie_id, score)

        result.add(_AGE_BUCKETS[AgeBucket.for_age(user.age)], movie_id, score)

    if orphans:
        logger.debug(f"Chunk ({start}, {end}): skipped {orphans} ratings with unknown user/movie")

    return result
