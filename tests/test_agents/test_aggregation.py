"""
Unit tests for the Rating Aggregator.
"""

import pytest

from movielens_olap.agents.aggregation import aggregate
from movielens_olap.agents.ingestion import MovieLensIngestionAgent
from movielens_olap.agents.merger import merge
from movielens_olap.errors import InvalidConfig
from movielens_olap.models.aggregate import AgeBucket, BucketKey, Totals
from movielens_olap.models.movie import Movie
from movielens_olap.models.rating import Rating
from movielens_olap.models.user import Gender, User
from movielens_olap.store.record_store import RecordStore


def test_worked_example(ratings, users, movies, target_genres):
    """Every bucket of the three-rating example."""
    result = aggregate(ratings, (0, 3), users, movies, target_genres)

    assert result.get(BucketKey.overall(), 10) == Totals(8, 2)
    assert result.get(BucketKey.overall(), 11) == Totals(4, 1)
    assert result.get(BucketKey.gender(Gender.MALE), 10) == Totals(5, 1)
    assert result.get(BucketKey.gender(Gender.MALE), 11) is None
    assert result.get(BucketKey.gender(Gender.FEMALE), 10) == Totals(3, 1)
    assert result.get(BucketKey.gender(Gender.FEMALE), 11) == Totals(4, 1)
    assert result.get(BucketKey.genre("Action"), 10) == Totals(8, 2)
    assert result.get(BucketKey.genre("Drama"), 11) == Totals(4, 1)
    assert result.get(BucketKey.age(AgeBucket.UNDER_18), 10) == Totals(3, 1)
    assert result.get(BucketKey.age(AgeBucket.UNDER_18), 11) == Totals(4, 1)
    assert result.get(BucketKey.age(AgeBucket.AGE_18_TO_29), 10) == Totals(5, 1)
    assert result.get(BucketKey.age(AgeBucket.AGE_30_PLUS), 10) is None


def test_target_genres_match_any_letter_case(movielens_dir):
    """Lower-case target genres still pick up movies flagged in u.item."""
    agent = MovieLensIngestionAgent(movielens_dir)
    users = RecordStore(agent.load_users())
    movies = RecordStore(agent.load_movies())
    ratings = agent.load_ratings()

    result = aggregate(ratings, (0, len(ratings)), users, movies, ("action", "COMEDY"))

    assert result.for_bucket(BucketKey.genre("action")) == {10: Totals(8, 2)}
    assert result.for_bucket(BucketKey.genre("COMEDY")) == {11: Totals(9, 2), 12: Totals(2, 1)}


def test_only_requested_range_is_processed(ratings, users, movies, target_genres):
    result = aggregate(ratings, (1, 2), users, movies, target_genres)

    assert result.get(BucketKey.overall(), 10) == Totals(3, 1)
    assert result.get(BucketKey.overall(), 11) is None


def test_empty_range_gives_empty_aggregate(ratings, users, movies, target_genres):
    result = aggregate(ratings, (2, 2), users, movies, target_genres)
    assert len(result) == 0


def test_orphan_references_are_skipped(users, movies, target_genres):
    """Ratings with unknown user or movie contribute nowhere and do not raise."""
    ratings = [Rating(1, 10, 4), Rating(99, 10, 5), Rating(1, 999, 5)]

    result = aggregate(ratings, (0, 3), users, movies, target_genres)

    assert result.get(BucketKey.overall(), 10) == Totals(4, 1)
    assert all(movie_id != 999 for (_, movie_id), _ in result.items())
    assert all(totals.count == 1 for _, totals in result.items())
    # Overall, Gender=Male, Genre=Action, AgeBucket=18to29
    assert len(result) == 4


def test_unknown_gender_contributes_to_no_gender_bucket(movies, target_genres):
    users = RecordStore([User(1, 40, Gender.from_code("x"))])
    result = aggregate([Rating(1, 10, 2)], (0, 1), users, movies, target_genres)

    assert result.get(BucketKey.overall(), 10) == Totals(2, 1)
    assert result.get(BucketKey.gender(Gender.MALE), 10) is None
    assert result.get(BucketKey.gender(Gender.FEMALE), 10) is None


def test_gender_codes_are_case_insensitive():
    assert Gender.from_code("m") is Gender.MALE
    assert Gender.from_code("F") is Gender.FEMALE
    assert Gender.from_code(" f ") is Gender.FEMALE
    assert Gender.from_code("") is Gender.UNKNOWN
    assert Gender.from_code(None) is Gender.UNKNOWN


def test_movie_in_several_target_genres(users, target_genres):
    movies = RecordStore([Movie(10, "Multi", frozenset({"Action", "Comedy", "Horror"}))])
    result = aggregate([Rating(1, 10, 4)], (0, 1), users, movies, target_genres)

    assert result.get(BucketKey.genre("Action"), 10) == Totals(4, 1)
    assert result.get(BucketKey.genre("Comedy"), 10) == Totals(4, 1)
    assert result.get(BucketKey.genre("Drama"), 10) is None
    assert BucketKey.genre("Horror") not in result.buckets()


@pytest.mark.parametrize("age,bucket", [
    (0, AgeBucket.UNDER_18),
    (17, AgeBucket.UNDER_18),
    (18, AgeBucket.AGE_18_TO_29),
    (29, AgeBucket.AGE_18_TO_29),
    (30, AgeBucket.AGE_30_PLUS),
    (73, AgeBucket.AGE_30_PLUS),
])
def test_age_bucket_boundaries(age, bucket, movies, target_genres):
    users = RecordStore([User(1, age, Gender.MALE)])
    result = aggregate([Rating(1, 10, 3)], (0, 1), users, movies, target_genres)

    age_buckets = [b for b in result.buckets() if b.dimension == "age"]
    assert age_buckets == [BucketKey.age(bucket)]


@pytest.mark.parametrize("chunk", [(-1, 2), (2, 1), (0, 4)])
def test_chunk_outside_ratings_rejected(chunk, ratings, users, movies, target_genres):
    with pytest.raises(InvalidConfig):
        aggregate(ratings, chunk, users, movies, target_genres)


def test_split_composition_matches_whole(random_dataset, target_genres):
    """aggregate(0, n) == merge(aggregate(0, k), aggregate(k, n)) for any k."""
    ratings, users, movies = random_dataset
    n = len(ratings)
    whole = aggregate(ratings, (0, n), users, movies, target_genres)

    for k in (0, 1, 333, n - 1, n):
        left = aggregate(ratings, (0, k), users, movies, target_genres)
        right = aggregate(ratings, (k, n), users, movies, target_genres)
        assert merge([left, right]) == whole


def test_aggregate_is_deterministic(random_dataset, target_genres):
    ratings, users, movies = random_dataset
    first = aggregate(ratings, (0, len(ratings)), users, movies, target_genres)
    second = aggregate(ratings, (0, len(ratings)), users, movies, target_genres)
    assert first == second
    assert first is not second


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
