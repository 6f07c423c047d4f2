"""
Shared fixtures: a tiny in-memory dataset and a MovieLens-format folder.
"""

import random

import pytest

from movielens_olap.models.movie import Movie
from movielens_olap.models.rating import Rating
from movielens_olap.models.user import Gender, User
from movielens_olap.store.record_store import RecordStore


@pytest.fixture
def target_genres():
    return ("Action", "Drama", "Comedy", "Fantasy")


@pytest.fixture
def users():
    return RecordStore(
        [
            User(1, 25, Gender.MALE),
            User(2, 16, Gender.FEMALE),
        ],
        name="users"
    )


@pytest.fixture
def movies():
    return RecordStore(
        [
            Movie(10, "Alpha", frozenset({"Action"})),
            Movie(11, "Beta", frozenset({"Drama"})),
        ],
        name="movies"
    )


@pytest.fixture
def ratings():
    return [Rating(1, 10, 5), Rating(2, 10, 3), Rating(2, 11, 4)]


@pytest.fixture
def random_dataset():
    """Seeded synthetic dataset with a few orphan ratings mixed in."""
    rng = random.Random(42)
    genres = ["Action", "Drama", "Comedy", "Fantasy", "Horror", "Western"]
    gender_codes = ["M", "F", "m", "x"]

    users = RecordStore(
        [User(uid, rng.randint(7, 70), Gender.from_code(rng.choice(gender_codes)))
         for uid in range(1, 41)],
        name="users"
    )
    movies = RecordStore(
        [Movie(mid, f"Movie {mid:03d}", frozenset(rng.sample(genres, rng.randint(0, 3))))
         for mid in range(1, 31)],
        name="movies"
    )
    ratings = [
        Rating(rng.randint(1, 45), rng.randint(1, 33), rng.randint(1, 5))
        for _ in range(1000)
    ]
    return ratings, users, movies


@pytest.fixture
def movielens_dir(tmp_path):
    """Write a small dataset in MovieLens 100k file format."""
    data_dir = tmp_path / "ml-100k"
    data_dir.mkdir()

    (data_dir / "u.user").write_text(
        "1|25|M|engineer|12345\n"
        "2|16|F|student|54321\n"
        "3|40|m|writer|11111\n"
        "\n"
        "bad|line\n"
        "x|30|F|other|00000\n",
        encoding="utf-8"
    )

    # 5 leading fields + 19 genre flags (Action is index 1, Drama 8, Comedy 5)
    def flags(*indexes):
        return "|".join("1" if i in indexes else "0" for i in range(19))

    (data_dir / "u.item").write_bytes(
        (
            f"10|Alpha (1995)|01-Jan-1995||http://x|{flags(1)}\n"
            f"11|Beta (1996)|01-Jan-1996||http://x|{flags(8, 5)}\n"
            f"12|Caf\xe9 (1997)|01-Jan-1997||http://x|{flags(5)}\n"
            "13|Too short\n"
        ).encode("latin-1")
    )

    (data_dir / "u.data").write_text(
        "1\t10\t5\t881250949\n"
        "2\t10\t3\t891717742\n"
        "2\t11\t4\t878887116\n"
        "3\t12\t2\n"
        "3\t11\t5\t880606923\n"
        "1\t99\t5\t880606923\n"
        "1\t10\t9\t880606923\n"
        "oops\n"
        "1\tx\t3\t0\n",
        encoding="utf-8"
    )
    return str(data_dir)

