"""
Basic unit tests for the Record Store.
"""

import threading

import pytest

from movielens_olap.models.movie import Movie
from movielens_olap.models.user import Gender, User
from movielens_olap.store.record_store import RecordStore


def test_lookup_by_id():
    store = RecordStore([User(1, 20, Gender.MALE), User(2, 33, Gender.FEMALE)], name="users")

    assert store.get(1).age == 20
    assert store.get(3) is None
    assert 2 in store
    assert 3 not in store
    assert len(store) == 2
    assert sorted(store) == [1, 2]


def test_duplicate_ids_last_wins():
    store = RecordStore([Movie(1, "First"), Movie(1, "Second")])

    assert len(store) == 1
    assert store.get(1).title == "Second"


def test_records_are_immutable():
    user = User(1, 20, Gender.MALE)
    with pytest.raises(AttributeError):
        user.age = 21


def test_store_does_not_alias_input_list():
    records = [Movie(1, "A")]
    store = RecordStore(records)
    records.append(Movie(2, "B"))

    assert 2 not in store


def test_concurrent_reads():
    """Many threads reading the same store see the same records."""
    store = RecordStore([Movie(i, f"M{i}") for i in range(500)])
    seen = []

    def reader():
        seen.append(sum(1 for i in range(500) if store.get(i) is not None))

    threads = [threading.Thread(target=reader) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert seen == [500] * 8


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
