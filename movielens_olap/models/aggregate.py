"""
Aggregate data model.

Dimension selectors (BucketKey) and the (bucket, movie) -> (sum, count)
mapping produced by the aggregator and combined by the merger.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from movielens_olap.models.user import Gender


class AgeBucket(Enum):
    """Fixed age groups: <18, 18-29, 30+."""
    UNDER_18 = "Under18"
    AGE_18_TO_29 = "18to29"
    AGE_30_PLUS = "30Plus"

    @classmethod
    def for_age(cls, age: int) -> "AgeBucket":
        if age < 18:
            return cls.UNDER_18
        if age < 30:
            return cls.AGE_18_TO_29
        return cls.AGE_30_PLUS


OVERALL = "overall"
GENDER = "gender"
GENRE = "genre"
AGE = "age"

_GENDER_LABELS = {Gender.MALE: "Male", Gender.FEMALE: "Female"}


@dataclass(frozen=True)
class BucketKey:
    """
    A dimension selector.

    One of: Overall, Gender=Male, Gender=Female, Genre=<g>, AgeBucket=<b>.
    Hashable so it can key the aggregate mapping.
    """
    dimension: str
    value: Optional[str] = None

    @classmethod
    def overall(cls) -> "BucketKey":
        return cls(OVERALL)

    @classmethod
    def gender(cls, gender: Gender) -> "BucketKey":
        if gender not in _GENDER_LABELS:
            raise ValueError(f"No gender bucket for {gender}")
        return cls(GENDER, _GENDER_LABELS[gender])

    @classmethod
    def genre(cls, genre: str) -> "BucketKey":
        return cls(GENRE, genre)

    @classmethod
    def age(cls, bucket: AgeBucket) -> "BucketKey":
        return cls(AGE, bucket.value)

    @property
    def label(self) -> str:
        """Human-readable form, e.g. 'Genre=Action'."""
        if self.dimension == OVERALL:
            return "Overall"
        prefix = {GENDER: "Gender", GENRE: "Genre", AGE: "AgeBucket"}[self.dimension]
        return f"{prefix}={self.value}"


def all_bucket_keys(target_genres: Iterable[str]) -> List[BucketKey]:
    """Enumerate every bucket a rating can contribute to, in report order."""
    keys = [
        BucketKey.overall(),
        BucketKey.gender(Gender.MALE),
        BucketKey.gender(Gender.FEMALE),
    ]
    keys.extend(BucketKey.genre(g) for g in target_genres)
    keys.extend(BucketKey.age(b) for b in AgeBucket)
    return keys


@dataclass(frozen=True)
class Totals:
    """Cumulative score sum and rating count for one (bucket, movie) pair."""
    sum: int = 0
    count: int = 0

    def plus(self, other: "Totals") -> "Totals":
        return Totals(self.sum + other.sum, self.count + other.count)

    @property
    def average(self) -> float:
        return self.sum / self.count if self.count else 0.0


class Aggregate:
    """
    Mapping from (BucketKey, movie_id) to Totals.

    Invariant: every stored pair has count >= 1 and an exact sum.
    A pair that is absent has count 0. Instances are owned by a single
    worker while being filled; nothing here is synchronized.
    """

    def __init__(self):
        self._totals: Dict[BucketKey, Dict[int, Totals]] = {}

    def add(self, bucket: BucketKey, movie_id: int, score: int) -> None:
        """Record one rating: sum += score, count += 1."""
        self.add_totals(bucket, movie_id, Totals(score, 1))

    def add_totals(self, bucket: BucketKey, movie_id: int, totals: Totals) -> None:
        """Fold an existing (sum, count) pair into this aggregate."""
        if totals.count < 1:
            return
        per_movie = self._totals.setdefault(bucket, {})
        current = per_movie.get(movie_id)
        per_movie[movie_id] = totals if current is None else current.plus(totals)

    def get(self, bucket: BucketKey, movie_id: int) -> Optional[Totals]:
        """Return totals for a pair, or None if no rating contributed."""
        return self._totals.get(bucket, {}).get(movie_id)

    def for_bucket(self, bucket: BucketKey) -> Dict[int, Totals]:
        """Return a copy of the movie_id -> Totals map for one bucket."""
        return dict(self._totals.get(bucket, {}))

    def items(self) -> Iterator[Tuple[Tuple[BucketKey, int], Totals]]:
        for bucket, per_movie in self._totals.items():
            for movie_id, totals in per_movie.items():
                yield (bucket, movie_id), totals

    def __len__(self) -> int:
        return sum(len(per_movie) for per_movie in self._totals.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Aggregate):
            return NotImplemented
        return self._totals == other._totals

    def __repr__(self) -> str:
        return f"Aggregate(buckets={len(self._totals)}, pairs={len(self)})"
