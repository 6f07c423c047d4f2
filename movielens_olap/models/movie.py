"""
Movie data model.
"""

from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True)
class Movie:
    """
    A rated movie with its genre tags.
    Genres are not mutually exclusive and match case-insensitively.
    """
    id: int
    title: str
    genres: FrozenSet[str] = field(default_factory=frozenset)
    _genre_keys: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Accept any iterable of tags but always store a frozenset
        if not isinstance(self.genres, frozenset):
            object.__setattr__(self, "genres", frozenset(self.genres))
        object.__setattr__(self, "_genre_keys", frozenset(g.lower() for g in self.genres))

    def has_genre(self, genre: str) -> bool:
        return genre.lower() in self._genre_keys
