"""
Run configuration model.

Validated, explicit configuration threaded through the scheduler,
ranking stage and report sink.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

import config.settings as settings
from movielens_olap.errors import InvalidConfig

_CANONICAL_GENRES = {g.lower(): g for g in settings.GENRES_ORDER}


def canonical_genre(genre: str) -> str:
    """Map a genre name to its GENRES_ORDER spelling; unknown names are kept."""
    genre = genre.strip()
    return _CANONICAL_GENRES.get(genre.lower(), genre)


@dataclass(frozen=True)
class RunConfig:
    """
    Options for a single pipeline run.

    Out-of-range values raise InvalidConfig on construction.
    """
    chunk_size: int = settings.DEFAULT_CHUNK_SIZE
    min_ratings_threshold: int = settings.MIN_RATINGS_THRESHOLD
    target_genres: Tuple[str, ...] = field(default=settings.TARGET_GENRES)
    concurrent: bool = settings.CONCURRENT
    top_n: int = settings.TOP_N
    max_workers: Optional[int] = settings.MAX_WORKERS

    def __post_init__(self):
        # Keep genre order stable for report naming; known genres take
        # their u.item spelling whatever case they were given in
        object.__setattr__(
            self,
            "target_genres",
            tuple(canonical_genre(g) for g in self.target_genres)
        )

        if self.chunk_size <= 0:
            raise InvalidConfig(f"chunk_size must be positive, got {self.chunk_size}")
        if self.min_ratings_threshold <= 0:
            raise InvalidConfig(
                f"min_ratings_threshold must be positive, got {self.min_ratings_threshold}"
            )
        if self.top_n <= 0:
            raise InvalidConfig(f"top_n must be positive, got {self.top_n}")
        if self.max_workers is not None and self.max_workers <= 0:
            raise InvalidConfig(f"max_workers must be positive, got {self.max_workers}")
        if not self.target_genres:
            raise InvalidConfig("target_genres must not be empty")
        if len(set(self.target_genres)) != len(self.target_genres):
            raise InvalidConfig(f"Duplicate target genres: {self.target_genres}")

    @classmethod
    def from_settings(cls, **overrides) -> "RunConfig":
        """Build from config.settings, ignoring overrides that are None."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return cls(**values)

    def with_mode(self, concurrent: bool) -> "RunConfig":
        return replace(self, concurrent=concurrent)
