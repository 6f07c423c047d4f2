"""
Rating data model.

Represents a single line of u.data.
"""

from dataclasses import dataclass


MIN_SCORE = 1
MAX_SCORE = 5


@dataclass(frozen=True)
class Rating:
    """
    One user's score for one movie.
    Position in the loaded sequence defines chunk boundaries and nothing else.
    """
    user_id: int
    movie_id: int
    score: int  # 1-5 stars
    timestamp: int = 0  # Unix seconds, unused by aggregation

    def __post_init__(self):
        # Validate score
        if not (MIN_SCORE <= self.score <= MAX_SCORE):
            raise ValueError(
                f"Invalid score: {self.score}. Must be {MIN_SCORE}-{MAX_SCORE}"
            )
