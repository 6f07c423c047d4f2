"""
Report data model.

A ranked row as handed to the report sink.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ReportRow:
    rank: int  # 1-based position within the report
    movie_id: int
    title: str
    average: float
    count: int

    def to_dict(self) -> dict:
        """Convert to a dict using the CSV column names."""
        return {
            "Rank": self.rank,
            "MovieId": self.movie_id,
            "Title": self.title,
            "AverageRating": self.average,
            "RatingCount": self.count,
        }
