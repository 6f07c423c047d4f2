"""
Ingestion Agent.

Loads users, movies and ratings from the MovieLens 100k flat files.
Malformed lines are skipped rather than failing the whole load.
"""

import csv
import logging
import os
from typing import List, Sequence, Tuple

import pandas as pd

import config.settings as settings
from movielens_olap.models.movie import Movie
from movielens_olap.models.rating import MAX_SCORE, MIN_SCORE, Rating
from movielens_olap.models.user import Gender, User

logger = logging.getLogger(__name__)

USER_COLUMNS = ["user_id", "age", "gender", "occupation", "zip_code"]
MOVIE_COLUMNS = ["movie_id", "title", "release_date", "video_release_date", "imdb_url"]
RATING_COLUMNS = ["user_id", "movie_id", "score", "timestamp"]


def _to_int(column: pd.Series) -> pd.Series:
    """Numeric view of a text column; non-integers become NaN."""
    values = pd.to_numeric(column.str.strip(), errors="coerce")
    return values.where(values == values.round())


class MovieLensIngestionAgent:
    """
    Reads the three MovieLens 100k data files.

    File formats:
    - u.user: user id | age | gender | occupation | zip code
    - u.item: movie id | title | release date | video release date |
              IMDb URL | 19 genre flags (0/1)
    - u.data: user id <TAB> movie id <TAB> score <TAB> timestamp
    """

    def __init__(
        self,
        data_dir: str,
        genres_order: Tuple[str, ...] = settings.GENRES_ORDER
    ):
        """
        Initialize ingestion agent.

        Args:
            data_dir: Folder containing u.user, u.item and u.data
            genres_order: Genre names in u.item flag order
        """
        self.data_dir = str(data_dir)
        self.genres_order = tuple(genres_order)

        logger.info(f"Initialized MovieLensIngestionAgent with data_dir={self.data_dir}")

    def load_users(self) -> List[User]:
        """
        Load users from u.user.

        Lines without a gender field or with a non-numeric id are skipped.
        An unparsable age is recorded as 0.
        """
        df = self._read_table(settings.USERS_FILE, "|", USER_COLUMNS)

        user_ids = _to_int(df["user_id"])
        valid = user_ids.notna() & df["gender"].notna()
        ages = _to_int(df["age"]).fillna(0)

        users = [
            User(id=int(user_id), age=int(age), gender=Gender.from_code(gender))
            for user_id, age, gender in zip(
                user_ids[valid], ages[valid], df.loc[valid, "gender"]
            )
        ]

        self._log_loaded("users", len(users), int((~valid).sum()))
        return users

    def load_movies(self) -> List[Movie]:
        """
        Load movies from u.item.

        Genre flags start at field 5; a flag of "1" tags the movie with
        the genre at the same position in genres_order. Lines that stop
        before the first flag and non-numeric ids are skipped.
        """
        flag_columns = [f"flag_{i}" for i in range(len(self.genres_order))]
        df = self._read_table(
            settings.MOVIES_FILE,
            "|",
            MOVIE_COLUMNS + flag_columns,
            encoding=settings.MOVIES_ENCODING
        )

        movie_ids = _to_int(df["movie_id"])
        valid = movie_ids.notna()
        if flag_columns:
            valid &= df[flag_columns[0]].notna()

        flags = df.loc[valid, flag_columns].apply(lambda col: col.str.strip() == "1")
        titles = df.loc[valid, "title"].fillna("")

        movies = [
            Movie(
                id=int(movie_id),
                title=title,
                genres=frozenset(
                    genre for genre, flag in zip(self.genres_order, row) if flag
                )
            )
            for movie_id, title, row in zip(
                movie_ids[valid], titles, flags.itertuples(index=False)
            )
        ]

        self._log_loaded("movies", len(movies), int((~valid).sum()))
        return movies

    def load_ratings(self) -> List[Rating]:
        """
        Load ratings from u.data, preserving file order.

        Lines with a missing or non-numeric user, movie or score, or a
        score outside 1-5, are skipped. A missing timestamp becomes 0.
        """
        df = self._read_table(settings.RATINGS_FILE, "\t", RATING_COLUMNS)

        user_ids = _to_int(df["user_id"])
        movie_ids = _to_int(df["movie_id"])
        scores = _to_int(df["score"])
        timestamps = _to_int(df["timestamp"]).fillna(0)

        valid = (
            user_ids.notna()
            & movie_ids.notna()
            & scores.between(MIN_SCORE, MAX_SCORE)
        )

        ratings = [
            Rating(int(user_id), int(movie_id), int(score), int(timestamp))
            for user_id, movie_id, score, timestamp in zip(
                user_ids[valid], movie_ids[valid], scores[valid], timestamps[valid]
            )
        ]

        self._log_loaded("ratings", len(ratings), int((~valid).sum()))
        return ratings

    def _read_table(
        self,
        filename: str,
        separator: str,
        columns: Sequence[str],
        encoding: str = "utf-8"
    ) -> pd.DataFrame:
        """
        Read a data file as text columns.

        Blank lines are ignored. Short lines are padded with NaN; fields
        past the named columns are ignored.

        Returns:
            DataFrame in file order

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = os.path.join(self.data_dir, filename)
        if not os.path.exists(path):
            raise FileNotFoundError(f"MovieLens data file not found: {path}")

        return pd.read_csv(
            path,
            sep=separator,
            header=None,
            names=list(columns),
            dtype=str,
            encoding=encoding,
            encoding_errors="replace",
            engine="python",
            quoting=csv.QUOTE_NONE,
            keep_default_na=False,
            na_values=[""],
            skip_blank_lines=True,
            index_col=False
        )

    def _log_loaded(self, kind: str, loaded: int, skipped: int) -> None:
        if skipped:
            logger.warning(f"Loaded {loaded} {kind}, skipped {skipped} malformed lines")
        else:
            logger.info(f"Loaded {loaded} {kind}")
