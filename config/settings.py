"""
Configuration settings for MovieLens OLAP.

Centralized configuration for the aggregation pipeline and report generation.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("MOVIELENS_DATA_DIR", str(PROJECT_ROOT / "data" / "ml-100k")))
REPORTS_ROOT = PROJECT_ROOT / "Reports"

# MovieLens 100k data files
USERS_FILE = "u.user"
MOVIES_FILE = "u.item"
RATINGS_FILE = "u.data"
MOVIES_ENCODING = "latin-1"  # u.item titles are not valid UTF-8

# Genre flag order used by u.item (19 flags starting at field 5)
GENRES_ORDER = (
    "unknown", "Action", "Adventure", "Animation", "Children's", "Comedy",
    "Crime", "Documentary", "Drama", "Fantasy", "Film-Noir", "Horror",
    "Musical", "Mystery", "Romance", "Sci-Fi", "Thriller", "War", "Western",
)

# Aggregation
DEFAULT_CHUNK_SIZE = 10000  # Ratings per unit of work
CONCURRENT = True
MAX_WORKERS = None  # None = one worker per chunk

# Ranking
MIN_RATINGS_THRESHOLD = 20  # Movies with fewer ratings in a slice are not ranked
TOP_N = 10
TARGET_GENRES = ("Action", "Drama", "Comedy", "Fantasy")

# Reports
SINGLE_REPORTS_DIR = "Single"
MULTI_REPORTS_DIR = "Multi"
REPORT_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "movielens_olap.log"
