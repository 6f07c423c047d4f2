"""
Pipeline Orchestrator.

Coordinates loading, aggregation, ranking and report writing for
sequential and concurrent runs.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

import config.settings as settings
from movielens_olap.agents.ingestion import MovieLensIngestionAgent
from movielens_olap.agents.partitioner import chunk_count
from movielens_olap.agents.ranking import build_report_set
from movielens_olap.agents.reporting import ReportWriter
from movielens_olap.agents.scheduler import AggregationScheduler
from movielens_olap.models.aggregate import Aggregate
from movielens_olap.models.movie import Movie
from movielens_olap.models.rating import Rating
from movielens_olap.models.run_config import RunConfig
from movielens_olap.models.user import User
from movielens_olap.store.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of one pipeline run."""
    mode: str  # "single" or "multi"
    aggregate: Aggregate
    report_paths: List[str]
    metadata_path: str
    chunk_count: int
    elapsed_seconds: float
    reports_dir: str


@dataclass
class ComparisonResult:
    """Sequential and concurrent runs over the same data."""
    single: RunResult
    multi: RunResult
    identical: bool = field(default=False)


class PipelineOrchestrator:
    """
    Orchestrates a MovieLens reporting run.

    Flow:
    1. Load users, movies, ratings (once per orchestrator)
    2. Aggregate ratings through the scheduler
    3. Rank every report
    4. Write reports and a metadata summary

    Nothing is written until every report has been ranked, so a failed
    run leaves no partial output behind.
    """

    def __init__(
        self,
        data_root: str,
        reports_root: str,
        config: Optional[RunConfig] = None
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            data_root: Folder containing the MovieLens 100k files
            reports_root: Root folder for Single/Multi report folders
            config: Run configuration (defaults from config.settings)
        """
        self.data_root = str(data_root)
        self.reports_root = str(reports_root)
        self.config = config or RunConfig.from_settings()

        self.ingestion_agent = MovieLensIngestionAgent(self.data_root)
        self.scheduler = AggregationScheduler(max_workers=self.config.max_workers)

        self.users: Optional[RecordStore[User]] = None
        self.movies: Optional[RecordStore[Movie]] = None
        self.ratings: Optional[List[Rating]] = None

        logger.info("Pipeline initialized successfully")

    def load(self) -> None:
        """Load the data files into record stores. No-op after the first call."""
        if self.ratings is not None:
            return

        logger.info(f"Loading data from: {self.data_root}")
        self.users = RecordStore(self.ingestion_agent.load_users(), name="users")
        self.movies = RecordStore(self.ingestion_agent.load_movies(), name="movies")
        self.ratings = self.ingestion_agent.load_ratings()

        logger.info(
            f"Loaded {len(self.users)} users, {len(self.movies)} movies, "
            f"{len(self.ratings)} ratings"
        )

    def run(self, concurrent: Optional[bool] = None) -> RunResult:
        """
        Run the pipeline once.

        Args:
            concurrent: Overrides config.concurrent when given

        Returns:
            RunResult with the final aggregate and written file paths

        Raises:
            InvalidConfig: If the configuration is unusable
            AggregationFailed: If aggregation fails (no reports are written)
        """
        config = self.config if concurrent is None else self.config.with_mode(concurrent)
        mode = "multi" if config.concurrent else "single"
        reports_dir = os.path.join(
            self.reports_root,
            settings.MULTI_REPORTS_DIR if config.concurrent else settings.SINGLE_REPORTS_DIR
        )

        self.load()
        chunks = chunk_count(len(self.ratings), config.chunk_size)
        logger.info(f"Starting {mode} run ({chunks} chunk(s) of <= {config.chunk_size})")
        start_time = time.perf_counter()

        # STAGE 1: Aggregation
        final_aggregate = self.scheduler.run(
            ratings=self.ratings,
            users=self.users,
            movies=self.movies,
            chunk_size=config.chunk_size,
            target_genres=config.target_genres,
            concurrent=config.concurrent
        )

        # STAGE 2: Ranking
        reports = build_report_set(final_aggregate, self.movies, config)

        # STAGE 3: Report writing
        writer = ReportWriter(reports_dir)
        report_paths = writer.write_all(reports)

        elapsed = time.perf_counter() - start_time
        metadata_path = writer.write_metadata(
            self._build_metadata(mode, chunks, elapsed, reports, report_paths)
        )

        logger.info(f"{mode.capitalize()} run complete in {elapsed:.2f}s. Reports folder: {reports_dir}")

        return RunResult(
            mode=mode,
            aggregate=final_aggregate,
            report_paths=report_paths,
            metadata_path=metadata_path,
            chunk_count=chunks,
            elapsed_seconds=elapsed,
            reports_dir=reports_dir
        )

    def compare(self) -> ComparisonResult:
        """
        Run sequentially, then concurrently, on the same loaded data.

        Returns:
            Both run results and whether their aggregates are identical
        """
        single = self.run(concurrent=False)
        multi = self.run(concurrent=True)
        identical = single.aggregate == multi.aggregate

        if identical:
            logger.info("Single and multi runs produced identical aggregates")
        else:
            logger.error("Single and multi runs produced DIFFERENT aggregates")

        return ComparisonResult(single=single, multi=multi, identical=identical)

    def _build_metadata(
        self,
        mode: str,
        chunk_count: int,
        elapsed: float,
        reports: Dict,
        report_paths: List[str]
    ) -> Dict:
        """Summary written next to the reports."""
        return {
            "mode": mode,
            "data_root": self.data_root,
            "chunk_size": self.config.chunk_size,
            "chunk_count": chunk_count,
            "max_workers": self.config.max_workers,
            "min_ratings_threshold": self.config.min_ratings_threshold,
            "top_n": self.config.top_n,
            "target_genres": list(self.config.target_genres),
            "records": {
                "users": len(self.users),
                "movies": len(self.movies),
                "ratings": len(self.ratings)
            },
            "reports": {
                name: {"rows": len(rows), "path": path}
                for (name, rows), path in zip(reports.items(), report_paths)
            },
            "elapsed_seconds": round(elapsed, 4),
            "generated_at": datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"
        }
