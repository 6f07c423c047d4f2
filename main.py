"""
MovieLens OLAP - Top-N movie reports

CLI entry point for running the aggregation pipeline.
"""

import argparse
import logging
import os
import sys

from movielens_olap.errors import AggregationFailed, InvalidConfig
from movielens_olap.models.run_config import RunConfig
from movielens_olap.orchestrator import PipelineOrchestrator
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def parse_genres(value: str):
    """Split a comma-separated genre list, dropping blanks."""
    return tuple(g.strip() for g in value.split(",") if g.strip())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MovieLens OLAP - Top-N movie rankings by gender, genre and age",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare single-thread and multi-thread runs (default)
  python main.py --data-dir ~/datasets/ml-100k

  # Concurrent run only, smaller chunks
  python main.py --data-dir ~/datasets/ml-100k --mode multi --chunk-size 5000

  # Custom genres and threshold
  python main.py --data-dir ~/datasets/ml-100k \\
                 --genres "Action,Sci-Fi,Horror" \\
                 --min-ratings 50
        """
    )

    parser.add_argument(
        "--data-dir",
        default=str(settings.DATA_ROOT),
        help=f"Folder containing u.data, u.item, u.user (default: {settings.DATA_ROOT})"
    )

    parser.add_argument(
        "--reports-dir",
        default=str(settings.REPORTS_ROOT),
        help=f"Root folder for reports (default: {settings.REPORTS_ROOT})"
    )

    parser.add_argument(
        "--mode",
        default="compare",
        choices=["single", "multi", "compare"],
        help="Run sequentially, concurrently, or both (default: compare)"
    )

    parser.add_argument(
        "--chunk-size",
        type=int,
        default=settings.DEFAULT_CHUNK_SIZE,
        help=f"Ratings per chunk (default: {settings.DEFAULT_CHUNK_SIZE})"
    )

    parser.add_argument(
        "--min-ratings",
        type=int,
        default=settings.MIN_RATINGS_THRESHOLD,
        help=f"Minimum ratings for a movie to be ranked (default: {settings.MIN_RATINGS_THRESHOLD})"
    )

    parser.add_argument(
        "--top-n",
        type=int,
        default=settings.TOP_N,
        help=f"Rows per report (default: {settings.TOP_N})"
    )

    parser.add_argument(
        "--genres",
        type=parse_genres,
        default=settings.TARGET_GENRES,
        help=f"Comma-separated target genres (default: {','.join(settings.TARGET_GENRES)})"
    )

    parser.add_argument(
        "--max-workers",
        type=int,
        default=settings.MAX_WORKERS,
        help="Worker thread cap (default: one thread per chunk)"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    if not os.path.isdir(args.data_dir):
        logger.error(f"Data folder not found: {args.data_dir}")
        sys.exit(1)

    try:
        config = RunConfig.from_settings(
            chunk_size=args.chunk_size,
            min_ratings_threshold=args.min_ratings,
            top_n=args.top_n,
            target_genres=args.genres,
            max_workers=args.max_workers,
            concurrent=(args.mode != "single")
        )
    except InvalidConfig as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    # Print banner
    print("=" * 60)
    print("MovieLens OLAP - Top-N movie reports")
    print("=" * 60)
    print(f"Data: {args.data_dir}")
    print(f"Mode: {args.mode}")
    print(f"Chunk size: {config.chunk_size}")
    print(f"Genres: {', '.join(config.target_genres)}")
    print("=" * 60)
    print()

    try:
        orchestrator = PipelineOrchestrator(
            data_root=args.data_dir,
            reports_root=args.reports_dir,
            config=config
        )

        if args.mode == "compare":
            comparison = orchestrator.compare()
            results = [comparison.single, comparison.multi]
        else:
            results = [orchestrator.run()]

        # Success
        print()
        print("=" * 60)
        for result in results:
            print(
                f"{result.mode:>6}: {len(result.report_paths)} reports, "
                f"{result.chunk_count} chunks, {result.elapsed_seconds:.2f} sec "
                f"-> {result.reports_dir}"
            )
        if args.mode == "compare":
            print(f"Identical aggregates: {comparison.identical}")
        print("=" * 60)

        logger.info("MovieLens OLAP completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        sys.exit(1)

    except (InvalidConfig, AggregationFailed) as e:
        logger.error(f"Pipeline failed: {e}")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
