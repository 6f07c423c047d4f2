"""
Report Writer.

Persists ranked rows as timestamped CSV files plus a JSON run summary.
"""

import json
import logging
import os
import re
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

import config.settings as settings
from movielens_olap.models.report import ReportRow

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["Rank", "MovieId", "Title", "AverageRating", "RatingCount"]
METADATA_PREFIX = "run_metadata"

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_report_name(name: str) -> str:
    """Strip characters that are not valid in file names; spaces become '_'."""
    return _UNSAFE_FILENAME_CHARS.sub("", name).replace(" ", "_")


class ReportWriter:
    """
    Writes reports into one output directory (e.g. Reports/Single).
    """

    def __init__(self, output_dir: str, timestamp: Optional[str] = None):
        """
        Initialize report writer.

        Args:
            output_dir: Directory that receives the CSV files
            timestamp: Suffix for file names; defaults to the current time
        """
        self.output_dir = str(output_dir)
        self.timestamp = timestamp or datetime.now().strftime(settings.REPORT_TIMESTAMP_FORMAT)

    def write(self, report_name: str, rows: List[ReportRow]) -> str:
        """
        Save one ranked report as CSV.

        Args:
            report_name: Logical report name (e.g. "Top10_Male")
            rows: Ranked rows, already ordered

        Returns:
            Path to the written CSV file
        """
        os.makedirs(self.output_dir, exist_ok=True)
        filename = f"report_{sanitize_report_name(report_name)}_{self.timestamp}.csv"
        output_path = os.path.join(self.output_dir, filename)

        df = pd.DataFrame([row.to_dict() for row in rows], columns=REPORT_COLUMNS)
        df.to_csv(
            output_path,
            index=False,
            float_format="%.3f",
            encoding="utf-8"
        )

        logger.info(f"Saved {len(rows)} rows -> {output_path}")
        return output_path

    def write_all(self, reports: Dict[str, List[ReportRow]]) -> List[str]:
        """Save every report; returns the written paths in input order."""
        return [self.write(name, rows) for name, rows in reports.items()]

    def write_metadata(self, summary: Dict) -> str:
        """Save the run summary next to the reports."""
        os.makedirs(self.output_dir, exist_ok=True)
        metadata_path = os.path.join(self.output_dir, f"{METADATA_PREFIX}_{self.timestamp}.json")

        with open(metadata_path, "w") as f:
            json.dump(summary, f, indent=2)

        logger.info(f"Metadata saved to {metadata_path}")
        return metadata_path
