# src/species_fetch/output_manager.py
"""
Output handling: FASTA result files and the per-run summary CSV.
"""

import csv
import time
from pathlib import Path

from .core import PersistenceError, logger, make_out_dir
from .models import FetchOutcome, FetchResult
from .parsing import output_file_name


class OutputManager:
    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.summary_path = self.output_dir / "fetch_summary.csv"

        make_out_dir(self.output_dir)
        self._setup_files()

    # Initialise summary csv header
    def _setup_files(self):
        if not self.summary_path.exists():
            with open(self.summary_path, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(["species", "gene", "status", "path", "detail", "timestamp"])

    def result_path(self, result: FetchResult) -> Path:
        return self.output_dir / output_file_name(result.query)

    # Write the whole payload, replacing any earlier file for this species/gene
    def write_result(self, result: FetchResult) -> Path:
        path = self.result_path(result)
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(result.payload)
        except OSError as e:
            raise PersistenceError(path, e) from e
        return path

    # Record the outcome of one species in the summary csv. A failed write is
    # logged and does not stop the batch
    def log_outcome(self, outcome: FetchOutcome) -> bool:
        try:
            with open(self.summary_path, "a", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(
                    [
                        outcome.query.species,
                        outcome.query.gene,
                        outcome.status.value,
                        str(outcome.path) if outcome.path else "",
                        "" if outcome.path else outcome.detail,
                        time.strftime("%Y-%m-%d %H:%M:%S"),
                    ]
                )
        except OSError as e:
            logger.error(
                f"Error recording outcome for species {outcome.query.species} "
                f"in {self.summary_path}: {e}"
            )
            return False
        return True
