# src/species_fetch/core.py
"""
Core utilities for Species Fetch.
Holds the run configuration, logging setup, the error types raised while
fetching a species and small filesystem helpers.
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from Bio import Entrez


# Initialise logger at module level
logger = logging.getLogger("species_fetch")


# =============================================================================
# Errors
# =============================================================================
class SpeciesFetchError(Exception):
    """Base class for failures while processing a single species."""


# Network or call failure talking to NCBI
class TransportError(SpeciesFetchError):
    pass


class ProtocolError(SpeciesFetchError):
    """An expected tag was missing from the ESearch response."""

    def __init__(self, field: str, detail: str = ""):
        self.field = field
        self.detail = detail
        message = f"MissingField: {field} not found in esearch response"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


# Zero hits or a zero-length EFetch payload. Not fatal
class EmptyResult(SpeciesFetchError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class PersistenceError(SpeciesFetchError):
    def __init__(self, path: Path, error: Exception):
        self.path = path
        super().__init__(f"error writing to output file '{path}': {error}")


# =============================================================================
# Configuration
# =============================================================================
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_OUTPUT_DIR = "output"


@dataclass
class Config:
    gene: str
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    species_file: Optional[Path] = None
    species: Optional[str] = None
    email: Optional[str] = None
    api_key: Optional[str] = None

    # NCBI nucleotide collection, fixed for every search and fetch
    db: str = field(default="nucleotide", init=False)

    # Maximum number of UIDs kept on the history server per search
    retmax: int = field(default=1000, init=False)

    # Shared across every remote call in the run
    calls_per_second: float = field(default=2.0, init=False)

    def __post_init__(self):
        if not self.gene or not self.gene.strip():
            raise ValueError(
                "Gene region is required. Use -g/--gene or set 'gene' in the "
                "config file."
            )
        self.gene = self.gene.strip()
        self.output_dir = Path(self.output_dir)
        if self.species_file is not None:
            self.species_file = Path(self.species_file)

    # Point Bio.Entrez at the user's NCBI identity, if one was given
    def configure_entrez(self) -> None:
        Entrez.tool = "species_fetch"
        if self.email:
            Entrez.email = self.email
        if self.api_key:
            Entrez.api_key = self.api_key


def load_config_file(path: Path, required: bool = False) -> Dict[str, Any]:
    """Read the JSON config file.

    Returns an empty mapping when the file does not exist and was not
    explicitly requested. Only the keys ``species_file``, ``output_dir`` and
    ``gene`` are used, anything else is ignored.
    """
    path = Path(path)
    if not path.exists():
        if required:
            raise ValueError(f"Configuration file not found: {path}")
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Configuration file {path} is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a JSON object")

    settings = {}
    for key in ("species_file", "output_dir", "gene"):
        value = data.get(key)
        if value:
            settings[key] = value
    logger.debug(f"Loaded configuration from {path}: {settings}")
    return settings


# =============================================================================
# Filesystem and logging helpers
# =============================================================================
# Ensure output directory exists and create if it doesn't
def make_out_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


# Setup logging with both file and console handlers
def setup_logging(output_dir: Path) -> logging.Logger:
    make_out_dir(output_dir)

    # Clear existing handlers
    logger.handlers.clear()
    logger.setLevel(logging.INFO)

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_path = output_dir / "species_fetch.log"
    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logger.info(f"Logging initialised. Log file: {log_path}")
    return logger


# Log progress at specified intervals
def log_progress(current: int, total: int, interval: int = 10) -> None:
    if total == 0:
        return
    if current == 0:
        logger.info("")
        logger.info(f"Starting processing: 0/{total} species processed (0%)")
    elif current == total:
        logger.info(f"Processed: {total}/{total} species processed (100%)")
    elif current % interval == 0:
        percentage = (current / total) * 100
        logger.info(
            f"=====   Progress: {current}/{total} species processed "
            f"({percentage:.2f}%)"
        )
