# src/species_fetch/models.py
"""
Value types passed between the fetcher, the output manager and the driver.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Query:
    species: str
    gene: str


@dataclass(frozen=True)
class SearchSession:
    web_env: str
    query_key: str
    # Raw text of the <Count> tag, compared as text rather than parsed
    count: str

    @property
    def has_results(self) -> bool:
        return self.count != "0"


@dataclass(frozen=True)
class FetchResult:
    query: Query
    payload: str


class FetchStatus(Enum):
    WRITTEN = "written"
    NO_RESULTS = "no_results"
    EMPTY_PAYLOAD = "empty_payload"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchOutcome:
    query: Query
    status: FetchStatus
    path: Optional[Path] = None
    cause: Optional[Exception] = None

    @property
    def skipped(self) -> bool:
        return self.status in (FetchStatus.NO_RESULTS, FetchStatus.EMPTY_PAYLOAD)

    @property
    def detail(self) -> str:
        if self.cause is not None:
            return str(self.cause)
        if self.path is not None:
            return f"Results written to '{self.path}'"
        return ""
