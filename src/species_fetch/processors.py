# src/species_fetch/processors.py
"""
Batch drivers: walk a list of species and run the fetcher for each one.
"""

from collections import Counter
from pathlib import Path
from typing import Iterable, Iterator, List

from .core import log_progress, logger
from .models import FetchOutcome, FetchStatus, Query
from .output_manager import OutputManager
from .sequence_fetcher import SequenceFetcher


# Yield trimmed species names, skipping blank lines
def read_species_file(path: Path) -> Iterator[str]:
    with open(path, encoding="utf-8-sig") as f:
        for line in f:
            species = line.strip()
            if species:
                yield species


def process_species(
    species: str,
    gene: str,
    fetcher: SequenceFetcher,
    output_manager: OutputManager,
) -> FetchOutcome:
    species = species.strip()
    logger.info(f"Processing species: {species}")
    outcome = fetcher.process(Query(species=species, gene=gene))
    output_manager.log_outcome(outcome)
    return outcome


def process_species_list(
    species_names: Iterable[str],
    gene: str,
    fetcher: SequenceFetcher,
    output_manager: OutputManager,
) -> List[FetchOutcome]:
    names = [name.strip() for name in species_names if name and name.strip()]
    total = len(names)
    outcomes = []

    log_progress(0, total)
    for i, species in enumerate(names, 1):
        logger.info("")
        logger.info(f"====== Species {i}/{total}: {species} ======")
        outcomes.append(process_species(species, gene, fetcher, output_manager))
        log_progress(i, total)

    log_summary(outcomes)
    return outcomes


def process_species_file(
    species_file: Path,
    gene: str,
    fetcher: SequenceFetcher,
    output_manager: OutputManager,
) -> List[FetchOutcome]:
    logger.info(f"Species file: {species_file}")
    return process_species_list(read_species_file(species_file), gene, fetcher, output_manager)


def log_summary(outcomes: List[FetchOutcome]) -> None:
    counts = Counter(outcome.status for outcome in outcomes)
    logger.info("")
    logger.info(
        f"Written: {counts[FetchStatus.WRITTEN]}, "
        f"no results: {counts[FetchStatus.NO_RESULTS]}, "
        f"empty payload: {counts[FetchStatus.EMPTY_PAYLOAD]}, "
        f"failed: {counts[FetchStatus.FAILED]}"
    )
    for outcome in outcomes:
        if outcome.status is FetchStatus.FAILED:
            logger.info(f"  Failed: {outcome.query.species} ({outcome.detail})")
