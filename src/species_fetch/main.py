# src/species_fetch/main.py
"""
Command-line interface for Species Fetch.
Provides the entry point and argument parser for the Species Fetch tool.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .core import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_OUTPUT_DIR,
    Config,
    load_config_file,
    logger,
    make_out_dir,
    setup_logging,
)
from .entrez_handler import EntrezHandler
from .output_manager import OutputManager
from .processors import process_species, process_species_file
from .rate_gate import RateGate
from .sequence_fetcher import SequenceFetcher


def setup_argument_parser():
    parser = argparse.ArgumentParser(
        description="Fetch FASTA sequences of a gene region for one or more "
        "species from the NCBI nucleotide database."
    )

    parser.add_argument(
        "--gene",
        "-g",
        help="Gene region to search for (e.g., rbcL or matK). Required unless "
        "set in the config file",
    )

    # Create mutually exclusive group for species input
    input_group = parser.add_mutually_exclusive_group()
    input_group.add_argument(
        "--species",
        "-s",
        type=str,
        help='Single species name (e.g., "Quercus robur")',
    )
    input_group.add_argument(
        "--species-file",
        "-f",
        dest="species_file",
        help="Path to a text file with one species name per line",
    )

    parser.add_argument(
        "--out",
        "-o",
        dest="output_dir",
        help=f"Directory to store output files (default: {DEFAULT_OUTPUT_DIR})",
    )

    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help=f"JSON configuration file (default: {DEFAULT_CONFIG_FILE} if present)",
    )

    parser.add_argument(
        "--email",
        "-e",
        type=str,
        help="Email to identify yourself to NCBI (optional)",
    )

    parser.add_argument(
        "--api-key",
        "-k",
        type=str,
        help="NCBI API key (optional)",
    )

    return parser


# Merge config file values with command-line overrides
def resolve_config(args) -> Config:
    config_path = Path(args.config or DEFAULT_CONFIG_FILE)
    settings = load_config_file(config_path, required=args.config is not None)

    gene = args.gene or settings.get("gene")
    output_dir = args.output_dir or settings.get("output_dir") or DEFAULT_OUTPUT_DIR

    species = None
    if args.species is not None:
        species = args.species.strip()
        if not species:
            raise ValueError("Species name (-s) must not be blank.")

    # A species given on the command line takes precedence over a configured file
    if args.species_file:
        species_file = args.species_file
    elif species:
        species_file = None
    else:
        species_file = settings.get("species_file")

    if not species_file and not species:
        raise ValueError("Either species name (-s) or species file (-f) must be provided.")

    return Config(
        gene=gene,
        output_dir=Path(output_dir),
        species_file=species_file,
        species=species,
        email=args.email,
        api_key=args.api_key,
    )


def main(argv: Optional[List[str]] = None):
    print("======   Starting Species Fetch   ======")
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except ValueError as e:
        print(f"ERROR: {e}")
        parser.print_usage()
        sys.exit(1)

    if config.species_file is not None and not config.species_file.is_file():
        print(f"ERROR: Species file not found: {config.species_file}")
        sys.exit(1)

    # Setup output directory and logging
    try:
        make_out_dir(config.output_dir)
    except OSError as e:
        print(f"Error creating output directory: {e}")
        sys.exit(1)
    setup_logging(config.output_dir)

    logger.info(f"Gene region: {config.gene}")
    logger.info(f"Output directory: {config.output_dir}")
    if not config.email:
        logger.warning("No email supplied (-e/--email); NCBI asks that requests identify the user")

    # One gate for the whole run, consulted before every remote call
    gate = RateGate(config.calls_per_second)
    entrez = EntrezHandler(config, gate)
    output_manager = OutputManager(config.output_dir)
    fetcher = SequenceFetcher(entrez, output_manager)

    if config.species_file is not None:
        try:
            process_species_file(config.species_file, config.gene, fetcher, output_manager)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading species file '{config.species_file}': {e}")
            sys.exit(1)
    else:
        process_species(config.species, config.gene, fetcher, output_manager)

    logger.info(f"Remote calls made: {entrez.calls_made}")
    logger.info("Processing completed.")


if __name__ == "__main__":
    main()
