# src/species_fetch/entrez_handler.py
"""
Entrez API interactions.
Wraps Bio.Entrez ESearch/EFetch so every call passes through the shared rate
gate and returns the raw response text.
"""

from http.client import IncompleteRead
from typing import Any, Protocol
from urllib.error import HTTPError, URLError

from Bio import Entrez

from .core import Config, TransportError, logger


class Gate(Protocol):
    def acquire(self) -> None:
        ...


# Read a whole Entrez handle as text. XML replies come back as bytes,
# text/plain replies (FASTA) are already decoded by Bio.Entrez
def read_handle(handle: Any) -> str:
    try:
        data = handle.read()
    finally:
        handle.close()
    if isinstance(data, bytes):
        return data.decode("utf-8")
    return data


class EntrezHandler:
    def __init__(self, config: Config, gate: Gate):
        self.config = config
        self.gate = gate
        self.calls_made = 0
        config.configure_entrez()

    def _call(self, name: str, func, **params) -> str:
        self.gate.acquire()
        self.calls_made += 1
        logger.debug(f"Entrez {name}: {params}")
        try:
            handle = func(**params)
            return read_handle(handle)
        except HTTPError as e:
            raise TransportError(f"error making {name} request: HTTP {e.code} {e.reason}") from e
        except (URLError, IncompleteRead, OSError, RuntimeError, UnicodeDecodeError) as e:
            raise TransportError(f"error making {name} request: {e}") from e

    # Phase 1: search, keeping the result set on the NCBI history server
    def search(self, term: str) -> str:
        return self._call(
            "esearch",
            Entrez.esearch,
            db=self.config.db,
            term=term,
            usehistory="y",
            retmax=str(self.config.retmax),
        )

    # Phase 2: fetch every record of a previous search as FASTA text
    def fetch(self, web_env: str, query_key: str) -> str:
        return self._call(
            "efetch",
            Entrez.efetch,
            db=self.config.db,
            query_key=query_key,
            WebEnv=web_env,
            rettype="fasta",
            retmode="text",
        )
