# src/species_fetch/parsing.py
"""
Helpers for building ESearch terms, reading the session tags out of raw
ESearch responses and turning species names into file names.
"""

import re
from typing import Optional

from .core import ProtocolError
from .models import Query, SearchSession


# Tags are pulled straight from the response text, first occurrence wins.
# The top-level <Count> precedes the per-term counts in the TranslationStack
WEB_ENV_RE = re.compile(r"<WebEnv>(\S+)</WebEnv>")
QUERY_KEY_RE = re.compile(r"<QueryKey>(\d+)</QueryKey>")
COUNT_RE = re.compile(r"<Count>(.*?)</Count>", re.DOTALL)
ERROR_RE = re.compile(r"<ERROR>(.*?)</ERROR>", re.DOTALL)

INVALID_FILENAME_CHARS_RE = re.compile(r"[^a-zA-Z0-9\-_]+")
TRAILING_INVALID_CHARS_RE = re.compile(r"[^a-zA-Z0-9\-_]+$")

# Exclude complete genomes and unverified sequences
SEARCH_FILTERS = "NOT complete genome[Title] NOT unverified[Title]"


def build_search_term(query: Query) -> str:
    return f"{query.species}[Organism] AND {query.gene}[Gene] {SEARCH_FILTERS}"


def _find_tag(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    if match is None:
        return None
    return match.group(1)


def parse_search_response(text: str) -> SearchSession:
    """Extract WebEnv, QueryKey and Count from a raw ESearch response.

    Each tag is looked up independently, so their order in the response does
    not matter. A missing tag raises ProtocolError naming it; any <ERROR>
    message from NCBI is carried along as detail.
    """
    server_error = _find_tag(ERROR_RE, text) or ""
    server_error = server_error.strip()

    web_env = _find_tag(WEB_ENV_RE, text)
    if web_env is None:
        raise ProtocolError("webEnv", server_error)

    query_key = _find_tag(QUERY_KEY_RE, text)
    if query_key is None:
        raise ProtocolError("queryKey", server_error)

    count = _find_tag(COUNT_RE, text)
    if count is None:
        raise ProtocolError("count", server_error)

    return SearchSession(web_env=web_env, query_key=query_key, count=count)


# Replace each run of characters outside [A-Za-z0-9_-] with one underscore.
# A trailing run is dropped, the separator before the gene stands in for it
def sanitize_file_name(name: str) -> str:
    name = TRAILING_INVALID_CHARS_RE.sub("", name)
    return INVALID_FILENAME_CHARS_RE.sub("_", name)


def output_file_name(query: Query) -> str:
    return f"{sanitize_file_name(query.species)}_{query.gene}.txt"
