# src/species_fetch/sequence_fetcher.py
"""
Two-phase ESearch/EFetch retrieval for a single species.

The search keeps its result set on the NCBI history server and the fetch
refers back to it through the WebEnv/QueryKey pair, so the query term is only
sent once. Each phase is a separate gated call.
"""

from .core import EmptyResult, SpeciesFetchError, logger
from .entrez_handler import EntrezHandler
from .models import FetchOutcome, FetchResult, FetchStatus, Query, SearchSession
from .output_manager import OutputManager
from .parsing import build_search_term, parse_search_response


class NoResults(EmptyResult):
    pass


class EmptyPayload(EmptyResult):
    pass


class SequenceFetcher:
    def __init__(self, entrez: EntrezHandler, output_manager: OutputManager):
        self.entrez = entrez
        self.output_manager = output_manager

    def search(self, query: Query) -> SearchSession:
        term = build_search_term(query)
        logger.info(f"Searching nucleotide database: {term}")
        session = parse_search_response(self.entrez.search(term))

        if not session.has_results:
            raise NoResults(
                f"No records found for species '{query.species}' and gene '{query.gene}'"
            )
        logger.info(f"Search returned {session.count} record(s) (QueryKey {session.query_key})")
        return session

    def fetch(self, query: Query, session: SearchSession) -> FetchResult:
        payload = self.entrez.fetch(session.web_env, session.query_key)
        if len(payload) == 0:
            raise EmptyPayload(
                f"No FASTA sequences found for species '{query.species}' and gene '{query.gene}'"
            )
        return FetchResult(query=query, payload=payload)

    def process(self, query: Query) -> FetchOutcome:
        """Search, fetch and persist one species.

        Never raises for per-species failures: every error is turned into a
        FetchOutcome so the caller can move on to the next species.
        """
        try:
            session = self.search(query)
            result = self.fetch(query, session)
            path = self.output_manager.write_result(result)
        except NoResults as e:
            logger.info(str(e))
            return FetchOutcome(query, FetchStatus.NO_RESULTS, cause=e)
        except EmptyPayload as e:
            logger.warning(f"{e} (search reported {session.count} record(s))")
            return FetchOutcome(query, FetchStatus.EMPTY_PAYLOAD, cause=e)
        except SpeciesFetchError as e:
            logger.error(f"Error processing species {query.species}: {e}")
            return FetchOutcome(query, FetchStatus.FAILED, cause=e)

        logger.info(f"Results written to '{path}'")
        return FetchOutcome(query, FetchStatus.WRITTEN, path=path)
