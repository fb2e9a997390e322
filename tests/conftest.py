"""Shared fixtures: a zero-delay gate and an in-memory stand-in for Bio.Entrez."""

import io

import pytest
from Bio import Entrez

from species_fetch.core import Config
from species_fetch.entrez_handler import EntrezHandler
from species_fetch.output_manager import OutputManager
from species_fetch.sequence_fetcher import SequenceFetcher


def esearch_xml(count="5", web_env="XYZ", query_key="2"):
    parts = ['<?xml version="1.0" encoding="UTF-8" ?>', "<eSearchResult>"]
    if count is not None:
        parts.append(f"<Count>{count}</Count>")
    parts.append("<RetMax>5</RetMax><RetStart>0</RetStart>")
    if query_key is not None:
        parts.append(f"<QueryKey>{query_key}</QueryKey>")
    if web_env is not None:
        parts.append(f"<WebEnv>{web_env}</WebEnv>")
    parts.append("<IdList><Id>123</Id></IdList></eSearchResult>")
    return "\n".join(parts)


class StubGate:
    def __init__(self):
        self.acquired = 0

    def acquire(self):
        self.acquired += 1


class FakeEntrez:
    """Records calls and replays canned ESearch/EFetch bodies."""

    def __init__(self, search_body=None, fetch_body=">seq1\nACGT\n"):
        self.search_body = esearch_xml() if search_body is None else search_body
        self.fetch_body = fetch_body
        self.search_queue = []
        self.search_calls = []
        self.fetch_calls = []
        self.search_error = None
        self.fetch_error = None

    def esearch(self, **params):
        self.search_calls.append(params)
        if self.search_error is not None:
            raise self.search_error
        if self.search_queue:
            self.search_body = self.search_queue.pop(0)
        # ESearch replies are XML, which Bio.Entrez hands back as bytes
        return io.BytesIO(self.search_body.encode("utf-8"))

    def efetch(self, **params):
        self.fetch_calls.append(params)
        if self.fetch_error is not None:
            raise self.fetch_error
        return io.StringIO(self.fetch_body)


@pytest.fixture
def fake_entrez(monkeypatch):
    fake = FakeEntrez()
    monkeypatch.setattr(Entrez, "esearch", fake.esearch)
    monkeypatch.setattr(Entrez, "efetch", fake.efetch)
    return fake


@pytest.fixture
def gate():
    return StubGate()


@pytest.fixture
def config(tmp_path):
    return Config(gene="rbcL", output_dir=tmp_path / "output")


@pytest.fixture
def output_manager(config):
    return OutputManager(config.output_dir)


@pytest.fixture
def entrez(config, gate, fake_entrez):
    return EntrezHandler(config, gate)


@pytest.fixture
def fetcher(entrez, output_manager):
    return SequenceFetcher(entrez, output_manager)
