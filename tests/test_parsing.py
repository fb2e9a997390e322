import pytest

from conftest import esearch_xml
from species_fetch.core import ProtocolError
from species_fetch.models import Query
from species_fetch.parsing import (
    build_search_term,
    output_file_name,
    parse_search_response,
    sanitize_file_name,
)


def test_search_term_combines_species_gene_and_filters():
    term = build_search_term(Query("Quercus robur", "rbcL"))
    assert term == (
        "Quercus robur[Organism] AND rbcL[Gene] "
        "NOT complete genome[Title] NOT unverified[Title]"
    )


def test_parse_well_formed_response():
    session = parse_search_response(esearch_xml(count="5", web_env="XYZ", query_key="2"))
    assert session.web_env == "XYZ"
    assert session.query_key == "2"
    assert session.count == "5"
    assert session.has_results


def test_tag_order_does_not_matter():
    text = "<WebEnv>MCID_1</WebEnv><QueryKey>7</QueryKey><Count>12</Count>"
    reordered = "<QueryKey>7</QueryKey><Count>12</Count><WebEnv>MCID_1</WebEnv>"
    assert parse_search_response(text) == parse_search_response(reordered)


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"web_env": None}, "webEnv"),
        ({"query_key": None}, "queryKey"),
        ({"count": None}, "count"),
    ],
)
def test_missing_tag_names_the_field(kwargs, field):
    with pytest.raises(ProtocolError) as excinfo:
        parse_search_response(esearch_xml(**kwargs))
    assert excinfo.value.field == field
    assert field in str(excinfo.value)


def test_server_error_is_carried_in_detail():
    text = "<eSearchResult><ERROR>Invalid query</ERROR></eSearchResult>"
    with pytest.raises(ProtocolError) as excinfo:
        parse_search_response(text)
    assert excinfo.value.field == "webEnv"
    assert excinfo.value.detail == "Invalid query"


def test_top_level_count_wins_over_translation_stack():
    text = (
        "<eSearchResult><Count>0</Count><QueryKey>1</QueryKey><WebEnv>W</WebEnv>"
        "<TranslationStack><TermSet><Count>4821</Count></TermSet></TranslationStack>"
        "</eSearchResult>"
    )
    assert not parse_search_response(text).has_results


@pytest.mark.parametrize("count", ["00", "abc", "", " 0"])
def test_only_literal_zero_means_no_results(count):
    assert parse_search_response(esearch_xml(count=count)).has_results


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Panthera leo (lion)", "Panthera_leo_lion"),
        ("(Homo sapiens)", "_Homo_sapiens"),
        ("Quercus robur", "Quercus_robur"),
        ("Abies_alba-var", "Abies_alba-var"),
        ("Pinus  sp. 'X'/Y", "Pinus_sp_X_Y"),
    ],
)
def test_sanitize_collapses_invalid_runs(name, expected):
    assert sanitize_file_name(name) == expected


def test_output_file_name():
    assert output_file_name(Query("Panthera leo (lion)", "rbcL")) == "Panthera_leo_lion_rbcL.txt"


def test_output_file_name_keeps_leading_run():
    assert output_file_name(Query("(Homo sapiens)", "rbcL")) == "_Homo_sapiens_rbcL.txt"
