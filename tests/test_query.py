# WHO GHO MCP Server
# File: tests/test_query.py
# Version: v1

"""Tests for URL building and OData filter composition."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlparse

import pytest

from who_gho_mcp import query

BASE = "https://gho.test/api"


# ---------------------------------------------------------------------------
# build_url
# ---------------------------------------------------------------------------


def test_build_url_without_params() -> None:
    assert query.build_url(BASE, "Dimension") == f"{BASE}/Dimension"
    assert query.build_url(BASE) == BASE


def test_build_url_appends_path_verbatim() -> None:
    url = query.build_url(BASE, "DIMENSION/COUNTRY/DimensionValues")
    assert url == f"{BASE}/DIMENSION/COUNTRY/DimensionValues"


def test_build_url_drops_empty_values_and_keeps_order() -> None:
    url = query.build_url(
        BASE,
        "WHOSIS_000001",
        {"$filter": None, "$top": 10, "$orderby": "TimeDim desc", "$skip": ""},
    )

    parsed = urlparse(url)
    assert parsed.path == "/api/WHOSIS_000001"
    assert parse_qsl(parsed.query) == [("$top", "10"), ("$orderby", "TimeDim desc")]


def test_build_url_encodes_filter() -> None:
    url = query.build_url(BASE, "Indicator", {"$filter": "contains(IndicatorName,'life')"})

    assert " " not in url
    assert dict(parse_qsl(urlparse(url).query)) == {
        "$filter": "contains(IndicatorName,'life')"
    }


# ---------------------------------------------------------------------------
# Clauses
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "years, expected",
    [
        ("2019", "TimeDim eq 2019"),
        (2019, "TimeDim eq 2019"),
        (" 2019 ", "TimeDim eq 2019"),
        ("2018:2020", "TimeDim ge 2018 and TimeDim le 2020"),
        ("2015 : 2020", "TimeDim ge 2015 and TimeDim le 2020"),
        ("2018:2020:2022", "TimeDim ge 2018 and TimeDim le 2020"),
        (None, None),
        ("", None),
        ("   ", None),
    ],
)
def test_year_clause(years, expected) -> None:
    assert query.year_clause(years) == expected


def test_string_literals_double_embedded_quotes() -> None:
    assert query.eq_clause("SpatialDim", "USA") == "SpatialDim eq 'USA'"
    assert query.eq_clause("SpatialDim", "O'X") == "SpatialDim eq 'O''X'"
    assert query.indicator_search_filter("women's health") == (
        "contains(IndicatorName,'women''s health')"
    )


def test_indicator_search_filter() -> None:
    assert query.indicator_search_filter("life expectancy") == (
        "contains(IndicatorName,'life expectancy')"
    )


def test_split_codes_trims_and_drops_empty_entries() -> None:
    assert query.split_codes(" USA, FRA ,,DEU ") == ["USA", "FRA", "DEU"]
    assert query.split_codes(["USA", " GBR"]) == ["USA", "GBR"]
    assert query.split_codes(None) == []


# ---------------------------------------------------------------------------
# Operation filters
# ---------------------------------------------------------------------------


def test_filters_absent_when_no_constraints() -> None:
    assert query.country_filter() is None
    assert query.country_filter(country_code="", year="", sex="") is None
    assert query.cross_table_filter() is None
    assert query.cross_table_filter(countries=" , ") is None


def test_country_filter_all_constraints() -> None:
    assert query.country_filter(country_code="USA", year="2020", sex="MLE") == (
        "SpatialDim eq 'USA' and TimeDim eq 2020 and Dim1 eq 'MLE'"
    )


def test_country_filter_year_range() -> None:
    assert query.country_filter(year="2015:2020") == "TimeDim ge 2015 and TimeDim le 2020"


def test_cross_table_filter_countries_and_range() -> None:
    assert query.cross_table_filter(countries="USA,FRA", years="2018:2020") == (
        "SpatialDim in ('USA','FRA') and TimeDim ge 2018 and TimeDim le 2020"
    )


def test_cross_table_filter_sex_only() -> None:
    assert query.cross_table_filter(sex="FMLE") == "Dim1 eq 'FMLE'"
