# WHO GHO MCP Server
# File: query.py
# Version: v1

"""URL and OData ``$filter`` composition for the WHO GHO API.

Filter clauses use the OData textual grammar:

- ``SpatialDim eq 'USA'``
- ``TimeDim ge 2015 and TimeDim le 2020``
- ``SpatialDim in ('USA','FRA')``
- ``contains(IndicatorName,'mortality')``

Clauses are joined with ``and``. When no clause applies the filter is
``None`` so the ``$filter`` parameter is left out of the URL entirely.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional
from urllib.parse import urlencode

SPATIAL_FIELD = "SpatialDim"
TIME_FIELD = "TimeDim"
SEX_FIELD = "Dim1"
INDICATOR_NAME_FIELD = "IndicatorName"

YEAR_RANGE_SEPARATOR = ":"


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def build_url(base_url: str, path_segment: str = "", params: Optional[Mapping[str, Any]] = None) -> str:
    """Build a request URL from a base address, a path segment and query params.

    The path segment is appended verbatim. Parameters whose value is ``None``
    or ``""`` are dropped; the rest are URL-encoded in mapping order.
    """
    url = base_url
    if path_segment:
        url += f"/{path_segment}"

    query = [(key, value) for key, value in (params or {}).items() if not _is_blank(value)]
    if query:
        url += "?" + urlencode(query)

    return url


# ---------------------------------------------------------------------------
# Clause helpers
# ---------------------------------------------------------------------------


def quote_literal(value: Any) -> str:
    """Render an OData string literal; embedded single quotes are doubled."""
    return "'" + str(value).replace("'", "''") + "'"


def eq_clause(field: str, value: Any, quoted: bool = True) -> str:
    rendered = quote_literal(value) if quoted else str(value).strip()
    return f"{field} eq {rendered}"


def range_clause(field: str, lower: Any, upper: Any) -> str:
    """Inclusive range: ``field ge lower and field le upper``."""
    return f"{field} ge {str(lower).strip()} and {field} le {str(upper).strip()}"


def in_clause(field: str, values: Iterable[Any]) -> str:
    return f"{field} in ({','.join(quote_literal(v) for v in values)})"


def contains_clause(field: str, text: Any) -> str:
    return f"contains({field},{quote_literal(text)})"


def year_clause(years: Any, field: str = TIME_FIELD) -> Optional[str]:
    """Equality clause for a bare year, closed range for ``"start:end"``."""
    if _is_blank(years):
        return None

    text = str(years).strip()
    if not text:
        return None

    if YEAR_RANGE_SEPARATOR in text:
        parts = text.split(YEAR_RANGE_SEPARATOR)
        lower, upper = parts[0], parts[1]
        return range_clause(field, lower, upper)

    return eq_clause(field, text, quoted=False)


def split_codes(codes: Any) -> List[str]:
    """Split a comma-separated code list, trimming and dropping empty entries."""
    if _is_blank(codes):
        return []
    if isinstance(codes, str):
        items = codes.split(",")
    else:
        items = [str(c) for c in codes]
    return [c.strip() for c in items if c and c.strip()]


def join_clauses(clauses: Iterable[Optional[str]]) -> Optional[str]:
    """Join the non-empty clauses with ``and``; ``None`` when nothing is left."""
    kept = [c for c in clauses if c]
    return " and ".join(kept) if kept else None


# ---------------------------------------------------------------------------
# Operation-specific filters
# ---------------------------------------------------------------------------


def country_filter(
    country_code: Optional[str] = None,
    year: Optional[str] = None,
    sex: Optional[str] = None,
) -> Optional[str]:
    """Filter for get_country_data: one country, a year or range, and a sex code."""
    return join_clauses(
        [
            None if _is_blank(country_code) else eq_clause(SPATIAL_FIELD, country_code),
            year_clause(year),
            None if _is_blank(sex) else eq_clause(SEX_FIELD, sex),
        ]
    )


def cross_table_filter(
    countries: Optional[str] = None,
    years: Optional[str] = None,
    sex: Optional[str] = None,
) -> Optional[str]:
    """Filter for get_cross_table: a country set, a year or range, and a sex code."""
    country_list = split_codes(countries)
    return join_clauses(
        [
            in_clause(SPATIAL_FIELD, country_list) if country_list else None,
            year_clause(years),
            None if _is_blank(sex) else eq_clause(SEX_FIELD, sex),
        ]
    )


def indicator_search_filter(keywords: str) -> str:
    return contains_clause(INDICATOR_NAME_FIELD, keywords)


def odata_params(
    filter_expr: Optional[str] = None,
    top: Optional[int] = None,
    order_by: Optional[str] = None,
) -> dict:
    """Map friendly argument names to OData system query options."""
    return {"$filter": filter_expr, "$top": top, "$orderby": order_by}
