# WHO GHO MCP Server
# File: normalize.py
# Version: v1

"""Projection of loosely-typed OData records into fixed output shapes.

Every field has an explicit default: ``""`` for text fields and ``None`` for
optional linkage / numeric fields. A missing field never raises.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import CrossTableSummary, DataPoint, Dimension, DimensionCode, Indicator

SOURCE_LABEL = "WHO Global Health Observatory (OData API)"

_MISSING = (None, "")


def _text(record: Mapping[str, Any], key: str) -> Any:
    value = record.get(key)
    return "" if value in _MISSING else value


def _optional(record: Mapping[str, Any], key: str) -> Optional[Any]:
    value = record.get(key)
    return None if value in _MISSING else value


def _numeric(value: Any) -> Optional[Any]:
    """``NumericValue`` as a number; XML bodies deliver it as text."""
    if value in _MISSING or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def extract_records(payload: Any) -> List[Mapping[str, Any]]:
    """Return the mapping records under ``payload["value"]``.

    A payload that is not a mapping, or whose ``value`` is absent or not a
    list, yields an empty list. Non-mapping entries are skipped.
    """
    if not isinstance(payload, Mapping):
        return []

    raw = payload.get("value")
    if not isinstance(raw, list):
        return []

    return [r for r in raw if isinstance(r, Mapping)]


def to_dimension(record: Mapping[str, Any]) -> Dimension:
    return Dimension(
        code=_text(record, "Code"),
        title=_text(record, "Title"),
        description=_text(record, "Description"),
    )


def to_dimension_code(record: Mapping[str, Any]) -> DimensionCode:
    return DimensionCode(
        code=_text(record, "Code"),
        title=_text(record, "Title"),
        description=_text(record, "Description"),
        parent_code=_optional(record, "ParentCode"),
    )


def to_indicator(record: Mapping[str, Any]) -> Indicator:
    return Indicator(
        code=_text(record, "IndicatorCode"),
        name=_text(record, "IndicatorName"),
        category=_text(record, "Category"),
        definition=_text(record, "Definition"),
        method=_text(record, "Method"),
        interpretation=_text(record, "Interpretation"),
    )


def to_data_point(record: Mapping[str, Any], indicator_code: str) -> DataPoint:
    display_value = _text(record, "Value")
    numeric_value = _numeric(record.get("NumericValue"))

    if display_value != "":
        value = display_value
    elif numeric_value is not None:
        value = numeric_value
    else:
        value = ""

    return DataPoint(
        indicator=indicator_code,
        value=value,
        numeric_value=numeric_value,
        display_value=display_value,
        spatial_dim=_text(record, "SpatialDim"),
        time_dim=_text(record, "TimeDim"),
        time_dim_begin=_text(record, "TimeDimensionBegin"),
        time_dim_end=_text(record, "TimeDimensionEnd"),
        dim1=_text(record, "Dim1"),
        dim2=_text(record, "Dim2"),
        dim3=_text(record, "Dim3"),
        comments=_text(record, "Comments"),
        data_source_code=_text(record, "DataSourceCode"),
    )


def _distinct_present(values: Iterable[Any]) -> int:
    # Upstream may send lists or objects here; count those by their repr.
    return len({v if isinstance(v, Hashable) else repr(v) for v in values if v not in _MISSING})


def summarize(data: List[Dict[str, Any]]) -> CrossTableSummary:
    """Distinct countries / years (missing values ignored) and the record count."""
    return CrossTableSummary(
        unique_countries=_distinct_present(d.get("spatial_dim") for d in data),
        unique_years=_distinct_present(d.get("time_dim") for d in data),
        total_records=len(data),
    )


def envelope(payload: Dict[str, Any], items: List[Any], api_url: str) -> Dict[str, Any]:
    """Wrap a payload with ``total_count``, ``source`` and ``api_url``."""
    out = dict(payload)
    out["total_count"] = len(items)
    out["source"] = SOURCE_LABEL
    out["api_url"] = api_url
    return out
