# WHO GHO MCP Server
# File: models.py
# Version: v1

"""Domain models used by the WHO GHO MCP server.

All of these are built fresh for every call from the upstream payload.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Union


@dataclass
class Dimension:
    """A named axis of classification (country, region, year, ...)."""

    code: str = ""
    title: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DimensionCode:
    """One value inside a dimension, optionally linked to a parent code."""

    code: str = ""
    title: str = ""
    description: str = ""
    parent_code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Indicator:
    """Metadata for a measurable quantity."""

    code: str = ""
    name: str = ""
    category: str = ""
    definition: str = ""
    method: str = ""
    interpretation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DataPoint:
    """One observed fact: an indicator value at a place and time.

    ``value`` / ``display_value`` come from the textual ``Value`` field and
    ``numeric_value`` from ``NumericValue``; upstream does not guarantee they
    agree and they are not reconciled.
    """

    indicator: str
    value: Union[str, int, float] = ""
    numeric_value: Optional[Union[int, float]] = None
    display_value: str = ""
    spatial_dim: str = ""  # country / region code
    time_dim: Union[str, int] = ""  # year
    time_dim_begin: str = ""
    time_dim_end: str = ""
    dim1: str = ""  # usually sex
    dim2: str = ""
    dim3: str = ""
    comments: str = ""
    data_source_code: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CrossTableSummary:
    unique_countries: int = 0
    unique_years: int = 0
    total_records: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
