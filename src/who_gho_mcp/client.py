# WHO GHO MCP Server
# File: client.py
# Version: v1
"""High-level client for the WHO Global Health Observatory OData API.

Implements:

- get_dimensions() via ``/Dimension``
- get_dimension_codes() via ``/DIMENSION/<code>/DimensionValues``
- search_indicators() via ``/Indicator`` with a ``contains`` filter
- get_health_data() via ``/<indicator_code>``
- get_country_data() and get_cross_table(), both built on get_health_data()

Each operation makes at most one outbound request through the injected
transport and returns an envelope carrying ``total_count``, ``source`` and
the exact ``api_url`` that was requested.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import normalize, query
from .config import GhoConfig
from .exceptions import MissingParameter
from .transport import HttpTransport, Transport

logger = logging.getLogger(__name__)

COUNTRY_DATA_ORDER_BY = "TimeDim desc"
CROSS_TABLE_ORDER_BY = "SpatialDim, TimeDim desc"
CROSS_TABLE_DEFAULT_TOP = 1000


def _require(value: Any, parameter: str, operation: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingParameter(parameter, operation)


@dataclass
class GhoClient:
    """Wrapper around the WHO GHO OData endpoints."""

    config: GhoConfig = field(default_factory=GhoConfig)
    transport: Optional[Transport] = None

    def __post_init__(self) -> None:
        if self.transport is None:
            self.transport = HttpTransport(config=self.config)

    async def _fetch(self, path_segment: str, params: Optional[Dict[str, Any]] = None) -> tuple[str, Any]:
        url = query.build_url(self.config.base_url, path_segment, params)
        payload = await self.transport.fetch(url, self.config.response_format)
        return url, payload

    # ------------------------------------------------------------------
    # Basic health
    # ------------------------------------------------------------------

    async def ping(self) -> bool:
        """Lightweight health check: a base URL is configured."""
        return bool(self.config.base_url)

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    async def get_dimensions(self) -> Dict[str, Any]:
        """List all dimensions available in the GHO database."""
        url, payload = await self._fetch("Dimension")

        dimensions = [
            normalize.to_dimension(r).to_dict()
            for r in normalize.extract_records(payload)
        ]
        return normalize.envelope({"dimensions": dimensions}, dimensions, url)

    async def get_dimension_codes(self, dimension_code: str) -> Dict[str, Any]:
        """List the codes of one dimension (e.g. ``COUNTRY``, ``REGION``)."""
        _require(dimension_code, "dimension_code", "get_dimension_codes")

        url, payload = await self._fetch(f"DIMENSION/{dimension_code}/DimensionValues")

        codes = [
            normalize.to_dimension_code(r).to_dict()
            for r in normalize.extract_records(payload)
        ]
        return normalize.envelope(
            {"dimension": dimension_code, "codes": codes}, codes, url
        )

    # ------------------------------------------------------------------
    # Indicators
    # ------------------------------------------------------------------

    async def search_indicators(self, keywords: str) -> Dict[str, Any]:
        """Find indicators whose name contains ``keywords``."""
        _require(keywords, "keywords", "search_indicators")

        url, payload = await self._fetch(
            "Indicator", {"$filter": query.indicator_search_filter(keywords)}
        )

        indicators = [
            normalize.to_indicator(r).to_dict()
            for r in normalize.extract_records(payload)
        ]
        return normalize.envelope(
            {"keywords": keywords, "indicators": indicators}, indicators, url
        )

    # ------------------------------------------------------------------
    # Facts
    # ------------------------------------------------------------------

    async def get_health_data(
        self,
        indicator_code: str,
        filter_expr: Optional[str] = None,
        top: Optional[int] = None,
        order_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Retrieve fact rows for an indicator.

        ``filter_expr``, ``top`` and ``order_by`` map to the OData
        ``$filter``, ``$top`` and ``$orderby`` options and are omitted from
        the URL when empty.
        """
        _require(indicator_code, "indicator_code", "get_health_data")

        url, payload = await self._fetch(
            indicator_code,
            query.odata_params(filter_expr=filter_expr, top=top, order_by=order_by),
        )

        data = [
            normalize.to_data_point(r, indicator_code).to_dict()
            for r in normalize.extract_records(payload)
        ]
        logger.debug("Indicator %s: %d rows from %s", indicator_code, len(data), url)

        return normalize.envelope({"indicator": indicator_code, "data": data}, data, url)

    async def get_country_data(
        self,
        indicator_code: str,
        country_code: Optional[str] = None,
        year: Optional[str] = None,
        sex: Optional[str] = None,
        top: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Indicator rows for one country, newest first.

        ``year`` is either a single year (``"2020"``) or an inclusive range
        (``"2015:2020"``).
        """
        _require(indicator_code, "indicator_code", "get_country_data")

        return await self.get_health_data(
            indicator_code=indicator_code,
            filter_expr=query.country_filter(country_code=country_code, year=year, sex=sex),
            top=top,
            order_by=COUNTRY_DATA_ORDER_BY,
        )

    async def get_cross_table(
        self,
        indicator_code: str,
        countries: Optional[str] = None,
        years: Optional[str] = None,
        sex: Optional[str] = None,
        top: Optional[int] = CROSS_TABLE_DEFAULT_TOP,
    ) -> Dict[str, Any]:
        """Indicator rows laid out for tabulation, plus a small summary.

        ``countries`` is a comma-separated list of codes; ``years`` is a
        single year or a ``start:end`` range.
        """
        _require(indicator_code, "indicator_code", "get_cross_table")

        health_data = await self.get_health_data(
            indicator_code=indicator_code,
            filter_expr=query.cross_table_filter(countries=countries, years=years, sex=sex),
            top=CROSS_TABLE_DEFAULT_TOP if top is None else top,
            order_by=CROSS_TABLE_ORDER_BY,
        )

        data: List[Dict[str, Any]] = health_data["data"]
        return {
            "indicator": indicator_code,
            "structured_data": data,
            "summary": normalize.summarize(data).to_dict(),
            "source": normalize.SOURCE_LABEL,
            "api_url": health_data["api_url"],
        }
