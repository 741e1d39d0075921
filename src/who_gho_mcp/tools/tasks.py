# WHO GHO MCP Server
# File: tools/tasks.py
# Version: v1
#
# NOTE: This module is the single place where we define "business logic"
# that is exposed as MCP tools.  The MCP transports (stdio / http) simply
# call `register_tools(server)` to wire these up.

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional
from urllib.parse import urlparse

from ..client import GhoClient
from ..config import GhoConfig
from ..exceptions import GhoError, MissingParameter, UpstreamRequestFailed

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers (error shape, mock transport, client factory)
# ---------------------------------------------------------------------------


def _make_error(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Small, LLM-friendly error shape used by the dispatcher and diagnostics."""
    err: Dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return err


def _error_payload(exc: GhoError) -> Dict[str, Any]:
    if isinstance(exc, MissingParameter):
        return {
            "error": _make_error(
                "MISSING_PARAMETER", str(exc), {"parameter": exc.parameter}
            )
        }

    details: Dict[str, Any] = {}
    if isinstance(exc, UpstreamRequestFailed):
        details = {"url": exc.url, "status_code": exc.status_code}
    return {"error": _make_error("UPSTREAM_REQUEST_FAILED", str(exc), details)}


class MockGhoTransport:
    """Small in-memory stand-in for the HTTP transport.

    Activated when WHO_GHO_MOCK_MODE is truthy. Serves canned OData payloads
    by URL path so every tool works without network access. Filters are not
    evaluated.
    """

    def __init__(self) -> None:
        self.requests: List[str] = []

        self._dimensions = {
            "value": [
                {"Code": "COUNTRY", "Title": "Country", "Description": "Countries and areas"},
                {"Code": "REGION", "Title": "WHO region", "Description": "WHO regional groupings"},
                {"Code": "SEX", "Title": "Sex", "Description": "Sex disaggregation"},
                {"Code": "YEAR", "Title": "Year"},
            ]
        }

        self._dimension_values = {
            "COUNTRY": {
                "value": [
                    {"Code": "USA", "Title": "United States of America", "ParentCode": "AMR"},
                    {"Code": "FRA", "Title": "France", "ParentCode": "EUR"},
                    {"Code": "IND", "Title": "India", "ParentCode": "SEAR"},
                ]
            },
            "SEX": {
                "value": [
                    {"Code": "MLE", "Title": "Male"},
                    {"Code": "FMLE", "Title": "Female"},
                    {"Code": "BTSX", "Title": "Both sexes"},
                ]
            },
        }

        self._indicators = {
            "value": [
                {
                    "IndicatorCode": "WHOSIS_000001",
                    "IndicatorName": "Life expectancy at birth (years)",
                    "Category": "Mortality",
                },
                {
                    "IndicatorCode": "WHOSIS_000015",
                    "IndicatorName": "Life expectancy at age 60 (years)",
                    "Category": "Mortality",
                },
            ]
        }

        self._facts = {
            "value": [
                {
                    "SpatialDim": "USA",
                    "TimeDim": 2019,
                    "Dim1": "BTSX",
                    "Value": "78.5",
                    "NumericValue": 78.5,
                    "TimeDimensionBegin": "2019-01-01T00:00:00+01:00",
                    "TimeDimensionEnd": "2019-12-31T00:00:00+01:00",
                },
                {
                    "SpatialDim": "USA",
                    "TimeDim": 2018,
                    "Dim1": "BTSX",
                    "Value": "78.7",
                    "NumericValue": 78.7,
                },
                {
                    "SpatialDim": "FRA",
                    "TimeDim": 2019,
                    "Dim1": "BTSX",
                    "Value": "82.5",
                    "NumericValue": 82.5,
                },
            ]
        }

    async def fetch(self, url: str, accept_format: str = "json") -> Any:
        self.requests.append(url)
        path = urlparse(url).path.rstrip("/")
        last = path.rsplit("/", 1)[-1]

        if last == "Dimension":
            return self._dimensions
        if last == "DimensionValues":
            dimension = path.rsplit("/", 2)[-2]
            return self._dimension_values.get(dimension.upper(), {"value": []})
        if last == "Indicator":
            return self._indicators
        return self._facts


def _make_client(cfg: Optional[GhoConfig] = None) -> GhoClient:
    """Create a GhoClient from environment variables.

    If WHO_GHO_MOCK_MODE is truthy, the client is wired to an in-process
    mock transport instead of the real HTTP one.

    Note: Callers should prefer invoking this with *no arguments* to keep
    unit tests monkeypatch-friendly (tests often replace _make_client with
    a no-arg lambda).
    """
    cfg = cfg or GhoConfig.from_env()

    if cfg.mock_mode:
        return GhoClient(config=cfg, transport=MockGhoTransport())

    return GhoClient(config=cfg)


# ---------------------------------------------------------------------------
# Core async tasks (library-style)
# ---------------------------------------------------------------------------


async def ping() -> Dict[str, Any]:
    client = _make_client()
    ok = await client.ping()
    return {"ok": bool(ok)}


async def get_dimensions() -> Dict[str, Any]:
    client = _make_client()
    return await client.get_dimensions()


async def get_dimension_codes(dimension_code: str) -> Dict[str, Any]:
    client = _make_client()
    return await client.get_dimension_codes(dimension_code=dimension_code)


async def search_indicators(keywords: str) -> Dict[str, Any]:
    client = _make_client()
    return await client.search_indicators(keywords=keywords)


async def get_health_data(
    indicator_code: str,
    filter_expr: Optional[str] = None,
    top: Optional[int] = None,
    order_by: Optional[str] = None,
) -> Dict[str, Any]:
    client = _make_client()
    return await client.get_health_data(
        indicator_code=indicator_code,
        filter_expr=filter_expr,
        top=top,
        order_by=order_by,
    )


async def get_country_data(
    indicator_code: str,
    country_code: Optional[str] = None,
    year: Optional[str] = None,
    sex: Optional[str] = None,
    top: Optional[int] = None,
) -> Dict[str, Any]:
    client = _make_client()
    return await client.get_country_data(
        indicator_code=indicator_code,
        country_code=country_code,
        year=year,
        sex=sex,
        top=top,
    )


async def get_cross_table(
    indicator_code: str,
    countries: Optional[str] = None,
    years: Optional[str] = None,
    sex: Optional[str] = None,
    top: Optional[int] = None,
) -> Dict[str, Any]:
    client = _make_client()
    return await client.get_cross_table(
        indicator_code=indicator_code,
        countries=countries,
        years=years,
        sex=sex,
        top=top,
    )


# ---------------------------------------------------------------------------
# Method routing (the unified `who_health` tool)
# ---------------------------------------------------------------------------


_Route = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]

METHODS: Dict[str, _Route] = {
    "get_dimensions": lambda p: get_dimensions(),
    "get_dimension_codes": lambda p: get_dimension_codes(p.get("dimension_code")),
    "search_indicators": lambda p: search_indicators(p.get("keywords")),
    "get_health_data": lambda p: get_health_data(
        indicator_code=p.get("indicator_code"),
        filter_expr=p.get("filter_expr"),
        top=p.get("top"),
        order_by=p.get("order_by"),
    ),
    "get_country_data": lambda p: get_country_data(
        indicator_code=p.get("indicator_code"),
        country_code=p.get("country_code"),
        year=p.get("year"),
        sex=p.get("sex"),
        top=p.get("top"),
    ),
    "get_cross_table": lambda p: get_cross_table(
        indicator_code=p.get("indicator_code"),
        countries=p.get("countries"),
        years=p.get("years"),
        sex=p.get("sex"),
        top=p.get("top"),
    ),
}


async def who_health(method: str, **params: Any) -> Dict[str, Any]:
    """Route ``method`` to its task and turn client errors into a payload.

    The caller always gets a dict back: the operation's envelope on success,
    ``{"error": {...}}`` on a missing parameter, an upstream failure, an
    unknown method or any unexpected error.
    """
    route = METHODS.get(method)
    if route is None:
        return {
            "error": _make_error(
                "UNKNOWN_METHOD",
                f"Unknown method: {method}",
                {"supported_methods": sorted(METHODS)},
            )
        }

    try:
        return await route(params)
    except GhoError as exc:
        logger.warning("who_health %s failed: %s", method, exc)
        return _error_payload(exc)
    except Exception as exc:
        logger.exception("who_health %s failed unexpectedly", method)
        return {"error": _make_error("INTERNAL_ERROR", str(exc) or type(exc).__name__)}


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def _collect_config_info() -> Dict[str, Any]:
    cfg = GhoConfig.from_env()
    parsed = urlparse(cfg.base_url)
    return {
        "base_url": cfg.base_url,
        "host": parsed.hostname or cfg.base_url,
        "response_format": cfg.response_format,
        "timeout_seconds": cfg.timeout_seconds,
        "verify_tls": bool(cfg.verify_tls),
        "mock_mode": bool(cfg.mock_mode),
        "user_agent": cfg.user_agent,
    }


async def diagnostics() -> Dict[str, Any]:
    started = time.time()
    config_info = _collect_config_info()

    checks: List[Dict[str, Any]] = []
    overall_ok = True

    t0 = time.time()
    try:
        client = _make_client()
        checks.append(
            {"name": "client_init", "ok": True, "error": None, "elapsed_ms": int((time.time() - t0) * 1000)}
        )
    except Exception as exc:  # pragma: no cover
        checks.append(
            {
                "name": "client_init",
                "ok": False,
                "error": _make_error("CONFIG_ERROR", str(exc)),
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )
        return {
            "ok": False,
            "mock_mode": config_info["mock_mode"],
            "config": config_info,
            "checks": checks,
            "meta": {"elapsed_ms": int((time.time() - started) * 1000)},
        }

    t0 = time.time()
    try:
        result = await client.get_dimensions()
        checks.append(
            {
                "name": "list_dimensions",
                "ok": True,
                "count": result["total_count"],
                "error": None,
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )
    except GhoError as exc:
        overall_ok = False
        checks.append(
            {
                "name": "list_dimensions",
                "ok": False,
                "error": _error_payload(exc)["error"],
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )

    return {
        "ok": overall_ok,
        "mock_mode": config_info["mock_mode"],
        "config": config_info,
        "checks": checks,
        "meta": {"elapsed_ms": int((time.time() - started) * 1000)},
    }


# ---------------------------------------------------------------------------
# MCP tool registration
# ---------------------------------------------------------------------------


WHO_HEALTH_DESCRIPTION = (
    "Unified tool for WHO Global Health Observatory operations via the OData API. "
    "method is one of: get_dimensions (list all data dimensions), get_dimension_codes "
    "(codes of one dimension, needs dimension_code), search_indicators (needs keywords), "
    "get_health_data (needs indicator_code; optional filter_expr, top, order_by), "
    "get_country_data (needs indicator_code; optional country_code, year as YYYY or "
    "YYYY:YYYY, sex, top) or get_cross_table (needs indicator_code; optional countries "
    "as comma-separated codes, years as YYYY or YYYY:YYYY, sex, top defaulting to 1000)."
)


def register_tools(server: Any) -> None:
    """Register MCP tools on an MCP Server-like instance."""
    if server is None or not hasattr(server, "tool"):
        raise ValueError(
            "register_tools(server) expects an MCP Server-like object that exposes a .tool() decorator."
        )

    @server.tool(name="who_ping", description="Basic health check for the WHO GHO MCP server.")
    async def mcp_ping() -> Dict[str, Any]:
        return await ping()

    @server.tool(name="who_health", description=WHO_HEALTH_DESCRIPTION)
    async def mcp_who_health(
        method: str,
        dimension_code: Optional[str] = None,
        indicator_code: Optional[str] = None,
        keywords: Optional[str] = None,
        filter_expr: Optional[str] = None,
        top: Optional[int] = None,
        order_by: Optional[str] = None,
        country_code: Optional[str] = None,
        year: Optional[str] = None,
        countries: Optional[str] = None,
        years: Optional[str] = None,
        sex: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await who_health(
            method,
            dimension_code=dimension_code,
            indicator_code=indicator_code,
            keywords=keywords,
            filter_expr=filter_expr,
            top=top,
            order_by=order_by,
            country_code=country_code,
            year=year,
            countries=countries,
            years=years,
            sex=sex,
        )

    @server.tool(
        name="who_diagnostics",
        description="Run high-level health checks against the MCP server and the WHO GHO API.",
    )
    async def mcp_diagnostics() -> Dict[str, Any]:
        return await diagnostics()
