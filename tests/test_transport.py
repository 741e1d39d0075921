# WHO GHO MCP Server
# File: tests/test_transport.py
# Version: v1

"""Tests for the httpx transport, using httpx.MockTransport instead of the network."""

from __future__ import annotations

import asyncio
from typing import List

import httpx
import pytest

from who_gho_mcp.client import GhoClient
from who_gho_mcp.config import GhoConfig
from who_gho_mcp.exceptions import UpstreamRequestFailed
from who_gho_mcp.transport import HttpTransport, parse_odata_xml

BASE = "https://gho.test/api"


def _run(coro):
    """Helper to run async coroutines in plain pytest tests."""
    return asyncio.run(coro)


def _transport(handler, **config_kwargs) -> HttpTransport:
    config = GhoConfig(base_url=BASE, user_agent="test-agent/1.0", **config_kwargs)
    return HttpTransport(config=config, http_transport=httpx.MockTransport(handler))


_ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"
      xmlns:d="http://schemas.microsoft.com/ado/2007/08/dataservices"
      xmlns:m="http://schemas.microsoft.com/ado/2007/08/dataservices/metadata">
  <entry>
    <content type="application/xml">
      <m:properties>
        <d:Code>USA</d:Code>
        <d:Title>United States</d:Title>
        <d:ParentCode m:null="true" />
      </m:properties>
    </content>
  </entry>
  <entry>
    <content type="application/xml">
      <m:properties>
        <d:Code>FRA</d:Code>
        <d:Title>France</d:Title>
        <d:ParentCode>EUR</d:ParentCode>
        <d:Description />
      </m:properties>
    </content>
  </entry>
</feed>
"""


# ---------------------------------------------------------------------------
# Successful responses
# ---------------------------------------------------------------------------


def test_fetch_json_sends_headers() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"value": [{"Code": "USA"}]})

    body = _run(_transport(handler).fetch(f"{BASE}/Dimension", "json"))

    assert body == {"value": [{"Code": "USA"}]}
    assert seen[0].headers["accept"] == "application/json"
    assert seen[0].headers["user-agent"] == "test-agent/1.0"


def test_fetch_xml_parses_atom_feed() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=_ATOM_FEED)

    body = _run(_transport(handler).fetch(f"{BASE}/DIMENSION/COUNTRY/DimensionValues", "xml"))

    assert seen[0].headers["accept"] == "application/xml"
    assert body == {
        "value": [
            {"Code": "USA", "Title": "United States", "ParentCode": None},
            {"Code": "FRA", "Title": "France", "ParentCode": "EUR", "Description": ""},
        ]
    }


def test_parse_odata_xml_without_entries() -> None:
    assert parse_odata_xml('<feed xmlns="http://www.w3.org/2005/Atom" />') == {"value": []}


def test_client_over_http_reports_requested_url() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"value": [{"SpatialDim": "USA", "TimeDim": 2019, "Value": "78.5", "NumericValue": 78.5}]},
        )

    config = GhoConfig(base_url=BASE)
    client = GhoClient(
        config=config,
        transport=HttpTransport(config=config, http_transport=httpx.MockTransport(handler)),
    )

    result = _run(client.get_country_data("WHOSIS_000001", country_code="USA", year="2019"))

    assert result["total_count"] == 1
    assert result["data"][0]["numeric_value"] == 78.5
    assert seen[0].url.path == "/api/WHOSIS_000001"
    assert seen[0].url.params["$filter"] == "SpatialDim eq 'USA' and TimeDim eq 2019"
    assert seen[0].url.params["$orderby"] == "TimeDim desc"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


def test_http_error_status_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="service unavailable")

    with pytest.raises(UpstreamRequestFailed) as excinfo:
        _run(_transport(handler).fetch(f"{BASE}/Dimension"))

    exc = excinfo.value
    assert exc.status_code == 503
    assert exc.url == f"{BASE}/Dimension"
    assert "HTTP 503" in str(exc)
    assert "service unavailable" in str(exc)
    assert isinstance(exc.__cause__, httpx.HTTPStatusError)


def test_timeout_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamRequestFailed) as excinfo:
        _run(_transport(handler).fetch(f"{BASE}/Dimension"))

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.TimeoutException)


def test_connection_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamRequestFailed) as excinfo:
        _run(_transport(handler).fetch(f"{BASE}/Indicator"))

    assert "connection refused" in str(excinfo.value)


def test_undecodable_json_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(UpstreamRequestFailed) as excinfo:
        _run(_transport(handler).fetch(f"{BASE}/Dimension", "json"))

    assert excinfo.value.status_code == 200
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_unparsable_xml_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<feed><entry>")

    with pytest.raises(UpstreamRequestFailed):
        _run(_transport(handler).fetch(f"{BASE}/Dimension", "xml"))
