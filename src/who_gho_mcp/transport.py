# WHO GHO MCP Server
# File: transport.py
# Version: v1

"""HTTP transport for the WHO GHO OData API.

``HttpTransport.fetch(url, accept_format)`` performs one GET and returns the
decoded body. JSON bodies come back as-is; XML (OData Atom) bodies are parsed
into the same ``{"value": [...]}`` shape so the normaliser never needs to
know which representation was requested.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import httpx
from httpx import HTTPStatusError, RequestError

from .config import GhoConfig
from .exceptions import UpstreamRequestFailed

logger = logging.getLogger(__name__)

ACCEPT_HEADERS = {
    "json": "application/json",
    "xml": "application/xml",
}


class Transport(Protocol):
    """Anything that can fetch a URL and return a decoded body."""

    async def fetch(self, url: str, accept_format: str = "json") -> Any:
        ...


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _is_null(elem: ET.Element) -> bool:
    for name, value in elem.attrib.items():
        if _local_name(name) == "null":
            return value.strip().lower() == "true"
    return False


def parse_odata_xml(xml_text: str) -> Dict[str, Any]:
    """Parse an OData Atom feed (or single entry) into ``{"value": [...]}``.

    Each ``m:properties`` element becomes one record keyed by the local name
    of its children. Properties flagged ``m:null="true"`` map to ``None``.
    """
    root = ET.fromstring(xml_text)

    records: List[Dict[str, Any]] = []
    for elem in root.iter():
        if _local_name(elem.tag) != "properties":
            continue

        record: Dict[str, Any] = {}
        for prop in elem:
            if _is_null(prop):
                record[_local_name(prop.tag)] = None
            else:
                record[_local_name(prop.tag)] = prop.text if prop.text is not None else ""
        records.append(record)

    return {"value": records}


@dataclass
class HttpTransport:
    """httpx-backed transport; one client per call, bounded by the config timeout."""

    config: GhoConfig

    # Lets tests plug in httpx.MockTransport.
    http_transport: Optional[httpx.AsyncBaseTransport] = None

    async def fetch(self, url: str, accept_format: str = "json") -> Any:
        accept_format = accept_format if accept_format in ACCEPT_HEADERS else "json"
        headers = {
            "User-Agent": self.config.user_agent,
            "Accept": ACCEPT_HEADERS[accept_format],
        }

        logger.debug("GET %s (accept=%s)", url, accept_format)

        async with httpx.AsyncClient(
            timeout=float(self.config.timeout_seconds),
            verify=self.config.verify_tls,
            transport=self.http_transport,
        ) as http_client:
            try:
                response = await http_client.get(url, headers=headers)
            except RequestError as exc:
                logger.warning("WHO GHO request to %s failed: %s", url, exc)
                raise UpstreamRequestFailed(
                    f"WHO OData API request failed: error calling '{url}': {exc}",
                    url=url,
                ) from exc

            try:
                response.raise_for_status()
            except HTTPStatusError as exc:
                status = response.status_code
                body_preview = response.text[:500]
                logger.warning("WHO GHO request to %s returned HTTP %s", url, status)
                raise UpstreamRequestFailed(
                    f"WHO OData API request failed: '{url}' returned HTTP {status}. "
                    f"Response snippet: {body_preview}",
                    url=url,
                    status_code=status,
                ) from exc

        if accept_format == "xml":
            try:
                return parse_odata_xml(response.text)
            except ET.ParseError as exc:
                raise UpstreamRequestFailed(
                    f"WHO OData API request failed: could not parse XML from '{url}': {exc}",
                    url=url,
                    status_code=response.status_code,
                ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamRequestFailed(
                f"WHO OData API request failed: could not decode JSON from '{url}': {exc}",
                url=url,
                status_code=response.status_code,
            ) from exc
