# WHO GHO MCP Server
# File: transports/http_server.py
# Version: v1

"""Streamable-HTTP entrypoint for the WHO GHO MCP server.

Host and port come from FastMCP's own settings (``FASTMCP_HOST`` /
``FASTMCP_PORT``).
"""

from __future__ import annotations

from ..config import GhoConfig
from .stdio_server import build_server, configure_logging


def main() -> None:
    """Entry point behind the ``who-gho-mcp-http`` console command."""
    configure_logging(GhoConfig.from_env())
    build_server().run(transport="streamable-http")


if __name__ == "__main__":
    main()
