# WHO GHO MCP Server
# File: transports/stdio_server.py
# Version: v1

"""STDIO entrypoint for the WHO GHO MCP server.

This is the script behind the ``who-gho-mcp`` console command.

It:

- configures logging on stderr (stdout carries the MCP protocol),
- creates a FastMCP server,
- registers the WHO GHO tools, and
- runs the built-in stdio transport.
"""

from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from ..config import GhoConfig
from ..tools import register_all_tools


def configure_logging(cfg: GhoConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_server() -> FastMCP:
    """Create a FastMCP server with every WHO GHO tool registered."""
    mcp = FastMCP("who-gho-mcp")
    register_all_tools(mcp)
    return mcp


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    configure_logging(GhoConfig.from_env())

    # Let FastMCP handle stdio + event loop setup.
    build_server().run()


if __name__ == "__main__":
    main()
