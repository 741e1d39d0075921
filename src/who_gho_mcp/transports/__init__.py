# WHO GHO MCP Server
# File: transports/__init__.py
# Version: v1

"""MCP transport entry points (stdio and streamable HTTP)."""
