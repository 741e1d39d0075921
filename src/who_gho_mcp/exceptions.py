# WHO GHO MCP Server
# File: exceptions.py
# Version: v1

"""Error types raised by the WHO GHO client.

Only two failure kinds exist:

- ``MissingParameter``: the caller left out an identifying parameter. Raised
  locally, before any network activity.
- ``UpstreamRequestFailed``: the network call or body decoding failed. The
  underlying exception is kept as ``__cause__``.
"""

from __future__ import annotations

from typing import Optional


class GhoError(RuntimeError):
    """Base class for all WHO GHO client errors."""


class MissingParameter(GhoError):
    """A required request parameter was absent or empty."""

    def __init__(self, parameter: str, operation: Optional[str] = None) -> None:
        self.parameter = parameter
        self.operation = operation
        if operation:
            message = f"{parameter} parameter is required for {operation}"
        else:
            message = f"{parameter} parameter is required"
        super().__init__(message)


class UpstreamRequestFailed(GhoError):
    """The WHO GHO OData API could not be reached or returned an unusable body."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)
