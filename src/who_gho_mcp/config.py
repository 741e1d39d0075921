# WHO GHO MCP Server
# File: config.py
# Version: v1

"""Configuration loading for the WHO GHO MCP Server."""

from __future__ import annotations

from dataclasses import dataclass
import os

from . import __version__

DEFAULT_BASE_URL = "https://ghoapi.azureedge.net/api"
RESPONSE_FORMATS = ("json", "xml")


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean-like environment variable.

    Accepts 1/0, true/false, yes/no, on/off (case-insensitive).
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_int_env(
    name: str,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Parse an int environment variable with clamping and safe fallback."""
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        value = int(default)
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            value = int(default)

    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value

    return value


def _parse_choice_env(name: str, default: str, choices: tuple[str, ...]) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    return raw if raw in choices else default


@dataclass
class GhoConfig:
    """Settings for talking to the WHO Global Health Observatory OData API."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: int = 30
    user_agent: str = f"WHO-GHO-MCP-Server/{__version__}"

    # "json" or "xml"; both are normalised to the same record shape.
    response_format: str = "json"

    verify_tls: bool = True
    mock_mode: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "GhoConfig":
        """Create configuration from environment variables."""
        base_url = (os.getenv("WHO_GHO_BASE_URL") or DEFAULT_BASE_URL).strip()
        user_agent = os.getenv("WHO_GHO_USER_AGENT") or f"WHO-GHO-MCP-Server/{__version__}"

        timeout_seconds = _parse_int_env(
            "WHO_GHO_TIMEOUT_SECONDS", default=30, min_value=1, max_value=300
        )
        response_format = _parse_choice_env(
            "WHO_GHO_RESPONSE_FORMAT", default="json", choices=RESPONSE_FORMATS
        )

        verify_tls = _parse_bool_env("WHO_GHO_VERIFY_TLS", default=True)
        mock_mode = _parse_bool_env("WHO_GHO_MOCK_MODE", default=False)
        log_level = (os.getenv("WHO_GHO_LOG_LEVEL") or "WARNING").strip().upper()

        return cls(
            base_url=base_url.rstrip("/"),
            timeout_seconds=timeout_seconds,
            user_agent=user_agent,
            response_format=response_format,
            verify_tls=verify_tls,
            mock_mode=mock_mode,
            log_level=log_level,
        )
