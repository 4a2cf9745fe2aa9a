"""
Server configuration.

Values come from the environment (a local .env file is honoured) and are
collected into a single Settings model.
"""

import logging
import os
from typing import Callable, Optional, TypeVar

import dotenv
from pydantic import BaseModel, Field

dotenv.load_dotenv()

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Settings(BaseModel):
    """Runtime settings for the MCP server."""
    server_name: str = Field("http-mcp-server", description="Name reported in serverInfo")
    server_version: str = Field("1.0.0", description="Version reported in serverInfo")
    protocol_version: str = Field("2024-11-05", description="MCP protocol version reported by initialize")
    request_timeout: Optional[float] = Field(
        30.0,
        description="Deadline in seconds for a single tool call or resource read (None disables)"
    )
    log_level: str = Field("INFO", description="Root logging level")
    host: str = Field("0.0.0.0", description="Bind address for uvicorn")
    port: int = Field(8001, description="Bind port for uvicorn")


def _get_number(name: str, default: T, convert: Callable[[str], T]) -> T:
    """Read a numeric env var, falling back to the default when it is malformed."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return convert(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return default


def _get_timeout() -> Optional[float]:
    """Read MCP_REQUEST_TIMEOUT; zero or a negative value disables the deadline."""
    timeout = _get_number("MCP_REQUEST_TIMEOUT", 30.0, float)
    return timeout if timeout > 0 else None


def load_settings() -> Settings:
    """Build Settings from environment variables."""
    return Settings(
        server_name=os.getenv("MCP_SERVER_NAME", "http-mcp-server"),
        server_version=os.getenv("MCP_SERVER_VERSION", "1.0.0"),
        protocol_version=os.getenv("MCP_PROTOCOL_VERSION", "2024-11-05"),
        request_timeout=_get_timeout(),
        log_level=os.getenv("MCP_LOG_LEVEL", "INFO").upper(),
        host=os.getenv("MCP_HOST", "0.0.0.0"),
        port=_get_number("MCP_PORT", 8001, int),
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
