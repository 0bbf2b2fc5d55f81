"""Command-line entrypoint for the oracle-mcp FastMCP server.

Serves stdio by default. When MCP_HTTP_URL is set (for example
``http://0.0.0.0:8080``) the server listens for streamable HTTP on that host
and port instead.
"""

from __future__ import annotations

import traceback
from urllib.parse import urlsplit

from fastmcp.utilities.logging import get_logger

from oracle_mcp.server import mcp
from oracle_mcp.services.config_service import ConfigService

# Configure a module-level logger for local server logs.
_logger = get_logger(__name__)

DEFAULT_HTTP_PORT = 8080


def http_bind_address(url: str) -> tuple[str, int]:
    """Split MCP_HTTP_URL into host and port."""
    parts = urlsplit(url if "://" in url else f"http://{url}")
    host = parts.hostname or "127.0.0.1"
    port = parts.port or DEFAULT_HTTP_PORT
    return host, port


def main() -> None:
    """Start the oracle-mcp FastMCP server via CLI."""
    url = ConfigService.get_http_url()
    try:
        if url is None:
            mcp.run()
        else:
            host, port = http_bind_address(url)
            _logger.info("Serving streamable HTTP on %s:%d", host, port)
            mcp.run(transport="http", host=host, port=port)
    except KeyboardInterrupt:
        _logger.info("Interrupted by user. Exiting cleanly.")
    except Exception:  # noqa: BLE001
        traceback.print_exc(limit=1)


if __name__ == "__main__":
    # Delegate to main() so behavior is consistent across execution paths.
    main()
