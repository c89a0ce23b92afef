"""HTTP client pool management using httpx with connection pooling.

This module provides one shared httpx.AsyncClient per collaborator
(secrets, bedrock, pinecone). Connection pooling avoids a TCP handshake
and TLS negotiation on every pipeline step.

Architecture:
    - One client per collaborator, keyed by collaborator name
    - Each client is created with the collaborator's base URL, so steps
      only describe the request path
    - Configurable timeouts and pool limits; a timeout surfaces to the
      pipeline as a TransportError

Usage:
    # In FastAPI startup
    await init_http_clients()

    # In application code
    client = get_client("pinecone")
    response = await client.post("/query", content=body, headers=headers)

    # In FastAPI shutdown
    await close_http_clients()

Environment Variables:
    Connection pool settings:
        HTTP_MAX_CONNECTIONS: Max connections per client (default: 100)
        HTTP_MAX_KEEPALIVE_CONNECTIONS: Max keepalive connections (default: 20)
        HTTP_KEEPALIVE_EXPIRY: Keepalive expiry in seconds (default: 5.0)

    Timeout settings:
        HTTP_CONNECT_TIMEOUT: Connection timeout in seconds (default: 10.0)
        HTTP_READ_TIMEOUT: Read timeout in seconds (default: 30.0)
        HTTP_WRITE_TIMEOUT: Write timeout in seconds (default: 30.0)
        HTTP_POOL_TIMEOUT: Pool acquire timeout in seconds (default: 10.0)

    Protocol settings:
        HTTP2_ENABLED: Enable HTTP/2 support (default: true)
"""

import os
import logging
from typing import Dict, Optional
import httpx
from dotenv import load_dotenv

from .config import get_collaborator_urls

load_dotenv()

logger = logging.getLogger(__name__)


class HttpClientConfig:
    """Configuration for httpx.AsyncClient connection pooling.

    Loads settings from environment variables with sensible defaults.
    """

    def __init__(self):
        """Initialize HTTP client configuration from environment variables."""
        # Connection pool settings
        self.max_connections = int(os.getenv("HTTP_MAX_CONNECTIONS", "100"))
        self.max_keepalive_connections = int(
            os.getenv("HTTP_MAX_KEEPALIVE_CONNECTIONS", "20")
        )
        self.keepalive_expiry = float(os.getenv("HTTP_KEEPALIVE_EXPIRY", "5.0"))

        # Timeout settings (all in seconds)
        self.connect_timeout = float(os.getenv("HTTP_CONNECT_TIMEOUT", "10.0"))
        self.read_timeout = float(os.getenv("HTTP_READ_TIMEOUT", "30.0"))
        self.write_timeout = float(os.getenv("HTTP_WRITE_TIMEOUT", "30.0"))
        self.pool_timeout = float(os.getenv("HTTP_POOL_TIMEOUT", "10.0"))

        # Protocol settings
        self.http2_enabled = os.getenv("HTTP2_ENABLED", "true").lower() == "true"

    def get_limits(self) -> dict:
        """
        Get httpx Limits configuration.

        Returns:
            dict: Configuration dict for httpx.Limits()
        """
        return {
            "max_connections": self.max_connections,
            "max_keepalive_connections": self.max_keepalive_connections,
            "keepalive_expiry": self.keepalive_expiry,
        }

    def get_timeout(self) -> dict:
        """
        Get httpx Timeout configuration.

        Returns:
            dict: Configuration dict for httpx.Timeout()
        """
        return {
            "connect": self.connect_timeout,
            "read": self.read_timeout,
            "write": self.write_timeout,
            "pool": self.pool_timeout,
        }

    def __repr__(self) -> str:
        return (
            f"HttpClientConfig("
            f"max_connections={self.max_connections}, "
            f"max_keepalive={self.max_keepalive_connections}, "
            f"connect_timeout={self.connect_timeout}s, "
            f"read_timeout={self.read_timeout}s, "
            f"http2={self.http2_enabled})"
        )


# Global HTTP client singletons, keyed by collaborator name
_clients: Dict[str, httpx.AsyncClient] = {}
_config: Optional[HttpClientConfig] = None


async def init_http_clients(
    base_urls: Optional[Dict[str, str]] = None,
    auth: Optional[Dict[str, httpx.Auth]] = None,
) -> Dict[str, httpx.AsyncClient]:
    """
    Initialize the global HTTP client pool.

    Should be called once during FastAPI startup (or at the top of a CLI
    command). Safe to call multiple times: returns the existing clients
    if already initialized.

    Args:
        base_urls: Collaborator name -> base URL (defaults to config)
        auth: Optional collaborator name -> httpx.Auth, e.g. a SigV4 signer
            for the AWS collaborators

    Returns:
        Dict mapping collaborator name to its httpx.AsyncClient
    """
    global _clients, _config

    if _clients:
        logger.info("HTTP clients already initialized, returning existing clients")
        return _clients

    _config = HttpClientConfig()
    logger.info(f"Initializing HTTP clients with config: {_config}")

    base_urls = base_urls or get_collaborator_urls()
    auth = auth or {}

    try:
        limits = httpx.Limits(**_config.get_limits())
        timeout = httpx.Timeout(**_config.get_timeout())

        for collaborator, base_url in base_urls.items():
            if not base_url:
                logger.warning(f"  No base URL configured for '{collaborator}'")
            _clients[collaborator] = httpx.AsyncClient(
                base_url=base_url,
                limits=limits,
                timeout=timeout,
                http2=_config.http2_enabled,
                auth=auth.get(collaborator),
                follow_redirects=True,
            )
            logger.info(f"  {collaborator} client: {base_url or '<unset>'}")

        logger.info("✓ HTTP clients initialized successfully")
        return _clients

    except Exception as e:
        logger.error(f"✗ Failed to initialize HTTP clients: {e}", exc_info=True)
        for collaborator, client in _clients.items():
            try:
                await client.aclose()
            except Exception as close_error:
                logger.warning(
                    f"  Could not close {collaborator} client: {close_error}"
                )
        _clients = {}
        _config = None
        raise


def get_client(collaborator: str) -> httpx.AsyncClient:
    """
    Get the pooled HTTP client for a collaborator.

    Raises:
        RuntimeError: If clients have not been initialized
        KeyError: If no client exists for the collaborator
    """
    if not _clients:
        raise RuntimeError(
            "HTTP clients not initialized. Call init_http_clients() first "
            "(typically in FastAPI startup)."
        )
    if collaborator not in _clients:
        raise KeyError(f"No HTTP client configured for collaborator '{collaborator}'")
    return _clients[collaborator]


async def close_http_clients() -> None:
    """
    Close all HTTP clients and release resources.

    Safe to call multiple times (no-op if clients already closed).
    """
    global _clients, _config

    if not _clients:
        logger.info("HTTP clients not initialized, nothing to close")
        return

    try:
        logger.info("Closing HTTP clients...")
        for collaborator, client in _clients.items():
            await client.aclose()
            logger.info(f"  ✓ {collaborator} HTTP client closed")

    except Exception as e:
        logger.error(f"✗ Error closing HTTP clients: {e}", exc_info=True)

    finally:
        _clients = {}
        _config = None


async def check_http_clients_health() -> dict:
    """
    Check the health and status of HTTP clients.

    Returns:
        dict: Health status including:
            - status: "healthy", "degraded", or "unavailable"
            - clients: Per-collaborator status ("open" / "closed")
    """
    if not _clients:
        return {
            "status": "unavailable",
            "error": "HTTP clients not initialized",
        }

    clients = {
        collaborator: "closed" if client.is_closed else "open"
        for collaborator, client in _clients.items()
    }
    open_count = sum(1 for state in clients.values() if state == "open")

    if open_count == len(clients):
        status = "healthy"
    elif open_count:
        status = "degraded"
    else:
        status = "unavailable"

    return {
        "status": status,
        "http2": _config.http2_enabled if _config else None,
        "max_connections": _config.max_connections if _config else None,
        "clients": clients,
    }
