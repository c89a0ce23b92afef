"""Outbound request descriptors and the transport that sends them."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from .. import http_pool
from ..errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestDescriptor:
    """Exact outbound call a step wants made on its behalf."""

    collaborator: str
    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


@dataclass(frozen=True)
class CollaboratorResponse:
    """Raw collaborator reply.

    ``body`` is the decoded text (invalid UTF-8 bytes are replaced);
    ``content`` holds the bytes exactly as received when the transport has them.
    """

    status_code: int
    body: str
    content: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(ABC):
    """Sends a RequestDescriptor and returns the collaborator's raw response."""

    @abstractmethod
    async def send(self, request: RequestDescriptor) -> CollaboratorResponse:
        """
        Perform the call.

        Raises:
            TransportError: If the collaborator could not be reached or the
                call timed out. Non-success status codes are NOT errors here.
        """
        pass


class HttpTransport(Transport):
    """Transport over pooled httpx clients, one per collaborator."""

    def __init__(self, clients: Optional[Dict[str, httpx.AsyncClient]] = None):
        """
        Args:
            clients: Collaborator name -> client. When omitted, clients are
                looked up in the global pool (see ``http_pool``).
        """
        self._clients = clients

    def _client_for(self, collaborator: str) -> httpx.AsyncClient:
        if self._clients is None:
            return http_pool.get_client(collaborator)
        try:
            return self._clients[collaborator]
        except KeyError:
            raise KeyError(
                f"No HTTP client configured for collaborator '{collaborator}'"
            ) from None

    async def send(self, request: RequestDescriptor) -> CollaboratorResponse:
        client = self._client_for(request.collaborator)
        logger.debug(f"→ {request.collaborator} {request.method} {request.path}")

        try:
            response = await client.request(
                request.method,
                request.path,
                headers=request.headers,
                content=request.body,
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"{request.collaborator} {request.method} {request.path} timed out: {e}",
                error_type="TimeoutError",
                collaborator=request.collaborator,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"{request.collaborator} {request.method} {request.path} failed: {e}",
                error_type=type(e).__name__,
                collaborator=request.collaborator,
            ) from e
        except (UnicodeEncodeError, httpx.InvalidURL) as e:
            # Request could not be encoded, e.g. a non-ASCII header value
            raise TransportError(
                f"{request.collaborator} {request.method} {request.path} could not be sent: {e}",
                error_type=type(e).__name__,
                collaborator=request.collaborator,
            ) from e

        logger.debug(f"← {request.collaborator} HTTP {response.status_code}")
        return CollaboratorResponse(
            status_code=response.status_code,
            body=response.text,
            content=response.content,
        )
