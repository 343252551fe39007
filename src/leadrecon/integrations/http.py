"""Shared httpx plumbing for collaborator clients."""

import logging
from typing import Optional

import httpx

from leadrecon.core.errors import CollaboratorUnavailable, IntegrationError
from leadrecon.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.INTEGRATIONS)


class HTTPCollaborator:
    """Base for clients that call one HTTP API.

    Attributes:
        name: Collaborator name used in errors and logs
        base_url: Root URL of the API
        timeout: Request timeout in seconds
    """

    name = "collaborator"

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def client(self, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            **kwargs,
        )

    @staticmethod
    def require(value: Optional[str], setting: str) -> str:
        """Return a credential or raise CollaboratorUnavailable naming it."""
        if not value:
            raise CollaboratorUnavailable(f"{setting} missing")
        return value

    def check(self, response: httpx.Response) -> httpx.Response:
        """Raise IntegrationError for non-2xx responses."""
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"{self.name} {response.request.method} {response.request.url} "
                f"-> {response.status_code}"
            )
            raise IntegrationError(f"{self.name} returned {response.status_code}") from e
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"{self.name} {response.request.method} {response.request.url} ok")
        return response
