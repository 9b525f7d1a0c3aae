"""Shared HTTP plumbing for vendor providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from pinescript_assistant.config.models import ProviderConfig
from pinescript_assistant.errors import ProviderError, ProviderErrorKind

logger = logging.getLogger(__name__)


def classify_status(status_code: int) -> ProviderErrorKind:
    """Map an HTTP status from a vendor API to a provider error kind."""
    if status_code in (401, 403):
        return ProviderErrorKind.AUTH
    if status_code == 429:
        return ProviderErrorKind.RATE_LIMIT
    if status_code in (408, 504):
        return ProviderErrorKind.TIMEOUT
    return ProviderErrorKind.NETWORK


class HttpProvider(ABC):
    """Base class for providers speaking a vendor's HTTPS JSON API.

    Subclasses set ``name``, ``default_base_url`` and ``endpoint`` and
    implement the three request/response hooks.
    """

    name = "http"
    default_base_url = ""
    endpoint = ""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize HTTP provider.

        Args:
            transport: Optional httpx transport (used to stub the network in tests).
        """
        self._transport = transport

    async def send(self, prompt: str, config: ProviderConfig) -> str:
        """Send a prompt and return the raw model output.

        Raises:
            ProviderError: If the request fails or the response envelope is malformed.
        """
        base_url = (config.base_url or self.default_base_url).rstrip("/")
        url = f"{base_url}{self.endpoint}"
        data = await self._make_request(
            url,
            headers=self._build_headers(config),
            payload=self._build_payload(prompt, config),
            timeout=config.timeout_seconds,
        )
        try:
            return self._extract_text(data)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.error("Unexpected response payload from %s at %s", self.name, url)
            raise ProviderError(
                f"Unexpected response payload: {exc}",
                kind=ProviderErrorKind.NETWORK,
                provider=self.name,
                operation="send",
            ) from exc

    @abstractmethod
    def _build_headers(self, config: ProviderConfig) -> Dict[str, str]:
        """Request headers, including credentials."""

    @abstractmethod
    def _build_payload(self, prompt: str, config: ProviderConfig) -> Dict[str, Any]:
        """JSON request body for ``prompt``."""

    @abstractmethod
    def _extract_text(self, data: Dict[str, Any]) -> str:
        """Model output from the decoded response body.

        Raises:
            KeyError, IndexError, TypeError, ValueError: If the envelope is malformed.
        """

    async def _make_request(
        self,
        url: str,
        headers: Dict[str, str],
        payload: Dict[str, Any],
        timeout: float,
    ) -> Dict[str, Any]:
        """POST the payload and decode the JSON body.

        Raises:
            ProviderError: On timeout, connection failure, non-2xx status or invalid JSON.
        """
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(url, headers=headers, json=payload)
                response.raise_for_status()
                return response.json()

        except httpx.TimeoutException as exc:
            logger.error("Timeout calling %s API at %s", self.name, url)
            raise ProviderError(
                f"Request timed out after {timeout:.1f}s",
                kind=ProviderErrorKind.TIMEOUT,
                provider=self.name,
                operation="send",
            ) from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.error("HTTP %s from %s API at %s", status_code, self.name, url)
            raise ProviderError(
                f"HTTP {status_code}: {exc.response.text[:200]}",
                kind=classify_status(status_code),
                status_code=status_code,
                provider=self.name,
                operation="send",
            ) from exc
        except httpx.TransportError as exc:
            logger.error("Connection error calling %s API at %s: %s", self.name, url, exc)
            raise ProviderError(
                f"Connection error: {exc}",
                kind=ProviderErrorKind.NETWORK,
                provider=self.name,
                operation="send",
            ) from exc
        except ValueError as exc:
            logger.error("Invalid JSON response from %s API at %s", self.name, url)
            raise ProviderError(
                "Invalid JSON in response body",
                kind=ProviderErrorKind.NETWORK,
                provider=self.name,
                operation="send",
            ) from exc
