"""
API Client - aiohttp transport for the PiShock HTTP API.

One client (and one ClientSession) is shared by an account and every shocker
obtained from it. Sessions are created lazily inside the running event loop.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Optional, Tuple

import aiohttp

from pishock_client.core.config import PUBLIC_API_BASE_URL
from pishock_client.core.errors import PiShockConnectionError
from pishock_client.core.logging_utils import get_module_logger, mask_secret

logger = get_module_logger("APIClient")

DEFAULT_TIMEOUT = 10.0


def _loggable(payload: Dict[str, Any]) -> Dict[str, Any]:
    if "Apikey" not in payload:
        return payload
    return {**payload, "Apikey": mask_secret(payload["Apikey"])}


class PiShockAPIClient:
    """
    Minimal async HTTP client for the PiShock API.

    Every endpoint is a JSON POST; this class only moves bytes and maps
    transport failures to ``PiShockConnectionError``. Interpreting response
    bodies is left to the caller.
    """

    def __init__(
        self,
        base_url: str = PUBLIC_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root without trailing slash
            timeout: Total timeout per request (seconds)
            session: Optional externally managed session (never closed here)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "PiShockAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    def url_for(self, path: str) -> str:
        return self.base_url + path

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    async def post_text(self, path: str, payload: Dict[str, Any]) -> Tuple[int, str]:
        """POST ``payload`` as JSON and return ``(status, body text)``."""
        url = self.url_for(path)
        logger.debug("POST %s %s", url, _loggable(payload))

        try:
            async with self._get_session().post(url, json=payload) as response:
                text = await response.text()
                logger.debug("Response from %s: %d", url, response.status)
                return response.status, text
        except aiohttp.ClientResponseError as exc:
            raise PiShockConnectionError(
                f"Failed to connect to {url}, response code: {exc.status}"
            ) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise PiShockConnectionError(f"Failed to connect to {url}") from exc
        except UnicodeDecodeError as exc:
            raise PiShockConnectionError(f"Failed to read response from {url}") from exc

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Tuple[int, Any]:
        """POST ``payload`` as JSON and return ``(status, decoded body)``.

        Non-200 bodies are returned undecoded as text.

        Raises:
            PiShockConnectionError: On transport failures.
            ValueError: If a 200 response body is not valid JSON.
        """
        status, text = await self.post_text(path, payload)
        if status != 200:
            return status, text
        logger.debug("Response body: %s", text)
        return status, json.loads(text)
