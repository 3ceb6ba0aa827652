"""Thin HTTP collaborator used by the failover loop."""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol, Tuple

import aiohttp

from ..exceptions import ProviderTransportError

logger = logging.getLogger(__name__)


class HTTPTransport(Protocol):
    async def post(
        self, provider: str, url: str, headers: Dict[str, str], body: Dict[str, Any]
    ) -> Tuple[int, Dict[str, Any]]:
        """POST a JSON body and return ``(status, decoded JSON body)``."""
        ...


class AiohttpTransport:
    """aiohttp-backed transport with one shared session."""

    def __init__(self, timeout: float = 60.0):
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self.session

    async def post(
        self, provider: str, url: str, headers: Dict[str, str], body: Dict[str, Any]
    ) -> Tuple[int, Dict[str, Any]]:
        session = await self._ensure_session()
        try:
            async with session.post(url, json=body, headers=headers) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    data = {}
                return response.status, data if isinstance(data, dict) else {}
        except asyncio.TimeoutError:
            raise ProviderTransportError(provider, f"Request to {provider} timed out after {self.timeout}s")
        except aiohttp.ClientError as e:
            raise ProviderTransportError(provider, f"Error calling {provider}: {str(e)}")

    async def close(self):
        """Close the aiohttp session."""
        if self.session:
            await self.session.close()
            self.session = None
