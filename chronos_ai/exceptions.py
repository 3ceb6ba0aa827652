"""Error taxonomy for provider calls.

Per-provider failures (``ProviderError`` subclasses) are absorbed by the
failover loop; only the last one, or ``NoProviderConfigured``, ever reaches a
caller.
"""

import math
from typing import Optional


class ChronosAIError(Exception):
    """Base exception for the AI core"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoProviderConfigured(ChronosAIError):
    """Raised when no candidate provider had a usable API key"""

    DEFAULT_MESSAGE = "No AI provider configured. Add an API key in Settings."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.DEFAULT_MESSAGE)


class ProviderError(ChronosAIError):
    """A single provider attempt failed"""

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider


class CircuitOpenError(ProviderError):
    """Provider skipped because its circuit breaker is open"""

    def __init__(self, provider: str, retry_in: float):
        self.retry_in = max(0, math.ceil(retry_in))
        super().__init__(
            provider,
            f"Circuit breaker open for {provider}. Will retry in {self.retry_in}s.",
        )


class ProviderHTTPError(ProviderError):
    """Non-success response, or a response without the expected text path"""

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        super().__init__(provider, message)
        self.status = status


class ProviderTransportError(ProviderError):
    """Network failure or timeout before a response was received"""


class MalformedResponseError(ProviderError):
    """Model output could not be parsed as JSON

    Raised by the parser, which does not know the provider; the failover loop
    fills in ``provider`` before recording the failure.
    """

    def __init__(self, message: str, excerpt: str = "", provider: str = ""):
        super().__init__(provider, message)
        self.excerpt = excerpt[:200]
