"""Base adapter interface for provider wire formats."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..exceptions import ProviderHTTPError


@dataclass
class WireRequest:
    """Provider-specific HTTP request, ready to send."""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)


class ProviderAdapter(ABC):
    """Translates canonical prompts to one provider's wire format and back.

    Adapters are pure: they never perform I/O. Temperature and max tokens are
    passed through unchanged wherever the provider's format carries them.
    """

    provider_id: str = ""
    label: str = ""

    @abstractmethod
    def build_request(
        self,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        api_key: str,
    ) -> WireRequest:
        """Build the request for a single-turn user prompt."""

    @abstractmethod
    def _text_from_body(self, body: Dict[str, Any]) -> str:
        """Walk the provider-specific path to the generated text."""

    def extract_text(self, status: int, body: Optional[Dict[str, Any]]) -> str:
        """Return generated text, or raise ``ProviderHTTPError``."""
        body = body if isinstance(body, dict) else {}
        if not 200 <= status < 300:
            raise ProviderHTTPError(self.provider_id, self.error_message(body), status=status)

        try:
            text = self._text_from_body(body)
        except (KeyError, IndexError, TypeError):
            raise ProviderHTTPError(self.provider_id, self.error_message(body), status=status)

        if not isinstance(text, str):
            raise ProviderHTTPError(self.provider_id, self.error_message(body), status=status)
        return text

    def error_message(self, body: Dict[str, Any]) -> str:
        """Message from the provider's ``{"error": {"message": ...}}`` envelope."""
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return f"{self.label} API error"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider_id})"
