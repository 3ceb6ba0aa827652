"""Anthropic messages adapter."""

from typing import Any, Dict

from .base_provider import ProviderAdapter, WireRequest


class AnthropicAdapter(ProviderAdapter):
    """Anthropic API adapter for Claude models.

    The messages body carries ``max_tokens`` but no temperature field.
    """

    provider_id = "anthropic"
    label = "Anthropic"
    BASE_URL = "https://api.anthropic.com/v1"
    ANTHROPIC_VERSION = "2023-06-01"

    def build_request(
        self,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        api_key: str,
    ) -> WireRequest:
        headers = {
            "x-api-key": api_key,
            "anthropic-version": self.ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        payload = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        return WireRequest(url=f"{self.BASE_URL}/messages", headers=headers, body=payload)

    def _text_from_body(self, body: Dict[str, Any]) -> str:
        return body["content"][0]["text"]
