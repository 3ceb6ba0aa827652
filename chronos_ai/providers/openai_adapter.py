"""OpenAI chat-completions adapter."""

from typing import Any, Dict

from .base_provider import ProviderAdapter, WireRequest


class OpenAIAdapter(ProviderAdapter):
    """OpenAI API adapter for GPT models."""

    provider_id = "openai"
    label = "OpenAI"
    BASE_URL = "https://api.openai.com/v1"

    def build_request(
        self,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        api_key: str,
    ) -> WireRequest:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        return WireRequest(url=f"{self.BASE_URL}/chat/completions", headers=headers, body=payload)

    def _text_from_body(self, body: Dict[str, Any]) -> str:
        return body["choices"][0]["message"]["content"]
