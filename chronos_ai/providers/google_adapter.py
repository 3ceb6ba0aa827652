"""Google Generative Language (Gemini) adapter."""

from typing import Any, Dict
from urllib.parse import quote

from .base_provider import ProviderAdapter, WireRequest


class GoogleAdapter(ProviderAdapter):
    """Gemini generateContent adapter; the API key travels in the query string."""

    provider_id = "google"
    label = "Google AI"
    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def build_request(
        self,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        api_key: str,
    ) -> WireRequest:
        url = f"{self.BASE_URL}/models/{quote(model, safe='.-_')}:generateContent?key={quote(api_key, safe='')}"
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature, "maxOutputTokens": max_tokens},
        }
        return WireRequest(url=url, headers={"Content-Type": "application/json"}, body=payload)

    def _text_from_body(self, body: Dict[str, Any]) -> str:
        return body["candidates"][0]["content"]["parts"][0]["text"]
