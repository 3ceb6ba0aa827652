"""Provider catalog and wire adapters.

Adding a provider means adding one adapter and registering it in ``ADAPTERS``.
"""

from typing import Any, Dict, Optional

from ..exceptions import ProviderHTTPError
from .anthropic_adapter import AnthropicAdapter
from .base_provider import ProviderAdapter, WireRequest
from .catalog import (
    PROVIDER_CATALOG,
    ModelDescriptor,
    ProviderDescriptor,
    get_provider,
    provider_ids,
)
from .google_adapter import GoogleAdapter
from .openai_adapter import OpenAIAdapter
from .transport import AiohttpTransport, HTTPTransport

ADAPTERS: Dict[str, ProviderAdapter] = {
    adapter.provider_id: adapter
    for adapter in (OpenAIAdapter(), AnthropicAdapter(), GoogleAdapter())
}


def get_adapter(provider_id: str) -> ProviderAdapter:
    adapter = ADAPTERS.get(provider_id)
    if adapter is None:
        raise ProviderHTTPError(provider_id, f"Unknown provider: {provider_id}")
    return adapter


def build_request(
    provider_id: str, model: str, prompt: str, temperature: float, max_tokens: int, api_key: str
) -> WireRequest:
    return get_adapter(provider_id).build_request(model, prompt, temperature, max_tokens, api_key)


def extract_text(provider_id: str, status: int, body: Optional[Dict[str, Any]]) -> str:
    return get_adapter(provider_id).extract_text(status, body)


__all__ = [
    "ADAPTERS",
    "PROVIDER_CATALOG",
    "AiohttpTransport",
    "AnthropicAdapter",
    "GoogleAdapter",
    "HTTPTransport",
    "ModelDescriptor",
    "OpenAIAdapter",
    "ProviderAdapter",
    "ProviderDescriptor",
    "WireRequest",
    "build_request",
    "extract_text",
    "get_adapter",
    "get_provider",
    "provider_ids",
]
