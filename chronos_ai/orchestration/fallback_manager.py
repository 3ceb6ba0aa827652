import logging
import time
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from ..config import MIN_API_KEY_LENGTH, AISettings
from ..exceptions import (
    CircuitOpenError,
    MalformedResponseError,
    NoProviderConfigured,
    ProviderError,
)
from ..models.canonical import CanonicalRequest, CanonicalResult
from ..monitoring.metrics import circuit_skips, provider_latency, provider_requests
from ..providers import ADAPTERS, HTTPTransport, ProviderAdapter, get_provider, provider_ids
from ..reliability.circuit_breaker import CircuitBreakerRegistry

logger = logging.getLogger(__name__)

ModelResolver = Callable[[str], Optional[str]]
ParseFn = Callable[[str], Any]


def candidate_order(preferred: Optional[str], catalog: Optional[Sequence[str]] = None) -> List[str]:
    """Preferred provider first, then the rest of the catalog, each once."""
    catalog = list(catalog) if catalog is not None else provider_ids()
    order: List[str] = [preferred] if preferred else []
    for provider in catalog:
        if provider not in order:
            order.append(provider)
    return order


def catalog_model_resolver(preferred: Optional[str], preferred_model: Optional[str]) -> ModelResolver:
    """Preferred provider uses the caller's model, others their first catalog model."""

    def resolve(provider: str) -> Optional[str]:
        if provider == preferred:
            return preferred_model or None
        descriptor = get_provider(provider)
        return descriptor.default_model if descriptor else None

    return resolve


def _usable_key(credentials: Mapping[str, Optional[str]], provider: str) -> Optional[str]:
    key = credentials.get(provider)
    if key and len(key) > MIN_API_KEY_LENGTH:
        return key
    return None


class FailoverOrchestrator:
    """Tries ranked providers until one returns usable output.

    Every per-provider failure is recorded against that provider's circuit and
    absorbed; only exhausting the candidate list raises, with the most recent
    provider error (or ``NoProviderConfigured`` if nothing was attempted).
    """

    def __init__(
        self,
        breaker: CircuitBreakerRegistry,
        transport: HTTPTransport,
        adapters: Optional[Mapping[str, ProviderAdapter]] = None,
    ):
        self.breaker = breaker
        self.transport = transport
        self.adapters = adapters if adapters is not None else ADAPTERS

    async def call(
        self,
        candidates: Sequence[str],
        model_resolver: ModelResolver,
        prompt: str,
        temperature: float,
        max_tokens: int,
        credentials: Mapping[str, Optional[str]],
        parse: Optional[ParseFn] = None,
    ) -> CanonicalResult:
        last_error: Optional[ProviderError] = None

        for provider in candidates:
            api_key = _usable_key(credentials, provider)
            if api_key is None:
                continue
            model = model_resolver(provider)
            if not model:
                continue
            adapter = self.adapters.get(provider)
            if adapter is None:
                continue

            try:
                self.breaker.check(provider)
            except CircuitOpenError as e:
                # a skip is not a new failure
                last_error = e
                circuit_skips.labels(provider=provider).inc()
                logger.info(f"Skipping {provider}: {last_error.message}")
                continue

            try:
                result = await self._attempt(adapter, model, prompt, temperature, max_tokens, api_key, parse)
            except ProviderError as e:
                if not e.provider:
                    e.provider = provider
                self.breaker.record_failure(provider)
                provider_requests.labels(provider=provider, outcome=_outcome(e)).inc()
                logger.warning(f"AI provider {provider} failed: {e.message}")
                last_error = e
                continue

            self.breaker.record_success(provider)
            provider_requests.labels(provider=provider, outcome="success").inc()
            return result

        if last_error is not None:
            raise last_error
        raise NoProviderConfigured()

    async def _attempt(
        self,
        adapter: ProviderAdapter,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        api_key: str,
        parse: Optional[ParseFn],
    ) -> CanonicalResult:
        provider = adapter.provider_id
        wire = adapter.build_request(model, prompt, temperature, max_tokens, api_key)

        start_time = time.monotonic()
        try:
            status, body = await self.transport.post(provider, wire.url, wire.headers, wire.body)
        finally:
            provider_latency.labels(provider=provider).observe(time.monotonic() - start_time)

        text = adapter.extract_text(status, body)
        parsed = parse(text) if parse is not None else None
        return CanonicalResult(raw_text=text, provider_used=provider, model_used=model, parsed=parsed)

    async def execute(
        self,
        request: CanonicalRequest,
        ai_settings: AISettings,
        parse: Optional[ParseFn] = None,
    ) -> CanonicalResult:
        """Run a canonical request across the default candidate order."""
        return await self.call(
            candidate_order(request.preferred_provider),
            catalog_model_resolver(request.preferred_provider, request.preferred_model),
            request.prompt_text,
            request.temperature,
            request.max_output_tokens,
            ai_settings.api_keys,
            parse=parse,
        )

    async def complete(
        self,
        prompt: str,
        preset: Tuple[float, int],
        ai_settings: AISettings,
        parse: Optional[ParseFn] = None,
    ) -> CanonicalResult:
        """Run a prompt with a (temperature, max tokens) preset against the caller's settings."""
        temperature, max_tokens = preset
        request = CanonicalRequest(
            prompt_text=prompt,
            preferred_provider=ai_settings.default_provider,
            preferred_model=ai_settings.default_model,
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
        return await self.execute(request, ai_settings, parse=parse)


def _outcome(error: ProviderError) -> str:
    if isinstance(error, MalformedResponseError):
        return "malformed"
    return type(error).__name__.replace("Provider", "").replace("Error", "").lower() or "error"
