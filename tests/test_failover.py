"""Failover orchestration tests."""
import asyncio

import pytest

from chronos_ai.config import AISettings
from chronos_ai.exceptions import (
    CircuitOpenError,
    MalformedResponseError,
    NoProviderConfigured,
    ProviderHTTPError,
    ProviderTransportError,
)
from chronos_ai.models import CanonicalRequest
from chronos_ai.orchestration import candidate_order, catalog_model_resolver
from chronos_ai.parsing import parse_json

from tests.conftest import ANTHROPIC_KEY, GOOGLE_KEY, OPENAI_KEY


def canonical(provider="openai", model="gpt-4o-mini"):
    return CanonicalRequest(
        prompt_text="Write something",
        preferred_provider=provider,
        preferred_model=model,
        temperature=0.8,
        max_output_tokens=2000,
    )


def test_candidate_order_puts_preferred_first():
    assert candidate_order("google") == ["google", "openai", "anthropic"]
    assert candidate_order("openai") == ["openai", "anthropic", "google"]
    assert candidate_order(None) == ["openai", "anthropic", "google"]


def test_model_resolver_uses_catalog_for_fallbacks():
    resolve = catalog_model_resolver("anthropic", "claude-3-haiku")
    assert resolve("anthropic") == "claude-3-haiku"
    assert resolve("openai") == "gpt-4o"
    assert resolve("google") == "gemini-2.0-flash"
    assert resolve("mistral") is None


@pytest.mark.asyncio
async def test_preferred_provider_success(failover, transport, ai_settings):
    transport.reply_text("openai", "hello")

    result = await failover.execute(canonical(), ai_settings)

    assert result.raw_text == "hello"
    assert result.provider_used == "openai"
    assert result.model_used == "gpt-4o-mini"
    assert not result.served_from_cache
    assert transport.providers_called() == ["openai"]


@pytest.mark.asyncio
async def test_fails_over_in_catalog_order(failover, transport, breaker, ai_settings):
    transport.fail("openai", 500, "boom")
    transport.fail("anthropic", 529, "overloaded")
    transport.reply_text("google", "from gemini")

    result = await failover.execute(canonical(), ai_settings)

    assert transport.providers_called() == ["openai", "anthropic", "google"]
    assert result.provider_used == "google"
    assert result.model_used == "gemini-2.0-flash"
    assert breaker.get_state("openai").consecutive_failures == 1
    assert breaker.get_state("anthropic").consecutive_failures == 1
    assert breaker.get_state("google").consecutive_failures == 0


@pytest.mark.asyncio
async def test_preferred_provider_not_repeated(failover, transport, ai_settings):
    for provider in ("openai", "anthropic", "google"):
        transport.fail(provider)

    with pytest.raises(ProviderHTTPError):
        await failover.execute(canonical(provider="anthropic", model="claude-3-haiku"), ai_settings)

    assert transport.providers_called() == ["anthropic", "openai", "google"]


@pytest.mark.asyncio
async def test_unconfigured_and_short_keys_are_skipped(failover, transport):
    settings = AISettings(
        default_provider="openai",
        api_keys={"openai": "", "anthropic": "sk-short", "google": GOOGLE_KEY},
    )
    transport.reply_text("google", "ok")

    result = await failover.execute(canonical(), settings)

    assert result.provider_used == "google"
    assert transport.providers_called() == ["google"]


@pytest.mark.asyncio
async def test_no_configured_provider_makes_no_attempt(failover, transport):
    with pytest.raises(NoProviderConfigured) as exc_info:
        await failover.execute(canonical(), AISettings(api_keys={}))

    assert "No AI provider configured" in exc_info.value.message
    assert transport.calls == []


@pytest.mark.asyncio
async def test_exhaustion_raises_last_error(failover, transport, ai_settings):
    transport.fail("openai", 500, "first")
    transport.fail("anthropic", 500, "second")
    transport.fail("google", 400, "API key not valid")

    with pytest.raises(ProviderHTTPError) as exc_info:
        await failover.execute(canonical(), ai_settings)

    assert exc_info.value.provider == "google"
    assert exc_info.value.message == "API key not valid"


@pytest.mark.asyncio
async def test_transport_errors_count_as_failures(failover, transport, breaker, ai_settings):
    transport.script("openai", ProviderTransportError("openai", "timed out"))
    transport.reply_text("anthropic", "ok")

    result = await failover.execute(canonical(), ai_settings)

    assert result.provider_used == "anthropic"
    assert breaker.get_state("openai").consecutive_failures == 1


@pytest.mark.asyncio
async def test_open_circuit_is_skipped_without_attempt_or_new_failure(failover, transport, breaker, ai_settings):
    for _ in range(3):
        breaker.record_failure("openai")
    transport.reply_text("anthropic", "ok")

    result = await failover.execute(canonical(), ai_settings)

    assert result.provider_used == "anthropic"
    assert transport.providers_called() == ["anthropic"]
    assert breaker.get_state("openai").consecutive_failures == 3


@pytest.mark.asyncio
async def test_all_circuits_open_surfaces_circuit_error(failover, transport, breaker, ai_settings):
    for provider in ("openai", "anthropic", "google"):
        for _ in range(3):
            breaker.record_failure(provider)

    with pytest.raises(CircuitOpenError) as exc_info:
        await failover.execute(canonical(), ai_settings)

    assert exc_info.value.provider == "google"
    assert exc_info.value.retry_in == 30
    assert transport.calls == []


@pytest.mark.asyncio
async def test_preferred_provider_trips_after_three_calls(failover, transport, breaker, clock):
    settings = AISettings(
        default_provider="openai",
        api_keys={"openai": OPENAI_KEY, "anthropic": ANTHROPIC_KEY},
    )
    transport.fail("openai", 503, "down")
    transport.reply_text("anthropic", "fallback")

    for _ in range(3):
        result = await failover.execute(canonical(), settings)
        assert result.provider_used == "anthropic"
        clock.advance(5)

    calls_before = len(transport.calls)
    result = await failover.execute(canonical(), settings)

    assert result.provider_used == "anthropic"
    assert transport.providers_called()[calls_before:] == ["anthropic"]
    assert transport.providers_called().count("openai") == 3
    assert breaker.get_state("openai").is_open


@pytest.mark.asyncio
async def test_parse_failure_fails_over(failover, transport, breaker, ai_settings):
    transport.reply_text("openai", "I'd be happy to help! {not json")
    transport.reply_text("anthropic", '```json\n{"ok": true}\n```')

    result = await failover.execute(canonical(), ai_settings, parse=parse_json)

    assert result.provider_used == "anthropic"
    assert result.parsed == {"ok": True}
    assert breaker.get_state("openai").consecutive_failures == 1
    assert breaker.get_state("anthropic").consecutive_failures == 0


@pytest.mark.asyncio
async def test_parse_failure_on_last_candidate_names_provider(failover, transport):
    settings = AISettings(default_provider="google", default_model="gemini-1.5-pro", api_keys={"google": GOOGLE_KEY})
    transport.reply_text("google", "not json at all")

    with pytest.raises(MalformedResponseError) as exc_info:
        await failover.execute(canonical("google", "gemini-1.5-pro"), settings, parse=parse_json)

    assert exc_info.value.provider == "google"
    assert exc_info.value.excerpt == "not json at all"


@pytest.mark.asyncio
async def test_temperature_and_tokens_pass_through(failover, transport, ai_settings):
    transport.reply_text("openai", "ok")

    await failover.complete("Analyze", (0.3, 4000), ai_settings)

    body = transport.calls[0].body
    assert body["temperature"] == 0.3
    assert body["max_tokens"] == 4000


@pytest.mark.asyncio
async def test_concurrent_calls_keep_separate_results(failover, transport, ai_settings):
    transport.reply_text("openai", "same answer")

    results = await asyncio.gather(*[failover.execute(canonical(), ai_settings) for _ in range(5)])

    assert [r.raw_text for r in results] == ["same answer"] * 5
    assert len(transport.calls) == 5
