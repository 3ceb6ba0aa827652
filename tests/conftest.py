"""Global test configuration and fixtures."""
import pytest

from chronos_ai.cache import ResponseCache
from chronos_ai.config import AISettings, Settings
from chronos_ai.orchestration import FailoverOrchestrator
from chronos_ai.reliability import CircuitBreakerRegistry
from chronos_ai.services import NarrativeAIService

from tests.fakes import FakeClock, FakeTransport

OPENAI_KEY = "sk-test-openai-0123456789"
ANTHROPIC_KEY = "sk-ant-test-0123456789"
GOOGLE_KEY = "AIza-test-0123456789"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def breaker(clock):
    return CircuitBreakerRegistry(failure_threshold=3, recovery_timeout=30.0, clock=clock)


@pytest.fixture
def cache(clock):
    return ResponseCache(ttl=300.0, clock=clock)


@pytest.fixture
def ai_settings():
    """All three providers configured, OpenAI preferred."""
    return AISettings(
        default_provider="openai",
        default_model="gpt-4o-mini",
        api_keys={"openai": OPENAI_KEY, "anthropic": ANTHROPIC_KEY, "google": GOOGLE_KEY},
    )


@pytest.fixture
def failover(breaker, transport):
    return FailoverOrchestrator(breaker, transport)


@pytest.fixture
def app_settings():
    return Settings(
        default_provider="openai",
        default_model="gpt-4o-mini",
        openai_api_key=OPENAI_KEY,
        anthropic_api_key=ANTHROPIC_KEY,
        google_api_key=GOOGLE_KEY,
        rolling_context_chars=2000,
    )


@pytest.fixture
def service(app_settings, transport, breaker, cache):
    return NarrativeAIService(app_settings, transport=transport, breaker=breaker, cache=cache)
