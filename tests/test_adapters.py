"""Wire adapter request/response shape tests."""
import pytest

from chronos_ai.exceptions import ProviderHTTPError
from chronos_ai.providers import ADAPTERS, build_request, extract_text, get_adapter

from tests.fakes import error_body, success_body


def test_lookup_table_has_every_catalog_provider():
    assert list(ADAPTERS) == ["openai", "anthropic", "google"]


def test_openai_request_shape():
    wire = build_request("openai", "gpt-4o", "Hello", 0.3, 4000, "sk-key-0123456789")

    assert wire.url == "https://api.openai.com/v1/chat/completions"
    assert wire.headers["Authorization"] == "Bearer sk-key-0123456789"
    assert wire.body == {
        "model": "gpt-4o",
        "messages": [{"role": "user", "content": "Hello"}],
        "temperature": 0.3,
        "max_tokens": 4000,
    }


def test_anthropic_request_shape():
    wire = build_request("anthropic", "claude-3-haiku", "Hello", 0.8, 2000, "sk-ant-0123456789")

    assert wire.url == "https://api.anthropic.com/v1/messages"
    assert wire.headers["x-api-key"] == "sk-ant-0123456789"
    assert wire.headers["anthropic-version"] == "2023-06-01"
    assert "Authorization" not in wire.headers
    assert wire.body == {
        "model": "claude-3-haiku",
        "max_tokens": 2000,
        "messages": [{"role": "user", "content": "Hello"}],
    }


def test_google_request_shape():
    wire = build_request("google", "gemini-2.0-flash", "Hello", 0.8, 2000, "AIza0123456789")

    assert wire.url == (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.0-flash:generateContent?key=AIza0123456789"
    )
    assert wire.body == {
        "contents": [{"parts": [{"text": "Hello"}]}],
        "generationConfig": {"temperature": 0.8, "maxOutputTokens": 2000},
    }


@pytest.mark.parametrize("provider", ["openai", "anthropic", "google"])
def test_extracts_text_from_provider_path(provider):
    assert extract_text(provider, 200, success_body(provider, "generated")) == "generated"


@pytest.mark.parametrize("provider", ["openai", "anthropic", "google"])
def test_non_success_surfaces_provider_message(provider):
    with pytest.raises(ProviderHTTPError) as exc_info:
        extract_text(provider, 429, error_body("Rate limit reached"))

    assert exc_info.value.message == "Rate limit reached"
    assert exc_info.value.status == 429
    assert exc_info.value.provider == provider


@pytest.mark.parametrize("provider, label", [
    ("openai", "OpenAI API error"),
    ("anthropic", "Anthropic API error"),
    ("google", "Google AI API error"),
])
def test_generic_message_without_envelope(provider, label):
    with pytest.raises(ProviderHTTPError) as exc_info:
        extract_text(provider, 503, {})
    assert exc_info.value.message == label


def test_missing_text_path_is_an_http_error():
    with pytest.raises(ProviderHTTPError):
        extract_text("openai", 200, {"choices": []})

    with pytest.raises(ProviderHTTPError):
        extract_text("google", 200, {"candidates": [{"content": {}}]})


def test_unknown_provider():
    with pytest.raises(ProviderHTTPError, match="Unknown provider: mistral"):
        get_adapter("mistral")
