"""Static provider and model catalog."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ModelDescriptor:
    """Configuration for a specific model."""

    model_id: str
    display_name: str
    cost_per_1k_tokens: float  # cents
    max_context_tokens: int


@dataclass(frozen=True)
class ProviderDescriptor:
    id: str
    display_name: str
    models: Tuple[ModelDescriptor, ...]

    @property
    def default_model(self) -> Optional[str]:
        return self.models[0].model_id if self.models else None


PROVIDER_CATALOG: Tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        id="openai",
        display_name="OpenAI",
        models=(
            ModelDescriptor("gpt-4o", "GPT-4o", 0.5, 128000),
            ModelDescriptor("gpt-4o-mini", "GPT-4o Mini", 0.015, 128000),
            ModelDescriptor("gpt-4-turbo", "GPT-4 Turbo", 1.0, 128000),
        ),
    ),
    ProviderDescriptor(
        id="anthropic",
        display_name="Anthropic",
        models=(
            ModelDescriptor("claude-3-5-sonnet", "Claude 3.5 Sonnet", 0.3, 200000),
            ModelDescriptor("claude-3-haiku", "Claude 3 Haiku", 0.025, 200000),
        ),
    ),
    ProviderDescriptor(
        id="google",
        display_name="Google",
        models=(
            ModelDescriptor("gemini-2.0-flash", "Gemini 2.0 Flash", 0.01, 1000000),
            ModelDescriptor("gemini-1.5-pro", "Gemini 1.5 Pro", 0.125, 2000000),
        ),
    ),
)

_BY_ID: Dict[str, ProviderDescriptor] = {p.id: p for p in PROVIDER_CATALOG}


def provider_ids() -> List[str]:
    """Provider ids in fixed enumeration order."""
    return [p.id for p in PROVIDER_CATALOG]


def get_provider(provider_id: str) -> Optional[ProviderDescriptor]:
    return _BY_ID.get(provider_id)
