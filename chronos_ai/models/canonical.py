"""Per-call value types shared by the orchestration layer."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CanonicalRequest:
    prompt_text: str
    preferred_provider: Optional[str]
    preferred_model: Optional[str]
    temperature: float
    max_output_tokens: int


@dataclass
class CanonicalResult:
    raw_text: str
    provider_used: str
    model_used: str
    served_from_cache: bool = False
    parsed: Optional[Any] = None
