from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderId = Literal["openai", "anthropic", "google"]

# Keys at or below this length are treated as placeholders
MIN_API_KEY_LENGTH = 10

# (temperature, max output tokens)
CREATIVE = (0.8, 2000)
ANALYTICAL = (0.3, 4000)


class AISettings(BaseModel):
    """Read-only provider selection and credentials supplied by the caller."""

    default_provider: ProviderId = "openai"
    default_model: str = "gpt-4o-mini"
    api_keys: Dict[str, str] = Field(default_factory=dict)

    def is_configured(self, provider: str) -> bool:
        key = self.api_keys.get(provider)
        return bool(key) and len(key) > MIN_API_KEY_LENGTH

    def has_configured_provider(self) -> bool:
        return any(self.is_configured(provider) for provider in self.api_keys)

    def configured_providers(self) -> list:
        return [provider for provider in self.api_keys if self.is_configured(provider)]


class Settings(BaseSettings):
    # API Configuration
    api_title: str = "Chronos AI Core"
    api_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Provider selection
    default_provider: ProviderId = "openai"
    default_model: str = "gpt-4o-mini"
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    google_api_key: Optional[str] = None
    request_timeout: float = 60.0

    # Reliability
    circuit_failure_threshold: int = 3
    circuit_recovery_timeout: float = 30.0  # seconds

    # Caching
    cache_ttl: float = 300.0  # 5 minutes

    # Co-writing
    rolling_context_chars: int = 2000

    # Monitoring
    enable_metrics: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def to_ai_settings(self) -> AISettings:
        keys = {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "google": self.google_api_key,
        }
        return AISettings(
            default_provider=self.default_provider,
            default_model=self.default_model,
            api_keys={provider: key for provider, key in keys.items() if key},
        )


settings = Settings()
