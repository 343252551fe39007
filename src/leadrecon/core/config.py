"""Environment-driven configuration.

Three settings groups:
1. GraphConfig: engine limits and the failure policy
2. FeatureFlags: deck provider selection, captured by the conductor's routers
3. IntegrationSettings: credentials and endpoints for external collaborators
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FailurePolicy = Literal["record", "raise"]


class GraphConfig(BaseSettings):
    """Engine configuration.

    Attributes:
        node_timeout: Per-node deadline in seconds, ``None`` disables it
        max_wavefronts: Upper bound on wavefronts per run (guards cycles)
        max_concurrent_runs: Simultaneous runs allowed by ``run_batch``
        failure_policy: ``record`` turns node exceptions into ``errors``
            entries, ``raise`` aborts the run
    """

    model_config = SettingsConfigDict(env_prefix="LEADRECON_", extra="ignore", frozen=True)

    node_timeout: Optional[float] = Field(default=120.0, gt=0)
    max_wavefronts: int = Field(default=50, ge=1)
    max_concurrent_runs: int = Field(default=5, ge=1)
    failure_policy: FailurePolicy = Field(default="record")


class FeatureFlags(BaseSettings):
    """Deck provider flags.

    ``GAMMA_ENABLED`` only turns off on the literal string ``false``.
    """

    model_config = SettingsConfigDict(extra="ignore", frozen=True)

    gamma_enabled: bool = Field(default=True)
    default_deck_provider: Literal["google", "gamma"] = Field(default="google")

    @field_validator("gamma_enabled", mode="before")
    @classmethod
    def _only_false_disables(cls, value):
        if isinstance(value, str):
            return value.strip().lower() != "false"
        return value

    @field_validator("default_deck_provider", mode="before")
    @classmethod
    def _normalise_provider(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class IntegrationSettings(BaseSettings):
    """Endpoints and credentials for external collaborators."""

    model_config = SettingsConfigDict(extra="ignore", frozen=True)

    gamma_api_base_url: str = "https://api.gamma.app/v1"
    gamma_api_key: Optional[str] = None

    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_bucket_decks: str = "decks"

    google_access_token: Optional[str] = None
    stripe_secret_key: Optional[str] = None

    funnel_base_url: str = "https://leadrecon.app"
    llm_model: str = "gpt-4o-mini"
    http_timeout: float = Field(default=60.0, gt=0)
