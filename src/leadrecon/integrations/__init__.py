"""External collaborators used by the pipeline's nodes.

``Collaborators`` bundles one implementation per protocol. ``from_settings``
builds the production set; any field may be replaced, which is how tests and
dry runs inject fakes.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from leadrecon.core.config import IntegrationSettings
from leadrecon.core.errors import CollaboratorUnavailable
from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations.base import (
    Copywriter,
    DeckOutline,
    FunnelBuilder,
    FunnelPages,
    FunnelStrategy,
    GammaAPI,
    GammaDocument,
    PaymentsAPI,
    ProductPrice,
    SlideOutline,
    SlidesAPI,
    Storage,
    WorkflowTracer,
)
from leadrecon.integrations.copywriter import MirascopeCopywriter
from leadrecon.integrations.export import to_csv
from leadrecon.integrations.funnels import HostedFunnelBuilder
from leadrecon.integrations.gamma import GammaClient
from leadrecon.integrations.payments import StripeClient
from leadrecon.integrations.slides import GoogleSlidesClient
from leadrecon.integrations.storage import MemoryStorage, SupabaseStorage
from leadrecon.integrations.tracing import LoggingTracer

logger = get_logger(LogComponent.INTEGRATIONS)


class Collaborators(BaseModel):
    """One implementation per collaborator protocol.

    A ``None`` field means the collaborator is not configured; the node that
    needs it raises ``CollaboratorUnavailable``, which the engine records like
    any other node failure.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    storage: Optional[Storage] = None
    gamma: Optional[GammaAPI] = None
    slides: Optional[SlidesAPI] = None
    payments: Optional[PaymentsAPI] = None
    funnels: Optional[FunnelBuilder] = None
    copywriter: Optional[Copywriter] = None
    tracer: WorkflowTracer = Field(default_factory=LoggingTracer)

    def require(self, name: str):
        """Return the named collaborator or raise CollaboratorUnavailable."""
        value = getattr(self, name)
        if value is None:
            raise CollaboratorUnavailable(f"{name} collaborator is not configured")
        return value

    @classmethod
    def from_settings(cls, settings: Optional[IntegrationSettings] = None) -> "Collaborators":
        """Build production collaborators; missing credentials leave a slot empty."""
        settings = settings or IntegrationSettings()
        timeout = settings.http_timeout

        def build(name, factory):
            try:
                return factory()
            except CollaboratorUnavailable as e:
                logger.warning(f"{name} unavailable: {e}")
                return None

        storage = build("storage", lambda: SupabaseStorage(
            settings.supabase_url,
            settings.supabase_anon_key,
            bucket=settings.supabase_bucket_decks,
            timeout=timeout,
        ))
        return cls(
            storage=storage,
            gamma=build("gamma", lambda: GammaClient(
                settings.gamma_api_key, base_url=settings.gamma_api_base_url, timeout=timeout,
            )),
            slides=build("slides", lambda: GoogleSlidesClient(settings.google_access_token, timeout=timeout)),
            payments=build("payments", lambda: StripeClient(settings.stripe_secret_key, timeout=timeout)),
            funnels=HostedFunnelBuilder(settings.funnel_base_url, storage=storage),
            copywriter=MirascopeCopywriter(model=settings.llm_model),
            tracer=LoggingTracer(),
        )


__all__ = [
    "Collaborators",
    "Storage",
    "GammaAPI",
    "SlidesAPI",
    "PaymentsAPI",
    "FunnelBuilder",
    "Copywriter",
    "WorkflowTracer",
    "GammaDocument",
    "ProductPrice",
    "FunnelPages",
    "SlideOutline",
    "DeckOutline",
    "FunnelStrategy",
    "SupabaseStorage",
    "MemoryStorage",
    "GammaClient",
    "GoogleSlidesClient",
    "StripeClient",
    "HostedFunnelBuilder",
    "MirascopeCopywriter",
    "LoggingTracer",
    "to_csv",
]
