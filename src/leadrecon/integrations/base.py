"""Collaborator protocols.

The pipeline's nodes only talk to the outside world through these interfaces.
Production implementations live next to this module; tests and dry runs swap
in anything with the same shape.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from pydantic import BaseModel, Field


class GammaDocument(BaseModel):
    doc_id: str
    share_url: Optional[str] = None


class ProductPrice(BaseModel):
    """A Stripe product and the price attached to it."""
    kind: str
    product_id: str
    price_id: str
    amount: float
    recurring: bool = False


class FunnelPages(BaseModel):
    funnel_id: str
    landing_page_url: str
    checkout_url: str
    thank_you_url: str


class SlideOutline(BaseModel):
    title: str
    bullets: List[str] = Field(default_factory=list)
    speaker_notes: str = ""


class DeckOutline(BaseModel):
    slides: List[SlideOutline]


class FunnelStrategy(BaseModel):
    name: str = "AI-Optimized Lead Recon Funnel"
    headline: str
    value_proposition: str
    call_to_action: str
    urgency_triggers: List[str] = Field(default_factory=list)
    social_proof: List[str] = Field(default_factory=list)
    risk_reversal: str = ""


@runtime_checkable
class Storage(Protocol):
    async def upload(self, data: bytes, path: str, content_type: str) -> str:
        """Store ``data`` at ``path`` and return its public URL."""
        ...


@runtime_checkable
class GammaAPI(Protocol):
    async def generate(
        self,
        prompt: str,
        idempotency_key: str,
        template_id: Optional[str] = None,
        brand: Optional[Dict[str, Any]] = None,
        variables: Optional[Dict[str, str]] = None,
    ) -> GammaDocument: ...

    async def export(self, doc_id: str, fmt: str) -> bytes: ...


@runtime_checkable
class SlidesAPI(Protocol):
    async def create_presentation(
        self,
        title: str,
        slides: Sequence[SlideOutline],
        colors: Sequence[str] = (),
        logo_url: Optional[str] = None,
    ) -> str:
        """Create a presentation and return its id."""
        ...

    async def export_pdf(self, presentation_id: str) -> bytes: ...


@runtime_checkable
class PaymentsAPI(Protocol):
    async def create_products(
        self,
        event_id: str,
        host_name: str,
        tripwire_price: float,
        tripwire_credits: int,
        bump_price: Optional[float] = None,
    ) -> List[ProductPrice]: ...


@runtime_checkable
class FunnelBuilder(Protocol):
    async def create_funnel(
        self,
        event_id: str,
        strategy: FunnelStrategy,
        products: Sequence[ProductPrice],
        branding: Dict[str, Any],
        deck_url: Optional[str] = None,
    ) -> FunnelPages: ...


@runtime_checkable
class Copywriter(Protocol):
    async def segment_messaging(
        self,
        segment_name: str,
        industry: str,
        characteristics: Sequence[str],
        host_name: str,
        offer_summary: str,
        event_date: str,
    ) -> str: ...

    async def deck_outline(
        self,
        industry: str,
        host_name: str,
        audience_size: str,
        event_date: str,
        offer_summary: str,
        bump_offer: str,
    ) -> DeckOutline: ...

    async def funnel_strategy(
        self,
        industry: str,
        host_name: str,
        audience_size: str,
        offer_summary: str,
        bump_offer: str,
        has_deck: bool,
        segment_count: int,
    ) -> FunnelStrategy: ...


@runtime_checkable
class WorkflowTracer(Protocol):
    async def log_workflow(
        self,
        event_id: str,
        name: str,
        outputs: Dict[str, Any],
        duration_ms: int = 0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None: ...
