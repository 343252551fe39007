"""Artifact models written by the event pipeline's nodes.

Nodes store artifacts as plain mappings (``model_dump(exclude_none=True)``) so
an unused deck provider is absent rather than present-and-empty, and so the
engine's artifact merge can union them.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from leadrecon.contracts.leads import LeadContact, Priority


class GoogleDeck(BaseModel):
    file_id: str
    pdf_url: str
    share_url: str
    variant_tag: str = "google_v1"


class GammaDeck(BaseModel):
    doc_id: str
    pdf_url: str
    pptx_url: str
    share_url: str
    variant_tag: str = "gamma_v1"


class DeckProviders(BaseModel):
    google: Optional[GoogleDeck] = None
    gamma: Optional[GammaDeck] = None


class DeckArtifact(BaseModel):
    active: Literal["google", "gamma"] = "google"
    providers: DeckProviders = Field(default_factory=DeckProviders)


class Segment(BaseModel):
    name: str
    size: int
    characteristics: List[str]
    priority: Priority
    recommended_channels: List[str] = Field(default_factory=list)
    estimated_conversion_rate: float = 0.0
    messaging: Optional[str] = None
    contacts: List[LeadContact] = Field(default_factory=list)


class ProfilerArtifact(BaseModel):
    csv_url: str
    segments: List[Segment]
    total_leads: int
    average_score: float
    high_value_leads: int


class FunnelArtifact(BaseModel):
    type: Literal["GHL", "Vercel"] = "GHL"
    funnel_id: str
    url: str
    checkout_url: str
    thank_you_url: str
    strategy: str
    conversion_elements: Dict[str, Any] = Field(default_factory=dict)
    deck_url: Optional[str] = None


class StripeArtifact(BaseModel):
    product_ids: List[str]
    price_ids: List[str]


class CommissionStructure(BaseModel):
    commission_rate: float
    tripwire_commission: int
    bump_commission: int
    total_possible_commission: int
    payout_model: str
    cookie_duration: int = 30


class TrackingArtifact(BaseModel):
    utm: Dict[str, str]
    affiliate_link: str
    affiliate_id: str
    commission_structure: CommissionStructure
    resources: Dict[str, List[Dict[str, str]]] = Field(default_factory=dict)


class Campaign(BaseModel):
    segment: str
    email_count: int
    channels: List[str]


class OutreachArtifact(BaseModel):
    emails_csv_url: str
    ad_copy_doc_url: str
    campaigns: List[Campaign]
    total_emails: int


class AnalyticsArtifact(BaseModel):
    workflow_start_time: float
    event_id: str
    industry: str
    audience_size: str
    deck_provider: Optional[str] = None
    offer_details: Dict[str, Any] = Field(default_factory=dict)
    host_info: Dict[str, Any] = Field(default_factory=dict)


class SummaryArtifact(BaseModel):
    event_id: str
    completed_at: str
    processing_time_ms: int
    results: Dict[str, Any]
    errors: List[str] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)
