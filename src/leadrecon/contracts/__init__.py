"""Typed contracts for the event pipeline."""

from leadrecon.contracts.artifacts import (
    AnalyticsArtifact,
    Campaign,
    CommissionStructure,
    DeckArtifact,
    DeckProviders,
    FunnelArtifact,
    GammaDeck,
    GoogleDeck,
    OutreachArtifact,
    ProfilerArtifact,
    Segment,
    StripeArtifact,
    SummaryArtifact,
    TrackingArtifact,
)
from leadrecon.contracts.leads import Lead, LeadContact, ScoredLead
from leadrecon.contracts.packet import (
    Audience,
    DeckProvider,
    EventAssets,
    EventPacket,
    Host,
    OfferToggle,
    as_packet,
)

__all__ = [
    "EventPacket",
    "Host",
    "Audience",
    "OfferToggle",
    "EventAssets",
    "DeckProvider",
    "as_packet",
    "Lead",
    "ScoredLead",
    "LeadContact",
    "DeckArtifact",
    "DeckProviders",
    "GoogleDeck",
    "GammaDeck",
    "ProfilerArtifact",
    "Segment",
    "FunnelArtifact",
    "StripeArtifact",
    "TrackingArtifact",
    "CommissionStructure",
    "OutreachArtifact",
    "Campaign",
    "AnalyticsArtifact",
    "SummaryArtifact",
]
