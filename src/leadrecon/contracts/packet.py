"""Event packet: the immutable input describing one event."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DeckProvider = Literal["google", "gamma", "both"]


class PacketModel(BaseModel):
    """Frozen model accepting both camelCase (wire) and snake_case names."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Host(PacketModel):
    name: str
    email: str = ""
    logo_url: Optional[str] = None
    website: str = ""
    payout_model: Literal["GHL_AFFILIATE", "STRIPE_CONNECT"] = "GHL_AFFILIATE"
    commission_pct: float = Field(default=30, ge=0, le=100)
    affiliate_id: Optional[str] = None


class Audience(PacketModel):
    industry: str
    size: Literal["solo", "smb", "mid"] = "smb"
    region: Optional[str] = None
    pain_points: List[str] = Field(default_factory=list)


class OfferToggle(PacketModel):
    tripwire_price: float = Field(default=297, ge=0)
    tripwire_credits: int = Field(default=1000, ge=0)
    bump_enabled: bool = False
    bump_price: float = Field(default=99, ge=0)


class EventAssets(PacketModel):
    deck_template_id: str = ""
    gamma_template_id: Optional[str] = None
    branding_palette: List[str] = Field(default_factory=list)
    deck_provider: Optional[DeckProvider] = None


class EventPacket(PacketModel):
    """Everything the pipeline knows about one event.

    Never mutated after creation; every node reads it, none writes it.
    """
    event_id: str
    date: str
    venue: Literal["live", "zoom"] = "zoom"
    host: Host
    audience: Audience
    offer: OfferToggle = Field(default_factory=OfferToggle)
    utm_base: Optional[str] = None
    assets: EventAssets = Field(default_factory=EventAssets)
    lead_sources: Dict[str, Any] = Field(default_factory=dict)


def as_packet(value: Any) -> EventPacket:
    """Accept an EventPacket or its (camelCase or snake_case) mapping form."""
    if isinstance(value, EventPacket):
        return value
    return EventPacket.model_validate(value)
