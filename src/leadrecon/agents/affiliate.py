"""Affiliate node: tracking link, UTM parameters and commission structure."""

import math
import re
import time
from typing import ClassVar, Dict, List, Optional, Type

import httpx
from pydantic import BaseModel

from leadrecon.agents.base import EventNode
from leadrecon.contracts import CommissionStructure, EventPacket, TrackingArtifact
from leadrecon.core.graph.nodes.base.node import NodeContext
from leadrecon.core.graph.state import NodeState, StateUpdate

COOKIE_DURATION_DAYS = 30


def generate_affiliate_id(host_name: Optional[str], now: Optional[float] = None) -> str:
    stamp = int((now if now is not None else time.time()) * 1000)
    if not host_name:
        return f"aff_{stamp}"
    return f"aff_{re.sub(r'[^a-z0-9]', '_', host_name.lower())}_{stamp}"


def utm_parameters(packet: EventPacket, affiliate_id: str) -> Dict[str, str]:
    return {
        "utm_source": "affiliate",
        "utm_medium": packet.host.payout_model.lower(),
        "utm_campaign": f"lead_recon_{packet.event_id}",
        "utm_content": (packet.audience.industry or "business").lower(),
        "utm_term": "lead_intelligence",
        "aff_id": affiliate_id,
        "event_id": packet.event_id,
    }


def build_affiliate_link(base_url: str, params: Dict[str, str]) -> str:
    """Set every parameter on ``base_url``, replacing any existing value."""
    url = httpx.URL(base_url)
    for key, value in params.items():
        url = url.copy_set_param(key, value)
    return str(url)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def commission_structure(packet: EventPacket) -> CommissionStructure:
    pct = packet.host.commission_pct
    tripwire = _round_half_up(packet.offer.tripwire_price * pct / 100)
    bump = _round_half_up(packet.offer.bump_price * pct / 100) if packet.offer.bump_enabled else 0
    return CommissionStructure(
        commission_rate=pct / 100,
        tripwire_commission=tripwire,
        bump_commission=bump,
        total_possible_commission=tripwire + bump,
        payout_model=packet.host.payout_model,
        cookie_duration=COOKIE_DURATION_DAYS,
    )


def affiliate_resources(packet: EventPacket, link: str) -> Dict[str, List[Dict[str, str]]]:
    industry = packet.audience.industry or "business"
    return {
        "email_templates": [{
            "subject": "Transform Your Lead Generation with AI (Special Invitation)",
            "body": (
                "Hi {{firstName}},\n\n"
                f"{packet.host.name} is hosting an exclusive training for {industry} owners on "
                "scoring, segmenting and reaching leads with AI.\n\n"
                f"Reserve your spot here: {link}\n\n"
                "Best regards,\n{{yourName}}"
            ),
        }],
        "social_posts": [{
            "platform": "LinkedIn",
            "content": (
                f"Game-changer for {industry} leaders: a live session on AI-powered lead "
                f"intelligence with {packet.host.name}. Save your seat: {link}"
            ),
        }],
    }


class AffiliateNode(EventNode):
    """Writes ``artifacts.tracking`` pointing at the funnel landing page.

    Attributes:
        fallback_url: Link base used when no funnel was built
    """

    artifact_models: ClassVar[Dict[str, Type[BaseModel]]] = {"tracking": TrackingArtifact}

    fallback_url: str = "https://leadrecon.app"

    async def process(self, state: NodeState, context: NodeContext) -> StateUpdate:
        packet = self.packet(state)
        base_url = state.get_artifact("funnel.url") or self.fallback_url
        affiliate_id = packet.host.affiliate_id or generate_affiliate_id(packet.host.name)

        utm = utm_parameters(packet, affiliate_id)
        link = build_affiliate_link(base_url, utm)
        return self.emit("tracking", TrackingArtifact(
            utm=utm,
            affiliate_link=link,
            affiliate_id=affiliate_id,
            commission_structure=commission_structure(packet),
            resources=affiliate_resources(packet, link),
        ))
