"""Deck generation nodes (Google Slides and Gamma).

Each provider node writes its own entry under ``artifacts.deck.providers``
and a ``deck.active`` choice. Both may run in the same wavefront; the engine's
recursive artifact merge keeps both provider entries.
"""

from typing import ClassVar, Dict, List, Type

from pydantic import BaseModel, Field

from leadrecon.agents.base import EventNode
from leadrecon.agents.profiler import offer_summary
from leadrecon.contracts import DeckArtifact, EventPacket, GammaDeck, GoogleDeck
from leadrecon.core.config import FeatureFlags
from leadrecon.core.graph.nodes.base.node import NodeContext
from leadrecon.core.graph.state import NodeState, StateUpdate
from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations import SlideOutline

logger = get_logger(LogComponent.AGENTS)

DEFAULT_PALETTE = ["#1f2937", "#3b82f6", "#10b981"]
PPTX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

DEFAULT_SLIDES = [
    SlideOutline(
        title="Lead Recon Mastery",
        bullets=["Transform Your Lead Generation", "AI-Powered Business Intelligence", "Maximize Revenue Per Lead"],
        speaker_notes="Welcome and introduction to the power of lead reconnaissance.",
    ),
    SlideOutline(
        title="The Lead Generation Problem",
        bullets=[
            "90% of leads are never properly qualified",
            "Manual processes waste 60% of sales time",
            "Poor lead data costs $1M+ annually",
        ],
        speaker_notes="Establish the problem that resonates with the audience's pain points.",
    ),
    SlideOutline(
        title="AI-Powered Solution",
        bullets=["Automated lead scoring and segmentation", "Real-time market intelligence", "Personalized outreach at scale"],
        speaker_notes="Present the solution with focus on automation and AI capabilities.",
    ),
    SlideOutline(
        title="Live Demo",
        bullets=["Upload lead list", "AI analysis in action", "Generated segments and messaging"],
        speaker_notes="Demonstrate the actual product functionality.",
    ),
    SlideOutline(
        title="Results & ROI",
        bullets=["300% increase in qualified leads", "50% reduction in sales cycle", "25% improvement in conversion rates"],
        speaker_notes="Share concrete results and social proof.",
    ),
    SlideOutline(
        title="Special Offer",
        bullets=["Limited-time pricing", "Bonus materials included", "Money-back guarantee"],
        speaker_notes="Present the offer with urgency and value stacking.",
    ),
]


def resolve_deck_provider(packet: EventPacket, flags: FeatureFlags) -> str:
    """Provider for this run: packet choice, else the flag default.

    With Gamma disabled, ``gamma`` and ``both`` fall back to ``google``.
    """
    provider = packet.assets.deck_provider or flags.default_deck_provider or "google"
    if not flags.gamma_enabled and provider in ("gamma", "both"):
        return "google"
    return provider


def active_deck(provider: str, own: str, state: NodeState) -> str:
    """``own`` when it is the chosen provider, else whatever is already active."""
    if provider == own:
        return own
    return state.get_artifact("deck.active") or "google"


def bump_offer(packet: EventPacket) -> str:
    if packet.offer.bump_enabled:
        return f"${packet.offer.bump_price:g}/mo subscription"
    return "None"


class GoogleDeckNode(EventNode):
    """Builds a Google Slides deck from an LLM outline and uploads its PDF."""

    artifact_models: ClassVar[Dict[str, Type[BaseModel]]] = {"deck": DeckArtifact}

    flags: FeatureFlags = Field(default_factory=FeatureFlags)

    async def process(self, state: NodeState, context: NodeContext) -> StateUpdate:
        packet = self.packet(state)
        copywriter = self.collaborators.require("copywriter")
        slides = self.collaborators.require("slides")
        storage = self.collaborators.require("storage")

        outline = await copywriter.deck_outline(
            industry=packet.audience.industry,
            host_name=packet.host.name,
            audience_size=packet.audience.size,
            event_date=packet.date,
            offer_summary=offer_summary(packet),
            bump_offer=bump_offer(packet),
        )
        content = outline.slides or DEFAULT_SLIDES

        presentation_id = await slides.create_presentation(
            title=f"{packet.host.name} - {packet.date}",
            slides=content,
            colors=packet.assets.branding_palette or DEFAULT_PALETTE,
            logo_url=packet.host.logo_url,
        )
        pdf = await slides.export_pdf(presentation_id)
        pdf_url = await storage.upload(
            pdf,
            f"decks/{packet.event_id}/google/{presentation_id}.pdf",
            "application/pdf",
        )
        logger.info(f"[{packet.event_id}] Google deck {presentation_id} ready ({len(content)} slides)")

        provider = resolve_deck_provider(packet, self.flags)
        return self.emit("deck", DeckArtifact(
            active=active_deck(provider, "google", state),
            providers={"google": GoogleDeck(
                file_id=presentation_id,
                pdf_url=pdf_url,
                share_url=f"https://docs.google.com/presentation/d/{presentation_id}/edit",
            )},
        ))


def gamma_prompt(packet: EventPacket) -> str:
    lines: List[str] = [
        f"Create a 12-18 slide deck for a live demo to {packet.audience.industry} business owners.",
        f"Offer: ${packet.offer.tripwire_price:g} for {packet.offer.tripwire_credits} credits (one-time).",
        f"Include post-checkout bump at ${packet.offer.bump_price:g}/mo." if packet.offer.bump_enabled else "",
        "Include: agenda, problem, solution (Profiler + Leads), live demo flow, social proof, "
        "pricing slide, CTA with affiliate link.",
        "Tone: confident, ROI-focused, practical demos.",
    ]
    return "\n".join(lines)


class GammaDeckNode(EventNode):
    """Generates a Gamma document and uploads its PDF and PPTX exports."""

    artifact_models: ClassVar[Dict[str, Type[BaseModel]]] = {"deck": DeckArtifact}

    flags: FeatureFlags = Field(default_factory=FeatureFlags)

    async def process(self, state: NodeState, context: NodeContext) -> StateUpdate:
        packet = self.packet(state)
        gamma = self.collaborators.require("gamma")
        storage = self.collaborators.require("storage")

        document = await gamma.generate(
            gamma_prompt(packet),
            idempotency_key=f"gamma-generate-{packet.event_id}",
            template_id=packet.assets.gamma_template_id,
            brand={"colors": list(packet.assets.branding_palette), "logoUrl": packet.host.logo_url},
            variables={
                "HOST_NAME": packet.host.name,
                "CTA_URL": "{{AFFILIATE_LINK}}",
                "EVENT_DATE": packet.date,
            },
        )

        prefix = f"decks/{packet.event_id}/gamma/{document.doc_id}"
        pdf_url = await storage.upload(await gamma.export(document.doc_id, "pdf"), f"{prefix}.pdf", "application/pdf")
        pptx_url = await storage.upload(await gamma.export(document.doc_id, "pptx"), f"{prefix}.pptx", PPTX_CONTENT_TYPE)
        logger.info(f"[{packet.event_id}] Gamma deck {document.doc_id} ready")

        provider = resolve_deck_provider(packet, self.flags)
        return self.emit("deck", DeckArtifact(
            active=active_deck(provider, "gamma", state),
            providers={"gamma": GammaDeck(
                doc_id=document.doc_id,
                pdf_url=pdf_url,
                pptx_url=pptx_url,
                share_url=document.share_url or f"https://gamma.app/docs/{document.doc_id}",
            )},
        ))
