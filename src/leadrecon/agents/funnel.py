"""Funnel node: conversion strategy, Stripe products and hosted funnel pages."""

from typing import ClassVar, Dict, Optional, Type

from pydantic import BaseModel

from leadrecon.agents.base import EventNode
from leadrecon.agents.deck import DEFAULT_PALETTE, bump_offer
from leadrecon.agents.profiler import offer_summary
from leadrecon.contracts import FunnelArtifact, StripeArtifact
from leadrecon.core.graph.nodes.base.node import NodeContext
from leadrecon.core.graph.state import NodeState, StateUpdate
from leadrecon.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.AGENTS)


def active_deck_url(state: NodeState) -> Optional[str]:
    active = state.get_artifact("deck.active")
    if not active:
        return None
    return state.get_artifact(f"deck.providers.{active}.share_url")


class FunnelNode(EventNode):
    """Writes ``artifacts.funnel`` and ``artifacts.stripe``."""

    artifact_models: ClassVar[Dict[str, Type[BaseModel]]] = {
        "funnel": FunnelArtifact,
        "stripe": StripeArtifact,
    }

    async def process(self, state: NodeState, context: NodeContext) -> StateUpdate:
        packet = self.packet(state)
        copywriter = self.collaborators.require("copywriter")
        payments = self.collaborators.require("payments")
        funnels = self.collaborators.require("funnels")

        strategy = await copywriter.funnel_strategy(
            industry=packet.audience.industry,
            host_name=packet.host.name,
            audience_size=packet.audience.size,
            offer_summary=offer_summary(packet),
            bump_offer=bump_offer(packet),
            has_deck=state.has_artifact("deck"),
            segment_count=len(state.get_artifact("profiler.segments", [])),
        )

        products = await payments.create_products(
            event_id=packet.event_id,
            host_name=packet.host.name,
            tripwire_price=packet.offer.tripwire_price,
            tripwire_credits=packet.offer.tripwire_credits,
            bump_price=packet.offer.bump_price if packet.offer.bump_enabled else None,
        )

        deck_url = active_deck_url(state)
        pages = await funnels.create_funnel(
            event_id=packet.event_id,
            strategy=strategy,
            products=products,
            branding={
                "colors": list(packet.assets.branding_palette) or DEFAULT_PALETTE,
                "logo_url": packet.host.logo_url,
                "host_name": packet.host.name,
            },
            deck_url=deck_url,
        )
        logger.info(f"[{packet.event_id}] Funnel {pages.funnel_id} live at {pages.landing_page_url}")

        funnel = FunnelArtifact(
            funnel_id=pages.funnel_id,
            url=pages.landing_page_url,
            checkout_url=pages.checkout_url,
            thank_you_url=pages.thank_you_url,
            strategy=strategy.name,
            conversion_elements=strategy.model_dump(exclude={"name"}),
            deck_url=deck_url,
        )
        stripe = StripeArtifact(
            product_ids=[p.product_id for p in products],
            price_ids=[p.price_id for p in products],
        )
        update = self.emit("funnel", funnel)
        update.artifacts.update(self.emit("stripe", stripe).artifacts)
        return update
