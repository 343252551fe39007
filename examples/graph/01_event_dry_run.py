"""
Event Pipeline Dry Run

This example demonstrates:
1. Running the full event pipeline without any external credentials
2. In-process stand-ins for the LLM copywriter, Slides, Gamma and Stripe
3. Both deck providers fanning in to a single funnel build
4. Reading the summary and the uploaded files afterwards
"""

import asyncio
import json

from leadrecon import build_graph, configure_logging, initial_state
from leadrecon.core import FeatureFlags, GraphConfig
from leadrecon.core.graph.viz import GraphVisualizer
from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations import (
    Collaborators,
    DeckOutline,
    FunnelStrategy,
    GammaDocument,
    HostedFunnelBuilder,
    MemoryStorage,
    ProductPrice,
    SlideOutline,
)

logger = get_logger(LogComponent.CONDUCTOR)

###################################################################
# Offline collaborators
###################################################################

class CannedCopywriter:
    async def segment_messaging(self, segment_name, industry, characteristics, host_name, offer_summary, event_date):
        return f"{host_name} shows {segment_name} teams in {industry} how to qualify leads on {event_date}."

    async def deck_outline(self, industry, host_name, audience_size, event_date, offer_summary, bump_offer):
        return DeckOutline(slides=[
            SlideOutline(title=f"Lead Intelligence for {industry}", bullets=["Why leads go cold", "What AI fixes"]),
            SlideOutline(title="The Offer", bullets=[offer_summary, bump_offer]),
        ])

    async def funnel_strategy(self, industry, host_name, audience_size, offer_summary, bump_offer, has_deck, segment_count):
        return FunnelStrategy(
            headline=f"Stop guessing which {industry} leads will buy",
            value_proposition=f"{segment_count} ready-made segments with messaging",
            call_to_action="Get your credits",
            urgency_triggers=["Event pricing ends at midnight"],
            social_proof=["Used by 10,000+ businesses"],
            risk_reversal="30-day money-back guarantee",
        )


class OfflineSlides:
    async def create_presentation(self, title, slides, colors=(), logo_url=None):
        return "offline_presentation"

    async def export_pdf(self, presentation_id):
        return b"%PDF-1.4 offline"


class OfflineGamma:
    async def generate(self, prompt, idempotency_key, template_id=None, brand=None, variables=None):
        return GammaDocument(doc_id="offline_doc")

    async def export(self, doc_id, fmt):
        return f"{doc_id} as {fmt}".encode()


class OfflinePayments:
    async def create_products(self, event_id, host_name, tripwire_price, tripwire_credits, bump_price=None):
        products = [ProductPrice(kind="tripwire", product_id="prod_dry", price_id="price_dry", amount=tripwire_price)]
        if bump_price is not None:
            products.append(ProductPrice(
                kind="bump", product_id="prod_dry_bump", price_id="price_dry_bump", amount=bump_price, recurring=True,
            ))
        return products

###################################################################
# Workflow
###################################################################

PACKET = {
    "eventId": "evt_dry_run",
    "date": "2025-03-15",
    "venue": "zoom",
    "host": {"name": "Ada Lovelace", "email": "ada@example.com", "commissionPct": 30},
    "audience": {"industry": "SaaS", "size": "smb"},
    "offer": {"tripwirePrice": 297, "tripwireCredits": 1000, "bumpEnabled": True, "bumpPrice": 99},
    "assets": {"deckProvider": "both", "brandingPalette": ["#0f172a", "#6366f1", "#22c55e"]},
}


async def main():
    configure_logging()

    storage = MemoryStorage()
    collaborators = Collaborators(
        storage=storage,
        gamma=OfflineGamma(),
        slides=OfflineSlides(),
        payments=OfflinePayments(),
        funnels=HostedFunnelBuilder(storage=storage),
        copywriter=CannedCopywriter(),
    )
    graph = build_graph(
        flags=FeatureFlags(gamma_enabled=True),
        collaborators=collaborators,
        config=GraphConfig(node_timeout=30),
    )

    visualizer = GraphVisualizer(graph)
    print(visualizer.render_graph())

    run = await graph.run(initial_state(PACKET), run_id=PACKET["eventId"])
    print(visualizer.render_execution(run))

    summary = run.state.artifacts["summary"]
    logger.info(f"Summary:\n{json.dumps(summary['results'], indent=2)}")
    for path in sorted(storage.objects):
        logger.info(f"Uploaded {path}")


if __name__ == "__main__":
    asyncio.run(main())
