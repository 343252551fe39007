"""Shared fixtures and collaborator fakes for the leadrecon test suite."""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import pytest

from leadrecon.contracts import EventPacket
from leadrecon.core.config import FeatureFlags, GraphConfig
from leadrecon.integrations import (
    Collaborators,
    DeckOutline,
    FunnelStrategy,
    GammaDocument,
    HostedFunnelBuilder,
    LoggingTracer,
    MemoryStorage,
    ProductPrice,
    SlideOutline,
)

FIXED_NOW = datetime(2025, 3, 1, 12, 0, 0)


class FakeCopywriter:
    """Copywriter returning canned copy and recording every call."""

    def __init__(self):
        self.calls: List[str] = []

    async def segment_messaging(self, segment_name, industry, characteristics, host_name, offer_summary, event_date):
        self.calls.append(f"segment_messaging:{segment_name}")
        return f"{segment_name} in {industry}: join {host_name} on {event_date}"

    async def deck_outline(self, industry, host_name, audience_size, event_date, offer_summary, bump_offer):
        self.calls.append("deck_outline")
        return DeckOutline(slides=[
            SlideOutline(title=f"Leads for {industry}", bullets=["Problem", "Solution"]),
            SlideOutline(title="Offer", bullets=[offer_summary]),
        ])

    async def funnel_strategy(self, industry, host_name, audience_size, offer_summary, bump_offer, has_deck, segment_count):
        self.calls.append("funnel_strategy")
        return FunnelStrategy(
            headline=f"Grow your {industry} pipeline",
            value_proposition="Qualified leads on autopilot",
            call_to_action="Reserve your spot",
            urgency_triggers=["48 hours only"],
            social_proof=["10,000 businesses"],
            risk_reversal="30-day money-back guarantee",
        )


class FakeSlides:
    def __init__(self):
        self.created: List[Dict[str, Any]] = []

    async def create_presentation(self, title, slides, colors=(), logo_url=None):
        self.created.append({"title": title, "slides": list(slides), "colors": list(colors)})
        return f"pres_{len(self.created)}"

    async def export_pdf(self, presentation_id):
        return b"%PDF-google"


class FakeGamma:
    """Gamma fake; ``fail_with`` makes ``generate`` raise, ``delay`` slows it down."""

    def __init__(self, fail_with: Optional[Exception] = None, delay: float = 0.0):
        self.fail_with = fail_with
        self.delay = delay
        self.requests: List[Dict[str, Any]] = []

    async def generate(self, prompt, idempotency_key, template_id=None, brand=None, variables=None):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        self.requests.append({"prompt": prompt, "idempotency_key": idempotency_key, "variables": variables})
        return GammaDocument(doc_id="gdoc_1", share_url="https://gamma.app/docs/gdoc_1")

    async def export(self, doc_id, fmt):
        return f"{doc_id}.{fmt}".encode()


class FakePayments:
    async def create_products(self, event_id, host_name, tripwire_price, tripwire_credits, bump_price=None):
        products = [ProductPrice(kind="tripwire", product_id="prod_1", price_id="price_1", amount=tripwire_price)]
        if bump_price is not None:
            products.append(ProductPrice(
                kind="bump", product_id="prod_2", price_id="price_2", amount=bump_price, recurring=True,
            ))
        return products


def make_packet_data(event_id: str = "evt_001", provider: Optional[str] = None, **overrides) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "eventId": event_id,
        "date": "2025-03-15",
        "venue": "zoom",
        "host": {
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "payoutModel": "GHL_AFFILIATE",
            "commissionPct": 30,
        },
        "audience": {"industry": "SaaS", "size": "smb"},
        "offer": {"tripwirePrice": 297, "tripwireCredits": 1000, "bumpEnabled": True, "bumpPrice": 99},
        "assets": {"deckTemplateId": "tmpl_1", "brandingPalette": ["#000000", "#ffffff"]},
    }
    if provider is not None:
        data["assets"]["deckProvider"] = provider
    data.update(overrides)
    return data


@pytest.fixture
def packet_data() -> Callable[..., Dict[str, Any]]:
    """Factory for camelCase packet mappings."""
    return make_packet_data


@pytest.fixture
def packet() -> EventPacket:
    return EventPacket.model_validate(make_packet_data())


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def copywriter() -> FakeCopywriter:
    return FakeCopywriter()


@pytest.fixture
def gamma() -> FakeGamma:
    return FakeGamma()


@pytest.fixture
def collaborators(storage, copywriter, gamma) -> Collaborators:
    """Fully faked collaborators sharing one in-memory storage."""
    return Collaborators(
        storage=storage,
        gamma=gamma,
        slides=FakeSlides(),
        payments=FakePayments(),
        funnels=HostedFunnelBuilder("https://funnels.test", storage=storage),
        copywriter=copywriter,
        tracer=LoggingTracer(),
    )


@pytest.fixture
def flags() -> FeatureFlags:
    return FeatureFlags(gamma_enabled=True, default_deck_provider="google")


@pytest.fixture
def config() -> GraphConfig:
    return GraphConfig(node_timeout=5.0, max_wavefronts=20, max_concurrent_runs=3, failure_policy="record")
