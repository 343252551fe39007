"""Tests for funnel page publishing, CSV export and workflow tracing."""

import pytest

from leadrecon.integrations import (
    FunnelStrategy,
    HostedFunnelBuilder,
    LoggingTracer,
    MemoryStorage,
    ProductPrice,
    to_csv,
)
from leadrecon.integrations.funnels import render_checkout_page, render_landing_page


@pytest.fixture
def strategy() -> FunnelStrategy:
    return FunnelStrategy(
        headline="Leads <fast>",
        value_proposition="More pipeline",
        call_to_action="Buy now",
        urgency_triggers=["Today only"],
        social_proof=["1,000 teams"],
        risk_reversal="Refund guaranteed",
    )


PRODUCTS = [
    ProductPrice(kind="tripwire", product_id="prod_1", price_id="price_1", amount=297),
    ProductPrice(kind="bump", product_id="prod_2", price_id="price_2", amount=99, recurring=True),
]


class TestHostedFunnelBuilder:
    """Test URL layout and page uploads."""

    @pytest.mark.asyncio
    async def test_pages_uploaded(self, strategy):
        storage = MemoryStorage()
        builder = HostedFunnelBuilder("https://funnels.test/", storage=storage)
        pages = await builder.create_funnel("evt_001", strategy, PRODUCTS, {"host_name": "Ada"})

        assert pages.funnel_id.startswith("funnel_evt_001_")
        assert pages.landing_page_url == f"https://funnels.test/f/{pages.funnel_id}"
        assert pages.thank_you_url == f"{pages.landing_page_url}/thank-you"
        assert sorted(storage.objects) == [
            f"funnels/evt_001/{pages.funnel_id}/{page}.html"
            for page in ("checkout", "index", "thank-you")
        ]
        assert storage.objects[f"funnels/evt_001/{pages.funnel_id}/index.html"][1] == "text/html"

    @pytest.mark.asyncio
    async def test_without_storage(self, strategy):
        pages = await HostedFunnelBuilder().create_funnel("evt_001", strategy, PRODUCTS, {})
        assert pages.checkout_url.startswith("https://leadrecon.app/f/funnel_evt_001_")

    def test_landing_page_escapes_copy(self, strategy):
        page = render_landing_page(strategy, {"colors": ["#111111"]}, "https://x.test/checkout")
        assert "Leads &lt;fast&gt;" in page
        assert "--primary:#111111" in page
        assert "--secondary:#3b82f6" in page
        assert "View the presentation" not in page

    def test_checkout_lists_products(self, strategy):
        page = render_checkout_page(strategy, PRODUCTS, {})
        assert "tripwire: $297.00</li>" in page
        assert "bump: $99.00/mo</li>" in page


class TestToCsv:
    def test_columns_and_blanks(self):
        payload = to_csv([{"a": 1, "b": None, "c": "x"}, {"a": 2}], columns=["a", "b"])
        assert payload == b"a,b\n1,\n2,\n"

    def test_default_columns(self):
        assert to_csv([{"name": "Ada, L.", "n": 1}]) == b'name,n\n"Ada, L.",1\n'

    def test_empty(self):
        assert to_csv([]) == b""


class TestLoggingTracer:
    @pytest.mark.asyncio
    async def test_records(self):
        tracer = LoggingTracer()
        await tracer.log_workflow("evt_001", "start", {"status": "started"})
        assert tracer.records == [{
            "event_id": "evt_001",
            "name": "start",
            "outputs": {"status": "started"},
            "duration_ms": 0,
            "metadata": {},
        }]
