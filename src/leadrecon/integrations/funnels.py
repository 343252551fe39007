"""Hosted funnel pages (landing, checkout, thank-you)."""

import html
import time
from typing import Any, Dict, Optional, Sequence

from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations.base import FunnelPages, FunnelStrategy, ProductPrice, Storage

logger = get_logger(LogComponent.INTEGRATIONS)

DEFAULT_COLORS = ("#1f2937", "#3b82f6", "#10b981")


class HostedFunnelBuilder:
    """Composes funnel URLs under ``base_url`` and publishes the page HTML.

    When a storage is given each page is uploaded to
    ``funnels/<event_id>/<funnel_id>/<page>.html``; without one the pages are
    only rendered and logged.
    """

    def __init__(self, base_url: str = "https://leadrecon.app", storage: Optional[Storage] = None):
        self.base_url = base_url.rstrip("/")
        self.storage = storage

    async def create_funnel(
        self,
        event_id: str,
        strategy: FunnelStrategy,
        products: Sequence[ProductPrice],
        branding: Dict[str, Any],
        deck_url: Optional[str] = None,
    ) -> FunnelPages:
        funnel_id = f"funnel_{event_id}_{int(time.time() * 1000)}"
        landing = f"{self.base_url}/f/{funnel_id}"
        pages = FunnelPages(
            funnel_id=funnel_id,
            landing_page_url=landing,
            checkout_url=f"{landing}/checkout",
            thank_you_url=f"{landing}/thank-you",
        )

        rendered = {
            "index": render_landing_page(strategy, branding, pages.checkout_url, deck_url),
            "checkout": render_checkout_page(strategy, products, branding),
            "thank-you": render_thank_you_page(branding),
        }
        if self.storage is not None:
            for page, body in rendered.items():
                await self.storage.upload(
                    body.encode("utf-8"),
                    f"funnels/{event_id}/{funnel_id}/{page}.html",
                    "text/html",
                )
        logger.info(f"Funnel {funnel_id} created with {len(rendered)} pages")
        return pages


def _palette(branding: Dict[str, Any]) -> Sequence[str]:
    colors = list(branding.get("colors") or [])
    return [colors[i] if i < len(colors) else DEFAULT_COLORS[i] for i in range(3)]


def _page(title: str, branding: Dict[str, Any], body: str) -> str:
    primary, secondary, accent = _palette(branding)
    logo = branding.get("logo_url")
    logo_tag = f'<img class="logo" src="{html.escape(logo)}" alt="logo">' if logo else ""
    return (
        "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n<meta charset=\"UTF-8\">\n"
        f"<title>{html.escape(title)}</title>\n"
        "<style>"
        f":root{{--primary:{primary};--secondary:{secondary};--accent:{accent};}}"
        "body{font-family:Arial,sans-serif;margin:0;color:#333;"
        "background:linear-gradient(135deg,var(--primary),var(--secondary));}"
        ".container{max-width:960px;margin:0 auto;padding:60px 20px;color:#fff;text-align:center;}"
        ".cta{background:var(--accent);color:#fff;padding:18px 36px;border-radius:8px;text-decoration:none;}"
        "</style>\n</head>\n<body>\n"
        f"<div class=\"container\">{logo_tag}{body}</div>\n</body>\n</html>\n"
    )


def render_landing_page(
    strategy: FunnelStrategy,
    branding: Dict[str, Any],
    checkout_url: str,
    deck_url: Optional[str] = None,
) -> str:
    proof = "".join(f"<li>{html.escape(item)}</li>" for item in strategy.social_proof)
    urgency = "".join(f"<li>{html.escape(item)}</li>" for item in strategy.urgency_triggers)
    deck = f'<p><a href="{html.escape(deck_url)}">View the presentation</a></p>' if deck_url else ""
    body = (
        f"<h1>{html.escape(strategy.headline)}</h1>"
        f"<p>{html.escape(strategy.value_proposition)}</p>"
        f'<a class="cta" href="{html.escape(checkout_url)}">{html.escape(strategy.call_to_action)}</a>'
        f"{deck}<ul>{proof}</ul><ul>{urgency}</ul>"
        f"<p>{html.escape(strategy.risk_reversal)}</p>"
    )
    return _page(strategy.headline, branding, body)


def render_checkout_page(
    strategy: FunnelStrategy,
    products: Sequence[ProductPrice],
    branding: Dict[str, Any],
) -> str:
    rows = "".join(
        f'<li data-price="{html.escape(p.price_id)}">{html.escape(p.kind)}: '
        f"${p.amount:,.2f}{'/mo' if p.recurring else ''}</li>"
        for p in products
    )
    body = f"<h1>Complete your order</h1><ul>{rows}</ul><p>{html.escape(strategy.risk_reversal)}</p>"
    return _page("Checkout", branding, body)


def render_thank_you_page(branding: Dict[str, Any]) -> str:
    host = html.escape(branding.get("host_name") or "Lead Recon")
    body = f"<h1>You're in!</h1><p>{host} will send your access details shortly.</p>"
    return _page("Thank you", branding, body)
