"""LLM copywriting for the event pipeline, built on Mirascope.

Three prompts back the nodes that need generated copy:
    - segment messaging for the profiler (plain text)
    - a slide outline for the Google deck (structured ``DeckOutline``)
    - a conversion strategy for the funnel (structured ``FunnelStrategy``)

The model is chosen at construction time so ``IntegrationSettings.llm_model``
applies without redefining the prompts.

Example:
    ```python
    writer = MirascopeCopywriter(model="gpt-4o-mini")
    outline = await writer.deck_outline(
        industry="SaaS", host_name="Ada", audience_size="smb",
        event_date="2025-03-01", offer_summary="$297 for 1000 credits", bump_offer="None",
    )
    ```
"""

from typing import Sequence

from mirascope.core import openai, prompt_template

from leadrecon.core.logging import LogComponent, get_logger, log_verbose
from leadrecon.integrations.base import DeckOutline, FunnelStrategy

logger = get_logger(LogComponent.INTEGRATIONS)


@prompt_template(
    """
    SYSTEM:
    You are an expert marketing copywriter. Write compelling, personalized
    messaging that resonates with a specific audience segment and drives
    registrations for a live event. Answer with 2-3 sentences of copy only.

    USER:
    Segment: {segment_name}
    Industry: {industry}
    Characteristics: {characteristics}
    Host: {host_name}
    Offer: {offer_summary}
    Event date: {event_date}
    """
)
async def segment_messaging_prompt(
    segment_name: str,
    industry: str,
    characteristics: str,
    host_name: str,
    offer_summary: str,
    event_date: str,
): ...


@prompt_template(
    """
    SYSTEM:
    You are a presentation strategist. Outline a webinar deck of 8-10 slides
    that hooks the audience, states their problem, presents the solution and
    closes with the offer and a clear call to action.

    USER:
    Industry: {industry}
    Host: {host_name}
    Audience size: {audience_size}
    Event date: {event_date}
    Main offer: {offer_summary}
    Bump offer: {bump_offer}
    """
)
async def deck_outline_prompt(
    industry: str,
    host_name: str,
    audience_size: str,
    event_date: str,
    offer_summary: str,
    bump_offer: str,
): ...


@prompt_template(
    """
    SYSTEM:
    You are a conversion optimization expert. Design a sales funnel strategy
    with a headline, a value proposition, a call to action, urgency triggers,
    social proof and a risk reversal.

    USER:
    Industry: {industry}
    Host: {host_name}
    Audience size: {audience_size}
    Main offer: {offer_summary}
    Bump offer: {bump_offer}
    Presentation deck available: {has_deck}
    Audience segments identified: {segment_count}
    """
)
async def funnel_strategy_prompt(
    industry: str,
    host_name: str,
    audience_size: str,
    offer_summary: str,
    bump_offer: str,
    has_deck: str,
    segment_count: int,
): ...


class MirascopeCopywriter:
    """Copywriter backed by OpenAI through Mirascope calls."""

    def __init__(self, model: str = "gpt-4o-mini"):
        self.model = model
        self._messaging = openai.call(model)(segment_messaging_prompt)
        self._outline = openai.call(model, response_model=DeckOutline, json_mode=True)(
            deck_outline_prompt
        )
        self._strategy = openai.call(model, response_model=FunnelStrategy, json_mode=True)(
            funnel_strategy_prompt
        )

    async def segment_messaging(
        self,
        segment_name: str,
        industry: str,
        characteristics: Sequence[str],
        host_name: str,
        offer_summary: str,
        event_date: str,
    ) -> str:
        response = await self._messaging(
            segment_name=segment_name,
            industry=industry,
            characteristics=", ".join(characteristics),
            host_name=host_name,
            offer_summary=offer_summary,
            event_date=event_date,
        )
        log_verbose(logger, f"Messaging for {segment_name}: {response.content[:80]}")
        return response.content.strip()

    async def deck_outline(
        self,
        industry: str,
        host_name: str,
        audience_size: str,
        event_date: str,
        offer_summary: str,
        bump_offer: str,
    ) -> DeckOutline:
        outline = await self._outline(
            industry=industry,
            host_name=host_name,
            audience_size=audience_size,
            event_date=event_date,
            offer_summary=offer_summary,
            bump_offer=bump_offer,
        )
        logger.debug(f"Deck outline with {len(outline.slides)} slides")
        return outline

    async def funnel_strategy(
        self,
        industry: str,
        host_name: str,
        audience_size: str,
        offer_summary: str,
        bump_offer: str,
        has_deck: bool,
        segment_count: int,
    ) -> FunnelStrategy:
        return await self._strategy(
            industry=industry,
            host_name=host_name,
            audience_size=audience_size,
            offer_summary=offer_summary,
            bump_offer=bump_offer,
            has_deck="Yes" if has_deck else "No",
            segment_count=segment_count,
        )
