"""The event pipeline.

    analytics_tap ─┐
                   ├─ (entry wavefront)
    profiler ──────┘── routes by deck provider ──> deck_google / deck_gamma
    deck_google / deck_gamma ── fan-in ──> funnel ──> affiliate ──> outreach ──> followup ──> END

The deck fan-in is a soft barrier by default: each deck node's edge waits for
the sibling provider's entry under ``artifacts.deck.providers`` when both
providers were scheduled. ``join="explicit"`` uses a join edge instead.

Feature flags are bound into the routers here, once, when the graph is built.
"""

from typing import List, Literal, Optional

from leadrecon.agents import (
    AffiliateNode,
    AnalyticsTapNode,
    FollowupNode,
    FunnelNode,
    GammaDeckNode,
    GoogleDeckNode,
    OutreachNode,
    ProfilerNode,
    resolve_deck_provider,
)
from leadrecon.contracts import EventPacket, as_packet
from leadrecon.core.config import FeatureFlags, GraphConfig
from leadrecon.core.graph import END, START, CompiledGraph, Graph, NodeState, wait_for_siblings
from leadrecon.core.graph.base import Router
from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations import Collaborators

logger = get_logger(LogComponent.CONDUCTOR)

ANALYTICS_TAP = "analytics_tap"
PROFILER = "profiler"
DECK_GOOGLE = "deck_google"
DECK_GAMMA = "deck_gamma"
FUNNEL = "funnel"
AFFILIATE = "affiliate"
OUTREACH = "outreach"
FOLLOWUP = "followup"

JoinMode = Literal["soft", "explicit"]


def initial_state(packet) -> NodeState:
    """Fresh run state for an EventPacket or its mapping form."""
    return NodeState.initial(as_packet(packet))


def deck_router(flags: FeatureFlags) -> Router:
    """Profiler edge: activate the deck node(s) for the run's provider."""

    def pick_decks(state: NodeState) -> List[str]:
        provider = resolve_deck_provider(as_packet(state.packet), flags)
        if provider == "both":
            return [DECK_GOOGLE, DECK_GAMMA]
        if provider == "gamma":
            return [DECK_GAMMA]
        return [DECK_GOOGLE]

    return pick_decks


def deck_fan_in(sibling: str, flags: FeatureFlags) -> Router:
    """Deck edge to the funnel, waiting for ``sibling`` only in both-provider mode."""

    def fan_out(state: NodeState) -> bool:
        return resolve_deck_provider(as_packet(state.packet), flags) == "both"

    return wait_for_siblings(FUNNEL, [f"deck.providers.{sibling}"], fan_out)


def build_graph(
    flags: Optional[FeatureFlags] = None,
    collaborators: Optional[Collaborators] = None,
    config: Optional[GraphConfig] = None,
    join: JoinMode = "soft",
) -> CompiledGraph:
    """Wire and compile the event pipeline.

    Args:
        flags: Deck provider flags, read from the environment when omitted
        collaborators: External clients, built from IntegrationSettings when omitted
        config: Engine configuration, read from the environment when omitted
        join: ``soft`` for sibling-artifact barriers, ``explicit`` for a join edge
    """
    flags = flags or FeatureFlags()
    collaborators = collaborators or Collaborators.from_settings()
    config = config or GraphConfig()

    graph = Graph(config=config)
    graph.add_node(AnalyticsTapNode(id=ANALYTICS_TAP, collaborators=collaborators))
    graph.add_node(ProfilerNode(id=PROFILER, collaborators=collaborators))
    graph.add_node(GoogleDeckNode(id=DECK_GOOGLE, collaborators=collaborators, flags=flags))
    graph.add_node(GammaDeckNode(id=DECK_GAMMA, collaborators=collaborators, flags=flags))
    graph.add_node(FunnelNode(id=FUNNEL, collaborators=collaborators))
    graph.add_node(AffiliateNode(id=AFFILIATE, collaborators=collaborators))
    graph.add_node(OutreachNode(id=OUTREACH, collaborators=collaborators))
    graph.add_node(FollowupNode(id=FOLLOWUP, collaborators=collaborators))

    graph.add_edge(START, ANALYTICS_TAP)
    graph.add_edge(START, PROFILER)
    graph.add_conditional_edges(PROFILER, deck_router(flags), destinations=[DECK_GOOGLE, DECK_GAMMA])

    if join == "explicit":
        graph.add_join_edge([DECK_GOOGLE, DECK_GAMMA], FUNNEL)
    elif join == "soft":
        graph.add_conditional_edges(DECK_GOOGLE, deck_fan_in("gamma", flags), destinations=[FUNNEL])
        graph.add_conditional_edges(DECK_GAMMA, deck_fan_in("google", flags), destinations=[FUNNEL])
    else:
        raise ValueError(f"Unknown join mode: {join}")

    graph.chain([FUNNEL, AFFILIATE, OUTREACH, FOLLOWUP])
    graph.add_edge(FOLLOWUP, END)

    logger.info(
        f"Event pipeline built (join={join}, gamma_enabled={flags.gamma_enabled}, "
        f"default_provider={flags.default_deck_provider})"
    )
    return graph.compile()


async def run_event(packet, graph: Optional[CompiledGraph] = None) -> NodeState:
    """Run one event through the pipeline and return its final state."""
    event: EventPacket = as_packet(packet)
    graph = graph or build_graph()
    return await graph.invoke(initial_state(event), run_id=event.event_id)
