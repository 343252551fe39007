"""Nodes of the event pipeline."""

from leadrecon.agents.affiliate import AffiliateNode
from leadrecon.agents.analytics import AnalyticsTapNode
from leadrecon.agents.base import EventNode
from leadrecon.agents.deck import GammaDeckNode, GoogleDeckNode, resolve_deck_provider
from leadrecon.agents.followup import FollowupNode
from leadrecon.agents.funnel import FunnelNode
from leadrecon.agents.outreach import OutreachNode
from leadrecon.agents.profiler import ProfilerNode

__all__ = [
    "EventNode",
    "AnalyticsTapNode",
    "ProfilerNode",
    "GoogleDeckNode",
    "GammaDeckNode",
    "FunnelNode",
    "AffiliateNode",
    "OutreachNode",
    "FollowupNode",
    "resolve_deck_provider",
]
