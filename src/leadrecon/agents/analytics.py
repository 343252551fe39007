"""Analytics tap: records run start facts and emits the start trace."""

import time
from typing import ClassVar, Dict, Type

from pydantic import BaseModel

from leadrecon.agents.base import EventNode
from leadrecon.contracts import AnalyticsArtifact
from leadrecon.core.graph.nodes.base.node import NodeContext
from leadrecon.core.graph.state import NodeState, StateUpdate


class AnalyticsTapNode(EventNode):
    artifact_models: ClassVar[Dict[str, Type[BaseModel]]] = {"analytics": AnalyticsArtifact}

    async def process(self, state: NodeState, context: NodeContext) -> StateUpdate:
        packet = self.packet(state)
        started = time.time()

        await self.collaborators.tracer.log_workflow(
            packet.event_id,
            "lead_recon_workflow_start",
            {"status": "started"},
            0,
            {
                "industry": packet.audience.industry,
                "deck_provider": packet.assets.deck_provider,
                "offer_price": packet.offer.tripwire_price,
                "run_id": context.run_id,
            },
        )

        return self.emit("analytics", AnalyticsArtifact(
            workflow_start_time=started,
            event_id=packet.event_id,
            industry=packet.audience.industry,
            audience_size=packet.audience.size,
            deck_provider=packet.assets.deck_provider,
            offer_details={
                "tripwire_price": packet.offer.tripwire_price,
                "bump_enabled": packet.offer.bump_enabled,
                "bump_price": packet.offer.bump_price,
            },
            host_info={
                "name": packet.host.name,
                "payout_model": packet.host.payout_model,
                "commission_pct": packet.host.commission_pct,
            },
        ))
