"""Followup node: closes the run with a summary bundle and completion trace."""

import time
from datetime import datetime, timezone
from typing import ClassVar, Dict, Type

from pydantic import BaseModel

from leadrecon.agents.base import EventNode
from leadrecon.contracts import SummaryArtifact
from leadrecon.core.graph.nodes.base.node import NodeContext
from leadrecon.core.graph.state import NodeState, StateUpdate
from leadrecon.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.AGENTS)

NEXT_STEPS = [
    "Review lead segments and personalized messaging",
    "Launch outreach campaigns using generated content",
    "Monitor funnel performance and conversion rates",
    "Optimize based on analytics and feedback",
]


class FollowupNode(EventNode):
    artifact_models: ClassVar[Dict[str, Type[BaseModel]]] = {"summary": SummaryArtifact}

    async def process(self, state: NodeState, context: NodeContext) -> StateUpdate:
        packet = self.packet(state)
        now = time.time()
        started = state.get_artifact("analytics.workflow_start_time", now)
        duration_ms = max(0, int((now - started) * 1000))

        results = {
            "total_leads": state.get_artifact("profiler.total_leads", 0),
            "segments": len(state.get_artifact("profiler.segments", [])),
            "high_value_leads": state.get_artifact("profiler.high_value_leads", 0),
            "average_lead_score": state.get_artifact("profiler.average_score", 0),
            "deck_generated": state.has_artifact("deck"),
            "funnel_created": state.has_artifact("funnel"),
            "affiliate_links_ready": state.has_artifact("tracking"),
            "outreach_campaigns_ready": state.has_artifact("outreach"),
        }

        await self.collaborators.tracer.log_workflow(
            packet.event_id,
            "lead_recon_workflow_complete",
            {key: results[key] for key in ("segments", "deck_generated", "funnel_created", "outreach_campaigns_ready")},
            duration_ms,
            {
                "success": not state.errors,
                "total_leads": results["total_leads"],
                "high_value_leads": results["high_value_leads"],
            },
        )
        logger.info(
            f"[{packet.event_id}] Workflow completed: {results['segments']} segments "
            f"from {results['total_leads']} leads"
        )

        return self.emit("summary", SummaryArtifact(
            event_id=packet.event_id,
            completed_at=datetime.now(timezone.utc).isoformat(),
            processing_time_ms=duration_ms,
            results=results,
            errors=list(state.errors),
            next_steps=NEXT_STEPS,
        ))
