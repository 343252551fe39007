"""Profiler node: lead gathering, scoring, segmentation and segment messaging."""

import asyncio
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from leadrecon.agents.base import EventNode
from leadrecon.agents.scoring import assign_segments, sample_leads, score_leads, segment_leads
from leadrecon.contracts import EventPacket, Lead, LeadContact, ProfilerArtifact, ScoredLead, Segment
from leadrecon.core.graph.nodes.base.node import NodeContext
from leadrecon.core.graph.state import NodeState, StateUpdate
from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations import to_csv

logger = get_logger(LogComponent.AGENTS)

LEAD_SOURCE_KEYS = ("crm", "social", "website")
CONTACTS_PER_SEGMENT = 10
HIGH_VALUE_THRESHOLD = 0.8

EXPORT_COLUMNS = (
    "id", "name", "email", "company", "industry", "size", "revenue", "employees",
    "location", "score", "segment", "priority", "recommendedAction", "lastActivity", "source",
)


def collect_leads(packet: EventPacket, now: Optional[datetime] = None) -> List[Lead]:
    """Inline lead records from the packet's sources, else a seeded sample.

    A source given as a list is read as lead records; any other value is a
    connector configuration and contributes nothing here.
    """
    leads: List[Lead] = []
    for key in LEAD_SOURCE_KEYS:
        source = packet.lead_sources.get(key)
        if not isinstance(source, list):
            continue
        for record in source:
            try:
                leads.append(Lead.model_validate(record))
            except ValidationError as e:
                logger.warning(f"[{packet.event_id}] Skipping malformed {key} lead: {e.error_count()} error(s)")
    if leads:
        return leads
    return sample_leads(packet.event_id, now=now)


def export_rows(leads: List[ScoredLead]) -> List[Dict[str, Any]]:
    return [
        {
            "id": lead.id,
            "name": lead.name,
            "email": lead.email,
            "company": lead.company,
            "industry": lead.industry,
            "size": lead.size,
            "revenue": lead.revenue,
            "employees": lead.employees,
            "location": lead.location,
            "score": f"{lead.score:.3f}",
            "segment": lead.segment,
            "priority": lead.priority,
            "recommendedAction": lead.recommended_action,
            "lastActivity": lead.last_activity.isoformat(),
            "source": lead.source,
        }
        for lead in leads
    ]


def offer_summary(packet: EventPacket) -> str:
    return f"${packet.offer.tripwire_price:g} for {packet.offer.tripwire_credits} credits"


class ProfilerNode(EventNode):
    """Scores and segments the event's leads and writes ``artifacts.profiler``."""

    artifact_models: ClassVar[Dict[str, Type[BaseModel]]] = {"profiler": ProfilerArtifact}

    now: Optional[datetime] = None

    async def process(self, state: NodeState, context: NodeContext) -> StateUpdate:
        packet = self.packet(state)
        storage = self.collaborators.require("storage")
        copywriter = self.collaborators.require("copywriter")
        now = self.now or datetime.now()

        scored = score_leads(collect_leads(packet, now), now)
        segments = segment_leads(scored, now)
        scored = assign_segments(scored, segments)
        logger.info(f"[{packet.event_id}] Scored {len(scored)} leads into {len(segments)} segments")

        messaging = await asyncio.gather(*(
            copywriter.segment_messaging(
                segment_name=rule.name,
                industry=packet.audience.industry,
                characteristics=rule.characteristics,
                host_name=packet.host.name,
                offer_summary=offer_summary(packet),
                event_date=packet.date,
            )
            for rule, _ in segments
        ))

        csv_url = await storage.upload(
            to_csv(export_rows(scored), EXPORT_COLUMNS),
            f"profiles/{packet.event_id}/leads-analysis.csv",
            "text/csv",
        )

        artifact = ProfilerArtifact(
            csv_url=csv_url,
            segments=[
                Segment(
                    name=rule.name,
                    size=len(members),
                    characteristics=list(rule.characteristics),
                    priority=rule.priority,
                    recommended_channels=list(rule.recommended_channels),
                    estimated_conversion_rate=rule.estimated_conversion_rate,
                    messaging=message,
                    contacts=[
                        LeadContact(id=lead.id, name=lead.name, email=lead.email, company=lead.company)
                        for lead in members[:CONTACTS_PER_SEGMENT]
                    ],
                )
                for (rule, members), message in zip(segments, messaging)
            ],
            total_leads=len(scored),
            average_score=sum(lead.score for lead in scored) / len(scored) if scored else 0.0,
            high_value_leads=sum(1 for lead in scored if lead.score > HIGH_VALUE_THRESHOLD),
        )
        return self.emit("profiler", artifact)
