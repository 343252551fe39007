"""Outreach node: per-segment campaigns, personalised email list and ad copy."""

import html
from typing import Any, ClassVar, Dict, List, Type

from pydantic import BaseModel

from leadrecon.agents.base import EventNode
from leadrecon.contracts import Campaign, EventPacket, OutreachArtifact, Segment
from leadrecon.core.graph.nodes.base.node import NodeContext
from leadrecon.core.graph.state import NodeState, StateUpdate
from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.integrations import to_csv

logger = get_logger(LogComponent.AGENTS)

CAMPAIGN_CHANNELS = ["email", "linkedin"]
EMAIL_COLUMNS = ("leadId", "firstName", "email", "company", "segment", "subject", "body")


def campaign_email(segment: Segment) -> Dict[str, str]:
    return {
        "subject": f"AI Lead Intelligence for {segment.name}",
        "body": (
            "Hi {{firstName}}, we have a solution that could help "
            f"{segment.name} businesses generate 300% more qualified leads. "
            "Interested in learning more?"
        ),
    }


def personalised_emails(segments: List[Segment]) -> List[Dict[str, Any]]:
    rows = []
    for segment in segments:
        template = campaign_email(segment)
        for contact in segment.contacts:
            first_name = contact.name.split(" ")[0] if contact.name else "Friend"
            rows.append({
                "leadId": contact.id,
                "firstName": first_name,
                "email": contact.email,
                "company": contact.company,
                "segment": segment.name,
                "subject": template["subject"],
                "body": template["body"].replace("{{firstName}}", first_name),
            })
    return rows


def ad_copy_document(packet: EventPacket, segments: List[Segment]) -> str:
    sections = "".join(
        f"<h2>{html.escape(segment.name)}</h2>"
        f"<p>{html.escape(segment.messaging or campaign_email(segment)['body'])}</p>"
        for segment in segments
    )
    return (
        f"<html><body><h1>Ad Copy for {html.escape(packet.event_id)}</h1>"
        f"{sections or '<p>Generated outreach content</p>'}</body></html>"
    )


class OutreachNode(EventNode):
    """Writes ``artifacts.outreach`` from the profiler's segments."""

    artifact_models: ClassVar[Dict[str, Type[BaseModel]]] = {"outreach": OutreachArtifact}

    async def process(self, state: NodeState, context: NodeContext) -> StateUpdate:
        packet = self.packet(state)
        storage = self.collaborators.require("storage")
        segments = [Segment.model_validate(s) for s in state.get_artifact("profiler.segments", [])]

        emails = personalised_emails(segments)
        emails_csv_url = await storage.upload(
            to_csv(emails, EMAIL_COLUMNS),
            f"outreach/{packet.event_id}/personalized-emails.csv",
            "text/csv",
        )
        ad_copy_url = await storage.upload(
            ad_copy_document(packet, segments).encode("utf-8"),
            f"outreach/{packet.event_id}/ad-copy.html",
            "text/html",
        )
        logger.info(f"[{packet.event_id}] {len(emails)} outreach emails across {len(segments)} segments")

        return self.emit("outreach", OutreachArtifact(
            emails_csv_url=emails_csv_url,
            ad_copy_doc_url=ad_copy_url,
            campaigns=[
                Campaign(
                    segment=segment.name,
                    email_count=len(segment.contacts),
                    channels=CAMPAIGN_CHANNELS,
                )
                for segment in segments
            ],
            total_emails=len(emails),
        ))
