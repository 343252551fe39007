"""Rule-based lead scoring and segmentation.

Scores combine revenue, industry fit, company size, engagement and recency
into a value in [0, 1]. Segments are fixed rules over scored leads; a segment
is kept only when it holds at least ``min_segment_size`` leads, and the kept
segments are ordered by priority, then by size.
"""

import random
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from leadrecon.contracts import Lead, ScoredLead
from leadrecon.contracts.leads import Priority

HIGH_VALUE_INDUSTRIES = ("SaaS", "E-commerce", "Agency", "Consulting")
PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}

SAMPLE_INDUSTRIES = ("SaaS", "E-commerce", "Consulting", "Agency", "Real Estate")
SAMPLE_SIZES = ("startup", "smb", "enterprise")
SAMPLE_LOCATIONS = ("US", "UK", "CA", "AU")
SAMPLE_SOURCES = ("website", "social", "referral", "paid")


def days_since(moment: datetime, now: datetime) -> int:
    return (now - moment).days


def fallback_score(lead: Lead, now: datetime) -> float:
    score = 0.5

    if lead.revenue > 5_000_000:
        score += 0.3
    elif lead.revenue > 1_000_000:
        score += 0.2
    elif lead.revenue > 500_000:
        score += 0.1

    if lead.industry in HIGH_VALUE_INDUSTRIES:
        score += 0.15

    if lead.size == "enterprise":
        score += 0.2
    elif lead.size == "smb":
        score += 0.1

    score += lead.engagement_score * 0.2

    days = days_since(lead.last_activity, now)
    if days < 7:
        score += 0.1
    elif days < 30:
        score += 0.05

    return min(1.0, max(0.0, score))


def determine_segment(lead: Lead) -> str:
    """Company tier from revenue and headcount."""
    if lead.revenue > 10_000_000 or lead.employees > 500:
        return "Enterprise"
    if lead.revenue > 1_000_000 or lead.employees > 50:
        return "SMB"
    return "Startup"


def score_leads(leads: Sequence[Lead], now: Optional[datetime] = None) -> List[ScoredLead]:
    now = now or datetime.now()
    return [
        ScoredLead(
            **lead.model_dump(),
            score=fallback_score(lead, now),
            segment=determine_segment(lead),
        )
        for lead in leads
    ]


class SegmentRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    characteristics: Tuple[str, ...]
    priority: Priority
    recommended_channels: Tuple[str, ...]
    estimated_conversion_rate: float
    matches: Callable[[ScoredLead, datetime], bool]


SEGMENT_RULES: Tuple[SegmentRule, ...] = (
    SegmentRule(
        name="High-Value Enterprise",
        characteristics=(
            "Large revenue ($10M+)",
            "High employee count (500+)",
            "Strong engagement signals",
            "Enterprise-grade needs",
        ),
        priority="high",
        recommended_channels=("direct-sales", "linkedin", "account-based-marketing"),
        estimated_conversion_rate=0.15,
        matches=lambda lead, now: lead.segment == "Enterprise" and lead.score > 0.7,
    ),
    SegmentRule(
        name="SMB Growth Companies",
        characteristics=(
            "Mid-market revenue ($1M-$10M)",
            "Growth-oriented industries",
            "Technology adoption mindset",
            "Scaling challenges",
        ),
        priority="high",
        recommended_channels=("email", "webinar", "content-marketing"),
        estimated_conversion_rate=0.12,
        matches=lambda lead, now: (
            lead.segment == "SMB"
            and lead.score > 0.6
            and lead.industry in ("SaaS", "E-commerce", "Agency")
        ),
    ),
    SegmentRule(
        name="Tech-Savvy Startups",
        characteristics=(
            "Early-stage companies",
            "Tech-forward industries",
            "Budget-conscious",
            "Quick decision makers",
        ),
        priority="medium",
        recommended_channels=("email", "social-media", "product-led-growth"),
        estimated_conversion_rate=0.08,
        matches=lambda lead, now: (
            lead.segment == "Startup" and lead.score > 0.5 and lead.industry in ("SaaS", "E-commerce")
        ),
    ),
    SegmentRule(
        name="Consulting & Agencies",
        characteristics=(
            "Service-based businesses",
            "Client management focus",
            "Efficiency and automation needs",
            "Relationship-driven",
        ),
        priority="medium",
        recommended_channels=("referral", "partnership", "linkedin"),
        estimated_conversion_rate=0.10,
        matches=lambda lead, now: lead.industry in ("Consulting", "Agency") and lead.score > 0.5,
    ),
    SegmentRule(
        name="International Markets",
        characteristics=(
            "Non-North American markets",
            "Different time zones",
            "Potential compliance considerations",
            "Currency and payment preferences",
        ),
        priority="low",
        recommended_channels=("email", "localized-content", "regional-partners"),
        estimated_conversion_rate=0.06,
        matches=lambda lead, now: lead.location not in ("US", "CA") and lead.score > 0.4,
    ),
    SegmentRule(
        name="Hot Prospects",
        characteristics=(
            "Recent high engagement",
            "Active within last week",
            "Strong interest signals",
            "Ready for immediate outreach",
        ),
        priority="high",
        recommended_channels=("phone", "direct-email", "immediate-follow-up"),
        estimated_conversion_rate=0.20,
        matches=lambda lead, now: (
            days_since(lead.last_activity, now) < 7 and lead.engagement_score > 0.7
        ),
    ),
    SegmentRule(
        name="Nurturing Pipeline",
        characteristics=(
            "Lower engagement scores",
            "Potential for future conversion",
            "Need education and trust building",
            "Long-term relationship building",
        ),
        priority="low",
        recommended_channels=("newsletter", "educational-content", "drip-campaigns"),
        estimated_conversion_rate=0.04,
        matches=lambda lead, now: 0.2 < lead.score < 0.5,
    ),
)


def segment_leads(
    leads: Sequence[ScoredLead],
    now: Optional[datetime] = None,
    min_segment_size: int = 5,
    max_segments: int = 8,
    rules: Sequence[SegmentRule] = SEGMENT_RULES,
) -> List[Tuple[SegmentRule, List[ScoredLead]]]:
    """Apply the segment rules.

    A lead may fall into several segments. Returns ``(rule, leads)`` pairs,
    highest priority first and larger segments first within a priority.
    """
    now = now or datetime.now()
    segments = []
    for rule in rules:
        members = [lead for lead in leads if rule.matches(lead, now)]
        if len(members) >= min_segment_size:
            segments.append((rule, members))

    segments.sort(key=lambda pair: (-PRIORITY_ORDER[pair[0].priority], -len(pair[1])))
    return segments[:max_segments]


def assign_segments(
    leads: Sequence[ScoredLead],
    segments: Sequence[Tuple[SegmentRule, List[ScoredLead]]],
) -> List[ScoredLead]:
    """Label each lead with the last kept segment containing it."""
    labels: Dict[str, str] = {}
    for rule, members in segments:
        for lead in members:
            labels[lead.id] = rule.name
    return [
        lead.model_copy(update={"segment": labels[lead.id]}) if lead.id in labels else lead
        for lead in leads
    ]


def sample_leads(seed: str, count: int = 50, now: Optional[datetime] = None) -> List[Lead]:
    """Deterministic demo leads; the same seed always yields the same leads."""
    now = now or datetime.now()
    rng = random.Random(seed)
    leads = []
    for i in range(count):
        n = i + 1
        leads.append(Lead(
            id=f"lead_{n}",
            name=f"Lead {n}",
            email=f"lead{n}@example.com",
            company=f"Company {n}",
            industry=SAMPLE_INDUSTRIES[i % len(SAMPLE_INDUSTRIES)],
            size=SAMPLE_SIZES[i % len(SAMPLE_SIZES)],
            revenue=rng.randint(100_000, 10_099_999),
            employees=rng.randint(10, 1_009),
            location=SAMPLE_LOCATIONS[i % len(SAMPLE_LOCATIONS)],
            engagement_score=rng.random(),
            last_activity=now - timedelta(days=rng.random() * 30),
            source=SAMPLE_SOURCES[i % len(SAMPLE_SOURCES)],
        ))
    return leads
