"""Lead records consumed and produced by the profiler."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Priority = Literal["high", "medium", "low"]


class Lead(BaseModel):
    """A prospect pulled from a lead source (camelCase or snake_case input)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    email: str = ""
    company: str = ""
    industry: str = ""
    size: str = "smb"
    revenue: float = 0
    employees: int = 0
    location: str = ""
    engagement_score: float = Field(default=0.0, ge=0, le=1)
    last_activity: datetime
    source: str = ""

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else "Friend"


class ScoredLead(Lead):
    score: float = Field(ge=0, le=1)
    segment: str
    priority: Priority = "medium"
    recommended_action: str = "Review and qualify"
    reasoning: str = "Rule-based scoring"


class LeadContact(BaseModel):
    """The part of a lead outreach needs."""
    id: str
    name: str
    email: str
    company: str = ""
