"""
Advisory payload schemas

Responses from the language model are untrusted; every structured payload is
validated against one of these models before anything else sees it.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class WealthScore(BaseModel):
    score: int = Field(..., ge=0, le=100, description="Financial health score, 0-100")
    label: str = Field(..., description="Short verdict, e.g. Thriving, Stable, At Risk")
    color: str = Field(..., description="Hex colour for the label")
    advice: str


class SpendingAlert(BaseModel):
    title: str
    message: str
    severity: Literal['low', 'medium', 'high'] = 'medium'


class Milestone(BaseModel):
    title: str
    eta: str = Field(..., description="Human readable time to reach the milestone")
    confidence: Literal['Low', 'Medium', 'High'] = 'Medium'


class FreedomProjection(BaseModel):
    summary: str
    milestones: List[Milestone] = Field(default_factory=list)


class SavingsQuest(BaseModel):
    title: str
    description: str
    target_saving: float = Field(..., ge=0)
    duration_days: int = Field(7, ge=1)
    difficulty: Literal['Easy', 'Medium', 'Hard'] = 'Medium'
    status: Literal['Available', 'Active'] = 'Available'


class SpendingPersona(BaseModel):
    name: str
    icon: str
    description: str
    strength: str
    watch_out: str


class CategoryLimit(BaseModel):
    category: str
    limit: float = Field(..., ge=0)


class CategoryOptimization(BaseModel):
    suggested_limits: List[CategoryLimit]
    rationale: str

    def as_mapping(self) -> Dict[str, float]:
        return {item.category: item.limit for item in self.suggested_limits}


class SavingsLink(BaseModel):
    title: str
    uri: str


class SavingsTip(BaseModel):
    text: str
    links: List[SavingsLink] = Field(default_factory=list)


class ChatMessage(BaseModel):
    role: Literal['user', 'model']
    text: str


class AdviceBundle(BaseModel):
    """One refresh worth of advice, stamped with the input it was computed from."""
    fingerprint: str
    insight: str
    subscription_audit: str
    forecast: str
    wealth_score: Optional[WealthScore] = None
    alerts: List[SpendingAlert] = Field(default_factory=list)
    freedom_projection: Optional[FreedomProjection] = None
    value_audit: str
    quest: Optional[SavingsQuest] = None
    persona: Optional[SpendingPersona] = None
    goal_strategy: Optional[str] = None
