"""Pydantic schemas for women's safety alerts."""

from pydantic import BaseModel, Field

from crimecast.schemas.forecast import RiskLevel


class SafetyAlert(BaseModel):
    """Predictive alert for an area showing an emerging risk pattern."""

    id: str
    title: str
    reason: str
    severity: RiskLevel
    location: str


class SafetyAlertsResponse(BaseModel):
    """Alerts produced from recent incidents."""

    alerts: list[SafetyAlert] = Field(default_factory=list)
