"""API route for women's safety alerts."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from crimecast.dependencies import get_alert_service
from crimecast.limiter import ORACLE_RATE_LIMIT, limiter
from crimecast.schemas.alerts import SafetyAlertsResponse
from crimecast.services.alerts import SafetyAlertService

router = APIRouter(tags=["alerts"])


@router.post("/womens-safety-alerts", response_model=SafetyAlertsResponse)
@limiter.limit(ORACLE_RATE_LIMIT)
async def womens_safety_alerts(
    request: Request,
    service: Annotated[SafetyAlertService, Depends(get_alert_service)],
) -> SafetyAlertsResponse:
    """Predictive alerts for clusters of recent Harassment, Theft and Accident incidents."""
    alerts = await service.generate()
    return SafetyAlertsResponse(alerts=alerts)
