"""API route for crime forecasts."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from crimecast.dependencies import get_forecast_service
from crimecast.limiter import ORACLE_RATE_LIMIT, limiter
from crimecast.schemas.forecast import PredictCrimeRequest, PredictCrimeResponse
from crimecast.services.forecast import ForecastService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["forecast"])


@router.post("/predict-crime", response_model=PredictCrimeResponse)
@limiter.limit(ORACLE_RATE_LIMIT)
async def predict_crime(
    request: Request,
    body: PredictCrimeRequest,
    service: Annotated[ForecastService, Depends(get_forecast_service)],
) -> PredictCrimeResponse:
    """
    Historical counts and predicted counts for a date range.

    Days up to today carry ``historicalCount``; later days carry
    ``predictedCount``. If the forecast model is unavailable the future days
    are returned with a prediction of 0 rather than an error.
    """
    return await service.predict(body)
