"""API routers."""

from crimecast.routers.alerts import router as alerts_router
from crimecast.routers.chat import router as chat_router
from crimecast.routers.forecast import router as forecast_router
from crimecast.routers.health import router as health_router
from crimecast.routers.incidents import router as incidents_router
from crimecast.routers.patrol import router as patrol_router

__all__ = [
    "alerts_router",
    "chat_router",
    "forecast_router",
    "health_router",
    "incidents_router",
    "patrol_router",
]
