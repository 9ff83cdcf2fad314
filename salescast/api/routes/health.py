from typing import Any

from fastapi import APIRouter, Depends

from salescast.core.config import settings
from salescast.services.forecast_service import ForecastService
from salescast.api.routes.sales import get_forecaster

router = APIRouter()


@router.get("/health")
def health() -> dict[str, Any]:
    return {"status": "ok", "app": settings.app_name, "llm_model": settings.openai_model}


@router.get("/health/provider")
def provider_health(forecaster: ForecastService = Depends(get_forecaster)) -> dict[str, Any]:
    reachable, status = forecaster.provider.probe(forecaster.credential_source())
    return {"reachable": reachable, "status": status, "llm_model": forecaster.provider.model}
