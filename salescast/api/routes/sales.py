import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salescast.core.config import settings
from salescast.core.errors import PeriodParseError
from salescast.db.schemas import (
    CategoryTotal,
    ForecastRequest,
    ForecastResult,
    Granularity,
    MultiForecastRequest,
    MultiForecastResponse,
    SeriesResponse,
)
from salescast.db.session import get_db
from salescast.services.aggregation import bucket, observations_from_report, series_to_observations
from salescast.services.forecast_service import ForecastService
from salescast.services.periods import add_months
from salescast.services.sales_service import SalesRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales", tags=["sales"])
repository = SalesRepository()
forecaster = ForecastService()


def get_forecaster() -> ForecastService:
    return forecaster


def _parse_date(value: str | None, name: str, default: date) -> date:
    if not value:
        return default
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(400, f"Invalid {name} format. Use YYYY-MM-DD")


def _load_report(db: Session, start_date: str | None, end_date: str | None) -> dict[str, list[CategoryTotal]]:
    today = date.today()
    start = _parse_date(start_date, "start_date", add_months(today, -settings.report_default_lookback_months))
    end = _parse_date(end_date, "end_date", today)
    if start > end:
        raise HTTPException(400, "start_date must be on/before end_date")
    try:
        return repository.category_totals(db, start, end)
    except SQLAlchemyError:
        logger.exception("Failed to query sales data")
        raise HTTPException(500, "Failed to query sales data")


@router.get("/report/category", response_model=dict[str, list[CategoryTotal]])
def report_by_category(
    start_date: str | None = None,
    end_date: str | None = None,
    db: Session = Depends(get_db),
) -> dict[str, list[CategoryTotal]]:
    report = _load_report(db, start_date, end_date)
    if not report:
        raise HTTPException(404, "No sales data found")
    return report


@router.get("/report/series", response_model=SeriesResponse)
def report_series(
    granularity: Granularity = "month",
    start_date: str | None = None,
    end_date: str | None = None,
    db: Session = Depends(get_db),
) -> SeriesResponse:
    report = _load_report(db, start_date, end_date)
    return SeriesResponse(granularity=granularity, series=bucket(observations_from_report(report), granularity))


@router.post("/forecast", response_model=ForecastResult)
def forecast(req: ForecastRequest, svc: ForecastService = Depends(get_forecaster)) -> ForecastResult:
    if not req.series:
        raise HTTPException(400, "No time series data provided")
    try:
        return svc.forecast(req.series, req.granularity, periods_to_forecast=req.periods_to_forecast)
    except PeriodParseError as e:
        raise HTTPException(400, str(e))


@router.post("/forecast/all", response_model=MultiForecastResponse)
def forecast_all(req: MultiForecastRequest, svc: ForecastService = Depends(get_forecaster)) -> MultiForecastResponse:
    if not req.series:
        raise HTTPException(400, "No time series data provided")
    try:
        observations = series_to_observations(req.series)
        daily, weekly, monthly = (
            svc.forecast(bucket(observations, g), g) for g in ("day", "week", "month")
        )
    except PeriodParseError as e:
        raise HTTPException(400, str(e))
    return MultiForecastResponse(daily=daily, weekly=weekly, monthly=monthly)
