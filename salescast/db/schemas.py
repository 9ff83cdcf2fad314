from datetime import date as Date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Granularity = Literal["day", "week", "month"]
GRANULARITIES: tuple[str, ...] = ("day", "week", "month")


class Observation(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: Date
    amount: float


class SeriesPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: str
    total: float


class ForecastPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: str
    total: float

    @field_validator("total")
    @classmethod
    def clamp_negative(cls, v: float) -> float:
        # Projected sales never go below zero, even though history can.
        return max(0.0, v)


class ForecastResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    forecast: list[ForecastPoint] = []
    granularity: Granularity
    message: str
    raw_diagnostic: str | None = None


class CategoryTotal(BaseModel):
    category_name: str
    total_amount: float


class ForecastRequest(BaseModel):
    series: list[SeriesPoint] = []
    granularity: Granularity = "month"
    periods_to_forecast: int | None = Field(default=None, ge=1, le=366)


class MultiForecastRequest(BaseModel):
    series: list[SeriesPoint] = []


class MultiForecastResponse(BaseModel):
    daily: ForecastResult
    weekly: ForecastResult
    monthly: ForecastResult


class SeriesResponse(BaseModel):
    granularity: Granularity
    series: list[SeriesPoint]
