from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Callable

from salescast.core.config import settings
from salescast.core.errors import (
    CredentialError,
    ForecastProviderError,
    ResponseParseError,
)
from salescast.db.schemas import ForecastPoint, ForecastResult, SeriesPoint
from salescast.services import parser_service
from salescast.services.llm_service import ForecastProvider
from salescast.services.prompt_service import build_prompt
from salescast.services.trend_service import TrendEstimator

logger = logging.getLogger(__name__)

MSG_SUCCESS = "Forecast generated successfully"
MSG_FALLBACK = "Forecast generated using statistical fallback"
MSG_NO_DATA = "No time series data provided"


def _configured_credential() -> str:
    return settings.openai_api_key


class ForecastService:
    """Forecasts one bucketed series at one granularity.

    Tries the LLM provider first. Any credential, transport, provider or
    parsing failure degrades to the trend estimator, so callers always get a
    ForecastResult; ``raw_diagnostic`` holds either the provider's raw reply
    or the reason for falling back.
    """

    def __init__(
        self,
        provider: ForecastProvider | None = None,
        estimator: TrendEstimator | None = None,
        credential_source: Callable[[], str | None] = _configured_credential,
    ):
        self.provider = provider or ForecastProvider()
        self.estimator = estimator or TrendEstimator()
        self.credential_source = credential_source

    def forecast(
        self,
        series: Sequence[SeriesPoint],
        granularity: str,
        credential: str | None = None,
        periods_to_forecast: int | None = None,
    ) -> ForecastResult:
        if not series:
            return ForecastResult(forecast=[], granularity=granularity, message=MSG_NO_DATA, raw_diagnostic="no data")

        key = credential if credential is not None else self.credential_source()
        prompt = build_prompt(series, granularity, periods_to_forecast)
        try:
            raw_text = self.provider.call(prompt, key)
        except CredentialError as exc:
            return self._fallback(series, granularity, periods_to_forecast, f"no/invalid credential: {exc}")
        except ForecastProviderError as exc:
            return self._fallback(series, granularity, periods_to_forecast, f"provider call failed: {exc}")
        except Exception as exc:
            logger.exception("Unexpected error from forecast provider")
            return self._fallback(
                series, granularity, periods_to_forecast, f"provider call failed: {type(exc).__name__}: {exc}"
            )

        try:
            points, raw_text = parser_service.parse(raw_text)
        except ResponseParseError as exc:
            return self._fallback(series, granularity, periods_to_forecast, f"parsing failed: {exc}")

        if periods_to_forecast is not None:
            points = points[:periods_to_forecast]
        logger.info("Provider forecast for %s: %d points", granularity, len(points))
        return ForecastResult(forecast=points, granularity=granularity, message=MSG_SUCCESS, raw_diagnostic=raw_text)

    def _fallback(
        self,
        series: Sequence[SeriesPoint],
        granularity: str,
        periods_to_forecast: int | None,
        reason: str,
    ) -> ForecastResult:
        logger.warning("Falling back to trend estimate for %s: %s", granularity, reason)
        points: list[ForecastPoint] = self.estimator.estimate(series, granularity, periods_to_forecast)
        return ForecastResult(forecast=points, granularity=granularity, message=MSG_FALLBACK, raw_diagnostic=reason)
