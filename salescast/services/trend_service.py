from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from salescast.db.schemas import ForecastPoint, SeriesPoint
from salescast.services.periods import advance, get_forecast_periods

RECENT_WINDOW = 3
SEASONAL_PERIOD = 12


class TrendEstimator:
    """Statistical fallback forecaster.

    Projects the mean of the most recent buckets forward along the trend
    between recent and older buckets, shaped by a sine seasonality of
    ``seasonality`` amplitude over a 12-step cycle and multiplied by uniform
    noise within ``±volatility``. Series too short to have an older segment
    get a plain linear extrapolation instead.
    """

    def __init__(
        self,
        seasonality: float = 0.10,
        volatility: float = 0.05,
        rng: np.random.Generator | None = None,
    ):
        self.seasonality = seasonality
        self.volatility = volatility
        self.rng = rng if rng is not None else np.random.default_rng()

    def estimate(
        self,
        series: Sequence[SeriesPoint],
        granularity: str,
        periods_to_forecast: int | None = None,
    ) -> list[ForecastPoint]:
        if len(series) < 2:
            return []
        periods = periods_to_forecast if periods_to_forecast is not None else get_forecast_periods(granularity)
        values = np.array([p.total for p in series], dtype=float)
        last_period = series[-1].period

        window = min(RECENT_WINDOW, len(values))
        recent, older = values[-window:], values[:-window]
        avg_recent = float(recent.mean())

        if older.size == 0:
            trend = (avg_recent - values[0]) / (len(values) - 1)
            return [
                ForecastPoint(
                    period=advance(last_period, granularity, i + 1),
                    total=avg_recent + trend * (i + 1),
                )
                for i in range(periods)
            ]

        trend = (avg_recent - float(older.mean())) / window
        out = []
        for i in range(periods):
            base = avg_recent + trend * (i + 1)
            seasonal = 1.0 + self.seasonality * math.sin(i * math.pi / (SEASONAL_PERIOD / 2))
            noise = 1.0 + self._noise()
            out.append(ForecastPoint(period=advance(last_period, granularity, i + 1), total=base * seasonal * noise))
        return out

    def _noise(self) -> float:
        if self.volatility == 0:
            return 0.0
        return float(self.rng.uniform(-self.volatility, self.volatility))
