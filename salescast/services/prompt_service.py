from __future__ import annotations

import logging
from collections.abc import Sequence

from salescast.db.schemas import SeriesPoint
from salescast.services.periods import add_months, get_forecast_periods, parse_any_label

logger = logging.getLogger(__name__)

LOOKBACK_MONTHS = 12

SYSTEM_PROMPT = (
    "You are a data analyst specializing in time series forecasting. "
    "Provide forecasts in JSON format with an array of objects containing 'period' and 'total' fields."
)

PERIOD_LABELS = {"day": "daily", "week": "weekly", "month": "monthly"}

PROMPT_TEMPLATE = """
You are a data analyst specializing in time series forecasting. You are given historical {label} sales data for a single category.
Using this historical data, provide a {label} sales forecast for the next {periods} periods, highlighting potential seasonal fluctuations.

Things to consider:
 - Sales data is for a single category of multiple products.
 - The response should follow the JSON format below.
 - Consider trends, seasonality, and patterns in the data.
 - Remove any data points that are anomalies or outliers.

{history}

Please provide the forecast in JSON response format like this:
[
  {{"period": "{example_1}", "total": 1500.00}},
  {{"period": "{example_2}", "total": 1600.00}}
]

Consider trends, seasonality, and patterns in the data."""


def filter_to_lookback(series: Sequence[SeriesPoint], months: int = LOOKBACK_MONTHS) -> list[SeriesPoint]:
    """Keep points no older than ``months`` before the latest one.

    Points whose label is neither ``YYYY-MM-DD`` nor ``YYYY-MM`` are dropped.
    """
    dated = [(p, parse_any_label(p.period)) for p in series]
    dated = [(p, d) for p, d in dated if d is not None]
    if not dated:
        return []
    cutoff = add_months(max(d for _, d in dated), -months)
    kept = [p for p, d in dated if d >= cutoff]
    logger.debug("Filtered series from %d to %d points (last %d months)", len(series), len(kept), months)
    return kept


def render_history(series: Sequence[SeriesPoint]) -> str:
    lines = ["<historical_data>"]
    for p in series:
        lines.append("  <data_point>")
        lines.append(f"    <period>{p.period}</period>")
        lines.append(f"    <total>{p.total:.2f}</total>")
        lines.append("  </data_point>")
    lines.append("</historical_data>")
    return "\n".join(lines)


def build_prompt(series: Sequence[SeriesPoint], granularity: str, periods: int | None = None) -> str:
    if granularity == "month":
        examples = ("2024-01", "2024-02")
    else:
        examples = ("2024-01-01", "2024-01-02") if granularity == "day" else ("2024-01-07", "2024-01-14")
    return PROMPT_TEMPLATE.format(
        label=PERIOD_LABELS.get(granularity, "period"),
        periods=periods if periods is not None else get_forecast_periods(granularity),
        history=render_history(filter_to_lookback(series)),
        example_1=examples[0],
        example_2=examples[1],
    )
