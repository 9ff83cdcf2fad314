from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date

import pandas as pd

from salescast.db.schemas import CategoryTotal, Observation, SeriesPoint
from salescast.services.periods import bucket_key, parse_label


def bucket(observations: Iterable[Observation], granularity: str) -> list[SeriesPoint]:
    """Sum observations into day/week/month buckets, oldest bucket first."""
    rows = [{"date": o.date, "amount": o.amount} for o in observations]
    if not rows:
        return []
    df = pd.DataFrame(rows)
    df["period"] = df["date"].map(lambda d: bucket_key(d, granularity))
    totals = df.groupby("period", sort=False)["amount"].sum().reset_index()
    if granularity == "month":
        totals = totals.sort_values("period")
    else:
        totals = totals.assign(
            start=pd.to_datetime(totals["period"], format="%Y-%m-%d")
        ).sort_values("start")
    return [SeriesPoint(period=r.period, total=float(r.amount)) for r in totals.itertuples()]


def observations_from_report(report: Mapping[str, list[CategoryTotal]]) -> list[Observation]:
    """One observation per category total in a ``date -> categories`` report."""
    out: list[Observation] = []
    for day, categories in report.items():
        d = date.fromisoformat(day)
        out.extend(Observation(date=d, amount=c.total_amount) for c in categories)
    return out


def series_to_observations(series: Iterable[SeriesPoint]) -> list[Observation]:
    return [Observation(date=parse_label(p.period, "day"), amount=p.total) for p in series]
