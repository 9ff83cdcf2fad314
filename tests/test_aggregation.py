"""
Tests for period bucketing of dated observations
"""

from datetime import date, timedelta

import pytest

from salescast.db.schemas import CategoryTotal, Observation, SeriesPoint
from salescast.services.aggregation import bucket, observations_from_report, series_to_observations


def obs(day: str, amount: float) -> Observation:
    return Observation(date=date.fromisoformat(day), amount=amount)


@pytest.fixture
def unordered_observations():
    return [
        obs("2024-03-02", 40.0),
        obs("2024-01-01", 100.0),
        obs("2024-02-15", -25.0),
        obs("2024-01-02", 150.0),
        obs("2024-03-01", 10.0),
        obs("2024-01-08", 200.0),
        obs("2024-01-01", 5.0),
    ]


class TestBucket:

    def test_empty_input(self):
        assert bucket([], "day") == []
        assert bucket([], "month") == []

    def test_week_scenario(self):
        series = bucket([obs("2024-01-01", 100), obs("2024-01-02", 150), obs("2024-01-08", 200)], "week")
        assert series == [SeriesPoint(period="2023-12-31", total=250.0), SeriesPoint(period="2024-01-07", total=200.0)]

    def test_month_buckets(self, unordered_observations):
        series = bucket(unordered_observations, "month")
        assert [p.period for p in series] == ["2024-01", "2024-02", "2024-03"]
        assert [p.total for p in series] == [455.0, -25.0, 50.0]

    @pytest.mark.parametrize("granularity", ["day", "week", "month"])
    def test_sorted_and_sums_preserved(self, unordered_observations, granularity):
        series = bucket(unordered_observations, granularity)
        periods = [p.period for p in series]
        assert periods == sorted(periods)
        assert len(set(periods)) == len(periods)
        assert sum(p.total for p in series) == pytest.approx(sum(o.amount for o in unordered_observations))

    def test_day_bucketing_is_idempotent(self, unordered_observations):
        once = bucket(unordered_observations, "day")
        twice = bucket(series_to_observations(once), "day")
        assert twice == once

    def test_week_sort_is_chronological_across_years(self):
        start = date(2023, 12, 20)
        observations = [Observation(date=start + timedelta(days=i), amount=1.0) for i in range(30)][::-1]
        series = bucket(observations, "week")
        assert series[0].period == "2023-12-17"
        assert series[-1].period == "2024-01-14"
        assert sum(p.total for p in series) == 30.0


class TestReportConversion:

    def test_observations_from_report(self):
        report = {
            "2024-01-01": [
                CategoryTotal(category_name="Electronics", total_amount=150.0),
                CategoryTotal(category_name="Grocery", total_amount=20.0),
            ],
            "2024-01-02": [CategoryTotal(category_name="Electronics", total_amount=-30.0)],
        }
        observations = observations_from_report(report)
        assert len(observations) == 3
        series = bucket(observations, "day")
        assert series == [SeriesPoint(period="2024-01-01", total=170.0), SeriesPoint(period="2024-01-02", total=-30.0)]
