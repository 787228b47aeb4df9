from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest
from dateutil import tz

from salud_forecast.analyzers.weight import WeightTrajectoryPredictor
from salud_forecast.config import ForecastConfig, WeightConfig
from salud_forecast.model import History, WeightSample

CONFIG = ForecastConfig(timezone=tz.UTC)
NOW = datetime(2025, 12, 31, 12, 0, tzinfo=timezone.utc)
START = date(2025, 11, 1)


def _history(*points: tuple[int, float]) -> History:
    return History(
        weights=tuple(
            WeightSample(day=START + timedelta(days=d), weight_kg=w) for d, w in points
        )
    )


def test_losing_trajectory_scenario() -> None:
    # 200 lb -> 196 lb -> 194 lb over 30 days
    history = _history((30, 88.0), (0, 90.7), (15, 88.9))
    out = WeightTrajectoryPredictor(CONFIG).analyze(history, NOW)

    assert out is not None
    assert out.trend == "losing"
    assert out.weekly_change_kg == pytest.approx(-0.6)
    assert out.goal_weight_kg == pytest.approx(81.6)
    assert out.current_weight_kg == pytest.approx(88.0)
    assert out.weeks_to_goal == 11
    assert out.confidence_pct == 59
    assert out.goal_date > NOW.date()


def test_requires_three_samples() -> None:
    predictor = WeightTrajectoryPredictor(CONFIG)
    two = _history((0, 90.0), (10, 89.0))
    three = _history((0, 90.0), (5, 89.5), (10, 89.0))
    assert predictor.analyze(two, NOW) is None
    assert predictor.shortfall(two) is not None
    assert predictor.analyze(three, NOW) is not None


def test_zero_weekly_change_returns_none() -> None:
    history = _history((0, 80.0), (7, 80.0), (14, 80.0))
    assert WeightTrajectoryPredictor(CONFIG).analyze(history, NOW) is None


def test_zero_day_span_returns_none() -> None:
    history = _history((0, 80.0), (0, 81.0), (0, 79.0))
    assert WeightTrajectoryPredictor(CONFIG).analyze(history, NOW) is None


def test_gaining_trend() -> None:
    history = _history((0, 70.0), (7, 70.5), (14, 71.0))
    out = WeightTrajectoryPredictor(CONFIG).analyze(history, NOW)
    assert out is not None
    assert out.trend == "gaining"
    assert out.weekly_change_kg == pytest.approx(0.5)


def test_goal_date_follows_injected_now() -> None:
    history = _history((0, 90.0), (10, 89.0), (20, 88.0))
    predictor = WeightTrajectoryPredictor(CONFIG)
    first = predictor.analyze(history, NOW)
    later = predictor.analyze(history, NOW + timedelta(days=7))
    assert first is not None and later is not None
    assert later.goal_date - first.goal_date == timedelta(days=7)
    assert predictor.analyze(history, NOW) == first


def test_confidence_capped() -> None:
    points = [(d, 90.0 - d * 0.1) for d in range(20)]
    out = WeightTrajectoryPredictor(CONFIG).analyze(_history(*points), NOW)
    assert out is not None
    assert out.confidence_pct == 95


def test_goal_fraction_configurable() -> None:
    config = replace(CONFIG, weight=WeightConfig(goal_fraction=0.95))
    history = _history((0, 100.0), (7, 99.0), (14, 98.0))
    out = WeightTrajectoryPredictor(config).analyze(history, NOW)
    assert out is not None
    assert out.goal_weight_kg == pytest.approx(95.0)


def test_small_slope_keeps_its_sign() -> None:
    history = _history((0, 90.0), (30, 89.95), (60, 89.8))
    out = WeightTrajectoryPredictor(CONFIG).analyze(history, NOW)
    assert out is not None
    assert out.trend == "losing"
    assert out.weekly_change_kg == pytest.approx(0.0)
