"""Optimal training time, body recomposition and habit streak forecasts."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from dateutil import tz

from salud_forecast.analyzers.recomposition import BodyRecompositionForecaster
from salud_forecast.analyzers.streak import HabitStreakPredictor, is_compressed
from salud_forecast.analyzers.training_time import (
    OptimalTrainingTimeAnalyzer,
    format_hour,
)
from salud_forecast.config import ForecastConfig
from salud_forecast.model import History, NutritionEntry, WeightSample, WorkoutSession

CONFIG = ForecastConfig(timezone=tz.UTC)
NOW = datetime(2025, 12, 31, 12, 0, tzinfo=timezone.utc)


def _session(start: datetime, volume: float = 1000.0) -> WorkoutSession:
    return WorkoutSession(
        start_time=start, end_time=start + timedelta(hours=1), total_volume=volume
    )


def _daily(count: int, last: datetime, gap_days: int = 1) -> tuple[WorkoutSession, ...]:
    return tuple(_session(last - timedelta(days=gap_days * i)) for i in range(count))


def test_format_hour() -> None:
    assert format_hour(0) == "12:00 AM"
    assert format_hour(7) == "7:00 AM"
    assert format_hour(12) == "12:00 PM"
    assert format_hour(24) == "12:00 AM"


def test_best_training_hour() -> None:
    morning = [_session(datetime(2025, 12, d, 7, 0, tzinfo=timezone.utc), 1200.0) for d in range(1, 6)]
    evening = [_session(datetime(2025, 12, d, 18, 0, tzinfo=timezone.utc), 1000.0) for d in range(1, 6)]
    history = History(workouts=tuple(morning + evening))
    out = OptimalTrainingTimeAnalyzer(CONFIG).analyze(history, NOW)

    assert out is not None
    assert out.best_hour == 7
    assert out.worst_hour == 18
    assert out.best_time == "7:00 AM - 8:00 AM"
    assert out.worst_time == "6:00 PM - 7:00 PM"
    assert out.performance_diff == 20
    assert out.recommendation == (
        "Schedule workouts around 7:00 AM - 8:00 AM for optimal performance"
    )


def test_training_time_consistent_and_gated() -> None:
    analyzer = OptimalTrainingTimeAnalyzer(CONFIG)
    sessions = _daily(10, datetime(2025, 12, 20, 9, 0, tzinfo=timezone.utc))
    assert analyzer.analyze(History(workouts=sessions[:9]), NOW) is None
    out = analyzer.analyze(History(workouts=sessions), NOW)
    assert out is not None
    assert out.performance_diff == 0
    assert out.recommendation == "Your performance is consistent across different times"


def _recomp_history(first_kg: float, last_kg: float) -> History:
    start = date(2025, 12, 1)
    step = (last_kg - first_kg) / 6
    weights = tuple(
        WeightSample(day=start + timedelta(days=2 * i), weight_kg=first_kg + step * i)
        for i in range(7)
    )
    nutrition = tuple(NutritionEntry(day=start + timedelta(days=i), calories=2200) for i in range(7))
    last = datetime(2025, 12, 30, 8, 0, tzinfo=timezone.utc)
    workouts = tuple(
        _session(last - timedelta(days=2 * i), 1200.0 if i < 5 else 1000.0)
        for i in range(10)
    )
    return History(weights=weights, workouts=workouts, nutrition=nutrition)


def test_recomposition_when_weight_holds_and_volume_rises() -> None:
    out = BodyRecompositionForecaster(CONFIG).analyze(_recomp_history(80.0, 80.0), NOW)

    assert out is not None
    assert out.is_recomping is True
    assert out.volume_trend == "increasing"
    assert out.estimated_muscle_gain_kg == pytest.approx(2.0)
    assert out.estimated_fat_loss_kg == pytest.approx(2.0)
    assert out.projected_weight_kg == pytest.approx(80.0)
    assert out.recommendation == "Great! You're building muscle while losing fat"


def test_fast_loss_splits_fat_and_muscle() -> None:
    out = BodyRecompositionForecaster(CONFIG).analyze(_recomp_history(82.0, 80.0), NOW)

    assert out is not None
    assert out.is_recomping is False
    assert out.weekly_weight_change_kg == pytest.approx(-1.17)
    assert out.projected_weight_kg == pytest.approx(66.0)
    assert out.estimated_fat_loss_kg == pytest.approx(10.5)
    assert out.estimated_muscle_gain_kg == pytest.approx(3.5)
    assert out.recommendation == "Consider increasing calories to preserve muscle"


def test_recomposition_gated_on_workouts() -> None:
    history = _recomp_history(80.0, 80.0)
    short = History(
        weights=history.weights, workouts=history.workouts[:9], nutrition=history.nutrition
    )
    forecaster = BodyRecompositionForecaster(CONFIG)
    assert forecaster.analyze(short, NOW) is None
    missing = forecaster.shortfall(short)
    assert missing is not None
    assert missing.got["workouts"] == 9


def test_active_streak() -> None:
    sessions = _daily(14, datetime(2025, 12, 30, 9, 0, tzinfo=timezone.utc))
    out = HabitStreakPredictor(CONFIG).analyze(History(workouts=sessions), NOW)

    assert out is not None
    assert out.current_streak == 14
    assert out.longest_streak == 14
    assert out.consistency_rate == 99
    assert out.streak_probability == 95
    assert out.avg_workouts_per_week == 6.9
    assert out.status == "active"
    assert out.recommendation == "You're on track! Keep up the consistency"


def test_broken_streak_after_long_pause() -> None:
    sessions = _daily(14, datetime(2025, 12, 20, 9, 0, tzinfo=timezone.utc), gap_days=3)
    out = HabitStreakPredictor(CONFIG).analyze(History(workouts=sessions), NOW)

    assert out is not None
    assert out.current_streak == 0
    assert out.longest_streak == 1
    assert out.status == "broken"
    assert out.recommendation == "Try scheduling workouts in advance to improve consistency"


def test_every_other_day_keeps_streak() -> None:
    sessions = _daily(14, datetime(2025, 12, 30, 9, 0, tzinfo=timezone.utc), gap_days=2)
    out = HabitStreakPredictor(CONFIG).analyze(History(workouts=sessions), NOW)
    assert out is not None
    assert out.longest_streak == 14
    assert HabitStreakPredictor(CONFIG).analyze(History(workouts=sessions[:13]), NOW) is None


def test_compressed_data_flag() -> None:
    last = datetime(2025, 12, 30, 9, 0, tzinfo=timezone.utc)
    assert is_compressed(History(workouts=_daily(5, last)), 5, 7.0) is True
    assert is_compressed(History(workouts=_daily(4, last)), 5, 7.0) is False
    assert is_compressed(History(workouts=_daily(8, last)), 5, 7.0) is False
