from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone

import pytest
from dateutil import tz

from salud_forecast.aggregate import PredictionAggregator, compute_predictions
from salud_forecast.analyzers.base import Analyzer
from salud_forecast.analyzers.weight import WeightTrajectoryPredictor
from salud_forecast.config import ForecastConfig
from salud_forecast.model import (
    AdherenceProfile,
    History,
    InjuryRisk,
    InsufficientData,
    WeightSample,
    WeightTrajectory,
    WorkoutSession,
)

CONFIG = ForecastConfig(timezone=tz.UTC)
NOW = datetime(2025, 12, 31, 12, 0, tzinfo=timezone.utc)


def _raw_history() -> dict[str, list[dict[str, object]]]:
    """Rows shaped like the tracker's tables, most recent first."""
    weights = [
        {"measurement_date": (date(2025, 12, 30) - timedelta(days=3 * i)).isoformat(), "weight": 85.0 + 0.2 * i}
        for i in range(8)
    ]
    workouts = [
        {
            "start_time": (NOW - timedelta(days=2 * i + 1)).isoformat(),
            "end_time": (NOW - timedelta(days=2 * i + 1) + timedelta(hours=1)).isoformat(),
            "total_volume": 1000 + (50 if i < 7 else 0),
            "total_sets": 18,
            "total_reps": 120,
        }
        for i in range(14)
    ]
    nutrition = [
        {
            "entry_date": (date(2025, 12, 30) - timedelta(days=i)).isoformat(),
            "calories": 2100,
            "protein_g": 160,
            "carbs_g": 210,
            "fat_g": 65,
        }
        for i in range(10)
    ]
    doses = [
        {
            "scheduled_time": (NOW - timedelta(days=i, hours=4)).isoformat(),
            "taken": i % 5 != 0,
        }
        for i in range(20)
    ]
    return {
        "weights": weights,
        "workouts": workouts,
        "nutrition": nutrition,
        "doses": doses,
    }


def test_full_history_populates_every_core_forecast() -> None:
    raw = _raw_history()
    bundle = compute_predictions(
        raw["weights"], raw["workouts"], raw["nutrition"], raw["doses"],
        config=CONFIG,
        now=NOW,
    )

    assert isinstance(bundle.weight_trajectory, WeightTrajectory)
    assert bundle.weight_trajectory.trend == "losing"
    assert isinstance(bundle.medication_adherence, AdherenceProfile)
    assert bundle.medication_adherence.adherence_rate == 80
    assert isinstance(bundle.injury_risk, InjuryRisk)
    for name in (
        "tdee",
        "nutrition_patterns",
        "deload_week",
        "optimal_training_time",
        "body_recomposition",
        "habit_streak",
    ):
        assert name in bundle.available()
    assert bundle.compressed_data is False
    assert bundle.counts == {"weights": 8, "workouts": 14, "nutrition": 10, "doses": 20}


def test_empty_history_reports_what_to_log() -> None:
    bundle = compute_predictions([], [], [], [], config=CONFIG, now=NOW)

    assert bundle.available() == {}
    for value in bundle.slots().values():
        assert isinstance(value, InsufficientData)
    assert isinstance(bundle.medication_adherence, InsufficientData)
    assert bundle.medication_adherence.message == "Log 14+ medication doses"
    assert isinstance(bundle.tdee, InsufficientData)
    assert bundle.tdee.message == "Log 7+ weight samples and 7+ nutrition entries"
    assert bundle.tdee.got == {"weights": 0, "nutrition": 0}


def test_identical_inputs_give_identical_bundles() -> None:
    raw = _raw_history()
    args = (raw["weights"], raw["workouts"], raw["nutrition"], raw["doses"])
    first = compute_predictions(*args, config=CONFIG, now=NOW)
    second = compute_predictions(*args, config=CONFIG, now=NOW)
    assert first == second


def test_naive_now_uses_configured_timezone() -> None:
    raw = _raw_history()
    args = (raw["weights"], raw["workouts"], raw["nutrition"], raw["doses"])
    aware = compute_predictions(*args, config=CONFIG, now=NOW)
    naive = compute_predictions(*args, config=CONFIG, now=NOW.replace(tzinfo=None))
    assert aware == naive


def test_in_progress_workouts_do_not_count() -> None:
    sessions = [
        WorkoutSession(start_time=NOW - timedelta(days=i + 1), total_volume=1000)
        for i in range(10)
    ]
    bundle = compute_predictions([], sessions, [], [], config=CONFIG, now=NOW)
    assert isinstance(bundle.injury_risk, InsufficientData)
    assert bundle.injury_risk.got == {"workouts": 0}


class _Exploding(Analyzer):
    name = "injury_risk"

    @property
    def requirements(self) -> Mapping[str, int]:
        return {"workouts": 0}

    def analyze(self, history: History, now: datetime) -> object | None:
        raise RuntimeError("boom")


def test_failing_analyzer_is_isolated_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    log = logging.getLogger("tests.aggregate")
    aggregator = PredictionAggregator(
        CONFIG,
        analyzers=[_Exploding(CONFIG), WeightTrajectoryPredictor(CONFIG)],
        log=log,
    )
    history = History(
        weights=tuple(
            WeightSample(day=date(2025, 12, 1) + timedelta(days=7 * i), weight_kg=90.0 - i)
            for i in range(3)
        )
    )
    with caplog.at_level(logging.DEBUG, logger="tests.aggregate"):
        bundle = aggregator.run(history, NOW)

    assert bundle.injury_risk is None
    assert isinstance(bundle.weight_trajectory, WeightTrajectory)
    assert "injury_risk: analysis failed" in caplog.text
    assert "weight_trajectory: available" in caplog.text


def test_degenerate_result_is_absent(caplog: pytest.LogCaptureFixture) -> None:
    flat = [{"date": f"2025-12-0{d}", "weight_kg": 80.0} for d in (1, 4, 7)]
    log = logging.getLogger("tests.aggregate")
    with caplog.at_level(logging.DEBUG, logger="tests.aggregate"):
        bundle = compute_predictions(flat, [], [], [], config=CONFIG, now=NOW, log=log)
    assert bundle.weight_trajectory is None
    assert "weight_trajectory: degenerate input" in caplog.text
    assert "medication_adherence: insufficient data" in caplog.text


def test_compressed_data_flagged() -> None:
    sessions = [
        {
            "start_time": (NOW - timedelta(hours=12 * i + 1)).isoformat(),
            "end_time": (NOW - timedelta(hours=12 * i)).isoformat(),
        }
        for i in range(6)
    ]
    bundle = compute_predictions([], sessions, [], [], config=CONFIG, now=NOW)
    assert bundle.compressed_data is True


class _Unslotted(Analyzer):
    name = "sleep_impact"

    @property
    def requirements(self) -> Mapping[str, int]:
        return {}

    def analyze(self, history: History, now: datetime) -> object | None:
        return object()


def test_unknown_analyzer_name_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    log = logging.getLogger("tests.aggregate")
    aggregator = PredictionAggregator(
        CONFIG, analyzers=[_Unslotted(CONFIG), WeightTrajectoryPredictor(CONFIG)], log=log
    )
    with caplog.at_level(logging.DEBUG, logger="tests.aggregate"):
        bundle = aggregator.run(History(), NOW)

    assert isinstance(bundle.weight_trajectory, InsufficientData)
    assert "sleep_impact: no prediction slot, skipped" in caplog.text
