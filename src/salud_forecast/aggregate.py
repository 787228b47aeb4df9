"""Orquestación de todos los analizadores sobre un mismo historial."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from salud_forecast.analyzers.adherence import AdherenceAnalyzer
from salud_forecast.analyzers.base import Analyzer
from salud_forecast.analyzers.deload import DeloadRecommender
from salud_forecast.analyzers.energy import EnergyExpenditureEstimator
from salud_forecast.analyzers.injury import InjuryRiskAssessor
from salud_forecast.analyzers.nutrition import NutritionPatternAnalyzer
from salud_forecast.analyzers.recomposition import BodyRecompositionForecaster
from salud_forecast.analyzers.streak import HabitStreakPredictor, is_compressed
from salud_forecast.analyzers.training_time import OptimalTrainingTimeAnalyzer
from salud_forecast.analyzers.weight import WeightTrajectoryPredictor
from salud_forecast.config import ForecastConfig
from salud_forecast.model import History, PredictionBundle
from salud_forecast.normalize import build_history

logger = logging.getLogger(__name__)

ANALYZERS: tuple[type[Analyzer], ...] = (
    WeightTrajectoryPredictor,
    EnergyExpenditureEstimator,
    AdherenceAnalyzer,
    NutritionPatternAnalyzer,
    InjuryRiskAssessor,
    DeloadRecommender,
    OptimalTrainingTimeAnalyzer,
    BodyRecompositionForecaster,
    HabitStreakPredictor,
)


class PredictionAggregator:
    """Runs every analyzer independently and assembles the bundle."""

    def __init__(
        self,
        config: ForecastConfig | None = None,
        *,
        analyzers: Iterable[Analyzer] | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Create the aggregator.

        Args:
            config: Business parameters; defaults to ``ForecastConfig()``.
            analyzers: Analyzer instances to run; defaults to all of them.
            log: Logger receiving per-analyzer decisions.
        """
        self._config = config or ForecastConfig()
        self._analyzers = (
            list(analyzers)
            if analyzers is not None
            else [cls(self._config) for cls in ANALYZERS]
        )
        self._log = log or logger

    @property
    def config(self) -> ForecastConfig:
        return self._config

    def run(self, history: History, now: datetime | None = None) -> PredictionBundle:
        """Compute every forecast; one failing analyzer never aborts the rest."""
        if now is None:
            now = datetime.now(tz=self._config.timezone)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=self._config.timezone)

        counts = history.counts()
        self._log.debug("Computing predictions with %s", counts)
        known = PredictionBundle().slots()
        slots: dict[str, Any] = {}
        for analyzer in self._analyzers:
            if analyzer.name not in known:
                self._log.warning("%s: no prediction slot, skipped", analyzer.name)
                continue
            slots[analyzer.name] = self._run_one(analyzer, history, now)

        streak = self._config.streak
        compressed = is_compressed(
            history, streak.compressed_min_workouts, streak.compressed_span_days
        )
        if compressed:
            self._log.info(
                "Compressed data: %d workouts in under %g days",
                len(history.workouts),
                streak.compressed_span_days,
            )
        return PredictionBundle(**slots, compressed_data=compressed, counts=counts)

    def _run_one(self, analyzer: Analyzer, history: History, now: datetime) -> Any:
        missing = analyzer.shortfall(history)
        if missing is not None:
            self._log.debug(
                "%s: insufficient data (need %s, have %s)",
                analyzer.name,
                dict(missing.required),
                dict(missing.got),
            )
            return missing
        try:
            result = analyzer.analyze(history, now)
        except Exception:
            self._log.exception("%s: analysis failed", analyzer.name)
            return None
        if result is None:
            self._log.debug("%s: degenerate input, no prediction", analyzer.name)
        else:
            self._log.debug("%s: available", analyzer.name)
        return result


def compute_predictions(
    weight_samples: Iterable[Any],
    workout_sessions: Iterable[Any],
    nutrition_entries: Iterable[Any],
    medication_doses: Iterable[Any],
    *,
    config: ForecastConfig | None = None,
    now: datetime | None = None,
    log: logging.Logger | None = None,
) -> PredictionBundle:
    """Normalize the four series and compute every forecast.

    Args:
        weight_samples: Weight records (mappings or ``WeightSample``).
        workout_sessions: Workout records (mappings or ``WorkoutSession``).
        nutrition_entries: Nutrition records (mappings or ``NutritionEntry``).
        medication_doses: Dose records (mappings or ``MedicationDose``).
        config: Business parameters; defaults to ``ForecastConfig()``.
        now: Reference instant; defaults to the current time.
        log: Logger receiving per-analyzer decisions.

    Returns:
        PredictionBundle with one slot per forecast.
    """
    aggregator = PredictionAggregator(config, log=log)
    history = build_history(
        weight_samples,
        workout_sessions,
        nutrition_entries,
        medication_doses,
        aggregator.config,
    )
    return aggregator.run(history, now)
