"""Estimación del gasto energético diario total (TDEE)."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from salud_forecast.analyzers.base import Analyzer, days_between, finite, mean
from salud_forecast.model import (
    CalorieDeficit,
    CalorieRange,
    CalorieSurplus,
    EnergyEstimate,
    History,
)


class EnergyExpenditureEstimator(Analyzer):
    """Maintenance calories from intake and the observed weight change."""

    name = "tdee"

    @property
    def requirements(self) -> Mapping[str, int]:
        t = self._config.thresholds
        return {
            "weights": t.tdee_weight_samples,
            "nutrition": t.tdee_nutrition_entries,
        }

    def analyze(self, history: History, now: datetime) -> EnergyEstimate | None:
        if self.shortfall(history) is not None:
            return None
        cfg = self._config.energy
        avg_calories = mean([e.calories for e in history.nutrition])

        samples = sorted(history.weights, key=lambda s: s.day)
        days = days_between(samples[0].day, samples[-1].day)
        if days <= 0:
            return None
        change_lb = (samples[-1].weight_kg - samples[0].weight_kg) * cfg.lb_per_kg
        delta_per_day = change_lb * cfg.kcal_per_lb / days
        workouts_per_week = len(history.workouts) / days * 7
        if not finite(avg_calories, delta_per_day, workouts_per_week):
            return None
        tdee = round(avg_calories - delta_per_day)

        return EnergyEstimate(
            tdee=tdee,
            avg_calories=round(avg_calories),
            activity_level=self._activity_level(workouts_per_week),
            workouts_per_week=round(workouts_per_week, 1),
            maintenance_range=CalorieRange(
                min=round(tdee * cfg.maintenance_low),
                max=round(tdee * cfg.maintenance_high),
            ),
            deficit=CalorieDeficit(
                mild=round(tdee * cfg.deficit_mild),
                moderate=round(tdee * cfg.deficit_moderate),
                aggressive=round(tdee * cfg.deficit_aggressive),
            ),
            surplus=CalorieSurplus(
                lean=round(tdee * cfg.surplus_lean),
                bulk=round(tdee * cfg.surplus_bulk),
            ),
        )

    def _activity_level(self, workouts_per_week: float) -> str:
        cfg = self._config.energy
        if workouts_per_week >= cfg.very_active_per_week:
            return "very active"
        if workouts_per_week >= cfg.active_per_week:
            return "active"
        if workouts_per_week >= cfg.lightly_active_per_week:
            return "lightly active"
        return "sedentary"
