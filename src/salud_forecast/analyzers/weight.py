"""Proyección de la trayectoria de peso corporal."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta

from salud_forecast.analyzers.base import Analyzer, days_between, finite
from salud_forecast.model import History, WeightTrajectory


class WeightTrajectoryPredictor(Analyzer):
    """Projects when the goal weight is reached at the observed rate."""

    name = "weight_trajectory"

    @property
    def requirements(self) -> Mapping[str, int]:
        return {"weights": self._config.thresholds.weight_samples}

    def analyze(self, history: History, now: datetime) -> WeightTrajectory | None:
        if self.shortfall(history) is not None:
            return None
        cfg = self._config.weight
        samples = sorted(history.weights, key=lambda s: s.day)
        first, last = samples[0], samples[-1]

        span = days_between(first.day, last.day)
        if span <= 0:
            return None
        weekly_change = (last.weight_kg - first.weight_kg) / span * 7
        if weekly_change == 0:
            return None

        goal = first.weight_kg * cfg.goal_fraction
        weeks = abs((last.weight_kg - goal) / weekly_change)
        # Weight change slows by monthly_slowdown for every 4 weeks projected.
        adjusted = weeks * (1 + (weeks / 4) * cfg.monthly_slowdown)
        if not finite(weekly_change, adjusted):
            return None
        try:
            goal_date = (now + timedelta(weeks=adjusted)).date()
        except OverflowError:
            return None

        if weekly_change < 0:
            trend = "losing"
        elif weekly_change > 0:
            trend = "gaining"
        else:
            trend = "stable"

        return WeightTrajectory(
            current_weight_kg=round(last.weight_kg, 1),
            goal_weight_kg=round(goal, 1),
            weekly_change_kg=round(weekly_change, 1),
            weeks_to_goal=round(adjusted),
            goal_date=goal_date,
            trend=trend,
            confidence_pct=min(
                cfg.confidence_cap,
                cfg.confidence_base + len(samples) * cfg.confidence_step,
            ),
        )
