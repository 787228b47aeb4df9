"""Hora del día con mejor rendimiento de entrenamiento."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

import pandas as pd

from salud_forecast.analyzers.base import Analyzer
from salud_forecast.model import History, TrainingTime


class OptimalTrainingTimeAnalyzer(Analyzer):
    """Finds the hour of day with the highest average session volume."""

    name = "optimal_training_time"

    @property
    def requirements(self) -> Mapping[str, int]:
        return {"workouts": self._config.thresholds.training_time_workouts}

    def analyze(self, history: History, now: datetime) -> TrainingTime | None:
        if self.shortfall(history) is not None:
            return None
        frame = pd.DataFrame(
            {
                "hour": [w.start_time.hour for w in history.workouts],
                "volume": [w.total_volume for w in history.workouts],
            }
        )
        by_hour = frame.groupby("hour")["volume"].mean()
        # idxmax/idxmin return the first (earliest) hour on ties.
        best = int(by_hour.idxmax())
        worst = int(by_hour.idxmin())
        best_avg = float(by_hour[best])
        worst_avg = float(by_hour[worst])
        diff = (best_avg - worst_avg) / worst_avg * 100 if worst_avg > 0 else 100.0

        best_range = _hour_range(best)
        if diff > self._config.training_time.meaningful_diff_pct:
            recommendation = f"Schedule workouts around {best_range} for optimal performance"
        else:
            recommendation = "Your performance is consistent across different times"

        return TrainingTime(
            best_time=best_range,
            best_hour=best,
            best_avg_volume=round(best_avg),
            worst_time=_hour_range(worst),
            worst_hour=worst,
            worst_avg_volume=round(worst_avg),
            performance_diff=round(diff),
            hourly_volume={int(h): float(v) for h, v in by_hour.items()},
            recommendation=recommendation,
        )


def format_hour(hour: int) -> str:
    """12-hour clock label, e.g. ``7:00 AM``; 24 wraps to midnight."""
    hour %= 24
    period = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:00 {period}"


def _hour_range(hour: int) -> str:
    return f"{format_hour(hour)} - {format_hour(hour + 1)}"
