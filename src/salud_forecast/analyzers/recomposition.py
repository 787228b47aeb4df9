"""Pronóstico de recomposición corporal a 12 semanas."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from salud_forecast.analyzers.base import Analyzer, days_between, finite, mean
from salud_forecast.model import BodyRecomposition, History


class BodyRecompositionForecaster(Analyzer):
    """Splits the projected weight change into muscle and fat estimates.

    The split is a rough heuristic: training volume going up while weight
    holds steady reads as recomposition.
    """

    name = "body_recomposition"

    @property
    def requirements(self) -> Mapping[str, int]:
        t = self._config.thresholds
        return {
            "weights": t.recomposition_weight_samples,
            "workouts": t.recomposition_workouts,
            "nutrition": t.recomposition_nutrition_entries,
        }

    def analyze(self, history: History, now: datetime) -> BodyRecomposition | None:
        if self.shortfall(history) is not None:
            return None
        cfg = self._config.recomposition
        samples = sorted(history.weights, key=lambda s: s.day)
        first, last = samples[0], samples[-1]
        days = days_between(first.day, last.day)
        if days <= 0:
            return None
        weekly_change = (last.weight_kg - first.weight_kg) / days * 7

        sessions = sorted(history.workouts, key=lambda w: w.start_time, reverse=True)
        half = len(sessions) // 2
        recent_avg = mean([w.total_volume for w in sessions[:half]])
        older_avg = mean([w.total_volume for w in sessions[half:]])
        if older_avg == 0:
            return None
        volume_change = (recent_avg - older_avg) * 100 / older_avg

        is_recomping = (
            volume_change > cfg.volume_change_pct
            and abs(weekly_change) < cfg.stable_weekly_kg
        )
        projected_change = weekly_change * cfg.projection_weeks

        if is_recomping:
            muscle = abs(volume_change) * cfg.muscle_per_volume_pct
            fat = abs(projected_change) + muscle
        elif weekly_change < 0:
            fat = abs(projected_change) * cfg.fat_share_when_losing
            muscle = (
                abs(projected_change) * cfg.muscle_share_when_losing
                if volume_change > 0
                else 0.0
            )
        else:
            muscle = projected_change * cfg.muscle_share_when_gaining
            fat = 0.0
        if not finite(weekly_change, volume_change, muscle, fat):
            return None

        if volume_change > cfg.volume_change_pct:
            volume_trend = "increasing"
        elif volume_change < -cfg.volume_change_pct:
            volume_trend = "decreasing"
        else:
            volume_trend = "stable"

        if is_recomping:
            recommendation = "Great! You're building muscle while losing fat"
        elif weekly_change < -cfg.fast_loss_weekly_kg:
            recommendation = "Consider increasing calories to preserve muscle"
        else:
            recommendation = "Continue current approach"

        return BodyRecomposition(
            current_weight_kg=round(last.weight_kg, 1),
            projected_weight_kg=round(last.weight_kg + projected_change, 1),
            weekly_weight_change_kg=round(weekly_change, 2),
            is_recomping=is_recomping,
            estimated_muscle_gain_kg=round(muscle, 1),
            estimated_fat_loss_kg=round(fat, 1),
            volume_trend=volume_trend,
            recommendation=recommendation,
        )
