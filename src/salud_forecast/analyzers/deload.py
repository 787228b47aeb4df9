"""Recomendación de semana de descarga (deload)."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta

from salud_forecast.analyzers.base import Analyzer
from salud_forecast.model import DeloadRecommendation, History, TrainingWeek


class DeloadRecommender(Analyzer):
    """Reads four trailing weeks of load and suggests when to back off."""

    name = "deload_week"

    @property
    def requirements(self) -> Mapping[str, int]:
        return {"workouts": self._config.thresholds.deload_workouts}

    def analyze(
        self, history: History, now: datetime
    ) -> DeloadRecommendation | None:
        if self.shortfall(history) is not None:
            return None
        cfg = self._config.deload
        weeks = self.trailing_weeks(history, now)

        avg_volume = sum(w.volume for w in weeks) / len(weeks)
        if weeks[0].volume > avg_volume * cfg.trend_factor:
            trend = "increasing"
        else:
            trend = "stable"
        fatigue = sum(w.sets for w in weeks) / len(weeks)
        training_weeks = sum(
            1 for w in weeks if w.workouts >= cfg.training_week_workouts
        )
        needs_deload = (
            training_weeks >= cfg.weeks
            or fatigue > cfg.fatigue_limit
            or trend == "increasing"
        )

        if needs_deload:
            timing = "This week"
        elif training_weeks >= cfg.weeks - 1:
            timing = "Next 1-2 weeks"
        else:
            timing = "3-4 weeks"

        return DeloadRecommendation(
            needs_deload=needs_deload,
            weeks_of_training=training_weeks,
            fatigue_score=round(fatigue),
            volume_trend=trend,
            recommended_timing=timing,
            weeks=weeks,
            deload_protocol=cfg.protocol,
            benefits=cfg.benefits,
        )

    def trailing_weeks(
        self, history: History, now: datetime
    ) -> tuple[TrainingWeek, ...]:
        """Weekly totals, week 1 being the 7 days ending at ``now``.

        Each bucket is half-open (start, end] so no session counts twice.
        """
        cfg = self._config.deload
        length = timedelta(days=cfg.bucket_days)
        out: list[TrainingWeek] = []
        for i in range(cfg.weeks):
            end = now - i * length
            start = end - length
            sessions = [w for w in history.workouts if start < w.start_time <= end]
            out.append(
                TrainingWeek(
                    week=i + 1,
                    volume=sum(w.total_volume for w in sessions),
                    sets=sum(w.total_sets for w in sessions),
                    workouts=len(sessions),
                )
            )
        return tuple(out)
