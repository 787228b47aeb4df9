"""Rachas de entrenamiento y probabilidad de mantenerlas."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from salud_forecast.analyzers.base import Analyzer, days_between, finite
from salud_forecast.model import History, HabitStreak


class HabitStreakPredictor(Analyzer):
    """Current training streak and the odds of keeping it going."""

    name = "habit_streak"

    @property
    def requirements(self) -> Mapping[str, int]:
        return {"workouts": self._config.thresholds.streak_workouts}

    def analyze(self, history: History, now: datetime) -> HabitStreak | None:
        if self.shortfall(history) is not None:
            return None
        cfg = self._config.streak
        sessions = sorted(history.workouts, key=lambda w: w.start_time)
        days = sorted({w.start_time.date() for w in sessions})

        longest = 0
        run = 1
        for prev, curr in zip(days, days[1:]):
            if days_between(prev, curr) <= cfg.max_gap_days:
                run += 1
            else:
                longest = max(longest, run)
                run = 1
        longest = max(longest, run)

        since_last = days_between(sessions[-1].start_time, now)
        current = run if since_last <= cfg.max_gap_days else 0

        total_days = days_between(sessions[0].start_time, now)
        if total_days <= 0:
            return None
        consistency = len(days) / total_days * 100
        probability = min(cfg.probability_cap, consistency * cfg.probability_factor)
        per_week = min(cfg.frequency_cap, len(sessions) / total_days * 7)
        if not finite(consistency, per_week):
            return None

        if probability > cfg.on_track_probability:
            recommendation = "You're on track! Keep up the consistency"
        else:
            recommendation = "Try scheduling workouts in advance to improve consistency"

        return HabitStreak(
            current_streak=current,
            longest_streak=longest,
            consistency_rate=round(consistency),
            streak_probability=round(probability),
            total_workouts=len(sessions),
            avg_workouts_per_week=round(per_week, 1),
            status="active" if current > 0 else "broken",
            recommendation=recommendation,
        )


def is_compressed(history: History, min_workouts: int, span_days: float) -> bool:
    """True when enough sessions were logged inside a very short span."""
    if len(history.workouts) < min_workouts:
        return False
    starts = [w.start_time for w in history.workouts]
    return days_between(min(starts), max(starts)) < span_days
