"""Perfil de adherencia a la medicación."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

import pandas as pd

from salud_forecast.analyzers.base import DAY_NAMES, Analyzer
from salud_forecast.model import AdherenceProfile, DaySlot, History, HourSlot


class AdherenceAnalyzer(Analyzer):
    """Overall adherence plus the weakest weekday and hour of day."""

    name = "medication_adherence"

    @property
    def requirements(self) -> Mapping[str, int]:
        return {"doses": self._config.thresholds.medication_doses}

    def analyze(self, history: History, now: datetime) -> AdherenceProfile | None:
        if self.shortfall(history) is not None:
            return None
        cfg = self._config.adherence
        frame = doses_to_frame(history)
        taken = int(frame["taken"].sum())
        total = len(frame)
        rate = taken / total * 100

        worst_weekday, worst_day_rate = _worst_bucket(frame, "weekday")
        worst_hour, worst_hour_rate = _worst_bucket(frame, "hour")
        worst_day = DAY_NAMES[worst_weekday] if worst_weekday is not None else None

        recommendations = [
            f"Set extra reminders for {worst_day}s"
            if rate < cfg.reminder_below and worst_day
            else None,
            f"Consider changing medication time from {worst_hour}:00"
            if rate < cfg.reminder_below and worst_hour is not None
            else None,
            "Consider using a pill organizer" if rate < cfg.organizer_below else None,
            "Consult with your doctor about adherence challenges"
            if rate < cfg.clinician_below
            else None,
        ]

        return AdherenceProfile(
            adherence_rate=round(rate),
            taken=taken,
            total=total,
            status=self._status(rate),
            worst_day=DaySlot(day=worst_day, rate=round(worst_day_rate)),
            worst_hour=HourSlot(hour=worst_hour, rate=round(worst_hour_rate)),
            recommendations=tuple(r for r in recommendations if r),
        )

    def _status(self, rate: float) -> str:
        cfg = self._config.adherence
        if rate >= cfg.excellent:
            return "excellent"
        if rate >= cfg.good:
            return "good"
        if rate >= cfg.fair:
            return "fair"
        return "poor"


def doses_to_frame(history: History) -> pd.DataFrame:
    """One row per dose with its local weekday (0=Monday) and hour."""
    return pd.DataFrame(
        {
            "weekday": [d.scheduled_time.weekday() for d in history.doses],
            "hour": [d.scheduled_time.hour for d in history.doses],
            "taken": [d.taken for d in history.doses],
        }
    )


def _worst_bucket(frame: pd.DataFrame, key: str) -> tuple[int | None, float]:
    """Lowest-rate bucket below 100%; ties go to the smallest key."""
    grouped = frame.groupby(key)["taken"].agg(["sum", "count"])
    worst: int | None = None
    worst_rate = 100.0
    for bucket, row in grouped.iterrows():
        bucket_rate = float(row["sum"]) / float(row["count"]) * 100
        if bucket_rate < worst_rate:
            worst, worst_rate = int(bucket), bucket_rate
    return worst, worst_rate
