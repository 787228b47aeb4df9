"""Evaluación de riesgo de lesión por carga de entrenamiento."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from salud_forecast.analyzers.base import Analyzer, days_between, finite, mean
from salud_forecast.model import History, InjuryRisk


class InjuryRiskAssessor(Analyzer):
    """Scores recent training load against the block before it."""

    name = "injury_risk"

    @property
    def requirements(self) -> Mapping[str, int]:
        return {"workouts": self._config.thresholds.injury_workouts}

    def analyze(self, history: History, now: datetime) -> InjuryRisk | None:
        if self.shortfall(history) is not None:
            return None
        cfg = self._config.injury
        sessions = sorted(history.workouts, key=lambda w: w.start_time, reverse=True)
        recent = sessions[: cfg.window]
        older = sessions[cfg.window : cfg.window * 2]

        recent_avg = mean([w.total_volume for w in recent])
        older_avg = (
            mean([w.total_volume for w in older])
            if len(older) >= cfg.window
            else recent_avg
        )
        increase = self._volume_increase(recent_avg, older_avg)

        span = days_between(sessions[-1].start_time, sessions[0].start_time)
        if span <= 0:
            return None
        frequency = min(cfg.frequency_cap, len(sessions) / span * 7)
        since_last = days_between(sessions[0].start_time, now)
        if not finite(increase, frequency, since_last):
            return None

        factors: list[str] = []
        score = 0
        if increase > cfg.rapid_increase_pct:
            factors.append(f"Rapid volume increase (>{cfg.rapid_increase_pct:g}%)")
            score += cfg.rapid_increase_score
        elif increase > cfg.moderate_increase_pct:
            factors.append(
                f"Moderate volume increase (>{cfg.moderate_increase_pct:g}%)"
            )
            score += cfg.moderate_increase_score

        if frequency > cfg.very_high_frequency:
            factors.append(
                f"Very high training frequency (>{cfg.very_high_frequency:g}x/week)"
            )
            score += cfg.very_high_frequency_score
        elif frequency > cfg.high_frequency:
            factors.append(f"High training frequency (>{cfg.high_frequency:g}x/week)")
            score += cfg.high_frequency_score

        if since_last < cfg.recovery_days and frequency > cfg.high_frequency:
            factors.append("Insufficient recovery time")
            score += cfg.recovery_score

        if score >= cfg.high_risk:
            level = "high"
        elif score >= cfg.moderate_risk:
            level = "moderate"
        else:
            level = "low"

        recommendations = [
            "Consider taking 1-2 rest days immediately"
            if score >= cfg.high_risk
            else None,
            "Reduce training volume by 10-20% this week"
            if increase > cfg.moderate_increase_pct
            else None,
            "Add at least one full rest day per week"
            if frequency > cfg.high_frequency
            else None,
            "Focus on mobility and recovery work" if score >= cfg.moderate_risk else None,
            "Current training load is sustainable" if score < cfg.moderate_risk else None,
        ]

        return InjuryRisk(
            risk_level=level,
            risk_score=score,
            risk_factors=tuple(factors),
            volume_increase_pct=round(increase),
            frequency=round(frequency, 1),
            recommendations=tuple(r for r in recommendations if r),
        )

    def _volume_increase(self, recent_avg: float, older_avg: float) -> float:
        """Percent change of average volume, clamped to +/- the configured cap."""
        cap = self._config.injury.increase_cap_pct
        if older_avg == 0:
            return cap if recent_avg > 0 else 0.0
        raw = (recent_avg - older_avg) * 100 / older_avg
        return max(-cap, min(cap, raw))
