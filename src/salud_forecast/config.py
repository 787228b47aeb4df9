"""Parámetros de negocio de las predicciones (valores por defecto documentados)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import tzinfo

from dateutil import tz

from salud_forecast.model import DeloadProtocol


@dataclass(frozen=True)
class Thresholds:
    """Minimum usable records each forecast needs."""

    weight_samples: int = 3
    tdee_weight_samples: int = 7
    tdee_nutrition_entries: int = 7
    medication_doses: int = 14
    nutrition_entries: int = 7
    injury_workouts: int = 7
    deload_workouts: int = 14
    training_time_workouts: int = 10
    recomposition_weight_samples: int = 7
    recomposition_workouts: int = 10
    recomposition_nutrition_entries: int = 7
    streak_workouts: int = 14


@dataclass(frozen=True)
class WeightConfig:
    """Weight trajectory assumptions.

    ``goal_fraction`` stands in for a user goal weight: the target is a 10%
    loss from the first sample until a real goal is threaded through.
    """

    goal_fraction: float = 0.9
    monthly_slowdown: float = 0.05
    confidence_base: int = 50
    confidence_step: int = 3
    confidence_cap: int = 95


@dataclass(frozen=True)
class EnergyConfig:
    """TDEE estimation constants."""

    lb_per_kg: float = 2.20462
    kcal_per_lb: float = 3500.0
    very_active_per_week: float = 5.0
    active_per_week: float = 3.0
    lightly_active_per_week: float = 1.0
    maintenance_low: float = 0.95
    maintenance_high: float = 1.05
    deficit_mild: float = 0.9
    deficit_moderate: float = 0.8
    deficit_aggressive: float = 0.7
    surplus_lean: float = 1.1
    surplus_bulk: float = 1.2


@dataclass(frozen=True)
class AdherenceConfig:
    """Status and recommendation cut-offs, in percent."""

    excellent: float = 90.0
    good: float = 75.0
    fair: float = 50.0
    reminder_below: float = 90.0
    organizer_below: float = 75.0
    clinician_below: float = 50.0


@dataclass(frozen=True)
class NutritionConfig:
    """Macro energy densities and insight thresholds."""

    kcal_per_g_protein: float = 4.0
    kcal_per_g_carbs: float = 4.0
    kcal_per_g_fat: float = 9.0
    protein_low_pct: int = 25
    protein_high_pct: int = 40
    carbs_low_pct: int = 30
    fat_low_pct: int = 20
    day_variance_kcal: float = 500.0


@dataclass(frozen=True)
class InjuryConfig:
    """Training load comparison and risk scoring."""

    window: int = 7
    rapid_increase_pct: float = 30.0
    rapid_increase_score: int = 30
    moderate_increase_pct: float = 20.0
    moderate_increase_score: int = 15
    very_high_frequency: float = 6.0
    very_high_frequency_score: int = 25
    high_frequency: float = 5.0
    high_frequency_score: int = 10
    recovery_days: float = 0.5
    recovery_score: int = 20
    high_risk: int = 50
    moderate_risk: int = 25
    increase_cap_pct: float = 200.0
    frequency_cap: float = 7.0


@dataclass(frozen=True)
class DeloadConfig:
    """Fatigue buckets and the fixed deload protocol."""

    weeks: int = 4
    bucket_days: int = 7
    trend_factor: float = 1.2
    fatigue_limit: float = 100.0
    training_week_workouts: int = 3
    protocol: DeloadProtocol = field(default_factory=DeloadProtocol)
    benefits: tuple[str, ...] = (
        "Allows nervous system recovery",
        "Reduces accumulated fatigue",
        "Prevents overtraining",
        "Prepares body for next training block",
    )


@dataclass(frozen=True)
class TrainingTimeConfig:
    """Minimum best-vs-worst gap, in percent, worth a schedule change."""

    meaningful_diff_pct: float = 15.0


@dataclass(frozen=True)
class RecompositionConfig:
    """Body recomposition projection assumptions."""

    projection_weeks: int = 12
    volume_change_pct: float = 5.0
    stable_weekly_kg: float = 0.5
    muscle_per_volume_pct: float = 0.1
    fat_share_when_losing: float = 0.75
    muscle_share_when_losing: float = 0.25
    muscle_share_when_gaining: float = 0.5
    fast_loss_weekly_kg: float = 1.0


@dataclass(frozen=True)
class StreakConfig:
    """Streak gap tolerance, probability scaling and compressed-data detection."""

    max_gap_days: int = 2
    probability_factor: float = 1.2
    probability_cap: float = 95.0
    on_track_probability: float = 70.0
    frequency_cap: float = 7.0
    compressed_min_workouts: int = 5
    compressed_span_days: float = 7.0


@dataclass(frozen=True)
class ForecastConfig:
    """All tunable inputs of the prediction engine."""

    timezone: tzinfo = field(default_factory=tz.tzlocal)
    thresholds: Thresholds = field(default_factory=Thresholds)
    weight: WeightConfig = field(default_factory=WeightConfig)
    energy: EnergyConfig = field(default_factory=EnergyConfig)
    adherence: AdherenceConfig = field(default_factory=AdherenceConfig)
    nutrition: NutritionConfig = field(default_factory=NutritionConfig)
    injury: InjuryConfig = field(default_factory=InjuryConfig)
    deload: DeloadConfig = field(default_factory=DeloadConfig)
    training_time: TrainingTimeConfig = field(default_factory=TrainingTimeConfig)
    recomposition: RecompositionConfig = field(default_factory=RecompositionConfig)
    streak: StreakConfig = field(default_factory=StreakConfig)


@dataclass(frozen=True)
class HistoryWindow:
    """How many of the most recent records ingestion hands to the engine."""

    weights: int = 30
    workouts: int = 30
    nutrition: int = 30
    doses: int = 60
