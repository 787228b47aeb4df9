"""Modelos tipados para historial de salud y resultados de predicción."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import date, datetime

_SERIES_LABELS: dict[str, str] = {
    "weights": "weight samples",
    "workouts": "workouts",
    "nutrition": "nutrition entries",
    "doses": "medication doses",
}


@dataclass(frozen=True)
class WeightSample:
    """One body-weight measurement (date-based)."""

    day: date
    weight_kg: float


@dataclass(frozen=True)
class WorkoutSession:
    """One logged training session."""

    start_time: datetime
    end_time: datetime | None = None
    total_volume: float = 0.0
    total_sets: int = 0
    total_reps: int = 0

    @property
    def completed(self) -> bool:
        """Sessions without an end time are still in progress."""
        return self.end_time is not None


@dataclass(frozen=True)
class NutritionEntry:
    """One nutrition log (a meal or a daily rollup)."""

    day: date
    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0


@dataclass(frozen=True)
class MedicationDose:
    """One scheduled medication dose."""

    scheduled_time: datetime
    taken: bool


@dataclass(frozen=True)
class History:
    """Normalized snapshot of the four record series, ascending in time."""

    weights: tuple[WeightSample, ...] = ()
    workouts: tuple[WorkoutSession, ...] = ()
    nutrition: tuple[NutritionEntry, ...] = ()
    doses: tuple[MedicationDose, ...] = ()

    def counts(self) -> dict[str, int]:
        """Number of usable records per series."""
        return {
            "weights": len(self.weights),
            "workouts": len(self.workouts),
            "nutrition": len(self.nutrition),
            "doses": len(self.doses),
        }


@dataclass(frozen=True)
class InsufficientData:
    """Placeholder for a forecast that needs more logged history."""

    required: Mapping[str, int]
    got: Mapping[str, int]

    @property
    def message(self) -> str:
        """User-facing hint, e.g. ``Log 14+ medication doses``."""
        parts = [
            f"{minimum}+ {_SERIES_LABELS.get(series, series)}"
            for series, minimum in self.required.items()
        ]
        return "Log " + " and ".join(parts)


@dataclass(frozen=True)
class WeightTrajectory:
    current_weight_kg: float
    goal_weight_kg: float
    weekly_change_kg: float
    weeks_to_goal: int
    goal_date: date
    trend: str
    confidence_pct: int


@dataclass(frozen=True)
class CalorieRange:
    min: int
    max: int


@dataclass(frozen=True)
class CalorieDeficit:
    mild: int
    moderate: int
    aggressive: int


@dataclass(frozen=True)
class CalorieSurplus:
    lean: int
    bulk: int


@dataclass(frozen=True)
class EnergyEstimate:
    tdee: int
    avg_calories: int
    activity_level: str
    workouts_per_week: float
    maintenance_range: CalorieRange
    deficit: CalorieDeficit
    surplus: CalorieSurplus


@dataclass(frozen=True)
class DaySlot:
    day: str | None
    rate: int


@dataclass(frozen=True)
class HourSlot:
    hour: int | None
    rate: int


@dataclass(frozen=True)
class AdherenceProfile:
    adherence_rate: int
    taken: int
    total: int
    status: str
    worst_day: DaySlot
    worst_hour: HourSlot
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True)
class Macros:
    protein: float
    carbs: float
    fat: float
    calories: float


@dataclass(frozen=True)
class MacroRatios:
    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class DayCalories:
    day: str
    calories: int


@dataclass(frozen=True)
class NutritionPatterns:
    avg_macros: Macros
    ratios: MacroRatios
    day_averages: dict[str, int]
    highest_day: DayCalories
    lowest_day: DayCalories
    consistency: int
    insights: tuple[str, ...] = ()


@dataclass(frozen=True)
class InjuryRisk:
    risk_level: str
    risk_score: int
    risk_factors: tuple[str, ...]
    volume_increase_pct: int
    frequency: float
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True)
class TrainingWeek:
    week: int
    volume: float
    sets: int
    workouts: int


@dataclass(frozen=True)
class DeloadProtocol:
    volume_reduction: str = "40-50%"
    intensity_reduction: str = "10-20%"
    duration: str = "1 week"
    focus: str = "Maintain intensity, reduce volume and frequency"


@dataclass(frozen=True)
class DeloadRecommendation:
    needs_deload: bool
    weeks_of_training: int
    fatigue_score: int
    volume_trend: str
    recommended_timing: str
    weeks: tuple[TrainingWeek, ...]
    deload_protocol: DeloadProtocol
    benefits: tuple[str, ...] = ()


@dataclass(frozen=True)
class TrainingTime:
    best_time: str
    best_hour: int
    best_avg_volume: int
    worst_time: str
    worst_hour: int
    worst_avg_volume: int
    performance_diff: int
    hourly_volume: dict[int, float]
    recommendation: str


@dataclass(frozen=True)
class BodyRecomposition:
    current_weight_kg: float
    projected_weight_kg: float
    weekly_weight_change_kg: float
    is_recomping: bool
    estimated_muscle_gain_kg: float
    estimated_fat_loss_kg: float
    volume_trend: str
    recommendation: str


@dataclass(frozen=True)
class HabitStreak:
    current_streak: int
    longest_streak: int
    consistency_rate: int
    streak_probability: int
    total_workouts: int
    avg_workouts_per_week: float
    status: str
    recommendation: str


@dataclass(frozen=True)
class PredictionBundle:
    """Combined output; each slot is a result, InsufficientData or None."""

    weight_trajectory: WeightTrajectory | InsufficientData | None = None
    tdee: EnergyEstimate | InsufficientData | None = None
    medication_adherence: AdherenceProfile | InsufficientData | None = None
    nutrition_patterns: NutritionPatterns | InsufficientData | None = None
    injury_risk: InjuryRisk | InsufficientData | None = None
    deload_week: DeloadRecommendation | InsufficientData | None = None
    optimal_training_time: TrainingTime | InsufficientData | None = None
    body_recomposition: BodyRecomposition | InsufficientData | None = None
    habit_streak: HabitStreak | InsufficientData | None = None
    compressed_data: bool = False
    counts: dict[str, int] = field(default_factory=dict)

    def slots(self) -> dict[str, object]:
        """All forecast slots by name, in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in ("compressed_data", "counts")
        }

    def available(self) -> dict[str, object]:
        """Only the slots holding a computed result."""
        return {
            name: value
            for name, value in self.slots().items()
            if value is not None and not isinstance(value, InsufficientData)
        }
