"""Análisis de patrones de nutrición (macros y consistencia semanal)."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

import pandas as pd

from salud_forecast.analyzers.base import DAY_NAMES, Analyzer, finite
from salud_forecast.model import (
    DayCalories,
    History,
    MacroRatios,
    Macros,
    NutritionPatterns,
)


class NutritionPatternAnalyzer(Analyzer):
    """Macro split, weekday calorie spread and rule-based insights."""

    name = "nutrition_patterns"

    @property
    def requirements(self) -> Mapping[str, int]:
        return {"nutrition": self._config.thresholds.nutrition_entries}

    def analyze(self, history: History, now: datetime) -> NutritionPatterns | None:
        if self.shortfall(history) is not None:
            return None
        cfg = self._config.nutrition
        frame = nutrition_to_frame(history)
        avg = frame[["protein_g", "carbs_g", "fat_g", "calories"]].mean()

        protein_kcal = float(avg["protein_g"]) * cfg.kcal_per_g_protein
        carbs_kcal = float(avg["carbs_g"]) * cfg.kcal_per_g_carbs
        fat_kcal = float(avg["fat_g"]) * cfg.kcal_per_g_fat
        total_kcal = protein_kcal + carbs_kcal + fat_kcal
        avg_calories = float(avg["calories"])
        if total_kcal <= 0 or avg_calories <= 0:
            return None
        ratios = MacroRatios(
            protein=round(protein_kcal / total_kcal * 100),
            carbs=round(carbs_kcal / total_kcal * 100),
            fat=round(fat_kcal / total_kcal * 100),
        )

        by_weekday = frame.groupby("weekday")["calories"].mean()
        day_averages = {
            DAY_NAMES[int(weekday)]: round(float(kcal))
            for weekday, kcal in by_weekday.items()
        }
        # dict order follows the calendar, so max/min keep the earliest day on ties.
        highest = max(day_averages, key=lambda d: day_averages[d])
        lowest = min(day_averages, key=lambda d: day_averages[d])
        spread = day_averages[highest] - day_averages[lowest]
        consistency = 100 - spread / avg_calories * 100
        if not finite(consistency):
            return None

        insights: list[str] = []
        if ratios.protein < cfg.protein_low_pct:
            insights.append(
                "Consider increasing protein intake for better muscle recovery"
            )
        if ratios.protein > cfg.protein_high_pct:
            insights.append(
                "Protein intake is very high - ensure adequate carbs for energy"
            )
        if ratios.carbs < cfg.carbs_low_pct:
            insights.append("Low carb intake may affect workout performance")
        if ratios.fat < cfg.fat_low_pct:
            insights.append("Consider increasing healthy fats for hormone production")
        if spread > cfg.day_variance_kcal:
            insights.append(
                f"Calorie intake varies significantly between {lowest} and {highest}"
            )

        return NutritionPatterns(
            avg_macros=Macros(
                protein=round(float(avg["protein_g"])),
                carbs=round(float(avg["carbs_g"])),
                fat=round(float(avg["fat_g"])),
                calories=round(avg_calories),
            ),
            ratios=ratios,
            day_averages=day_averages,
            highest_day=DayCalories(day=highest, calories=day_averages[highest]),
            lowest_day=DayCalories(day=lowest, calories=day_averages[lowest]),
            consistency=round(consistency),
            insights=tuple(insights),
        )


def nutrition_to_frame(history: History) -> pd.DataFrame:
    """One row per nutrition entry, with its weekday (0=Monday)."""
    return pd.DataFrame(
        {
            "weekday": [e.day.weekday() for e in history.nutrition],
            "calories": [e.calories for e in history.nutrition],
            "protein_g": [e.protein_g for e in history.nutrition],
            "carbs_g": [e.carbs_g for e in history.nutrition],
            "fat_g": [e.fat_g for e in history.nutrition],
        }
    )
