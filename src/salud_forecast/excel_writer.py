"""Generación de Excel con el resumen de predicciones."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from salud_forecast.model import (
    AdherenceProfile,
    BodyRecomposition,
    DeloadRecommendation,
    EnergyEstimate,
    HabitStreak,
    InjuryRisk,
    InsufficientData,
    NutritionPatterns,
    PredictionBundle,
    TrainingTime,
    WeightTrajectory,
)

_SLOT_LABELS: dict[str, str] = {
    "weight_trajectory": "Trayectoria de peso",
    "tdee": "Gasto energético (TDEE)",
    "medication_adherence": "Adherencia a medicación",
    "nutrition_patterns": "Patrones de nutrición",
    "injury_risk": "Riesgo de lesión",
    "deload_week": "Semana de descarga",
    "optimal_training_time": "Horario óptimo de entrenamiento",
    "body_recomposition": "Recomposición corporal",
    "habit_streak": "Racha de entrenamiento",
}

_HEADERS = ("Predicción", "Estado", "Detalle")
_NO_PREDICTION = "Sin datos suficientes"


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the predictions sheet."""

    sheet_name: str = "Predicciones"


def bundle_to_frame(bundle: PredictionBundle) -> pd.DataFrame:
    """One row per forecast: label, status and a one-line detail."""
    rows: list[dict[str, str]] = []
    for name, value in bundle.slots().items():
        if isinstance(value, InsufficientData):
            status, detail = "Datos insuficientes", value.message
        elif value is None:
            status, detail = "Sin predicción", _NO_PREDICTION
        else:
            status, detail = "Disponible", describe(value)
        rows.append(
            {
                _HEADERS[0]: _SLOT_LABELS.get(name, name),
                _HEADERS[1]: status,
                _HEADERS[2]: detail,
            }
        )
    return pd.DataFrame(rows, columns=list(_HEADERS))


def describe(value: object) -> str:
    """Human summary of one forecast result."""
    if isinstance(value, WeightTrajectory):
        return (
            f"{value.current_weight_kg} kg, {value.trend} "
            f"{value.weekly_change_kg} kg/week; goal {value.goal_weight_kg} kg "
            f"in ~{value.weeks_to_goal} weeks ({value.goal_date.isoformat()}), "
            f"confidence {value.confidence_pct}%"
        )
    if isinstance(value, EnergyEstimate):
        return (
            f"TDEE {value.tdee} kcal ({value.activity_level}, "
            f"{value.workouts_per_week} workouts/week); maintenance "
            f"{value.maintenance_range.min}-{value.maintenance_range.max} kcal"
        )
    if isinstance(value, AdherenceProfile):
        text = f"{value.adherence_rate}% ({value.taken}/{value.total}), {value.status}"
        return _with_notes(text, value.recommendations)
    if isinstance(value, NutritionPatterns):
        r = value.ratios
        text = (
            f"P/C/F {r.protein}/{r.carbs}/{r.fat}%, "
            f"consistency {value.consistency}%"
        )
        return _with_notes(text, value.insights)
    if isinstance(value, InjuryRisk):
        text = (
            f"{value.risk_level} (score {value.risk_score}), volume "
            f"{value.volume_increase_pct:+d}%, {value.frequency}x/week"
        )
        return _with_notes(text, value.recommendations)
    if isinstance(value, DeloadRecommendation):
        return (
            f"{value.recommended_timing}; fatigue {value.fatigue_score} sets/week, "
            f"volume {value.volume_trend}, {value.weeks_of_training} training weeks"
        )
    if isinstance(value, TrainingTime):
        return f"{value.best_time} ({value.performance_diff}% better). {value.recommendation}"
    if isinstance(value, BodyRecomposition):
        return (
            f"{value.projected_weight_kg} kg projected; muscle "
            f"+{value.estimated_muscle_gain_kg} kg, fat -{value.estimated_fat_loss_kg} kg. "
            f"{value.recommendation}"
        )
    if isinstance(value, HabitStreak):
        return (
            f"current {value.current_streak}, longest {value.longest_streak}, "
            f"consistency {value.consistency_rate}%. {value.recommendation}"
        )
    return str(value)


def _with_notes(text: str, notes: tuple[str, ...]) -> str:
    if not notes:
        return text
    return text + "\n" + "\n".join(f"- {n}" for n in notes)


def write_predictions_xlsx(
    bundle: PredictionBundle, out_path: Path, layout: ExcelLayout
) -> None:
    """Write a formatted Excel summary of the predictions.

    Args:
        bundle: Aggregated predictions.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    export_df = bundle_to_frame(bundle)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws)


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Alinea arriba a la izquierda y ajusta texto; el detalle puede ser multilínea."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    top_left = Alignment(horizontal="left", vertical="top", wrap_text=True)
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = top_left
            cell.border = border
        lines = max(str(cell.value or "").count("\n") + 1 for cell in row)
        ws.row_dimensions[row[0].row].height = 15 * lines


def _apply_column_widths(ws: Any) -> None:
    """Establece anchos de columna por cabecera."""
    widths = {"Predicción": 32, "Estado": 20, "Detalle": 90}
    for cell in ws[1]:
        width = widths.get(str(cell.value))
        if width is not None:
            ws.column_dimensions[cell.column_letter].width = width


def _format_sheet(ws: Any) -> None:
    """Apply borders, alignment and widths to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    _apply_column_widths(ws)
