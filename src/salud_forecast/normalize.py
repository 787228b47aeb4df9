"""Normalización de registros crudos al modelo canónico."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, tzinfo
from typing import Any

import pandas as pd
from dateutil import parser

from salud_forecast.config import ForecastConfig
from salud_forecast.model import (
    History,
    MedicationDose,
    NutritionEntry,
    WeightSample,
    WorkoutSession,
)

logger = logging.getLogger(__name__)

_TRUTHY = {"true", "t", "yes", "y", "1"}

_WEIGHT_DAY_KEYS = ("day", "date", "measurement_date")
_WEIGHT_KEYS = ("weight_kg", "weight")
_NUTRITION_DAY_KEYS = ("day", "date", "entry_date", "log_date")


def normalize_weights(
    items: Iterable[Any], config: ForecastConfig
) -> tuple[WeightSample, ...]:
    """Return usable weight samples sorted by date.

    Samples without a date, or whose weight is not positive, are dropped.
    """
    out: list[WeightSample] = []
    for item in items:
        raw = _as_mapping(item)
        if raw is None:
            logger.debug("Dropping weight sample %r: not a record", item)
            continue
        day = _to_date(_pick(raw, _WEIGHT_DAY_KEYS), config.timezone)
        if day is None:
            logger.debug("Dropping weight sample %r: missing date", item)
            continue
        weight = _to_number(_pick(raw, _WEIGHT_KEYS))
        if weight <= 0:
            logger.debug("Dropping weight sample %r: weight not positive", item)
            continue
        out.append(WeightSample(day=day, weight_kg=weight))
    out.sort(key=lambda s: s.day)
    return tuple(out)


def normalize_workouts(
    items: Iterable[Any], config: ForecastConfig
) -> tuple[WorkoutSession, ...]:
    """Return workout sessions (completed or not) sorted by start time."""
    out: list[WorkoutSession] = []
    for item in items:
        raw = _as_mapping(item)
        if raw is None:
            logger.debug("Dropping workout %r: not a record", item)
            continue
        start = _to_timestamp(_pick(raw, ("start_time", "started_at")), config.timezone)
        if start is None:
            logger.debug("Dropping workout %r: missing start time", item)
            continue
        end = _to_timestamp(_pick(raw, ("end_time", "ended_at")), config.timezone)
        out.append(
            WorkoutSession(
                start_time=start,
                end_time=end,
                total_volume=_to_number(_pick(raw, ("total_volume", "volume"))),
                total_sets=int(_to_number(_pick(raw, ("total_sets", "sets")))),
                total_reps=int(_to_number(_pick(raw, ("total_reps", "reps")))),
            )
        )
    out.sort(key=lambda s: s.start_time)
    return tuple(out)


def normalize_nutrition(
    items: Iterable[Any], config: ForecastConfig
) -> tuple[NutritionEntry, ...]:
    """Return nutrition entries sorted by date; missing macros count as 0."""
    out: list[NutritionEntry] = []
    for item in items:
        raw = _as_mapping(item)
        if raw is None:
            logger.debug("Dropping nutrition entry %r: not a record", item)
            continue
        day = _to_date(_pick(raw, _NUTRITION_DAY_KEYS), config.timezone)
        if day is None:
            logger.debug("Dropping nutrition entry %r: missing date", item)
            continue
        out.append(
            NutritionEntry(
                day=day,
                calories=_to_number(_pick(raw, ("calories", "calories_kcal"))),
                protein_g=_to_number(_pick(raw, ("protein_g", "protein"))),
                carbs_g=_to_number(_pick(raw, ("carbs_g", "carbs"))),
                fat_g=_to_number(_pick(raw, ("fat_g", "fat"))),
            )
        )
    out.sort(key=lambda e: e.day)
    return tuple(out)


def normalize_doses(
    items: Iterable[Any], config: ForecastConfig
) -> tuple[MedicationDose, ...]:
    """Return medication doses sorted by scheduled time."""
    out: list[MedicationDose] = []
    for item in items:
        raw = _as_mapping(item)
        if raw is None:
            logger.debug("Dropping medication dose %r: not a record", item)
            continue
        scheduled = _to_timestamp(_pick(raw, ("scheduled_time",)), config.timezone)
        if scheduled is None:
            logger.debug("Dropping medication dose %r: missing scheduled time", item)
            continue
        out.append(
            MedicationDose(scheduled_time=scheduled, taken=_to_bool(raw.get("taken")))
        )
    out.sort(key=lambda d: d.scheduled_time)
    return tuple(out)


def build_history(
    weight_samples: Iterable[Any],
    workout_sessions: Iterable[Any],
    nutrition_entries: Iterable[Any],
    medication_doses: Iterable[Any],
    config: ForecastConfig,
) -> History:
    """Normalize the four series into one snapshot.

    Sessions still in progress are left out: every workout analysis works on
    completed sessions only.
    """
    workouts = normalize_workouts(workout_sessions, config)
    completed = tuple(w for w in workouts if w.completed)
    if len(completed) != len(workouts):
        logger.debug(
            "Ignoring %d in-progress workout(s)", len(workouts) - len(completed)
        )
    return History(
        weights=normalize_weights(weight_samples, config),
        workouts=completed,
        nutrition=normalize_nutrition(nutrition_entries, config),
        doses=normalize_doses(medication_doses, config),
    )


def _as_mapping(item: Any) -> Mapping[str, Any] | None:
    if isinstance(item, Mapping):
        return item
    if is_dataclass(item) and not isinstance(item, type):
        return asdict(item)
    to_dict = getattr(item, "to_dict", None)
    if callable(to_dict):
        converted = to_dict()
        if isinstance(converted, Mapping):
            return converted
    return None


def _pick(raw: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if not _is_missing(value):
            return value
    return None


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (float, pd.Timestamp)) or value is pd.NaT:
        return bool(pd.isna(value))
    return False


def _to_number(value: Any) -> float:
    """Coerce a quantity to a finite, non-negative float (0 when unusable)."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(pd.to_numeric(value, errors="coerce"))
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _to_bool(value: Any) -> bool:
    if pd.api.types.is_bool(value):
        return bool(value)
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    if pd.api.types.is_number(value):
        return not pd.isna(value) and value != 0
    return False


def _localize(dt: datetime, zone: tzinfo) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


def _to_timestamp(value: Any, zone: tzinfo) -> datetime | None:
    """Parse a timestamp into an aware datetime in ``zone``; None if unusable."""
    if _is_missing(value):
        return None
    if isinstance(value, pd.Timestamp):
        return _localize(value.to_pydatetime(), zone)
    if isinstance(value, datetime):
        return _localize(value, zone)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time()).replace(tzinfo=zone)
    if pd.api.types.is_number(value) and not pd.api.types.is_bool(value):
        try:
            return datetime.fromtimestamp(float(value), tz=zone)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return _localize(parser.parse(value), zone)
        except (ValueError, OverflowError):
            return None
    return None


def _to_date(value: Any, zone: tzinfo) -> date | None:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    ts = _to_timestamp(value, zone)
    return ts.date() if ts is not None else None
