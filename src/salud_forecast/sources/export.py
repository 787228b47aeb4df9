"""Lectura del historial exportado (JSON o CSV por tipo de registro)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from salud_forecast.sources.base import DataSource, RawHistory, SourcePaths

logger = logging.getLogger(__name__)

# series -> (file stem, candidate time columns)
_SERIES: dict[str, tuple[str, tuple[str, ...]]] = {
    "weights": ("weight", ("day", "date", "measurement_date")),
    "workouts": ("workouts", ("start_time", "started_at")),
    "nutrition": ("nutrition", ("day", "date", "entry_date", "log_date")),
    "doses": ("medications", ("scheduled_time",)),
}


@dataclass(frozen=True)
class ExportPaths(SourcePaths):
    """Paths for a history export directory."""

    # root: folder with weight, workouts, nutrition and medications (.json/.csv)


class ExportSource(DataSource):
    """History export reader; missing files read as empty series."""

    def validate(self) -> None:
        """Validate that the export directory exists."""
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))

    def series_file(self, stem: str) -> Path | None:
        """Return ``<stem>.json`` or ``<stem>.csv`` (JSON wins), if present."""
        for suffix in (".json", ".csv"):
            candidate = self._paths.root / f"{stem}{suffix}"
            if candidate.exists():
                return candidate
        return None

    def load_history(self) -> RawHistory:
        """Read every series, keeping the most recent records of each.

        Raises:
            ValueError: If a JSON file does not hold a list of objects.
        """
        loaded: dict[str, list[dict[str, Any]]] = {}
        for series, (stem, time_keys) in _SERIES.items():
            path = self.series_file(stem)
            if path is None:
                logger.debug("No %s export in %s", stem, self._paths.root)
                loaded[series] = []
                continue
            frame = _read_frame(path)
            limit = getattr(self._window, series)
            loaded[series] = _most_recent(frame, time_keys, limit)
            logger.debug("Read %d %s record(s) from %s", len(loaded[series]), stem, path)
        return RawHistory(**loaded)


def _read_frame(path: Path) -> pd.DataFrame:
    if path.suffix == ".csv":
        return pd.read_csv(path)
    raw = _extract_json_list(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path.name} must contain a JSON list")
    if not all(isinstance(item, dict) for item in raw):
        raise ValueError(f"{path.name} must contain JSON objects")
    return pd.DataFrame(raw)


def _extract_json_list(text: str) -> Any:
    """Extract JSON array from text, tolerating leading non-JSON (e.g. log lines)."""
    start = text.find("[")
    if start >= 0:
        return json.loads(text[start:])
    return json.loads(text)


def _most_recent(
    frame: pd.DataFrame, time_keys: tuple[str, ...], limit: int
) -> list[dict[str, Any]]:
    """Keep the ``limit`` latest rows by the first time column present."""
    if frame.empty:
        return []
    key = next((k for k in time_keys if k in frame.columns), None)
    if key is None:
        return frame.tail(limit).to_dict(orient="records")
    order = pd.to_datetime(frame[key], errors="coerce", utc=True, format="mixed")
    frame = frame.assign(_order=order).sort_values(
        "_order", na_position="first", kind="stable"
    )
    return frame.drop(columns="_order").tail(limit).to_dict(orient="records")
