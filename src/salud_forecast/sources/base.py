"""Clases base para fuentes de historial."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from salud_forecast.config import HistoryWindow


@dataclass(frozen=True)
class SourcePaths:
    """Container for source directories."""

    root: Path


@dataclass(frozen=True)
class RawHistory:
    """The four record series as read from a source, most recent last."""

    weights: list[dict[str, Any]] = field(default_factory=list)
    workouts: list[dict[str, Any]] = field(default_factory=list)
    nutrition: list[dict[str, Any]] = field(default_factory=list)
    doses: list[dict[str, Any]] = field(default_factory=list)


class DataSource(ABC):
    """Abstract history source scoped to one identity."""

    def __init__(self, paths: SourcePaths, window: HistoryWindow | None = None) -> None:
        """Create a data source.

        Args:
            paths: Source paths configuration.
            window: Number of most recent records kept per series.
        """
        self._paths = paths
        self._window = window or HistoryWindow()

    @abstractmethod
    def validate(self) -> None:
        """Validate that required folders/files exist.

        Raises:
            FileNotFoundError: If required files are missing.
        """

    @abstractmethod
    def load_history(self) -> RawHistory:
        """Read the four series, each bounded to its window."""
