"""Clases base para los analizadores de historial."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import date, datetime, timedelta

from salud_forecast.config import ForecastConfig
from salud_forecast.model import History, InsufficientData

DAY_NAMES: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_DAY = timedelta(days=1)


class Analyzer(ABC):
    """Abstract forecast over a history snapshot."""

    name: str = ""

    def __init__(self, config: ForecastConfig) -> None:
        """Create an analyzer.

        Args:
            config: Business parameters and thresholds.
        """
        self._config = config

    @property
    @abstractmethod
    def requirements(self) -> Mapping[str, int]:
        """Minimum record count per history series."""

    def shortfall(self, history: History) -> InsufficientData | None:
        """Describe missing data, or None when every minimum is met."""
        counts = history.counts()
        got = {series: counts[series] for series in self.requirements}
        if all(got[s] >= minimum for s, minimum in self.requirements.items()):
            return None
        return InsufficientData(required=dict(self.requirements), got=got)

    @abstractmethod
    def analyze(self, history: History, now: datetime) -> object | None:
        """Compute the forecast.

        Args:
            history: Normalized snapshot.
            now: Reference instant (timezone-aware).

        Returns:
            Result dataclass, or None on insufficient data or degenerate
            arithmetic.
        """


def days_between(start: date | datetime, end: date | datetime) -> float:
    """Fractional days from ``start`` to ``end``."""
    return (end - start) / _DAY


def finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def mean(values: list[float]) -> float:
    return sum(values) / len(values)
