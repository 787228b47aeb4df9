"""Punto de entrada de la CLI de predicciones."""

from __future__ import annotations

from salud_forecast.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
