"""CLI para calcular predicciones de salud desde un historial exportado."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from salud_forecast.aggregate import compute_predictions
from salud_forecast.config import ForecastConfig, HistoryWindow
from salud_forecast.excel_writer import ExcelLayout, write_predictions_xlsx
from salud_forecast.sources.export import ExportPaths, ExportSource


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    defaults = HistoryWindow()
    parser = argparse.ArgumentParser(
        description="Predicciones: peso, TDEE, adherencia, nutrición, lesión, descarga."
    )
    parser.add_argument(
        "--data-dir",
        default=str(Path.home() / "proyectos" / "salud" / "historial"),
        help="Directorio con weight/workouts/nutrition/medications (.json o .csv).",
    )
    parser.add_argument(
        "--out-dir",
        default=None,
        help="Directorio de salida (default: <data-dir>/salidas).",
    )
    parser.add_argument("--weight-window", type=int, default=defaults.weights)
    parser.add_argument("--workout-window", type=int, default=defaults.workouts)
    parser.add_argument("--nutrition-window", type=int, default=defaults.nutrition)
    parser.add_argument("--medication-window", type=int, default=defaults.doses)
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log de cada analizador."
    )
    return parser.parse_args()


def main() -> int:
    """Run the predictions CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    base = Path(ns.data_dir).expanduser().resolve()
    window = HistoryWindow(
        weights=ns.weight_window,
        workouts=ns.workout_window,
        nutrition=ns.nutrition_window,
        doses=ns.medication_window,
    )

    source = ExportSource(ExportPaths(root=base), window)
    source.validate()
    raw = source.load_history()

    config = ForecastConfig()
    bundle = compute_predictions(
        raw.weights, raw.workouts, raw.nutrition, raw.doses, config=config
    )

    out_dir = Path(ns.out_dir).expanduser() if ns.out_dir else base / "salidas"
    ts = datetime.now(tz=config.timezone).strftime("%Y-%m-%d_%H-%M-%S")
    out_path = out_dir / f"predicciones_{ts}.xlsx"

    write_predictions_xlsx(bundle, out_path, ExcelLayout())

    print(f"OK: Records: {bundle.counts}")
    print(f"OK: Predictions available: {len(bundle.available())}/{len(bundle.slots())}")
    if bundle.compressed_data:
        print("WARN: Workouts logged within a short timeframe; trends may be skewed")
    print(f"OK: Output: {out_path}")
    return 0
