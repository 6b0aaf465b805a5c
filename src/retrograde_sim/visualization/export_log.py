from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from retrograde_sim.analysis.cursor import EM_DASH, display_state, format_number
from retrograde_sim.simulation.engine import RetrogradeSeries


def _json_float(value: float) -> Optional[float]:
    # JSON has no nan; null marks an undefined sample
    return value if math.isfinite(value) else None


def series_to_dict(series: RetrogradeSeries) -> Dict[str, Any]:
    """
    JSON shape:
    {
      "observer": "Earth", "target": "Mars",
      "t0_day": 0.0, "window_start_day": 0.0, "window_end_day": 720.0,
      "dt_internal_day": 0.25,
      "times_day": [...], "lambda_wrapped_deg": [...],
      "lambda_unwrapped_deg": [...], "dlambda_dt_deg_per_day": [...],
      "stationary_days": [...],
      "retrograde_intervals": [{"start_day": ..., "end_day": ...}, ...]
    }
    """
    return {
        "observer": series.observer,
        "target": series.target,
        "t0_day": _json_float(series.t0_day),
        "window_start_day": _json_float(series.window_start_day),
        "window_end_day": _json_float(series.window_end_day),
        "dt_internal_day": _json_float(series.dt_internal_day),
        "times_day": list(series.times_day),
        "lambda_wrapped_deg": [_json_float(v) for v in series.lambda_wrapped_deg],
        "lambda_unwrapped_deg": [_json_float(v) for v in series.lambda_unwrapped_deg],
        "dlambda_dt_deg_per_day": [_json_float(v) for v in series.dlambda_dt_deg_per_day],
        "stationary_days": list(series.stationary_days),
        "retrograde_intervals": [
            {"start_day": iv.start_day, "end_day": iv.end_day} for iv in series.retrograde_intervals
        ],
    }


def _write_json(data: Dict[str, Any], out_path: str) -> str:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f, allow_nan=False)
    return out_path


def export_series_to_json(series: RetrogradeSeries, out_path: str = "out/retrograde_series.json") -> str:
    return _write_json(series_to_dict(series), out_path)


def results_payload(series: RetrogradeSeries, cursor_day: float) -> Dict[str, Any]:
    """
    Versioned results summary at one cursor day: parameters, readouts, notes.
    """
    ds = display_state(series, cursor_day)
    nearest = ds.retro_interval
    retro_bounds = EM_DASH if nearest is None else (
        f"{format_number(nearest.start_day, 1)} to {format_number(nearest.end_day, 1)}"
    )

    def row(name: str, value: str) -> Dict[str, str]:
        return {"name": name, "value": value}

    parameters: List[Dict[str, str]] = [
        row("Observer", series.observer),
        row("Target", series.target),
        row("Window start day (day)", format_number(series.window_start_day, 1)),
        row("Window end day (day)", format_number(series.window_end_day, 1)),
        row("Internal step (day)", format_number(series.dt_internal_day, 2)),
        row("Model type", "Keplerian 2D (coplanar)"),
    ]
    readouts: List[Dict[str, str]] = [
        row("Current day (day)", format_number(ds.cursor_day, 1)),
        row("Apparent longitude (deg)", format_number(ds.lambda_deg, 1)),
        row("d(lambda)/dt (deg/day)", format_number(ds.dlambda_dt, 3)),
        row("State", ds.state_label),
        row("Previous stationary day (day)", format_number(ds.prev_stationary, 1)),
        row("Next stationary day (day)", format_number(ds.next_stationary, 1)),
        row("Nearest retrograde bounds (day)", retro_bounds),
        row("Nearest retrograde duration (day)", ds.retro_duration),
        row("Retrograde duration at cursor (day)", EM_DASH if ds.active_retro_duration is None
            else format_number(ds.active_retro_duration, 1)),
    ]
    return {
        "version": 1,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "parameters": parameters,
        "readouts": readouts,
        "notes": [
            "Retrograde is apparent: the planet never reverses orbit. "
            "The sign flip comes from relative motion and viewing geometry.",
            "Model time uses model day only (no calendar-date claims).",
            "Orbits are coplanar Keplerian ellipses around the Sun with a fixed inertial +x axis as 0 deg.",
        ],
    }


def export_results_payload(
    series: RetrogradeSeries,
    cursor_day: float,
    out_path: str = "out/retrograde_results.json",
) -> str:
    return _write_json(results_payload(series, cursor_day), out_path)
