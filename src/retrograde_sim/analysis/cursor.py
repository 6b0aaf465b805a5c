"""
Readout queries at a cursor day on a computed series.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from retrograde_sim.analysis.retrograde import RetrogradeInterval
from retrograde_sim.simulation.engine import RetrogradeSeries

EM_DASH = "—"


def format_number(value: float, digits: int) -> str:
    if not math.isfinite(value):
        return EM_DASH
    return f"{value:.{digits}f}"


def format_duration(start_day: float, end_day: float) -> str:
    if not (math.isfinite(start_day) and math.isfinite(end_day)):
        return EM_DASH
    return f"{end_day - start_day:.1f}"


def motion_state(dlambda_dt: float) -> str:
    if not math.isfinite(dlambda_dt):
        return EM_DASH
    if dlambda_dt > 0:
        return "Direct"
    if dlambda_dt < 0:
        return "Retrograde"
    return "Stationary"


def geometry_hint(observer_a_au: float, target_a_au: float) -> str:
    if target_a_au < observer_a_au:
        return "Inferior-planet geometry"
    if target_a_au > observer_a_au:
        return "Superior-planet geometry"
    return ""


def round_half_up(x: float) -> float:
    """Nearest integer with halves rounded toward +inf; nan stays nan."""
    if not math.isfinite(x):
        return math.nan
    return float(math.floor(x + 0.5))


def series_index_at_day(t_day: float, window_start_day: float, dt_day: float) -> Optional[int]:
    """Nearest non-negative sample index, or None when the day is not finite."""
    idx = round_half_up((t_day - window_start_day) / dt_day)
    if math.isnan(idx):
        return None
    return max(0, int(idx))


def snap_to_grid(series: RetrogradeSeries, t_day: float) -> float:
    """Clamp to the window, then snap onto the internal sampling grid."""
    if not math.isfinite(t_day):
        return t_day
    if not (math.isfinite(series.window_start_day) and math.isfinite(series.window_end_day)):
        return t_day
    clamped = min(max(t_day, series.window_start_day), series.window_end_day)
    idx = round_half_up((clamped - series.window_start_day) / series.dt_internal_day)
    return series.window_start_day + idx * series.dt_internal_day


def find_prev_next_stationary(stationary_days: Sequence[float], cursor_day: float) -> Tuple[float, float]:
    """
    Nearest stationary days at or before, and strictly after, the cursor.
    nan where there is none.
    """
    prev = math.nan
    nxt = math.nan
    if not math.isfinite(cursor_day):
        return prev, nxt
    for d in stationary_days:
        if d <= cursor_day:
            prev = d
        elif math.isnan(nxt):
            nxt = d
    return prev, nxt


def nearest_retrograde_interval(
    intervals: Sequence[RetrogradeInterval],
    cursor_day: float,
) -> Optional[RetrogradeInterval]:
    """
    The interval containing the cursor, else the one whose midpoint is closest.
    """
    if not intervals or not math.isfinite(cursor_day):
        return None
    for iv in intervals:
        if iv.contains(cursor_day):
            return iv
    return min(intervals, key=lambda iv: abs(cursor_day - iv.midpoint_day))


def retrograde_duration_if_active_at_cursor(
    intervals: Sequence[RetrogradeInterval],
    cursor_day: float,
) -> Optional[float]:
    """Duration of the interval the cursor sits in, None outside retrograde."""
    for iv in intervals:
        if iv.contains(cursor_day):
            return iv.duration_day
    return None


@dataclass(frozen=True)
class DisplayState:
    cursor_day: float
    lambda_deg: float
    dlambda_dt: float
    state_label: str
    geometry_hint: str
    prev_stationary: float
    next_stationary: float
    retro_interval: Optional[RetrogradeInterval]
    retro_duration: str
    active_retro_duration: Optional[float] = None


def display_state(series: RetrogradeSeries, cursor_day: float) -> DisplayState:
    """
    Everything a readout panel shows for one cursor position.

    A non-finite cursor day yields nan readouts and no interval.
    """
    day = snap_to_grid(series, cursor_day)
    lam = math.nan
    slope = math.nan
    idx = series_index_at_day(day, series.window_start_day, series.dt_internal_day)
    if series.times_day and idx is not None:
        idx = min(idx, len(series.times_day) - 1)
        lam = series.lambda_wrapped_deg[idx]
        slope = series.dlambda_dt_deg_per_day[idx]

    prev, nxt = find_prev_next_stationary(series.stationary_days, day)
    nearest = nearest_retrograde_interval(series.retrograde_intervals, day)
    duration = EM_DASH if nearest is None else format_duration(nearest.start_day, nearest.end_day)

    return DisplayState(
        cursor_day=day,
        lambda_deg=lam,
        dlambda_dt=slope,
        state_label=motion_state(slope),
        geometry_hint=geometry_hint(series.observer_elements.a_au, series.target_elements.a_au),
        prev_stationary=prev,
        next_stationary=nxt,
        retro_interval=nearest,
        retro_duration=duration,
        active_retro_duration=retrograde_duration_if_active_at_cursor(series.retrograde_intervals, day),
    )
