from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Tuple, Union

from retrograde_sim.analysis.retrograde import RetrogradeInterval, classify_retrograde_intervals
from retrograde_sim.analysis.series import central_difference_deg_per_day, unwrap_deg_180
from retrograde_sim.analysis.stationary import LocalDerivativeProbe, detect_stationary_days
from retrograde_sim.core.constants import DT_INTERNAL_DAY, MODEL_MONTH_DAYS
from retrograde_sim.objects.planet import planet_elements
from retrograde_sim.physics.apparent import apparent_longitude_deg_at
from retrograde_sim.physics.orbit import OrbitalElements

logger = logging.getLogger(__name__)

BodySpec = Union[str, OrbitalElements]


@dataclass
class RetrogradeSeries:
    """
    Apparent motion of a target as seen from an observer over one window.
    The four sample arrays share the times_day grid.
    """
    observer: str
    target: str
    observer_elements: OrbitalElements
    target_elements: OrbitalElements
    t0_day: float
    window_start_day: float
    window_end_day: float
    dt_internal_day: float
    times_day: List[float] = field(default_factory=list)
    lambda_wrapped_deg: List[float] = field(default_factory=list)
    lambda_unwrapped_deg: List[float] = field(default_factory=list)
    dlambda_dt_deg_per_day: List[float] = field(default_factory=list)
    stationary_days: List[float] = field(default_factory=list)
    retrograde_intervals: List[RetrogradeInterval] = field(default_factory=list)

    def probe(self) -> LocalDerivativeProbe:
        """Fresh dλ/dt evaluator consistent with this series."""
        return LocalDerivativeProbe(self.observer_elements, self.target_elements, self.t0_day, self.dt_internal_day)

    def has_nan(self) -> bool:
        return any(not math.isfinite(v) for v in self.lambda_wrapped_deg)


def _resolve_body(body: BodySpec, label: str = "") -> Tuple[str, OrbitalElements]:
    if isinstance(body, OrbitalElements):
        return (label or "custom"), body
    return (label or body), planet_elements(body)


def sample_times(window_start_day: float, window_end_day: float, dt_day: float = DT_INTERNAL_DAY) -> List[float]:
    """
    Fixed-step grid start, start + dt, ... up to (and including, if it lands) end.
    """
    if not all(math.isfinite(v) for v in (window_start_day, window_end_day, dt_day)) or dt_day <= 0:
        return []
    n = max(0, math.floor((window_end_day - window_start_day) / dt_day) + 1)
    return [window_start_day + i * dt_day for i in range(n)]


def compute_series(
    observer: BodySpec,
    target: BodySpec,
    window_start_day: float,
    window_months: float,
    t0_day: float = 0.0,
    observer_label: str = "",
    target_label: str = "",
) -> RetrogradeSeries:
    """
    Sample apparent longitude of target from observer over the window and
    extract stationary points and retrograde intervals.

    observer / target are planet catalog keys or OrbitalElements.
    Bad numeric input never raises: it shows up as nan samples (or an empty
    series for a non-finite window).
    """
    observer_name, observer_elements = _resolve_body(observer, observer_label)
    target_name, target_elements = _resolve_body(target, target_label)
    if not math.isfinite(t0_day):
        t0_day = 0.0

    dt = DT_INTERNAL_DAY
    window_end_day = window_start_day + window_months * MODEL_MONTH_DAYS

    series = RetrogradeSeries(
        observer=observer_name,
        target=target_name,
        observer_elements=observer_elements,
        target_elements=target_elements,
        t0_day=t0_day,
        window_start_day=window_start_day,
        window_end_day=window_end_day,
        dt_internal_day=dt,
    )

    # Tick loop
    series.times_day = sample_times(window_start_day, window_end_day, dt)
    series.lambda_wrapped_deg = [
        apparent_longitude_deg_at(observer_elements, target_elements, t, t0_day) for t in series.times_day
    ]
    if series.has_nan():
        logger.warning("Apparent longitude series %s->%s contains non-finite samples", observer_name, target_name)

    series.lambda_unwrapped_deg = unwrap_deg_180(series.lambda_wrapped_deg)
    series.dlambda_dt_deg_per_day = central_difference_deg_per_day(series.lambda_unwrapped_deg, dt)

    probe = series.probe()
    series.stationary_days = detect_stationary_days(series.times_day, series.dlambda_dt_deg_per_day, probe)
    if series.times_day:
        series.retrograde_intervals = classify_retrograde_intervals(
            window_start_day, window_end_day, series.stationary_days, probe
        )

    logger.debug(
        "Series %s->%s: %d samples, %d stationary points, %d retrograde intervals",
        observer_name, target_name, len(series.times_day),
        len(series.stationary_days), len(series.retrograde_intervals),
    )
    return series
