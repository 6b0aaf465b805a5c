"""
Stationary-point detection for apparent longitude.

The coarse derivative series only brackets the sign changes. Each bracket is
then refined by bisection on a local central-difference probe evaluated at
arbitrary times, so the located time is not tied to the sampling step.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Sequence

from retrograde_sim.core.angles import wrap_delta_deg_180
from retrograde_sim.core.constants import (
    DT_INTERNAL_DAY,
    STATIONARY_DEDUP_DAY,
    STATIONARY_MAX_ITER,
    STATIONARY_TOL_DAY,
)
from retrograde_sim.physics.apparent import apparent_longitude_deg_at
from retrograde_sim.physics.orbit import OrbitalElements

logger = logging.getLogger(__name__)

DerivativeProbe = Callable[[float], float]


@dataclass(frozen=True)
class LocalDerivativeProbe:
    """
    dλ/dt at any model day, from a fresh central difference:

        (λ(t + dt) - λ(t - dt)) / (2 dt)

    with the difference taken as the shortest signed step so the 0/360 seam
    does not leak into the result.
    """
    observer: OrbitalElements
    target: OrbitalElements
    t0_day: float = 0.0
    dt_day: float = DT_INTERNAL_DAY

    def longitude_deg(self, t_day: float) -> float:
        return apparent_longitude_deg_at(self.observer, self.target, t_day, self.t0_day)

    def __call__(self, t_day: float) -> float:
        lam_minus = self.longitude_deg(t_day - self.dt_day)
        lam_plus = self.longitude_deg(t_day + self.dt_day)
        return wrap_delta_deg_180(lam_plus - lam_minus) / (2.0 * self.dt_day)


def refine_stationary_day(
    probe: DerivativeProbe,
    t_lo: float,
    t_hi: float,
    tol_day: float = STATIONARY_TOL_DAY,
    max_iter: int = STATIONARY_MAX_ITER,
) -> float:
    """
    Bisect [t_lo, t_hi] on the sign of probe(t).

    Falls back to the bracket midpoint when an endpoint probe is not finite
    or the endpoints do not change sign. Never raises.
    """
    lo = t_lo
    hi = t_hi
    f_lo = probe(lo)
    f_hi = probe(hi)

    if not math.isfinite(f_lo) or not math.isfinite(f_hi):
        return 0.5 * (lo + hi)
    if f_lo == 0.0:
        return lo
    if f_hi == 0.0:
        return hi
    if f_lo * f_hi > 0.0:
        return 0.5 * (lo + hi)

    for _ in range(max_iter):
        if hi - lo < tol_day:
            break
        mid = 0.5 * (lo + hi)
        f_mid = probe(mid)
        if not math.isfinite(f_mid):
            break
        if f_mid == 0.0:
            return mid

        if f_lo * f_mid <= 0.0:
            hi = mid
        else:
            lo = mid
            f_lo = f_mid

    return 0.5 * (lo + hi)


def dedupe_sorted_days(days: Sequence[float], min_sep_day: float = STATIONARY_DEDUP_DAY) -> List[float]:
    """Sort and drop any day within min_sep_day of the previously kept one."""
    unique: List[float] = []
    for t in sorted(days):
        if not unique or abs(t - unique[-1]) > min_sep_day:
            unique.append(t)
    return unique


def detect_stationary_days(
    times_day: Sequence[float],
    dlambda_dt: Sequence[float],
    probe: DerivativeProbe,
    tol_day: float = STATIONARY_TOL_DAY,
    max_iter: int = STATIONARY_MAX_ITER,
    dedup_day: float = STATIONARY_DEDUP_DAY,
) -> List[float]:
    """
    Times where the apparent-longitude derivative crosses zero.

    Scans consecutive coarse samples for a sign change (an exact zero sample
    is an event at that sample), refines each bracket with the probe, then
    sorts and deduplicates.
    """
    if len(times_day) != len(dlambda_dt):
        raise ValueError("times_day and dlambda_dt must be same length.")

    n = len(times_day)
    events: List[float] = []
    for i in range(n - 1):
        d0 = dlambda_dt[i]
        d1 = dlambda_dt[i + 1]
        if not math.isfinite(d0) or not math.isfinite(d1):
            continue
        if d0 == 0.0:
            events.append(times_day[i])
            continue
        if d0 * d1 < 0.0:
            events.append(refine_stationary_day(probe, times_day[i], times_day[i + 1], tol_day, max_iter))

    # an exact zero on the last sample has no following pair to catch it
    if n > 0 and dlambda_dt[n - 1] == 0.0:
        events.append(times_day[n - 1])

    unique = dedupe_sorted_days(events, dedup_day)
    logger.debug("Detected %d stationary points (%d before dedup)", len(unique), len(events))
    return unique
