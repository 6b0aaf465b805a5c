from __future__ import annotations

import math
from typing import List, Sequence

from retrograde_sim.core.angles import wrap_delta_deg_180


def unwrap_deg_180(wrapped_deg: Sequence[float]) -> List[float]:
    """
    Phase-unwrap a wrapped [0, 360) series.

    Each output step is the shortest signed step between the matching wrapped
    samples, accumulated from the first sample (which is passed through).
    Assumes the true motion between samples stays under half a turn.

    A non-finite sample gives nan at that position; accumulation resumes from
    the last finite value.
    """
    n = len(wrapped_deg)
    if n == 0:
        return []

    out: List[float] = [math.nan] * n
    out[0] = float(wrapped_deg[0])
    last_wrapped = out[0] if math.isfinite(out[0]) else math.nan
    last_unwrapped = out[0] if math.isfinite(out[0]) else math.nan

    for i in range(1, n):
        cur = wrapped_deg[i]
        if not math.isfinite(cur):
            continue
        if not math.isfinite(last_unwrapped):
            # first finite sample after a leading gap starts the accumulation
            out[i] = float(cur)
        else:
            out[i] = last_unwrapped + wrap_delta_deg_180(cur - last_wrapped)
        last_wrapped = cur
        last_unwrapped = out[i]

    return out


def central_difference_deg_per_day(y_deg: Sequence[float], dt_day: float) -> List[float]:
    """
    d/dt of an unwrapped series on a uniform grid (deg/day).

    Interior points use central differences, endpoints one-sided ones.
    """
    n = len(y_deg)
    if n == 0:
        return []
    if not math.isfinite(dt_day) or not dt_day > 0:
        return [math.nan] * n
    if n == 1:
        return [math.nan]

    out: List[float] = [0.0] * n
    out[0] = (y_deg[1] - y_deg[0]) / dt_day
    for i in range(1, n - 1):
        out[i] = (y_deg[i + 1] - y_deg[i - 1]) / (2.0 * dt_day)
    out[n - 1] = (y_deg[n - 1] - y_deg[n - 2]) / dt_day
    return out
