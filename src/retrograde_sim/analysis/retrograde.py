from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from retrograde_sim.analysis.stationary import DerivativeProbe


@dataclass(frozen=True)
class RetrogradeInterval:
    """Span of model days over which the apparent motion runs backwards."""
    start_day: float
    end_day: float

    @property
    def duration_day(self) -> float:
        return self.end_day - self.start_day

    @property
    def midpoint_day(self) -> float:
        return 0.5 * (self.start_day + self.end_day)

    def contains(self, t_day: float) -> bool:
        return self.start_day <= t_day <= self.end_day


def cut_points(window_start_day: float, window_end_day: float, stationary_days: Sequence[float]) -> List[float]:
    return sorted([window_start_day, *stationary_days, window_end_day])


def partition_timeline(
    window_start_day: float,
    window_end_day: float,
    stationary_days: Sequence[float],
    probe: DerivativeProbe,
) -> List[Tuple[float, float, float]]:
    """
    Split the window at the stationary days.

    Returns:
        List of (start_day, end_day, midpoint slope) for every non-degenerate
        piece, in ascending order.
    """
    cuts = cut_points(window_start_day, window_end_day, stationary_days)
    pieces: List[Tuple[float, float, float]] = []
    for start_day, end_day in zip(cuts[:-1], cuts[1:]):
        if not end_day > start_day:
            continue
        slope = probe(0.5 * (start_day + end_day))
        pieces.append((start_day, end_day, slope))
    return pieces


def classify_retrograde_intervals(
    window_start_day: float,
    window_end_day: float,
    stationary_days: Sequence[float],
    probe: DerivativeProbe,
) -> List[RetrogradeInterval]:
    """
    Keep the pieces of the timeline whose midpoint slope is finite and negative.
    """
    return [
        RetrogradeInterval(start_day, end_day)
        for start_day, end_day, slope in partition_timeline(window_start_day, window_end_day, stationary_days, probe)
        if math.isfinite(slope) and slope < 0.0
    ]
