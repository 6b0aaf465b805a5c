from __future__ import annotations

import math
from typing import Tuple

from retrograde_sim.core.constants import TWO_PI

Vector2 = Tuple[float, float]


def wrap_to_2pi(angle_rad: float) -> float:
    """Wrap angle to [0, 2π). Non-finite input gives nan."""
    if not math.isfinite(angle_rad):
        return math.nan
    wrapped = angle_rad % TWO_PI
    # fmod rounding can land exactly on 2π for tiny negative inputs
    return 0.0 if wrapped == TWO_PI else wrapped


def wrap_0_to_360_deg(angle_deg: float) -> float:
    """Wrap angle to [0, 360)."""
    if not math.isfinite(angle_deg):
        return math.nan
    wrapped = angle_deg % 360.0
    return 0.0 if wrapped == 360.0 else wrapped


def wrap_delta_deg_180(delta_deg: float) -> float:
    """
    Shortest signed angular step, wrapped into (-180, 180].
    """
    if not math.isfinite(delta_deg):
        return math.nan
    d = delta_deg % 360.0
    if d > 180.0:
        d -= 360.0
    return d


def split_turns(angle_rad: float) -> Tuple[float, int]:
    """
    Factor an angle into (remainder in [0, 2π), whole turns).

    angle ~= remainder + turns * 2π, so a caller can solve on the remainder
    and re-attach the turns afterwards without a jump at each revolution.
    """
    if not math.isfinite(angle_rad):
        return math.nan, 0
    turns = math.floor(angle_rad / TWO_PI)
    remainder = angle_rad - turns * TWO_PI
    # Keep remainder and turns consistent when rounding spills over an edge
    if remainder >= TWO_PI:
        remainder -= TWO_PI
        turns += 1
    elif remainder < 0.0:
        remainder += TWO_PI
        turns -= 1
    if remainder >= TWO_PI:
        remainder = 0.0
        turns += 1
    return remainder, int(turns)


def sub(a: Vector2, b: Vector2) -> Vector2:
    return (a[0] - b[0], a[1] - b[1])


def norm(a: Vector2) -> float:
    return math.hypot(a[0], a[1])
