from __future__ import annotations

import math

from retrograde_sim.core.angles import Vector2, norm, sub, wrap_0_to_360_deg
from retrograde_sim.physics.orbit import OrbitalElements, OrbitState, orbit_state_at


def line_of_sight(observer: OrbitState, target: OrbitState) -> Vector2:
    """Observer -> target vector in AU."""
    return sub((target.x_au, target.y_au), (observer.x_au, observer.y_au))


def apparent_longitude_deg(observer: OrbitState, target: OrbitState) -> float:
    """
    Angle of the observer -> target line in the fixed inertial frame,
    wrapped to [0, 360). Jumps at the 0/360 seam, so unwrap before
    differentiating.
    """
    if not (observer.is_finite() and target.is_finite()):
        return math.nan
    dx, dy = line_of_sight(observer, target)
    return wrap_0_to_360_deg(math.degrees(math.atan2(dy, dx)))


def observer_target_distance_au(observer: OrbitState, target: OrbitState) -> float:
    if not (observer.is_finite() and target.is_finite()):
        return math.nan
    return norm(line_of_sight(observer, target))


def apparent_longitude_deg_at(
    observer: OrbitalElements,
    target: OrbitalElements,
    t_day: float,
    t0_day: float = 0.0,
) -> float:
    o = orbit_state_at(observer, t_day, t0_day)
    t = orbit_state_at(target, t_day, t0_day)
    return apparent_longitude_deg(o, t)
