# src/retrograde_sim/physics/orbit.py

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List

from retrograde_sim.core.angles import split_turns, wrap_to_2pi
from retrograde_sim.core.constants import MODEL_YEAR_DAYS, TWO_PI
from retrograde_sim.physics.gravity import is_elliptic_eccentricity, solve_keplers_equation


@dataclass(frozen=True)
class OrbitalElements:
    """
    Coplanar heliocentric elements for an elliptic orbit.

    Units:
        a_au: semi-major axis in AU
        e: eccentricity (0<=e<1)
        varpi_deg: longitude of periapsis in degrees
        L0_deg: mean longitude at the reference time t0 in degrees

    Construction never raises so that a bad element set only turns the
    affected samples into nan. Call validate() at a boundary that wants
    eager checking.
    """
    a_au: float
    e: float
    varpi_deg: float
    L0_deg: float

    def is_valid(self) -> bool:
        return (
            math.isfinite(self.a_au)
            and self.a_au > 0.0
            and is_elliptic_eccentricity(self.e)
            and math.isfinite(self.varpi_deg)
            and math.isfinite(self.L0_deg)
        )

    def validate(self) -> None:
        if not (math.isfinite(self.a_au) and self.a_au > 0):
            raise ValueError(f"Semi-major axis must be positive. Got: {self.a_au}")
        if not is_elliptic_eccentricity(self.e):
            raise ValueError(f"This model supports elliptic orbits only (0 <= e < 1). Got: {self.e}")
        if not math.isfinite(self.varpi_deg):
            raise ValueError(f"Longitude of periapsis must be finite. Got: {self.varpi_deg}")
        if not math.isfinite(self.L0_deg):
            raise ValueError(f"Reference mean longitude must be finite. Got: {self.L0_deg}")


@dataclass(frozen=True)
class OrbitState:
    """
    Heliocentric planar state of a body at model day t_day.

    mean_longitude_deg is not wrapped. mean_anomaly_rad and true_anomaly_rad are wrapped to
    [0, 2π) with the whole turns kept in mean_anomaly_turns.
    """
    t_day: float
    mean_longitude_deg: float
    mean_anomaly_rad: float
    mean_anomaly_turns: int
    eccentric_anomaly_rad: float
    true_anomaly_rad: float
    r_au: float
    x_au: float
    y_au: float

    @classmethod
    def undefined(cls, t_day: float) -> "OrbitState":
        nan = math.nan
        return cls(t_day, nan, nan, 0, nan, nan, nan, nan, nan)

    def is_finite(self) -> bool:
        return math.isfinite(self.x_au) and math.isfinite(self.y_au)


def _central_mass_or_sun(central_mass_solar: float) -> float:
    if math.isfinite(central_mass_solar) and central_mass_solar > 0:
        return central_mass_solar
    return 1.0


def orbital_period_days(a_au: float, central_mass_solar: float = 1.0) -> float:
    """Kepler's third law: P[yr] = sqrt(a[AU]^3 / M[Msun])."""
    if not (math.isfinite(a_au) and a_au > 0):
        return math.nan
    if not (math.isfinite(central_mass_solar) and central_mass_solar > 0):
        return math.nan
    return math.sqrt(a_au ** 3 / central_mass_solar) * MODEL_YEAR_DAYS


def mean_motion_rad_per_day(a_au: float, central_mass_solar: float = 1.0) -> float:
    """n = 2π / P."""
    return TWO_PI / orbital_period_days(a_au, central_mass_solar)


def orbit_state_at(
    elements: OrbitalElements,
    t_day: float,
    t0_day: float = 0.0,
    central_mass_solar: float = 1.0,
) -> OrbitState:
    """
    Two-body Keplerian position of a body at model day t_day.

    Returns an all-nan state (never raises) for invalid elements or
    non-finite times.
    """
    if not elements.is_valid() or not (math.isfinite(t_day) and math.isfinite(t0_day)):
        return OrbitState.undefined(t_day)

    a = elements.a_au
    e = elements.e
    n = mean_motion_rad_per_day(a, _central_mass_or_sun(central_mass_solar))

    mean_longitude_deg = elements.L0_deg + math.degrees(n * (t_day - t0_day))
    M, turns = split_turns(math.radians(mean_longitude_deg - elements.varpi_deg))

    E = solve_keplers_equation(M, e)
    if not math.isfinite(E):
        return OrbitState.undefined(t_day)

    # True anomaly ν from eccentric anomaly E (half-angle form)
    nu = 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(0.5 * E),
        math.sqrt(1.0 - e) * math.cos(0.5 * E),
    )

    r_au = a * (1.0 - e * math.cos(E))
    theta = nu + math.radians(elements.varpi_deg)

    return OrbitState(
        t_day=t_day,
        mean_longitude_deg=mean_longitude_deg,
        mean_anomaly_rad=M,
        mean_anomaly_turns=turns,
        eccentric_anomaly_rad=E,
        true_anomaly_rad=wrap_to_2pi(nu),
        r_au=r_au,
        x_au=r_au * math.cos(theta),
        y_au=r_au * math.sin(theta),
    )


def propagate(
    elements: OrbitalElements,
    times_day: Iterable[float],
    t0_day: float = 0.0,
    central_mass_solar: float = 1.0,
) -> List[OrbitState]:
    """
    Propagate an orbit across a list of model days.
    """
    return [orbit_state_at(elements, t, t0_day, central_mass_solar) for t in times_day]
