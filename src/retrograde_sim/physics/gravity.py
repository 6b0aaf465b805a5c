# Two-body / Kepler's equation

from __future__ import annotations

import logging
import math
from typing import Tuple

from retrograde_sim.core.angles import split_turns
from retrograde_sim.core.constants import (
    KEPLER_BISECTION_MAX_ITER,
    KEPLER_HIGH_E_SEED_THRESHOLD,
    KEPLER_MAX_ITER,
    KEPLER_TOL_RAD,
    TWO_PI,
)

logger = logging.getLogger(__name__)


def is_elliptic_eccentricity(e: float) -> bool:
    return math.isfinite(e) and 0.0 <= e < 1.0


def kepler_residual(E_rad: float, M_rad: float, e: float) -> float:
    """f(E) = E - e sin(E) - M."""
    return E_rad - e * math.sin(E_rad) - M_rad


def newton_kepler(M_rad: float, e: float, tol: float = KEPLER_TOL_RAD,
                  max_iter: int = KEPLER_MAX_ITER) -> Tuple[float, bool]:
    """
    Newton-Raphson on Kepler's equation for a mean anomaly in [0, 2π).

    Seeds E0 = M for e <= 0.8, else E0 = π (Newton diverges less often
    from there at high eccentricity).

    Returns:
        (E_rad, converged). E_rad is the last iterate even when not converged.
    """
    E = M_rad if e <= KEPLER_HIGH_E_SEED_THRESHOLD else math.pi

    for _ in range(max(0, max_iter)):
        f = kepler_residual(E, M_rad, e)
        fp = 1.0 - e * math.cos(E)
        if not math.isfinite(f) or not math.isfinite(fp) or fp == 0.0:
            break
        dE = -f / fp
        E += dE
        if abs(dE) < tol:
            return E, math.isfinite(E)

    return E, False


def bisect_kepler(M_rad: float, e: float, tol: float = KEPLER_TOL_RAD,
                  max_iter: int = KEPLER_BISECTION_MAX_ITER) -> float:
    """
    Bisection on E in [0, 2π] for a mean anomaly in [0, 2π).

    For 0 <= e < 1 the residual is monotonically increasing, so f(0) = -M <= 0
    and f(2π) = 2π - M > 0 bracket the root. Returns nan if they do not.
    """
    lo = 0.0
    hi = TWO_PI
    f_lo = kepler_residual(lo, M_rad, e)
    f_hi = kepler_residual(hi, M_rad, e)

    if abs(f_lo) < tol:
        return lo
    if abs(f_hi) < tol:
        return hi
    if not (f_lo < 0.0 < f_hi):
        return math.nan

    for _ in range(max_iter):
        mid = 0.5 * (lo + hi)
        f_mid = kepler_residual(mid, M_rad, e)
        if not math.isfinite(f_mid):
            return math.nan
        if abs(f_mid) < tol:
            return mid

        if f_mid > 0.0:
            hi = mid
        else:
            lo = mid

        if hi - lo < tol:
            break

    return 0.5 * (lo + hi)


def solve_keplers_equation(M_rad: float, e: float, tol: float = KEPLER_TOL_RAD,
                           max_iter: int = KEPLER_MAX_ITER) -> float:
    """
    Solve Kepler's equation for elliptic orbits:
        M = E - e sin(E)

    Newton-Raphson first, checked by residual, with a bisection fallback that
    always converges for 0 <= e < 1. Whole turns in M are carried through to
    E, so repeated calls along a time series do not reset at each revolution.

    Args:
        M_rad: Mean anomaly (rad), any finite value
        e: eccentricity (0 <= e < 1)
        tol: convergence / residual tolerance (rad)
        max_iter: Newton iteration cap (0 forces bisection)

    Returns:
        E_rad: Eccentric anomaly (rad), or nan for invalid input.
    """
    if not is_elliptic_eccentricity(e) or not math.isfinite(M_rad):
        return math.nan

    M, turns = split_turns(M_rad)
    offset = turns * TWO_PI

    if e == 0.0:
        return M + offset

    E, converged = newton_kepler(M, e, tol, max_iter)
    if converged and abs(kepler_residual(E, M, e)) <= tol:
        return E + offset

    logger.debug("Newton did not converge for M=%.6f e=%.6f, using bisection", M, e)
    E = bisect_kepler(M, e, tol)
    if not math.isfinite(E):
        return math.nan
    return E + offset
