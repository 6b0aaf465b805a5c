from __future__ import annotations

import math

TWO_PI: float = 2.0 * math.pi

# Time bookkeeping (Julian year, model days carry no calendar meaning)
DAY_S: float = 86400.0
YEAR_S: float = 31557600.0
MODEL_YEAR_DAYS: float = YEAR_S / DAY_S
MODEL_MONTH_DAYS: float = 30.0

# Internal sampling step for apparent-longitude series (days)
DT_INTERNAL_DAY: float = 0.25

# Kepler solver
KEPLER_TOL_RAD: float = 1e-12
KEPLER_MAX_ITER: int = 15
KEPLER_BISECTION_MAX_ITER: int = 200
KEPLER_HIGH_E_SEED_THRESHOLD: float = 0.8

# Stationary-point refinement (tunable, not a guaranteed bound)
STATIONARY_TOL_DAY: float = 1e-3
STATIONARY_MAX_ITER: int = 80
STATIONARY_DEDUP_DAY: float = 1e-6
