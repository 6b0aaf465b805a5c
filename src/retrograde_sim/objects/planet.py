from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from retrograde_sim.physics.orbit import OrbitalElements, OrbitState, orbit_state_at

# "Toy J2000-ish" heliocentric elements for a coplanar Keplerian teaching model.
# They set a deterministic phase reference only; no real-date prediction.
PLANET_ELEMENTS: Dict[str, OrbitalElements] = {
    "Venus": OrbitalElements(a_au=0.72333199, e=0.00677323, varpi_deg=131.602467, L0_deg=181.97973),
    "Earth": OrbitalElements(a_au=1.00000011, e=0.01671022, varpi_deg=102.937682, L0_deg=100.464572),
    "Mars": OrbitalElements(a_au=1.52366231, e=0.09341233, varpi_deg=336.04084, L0_deg=355.45332),
    "Jupiter": OrbitalElements(a_au=5.20336301, e=0.04839266, varpi_deg=14.75385, L0_deg=34.40438),
    "Saturn": OrbitalElements(a_au=9.53707032, e=0.0541506, varpi_deg=92.43194, L0_deg=49.94432),
}


def planet_keys() -> List[str]:
    return list(PLANET_ELEMENTS.keys())


def planet_elements(key: str) -> OrbitalElements:
    try:
        return PLANET_ELEMENTS[key]
    except KeyError:
        raise KeyError(f"Unknown planet '{key}'. Known planets: {', '.join(planet_keys())}") from None


@dataclass
class Planet:
    """
    A body on a fixed Keplerian ellipse around the Sun.
    Purely kinematic: state is recomputed from the elements on demand.
    """
    key: str
    elements: OrbitalElements

    # Last computed state (handy for readouts / debugging)
    last_state: Optional[OrbitState] = None

    @classmethod
    def from_catalog(cls, key: str) -> "Planet":
        return cls(key=key, elements=planet_elements(key))

    def state_at(self, t_day: float, t0_day: float = 0.0) -> OrbitState:
        """
        Returns the heliocentric state at model day t_day.
        """
        state = orbit_state_at(self.elements, t_day, t0_day)
        self.last_state = state
        return state
