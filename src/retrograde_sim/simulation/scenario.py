from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from retrograde_sim.objects.planet import Planet, planet_keys
from retrograde_sim.simulation.engine import RetrogradeSeries, compute_series

# Named observer/target pairs offered as quick picks
PRESETS: Dict[str, Tuple[str, str]] = {
    "earth-mars": ("Earth", "Mars"),
    "earth-venus": ("Earth", "Venus"),
    "earth-jupiter": ("Earth", "Jupiter"),
    "earth-saturn": ("Earth", "Saturn"),
}


def preset_to_config(preset: str) -> Optional[Tuple[str, str]]:
    """(observer, target) for a named preset, None for anything else (including "custom")."""
    return PRESETS.get(preset)


def resolve_distinct_pair(observer: str, target: str) -> Tuple[str, str, bool]:
    """
    Make sure observer and target differ.

    Returns:
        (observer, target, adjusted). When both are the same, target is reset
        to the first catalog planet that is not the observer.
    """
    if observer != target:
        return observer, target, False
    for key in planet_keys():
        if key != observer:
            return observer, key, True
    raise ValueError("Planet catalog needs at least two bodies.")


@dataclass
class Scenario:
    """
    One observer/target pair and its sampling window.
    Keep this pure: just validated data, no stepping logic.
    """
    name: str
    observer: Planet
    target: Planet
    window_start_day: float = 0.0
    window_months: float = 24.0
    t0_day: float = 0.0

    def __post_init__(self):
        if self.observer.key == self.target.key:
            raise ValueError(f"Observer and target must be different. Got: {self.observer.key}")
        if not math.isfinite(self.window_start_day):
            raise ValueError(f"Window start must be finite. Got: {self.window_start_day}")
        if not (math.isfinite(self.window_months) and self.window_months > 0):
            raise ValueError(f"Window length must be positive. Got: {self.window_months} months")
        if not math.isfinite(self.t0_day):
            raise ValueError(f"Reference time must be finite. Got: {self.t0_day}")
        self.observer.elements.validate()
        self.target.elements.validate()

    @classmethod
    def from_catalog(
        cls,
        observer: str,
        target: str,
        window_start_day: float = 0.0,
        window_months: float = 24.0,
        t0_day: float = 0.0,
    ) -> "Scenario":
        return cls(
            name=f"{observer} -> {target}",
            observer=Planet.from_catalog(observer),
            target=Planet.from_catalog(target),
            window_start_day=window_start_day,
            window_months=window_months,
            t0_day=t0_day,
        )

    def run(self) -> RetrogradeSeries:
        return compute_series(
            self.observer.elements,
            self.target.elements,
            self.window_start_day,
            self.window_months,
            t0_day=self.t0_day,
            observer_label=self.observer.key,
            target_label=self.target.key,
        )
