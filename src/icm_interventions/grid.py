"""
===========================================================
grid.py
Last Updated: 2026-10-16
===========================================================

Description:
    Cartesian grid over the two intervention levers
    (exposure rate, infection probability). Each grid point
    is a SimulationConfig copied from a shared base config.

Example Usage:
    from icm_interventions.grid import ParameterGrid
    grid = ParameterGrid([2, 5, 10], [0.01, 0.05])
    for config in grid:
        ...

Notes:
    - Iteration is lazy and restartable: every iter() walks
      the grid again from the first point.
    - Default order: outer loop over exposure rates, inner
      loop over infection probabilities.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from dataclasses import replace
from itertools import product
from typing import Iterator, List, Optional, Sequence, Tuple

from .settings import DEFAULT_SETTINGS, SimulationConfig

LEVERS = ("exposure_rate", "infection_probability")


class ParameterGrid:
    """Full product of exposure rates and infection probabilities"""

    def __init__(self,
                 exposure_rates: Sequence[float],
                 infection_probabilities: Sequence[float],
                 base: Optional[SimulationConfig] = None,
                 outer: str = "exposure_rate"):
        self.exposure_rates = tuple(float(x) for x in exposure_rates)
        self.infection_probabilities = tuple(float(p) for p in infection_probabilities)
        if not self.exposure_rates or not self.infection_probabilities:
            raise ValueError("Both lever value sets must be non-empty")
        if outer not in LEVERS:
            raise ValueError(f"outer must be one of {LEVERS}, got {outer!r}")
        self.base = base if base is not None else DEFAULT_SETTINGS.base_config()
        self.outer = outer

    def _pairs(self) -> Iterator[Tuple[float, float]]:
        if self.outer == "exposure_rate":
            return product(self.exposure_rates, self.infection_probabilities)
        return ((e, p) for p, e in product(self.infection_probabilities, self.exposure_rates))

    def points(self) -> List[Tuple[float, float]]:
        """(exposure_rate, infection_probability) pairs in iteration order"""
        return list(self._pairs())

    def reordered(self) -> "ParameterGrid":
        """Same grid with the loop order swapped"""
        outer = LEVERS[1] if self.outer == LEVERS[0] else LEVERS[0]
        return ParameterGrid(self.exposure_rates, self.infection_probabilities,
                             base=self.base, outer=outer)

    def __iter__(self) -> Iterator[SimulationConfig]:
        return (replace(self.base, exposure_rate=e, infection_probability=p)
                for e, p in self._pairs())

    def __len__(self) -> int:
        return len(self.exposure_rates) * len(self.infection_probabilities)

    def __repr__(self) -> str:
        return (f"ParameterGrid(exposure_rates={list(self.exposure_rates)}, "
                f"infection_probabilities={list(self.infection_probabilities)}, "
                f"outer={self.outer!r})")
