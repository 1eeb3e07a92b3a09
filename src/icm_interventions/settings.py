"""
===============================================================================
settings.py
Last Updated: 2026-10-16
===============================================================================
Simulation and sweep settings for the intervention experiments

Holds the per-run configuration handed to the ICM engine and the
session-wide defaults for population, demography, simulation control and
the serial interval used when estimating R0.

All rates are per time step (one step = one day). Probabilities lie in [0, 1].

References:
    - Nishiura et al. (2020): serial interval of COVID-19, mean 4.7 days,
      sd 2.9 days
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class DepartureRates:
    """Per-step departure probabilities by compartment"""
    susceptible: float = 0.0
    infected: float = 0.0
    recovered: float = 0.0


@dataclass(frozen=True)
class SerialInterval:
    """Gamma-distributed serial interval (days) for R0 estimation"""
    mean: float = 4.7
    sd: float = 2.9


@dataclass
class SimulationConfig:
    """
    Configuration for one grid point of the intervention sweep.

    The two intervention levers are exposure_rate (acts per person per step,
    lowered by social distancing) and infection_probability (per-act
    transmission probability, lowered by masks and hygiene). Everything
    else is held fixed across the grid.

    At initialisation initial_infected individuals are infected and the
    remainder of population_size is susceptible.
    """

    # ==================== Intervention levers ====================================
    exposure_rate: float = 10.0
    infection_probability: float = 0.05

    # ==================== Population & natural history ===========================
    population_size: int = 1000
    initial_infected: int = 3
    recovery_rate: float = 0.05     # 1/20 days infectious period

    # ==================== Demography (open population) ===========================
    arrival_rate: float = 0.0
    departure_rates: DepartureRates = field(default_factory=DepartureRates)

    # ==================== Simulation control =====================================
    step_count: int = 100
    trial_count: int = 10
    seed: Optional[int] = None

    @property
    def initial_susceptible(self) -> int:
        return self.population_size - self.initial_infected


@dataclass
class SweepSettings:
    """Values shared by every grid point in a sweep"""
    population_size: int = 1000
    initial_infected: int = 3
    recovery_rate: float = 0.05
    arrival_rate: float = 0.0
    departure_rates: DepartureRates = field(default_factory=DepartureRates)
    step_count: int = 100
    trial_count: int = 10
    serial_interval: SerialInterval = field(default_factory=SerialInterval)
    seed: Optional[int] = None

    def base_config(self, exposure_rate: float = 10.0,
                    infection_probability: float = 0.05) -> SimulationConfig:
        """Build the SimulationConfig skeleton the parameter grid fills in"""
        return SimulationConfig(
            exposure_rate=exposure_rate,
            infection_probability=infection_probability,
            population_size=self.population_size,
            initial_infected=self.initial_infected,
            recovery_rate=self.recovery_rate,
            arrival_rate=self.arrival_rate,
            departure_rates=self.departure_rates,
            step_count=self.step_count,
            trial_count=self.trial_count,
        )


# Narrative defaults
DEFAULT_SERIAL_INTERVAL = SerialInterval()
DEFAULT_SETTINGS = SweepSettings(seed=2020)
