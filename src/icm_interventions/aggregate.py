"""
===========================================================
aggregate.py
Last Updated: 2026-10-16
===========================================================

Description:
    Summary statistics for one simulated grid point:
    total cases, peak prevalence and an R0 estimate from the
    growth phase of the outbreak (up to the prevalence peak).

    The R0 estimate is a small sum type:
        - Estimated(value, ci_lower, ci_upper)
        - Missing(reason)
    so degenerate outbreaks never show up as a fake number.

Example Usage:
    from icm_interventions.aggregate import summarize_run
    summary = summarize_run(result, config)
    summary.to_record()
-----------------------------------------------------------
License: MIT
===========================================================
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Union

import numpy as np
import pandas as pd

from .reproduction import EstimationError, estimate_r0_ml
from .settings import DEFAULT_SERIAL_INTERVAL, SerialInterval, SimulationConfig

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Estimated:
    value: float
    ci_lower: float
    ci_upper: float


@dataclass(frozen=True)
class Missing:
    reason: str


ReproductionEstimate = Union[Estimated, Missing]


@dataclass(frozen=True)
class GridSummary:
    """Outbreak summary for one (exposure_rate, infection_probability) pair"""
    exposure_rate: float
    infection_probability: float
    total_cases: int
    peak_prevalence: int
    peak_time: int
    estimated_r0: ReproductionEstimate

    def to_record(self) -> Dict[str, float]:
        """Flatten to a dict; a missing R0 becomes NaN"""
        if isinstance(self.estimated_r0, Estimated):
            r0, lo, hi = (self.estimated_r0.value, self.estimated_r0.ci_lower,
                          self.estimated_r0.ci_upper)
        else:
            r0 = lo = hi = np.nan
        return {
            "exposure_rate": self.exposure_rate,
            "infection_probability": self.infection_probability,
            "total_cases": self.total_cases,
            "peak_prevalence": self.peak_prevalence,
            "peak_time": self.peak_time,
            "estimated_r0": r0,
            "r0_ci_lower": lo,
            "r0_ci_upper": hi,
        }


def growth_phase(result: pd.DataFrame) -> pd.DataFrame:
    """Rows up to and including the first prevalence peak"""
    peak_idx = int(np.argmax(result["infected"].to_numpy()))
    return result.iloc[: peak_idx + 1]


def estimate_growth_r0(incidence: np.ndarray,
                       serial_interval: SerialInterval = DEFAULT_SERIAL_INTERVAL
                       ) -> ReproductionEstimate:
    """R0 from growth-phase incidence, Missing when there is nothing to fit"""
    incidence = np.asarray(incidence, dtype=float)
    if incidence.sum() <= 0:
        return Missing("no infections in growth phase")
    try:
        est = estimate_r0_ml(incidence, mean=serial_interval.mean, sd=serial_interval.sd)
    except EstimationError as e:
        LOGGER.warning("R0 not estimated: %s", e)
        return Missing(str(e))
    return Estimated(value=est.r0, ci_lower=est.ci_lower, ci_upper=est.ci_upper)


def summarize_run(result: pd.DataFrame, config: SimulationConfig,
                  serial_interval: SerialInterval = DEFAULT_SERIAL_INTERVAL) -> GridSummary:
    """Summarise one trial-averaged run.
    Parameters:
    result: DataFrame. Output of run_simulation (time_step, infected, new_infections, ...)
    config: SimulationConfig. The grid point the result came from
    serial_interval: SerialInterval. Passed to the R0 estimator

    Returns:
    GridSummary
    """
    infected = result["infected"].to_numpy(dtype=float)
    peak_idx = int(np.argmax(infected))
    growth = growth_phase(result)

    return GridSummary(
        exposure_rate=config.exposure_rate,
        infection_probability=config.infection_probability,
        total_cases=int(round(result["new_infections"].sum())),
        peak_prevalence=int(round(infected[peak_idx])),
        peak_time=int(result["time_step"].iloc[peak_idx]),
        estimated_r0=estimate_growth_r0(growth["new_infections"].to_numpy(), serial_interval),
    )


def summaries_to_frame(summaries: Iterable[GridSummary]) -> pd.DataFrame:
    """Tidy table with one row per grid point, sorted by the two levers"""
    df = pd.DataFrame.from_records([s.to_record() for s in summaries])
    if df.empty:
        return df
    return df.sort_values(["exposure_rate", "infection_probability"]).reset_index(drop=True)
