"""
===========================================================
runner.py
Last Updated: 2026-10-16
===========================================================

Description:
    Runs one grid point: maps a SimulationConfig onto the ICM
    engine inputs, executes trial_count stochastic trials and
    returns the trial-averaged per-step table.

    Defines:
        - engine_inputs(): SimulationConfig -> (ParamICM, InitICM, ControlICM)
        - run_simulation(): trial-mean SimulationResult table
        - run_trials(): every trial, long format

Notes:
    - Invalid configurations are rejected by the engine with a
      ValueError, which is not caught here.
-----------------------------------------------------------
License: MIT
===========================================================
"""
import logging
from typing import Optional, Tuple

import pandas as pd

from .icm import ControlICM, InitICM, ParamICM, run_icm
from .settings import SimulationConfig

LOGGER = logging.getLogger(__name__)

RESULT_COLUMNS = {
    "time": "time_step",
    "s_num": "susceptible",
    "i_num": "infected",
    "r_num": "recovered",
    "si_flow": "new_infections",
    "ir_flow": "recoveries",
    "a_flow": "arrivals",
    "num": "population",
}


def engine_inputs(config: SimulationConfig,
                  seed: Optional[int] = None) -> Tuple[ParamICM, InitICM, ControlICM]:
    """Translate a SimulationConfig into ICM parameter/init/control objects"""
    param = ParamICM(
        inf_prob=config.infection_probability,
        act_rate=config.exposure_rate,
        rec_rate=config.recovery_rate,
        a_rate=config.arrival_rate,
        ds_rate=config.departure_rates.susceptible,
        di_rate=config.departure_rates.infected,
        dr_rate=config.departure_rates.recovered,
    )
    init = InitICM(s_num=config.initial_susceptible, i_num=config.initial_infected, r_num=0)
    control = ControlICM(
        type="SIR",
        nsteps=config.step_count,
        nsims=config.trial_count,
        seed=seed if seed is not None else config.seed,
    )
    return param, init, control


def _tidy(df: pd.DataFrame) -> pd.DataFrame:
    out = df.rename(columns=RESULT_COLUMNS)
    out["departures"] = df["ds_flow"] + df["di_flow"] + df["dr_flow"]
    columns = ["time_step", "susceptible", "infected", "recovered", "new_infections",
               "recoveries", "arrivals", "departures", "population"]
    if "sim" in out.columns:
        columns = ["trial"] + columns
        out = out.rename(columns={"sim": "trial"})
    return out[columns].reset_index(drop=True)


def run_simulation(config: SimulationConfig, seed: Optional[int] = None) -> pd.DataFrame:
    """Run trial_count stochastic trials and average them per time step.
    Parameters:
    config: SimulationConfig. One grid point
    seed: int, optional. Overrides config.seed

    Returns:
    DataFrame with one row per time step: time_step, susceptible, infected,
    recovered, new_infections, recoveries, arrivals, departures, population
    """
    LOGGER.debug("Running ICM: exposure_rate=%s infection_probability=%s trials=%d",
                 config.exposure_rate, config.infection_probability, config.trial_count)
    sim = run_icm(*engine_inputs(config, seed))
    return _tidy(sim.as_data_frame(out="mean"))


def run_trials(config: SimulationConfig, seed: Optional[int] = None) -> pd.DataFrame:
    """Same as run_simulation but returns every trial with a 'trial' column"""
    sim = run_icm(*engine_inputs(config, seed))
    return _tidy(sim.as_data_frame(out="vals"))
