"""
===========================================================
icm.py
Last Updated: 2026-10-16
===========================================================
Stochastic Individual Contact Model (ICM)
==========================================

Module implements a discrete-time, individual-based
compartmental simulator for SI / SIS / SIR epidemics in an
open population. Each time step captures:
- Random contacts (acts) between pairs of living individuals
- Stochastic transmission across discordant S-I acts
- Recovery (SIR) or loss of infection (SIS)
- Compartment-specific departures and susceptible arrivals

Example Usage:
    from icm_interventions.icm import ParamICM, InitICM, ControlICM, run_icm
    param = ParamICM(inf_prob=0.05, act_rate=10, rec_rate=0.05)
    init = InitICM(s_num=997, i_num=3)
    control = ControlICM(type="SIR", nsteps=100, nsims=10)
    sim = run_icm(param, init, control)
    df = sim.as_data_frame(out="mean")

Notes:
    - Time step 1 records the initial state; all flows are 0 there.
    - Trials are independent draws from one numpy Generator, so a
      fixed seed reproduces the whole multi-trial result.
-----------------------------------------------------------
License: MIT
===========================================================
"""
import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Dict, Optional
from enum import Enum


class DiseaseState(Enum):
    """Enumeration for ICM disease states"""
    SUSCEPTIBLE = 0
    INFECTED = 1
    RECOVERED = 2


_S = DiseaseState.SUSCEPTIBLE.value
_I = DiseaseState.INFECTED.value
_R = DiseaseState.RECOVERED.value

MODEL_TYPES = ("SI", "SIS", "SIR")

EPI_KEYS = (
    "s_num", "i_num", "r_num", "num",
    "si_flow", "ir_flow", "is_flow",
    "a_flow", "ds_flow", "di_flow", "dr_flow",
)


def _check_rate(name: str, value: float, upper: Optional[float] = None):
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    if upper is not None and value > upper:
        raise ValueError(f"{name} must be <= {upper}, got {value}")


@dataclass
class ParamICM:
    """Epidemic parameters for the ICM.
    Attributes:
    inf_prob: float. Probability of transmission per S-I act
    act_rate: float. Average number of acts per person per time step
    rec_rate: float. Per-step probability an infected individual recovers
    a_rate: float. Per-step arrivals per living individual
    ds_rate, di_rate, dr_rate: float. Per-step departure probabilities for
        susceptible, infected and recovered individuals
    """
    inf_prob: float
    act_rate: float
    rec_rate: float = 0.0
    a_rate: float = 0.0
    ds_rate: float = 0.0
    di_rate: float = 0.0
    dr_rate: float = 0.0

    def __post_init__(self):
        _check_rate("inf_prob", self.inf_prob, upper=1.0)
        _check_rate("act_rate", self.act_rate)
        _check_rate("rec_rate", self.rec_rate, upper=1.0)
        _check_rate("a_rate", self.a_rate, upper=1.0)
        _check_rate("ds_rate", self.ds_rate, upper=1.0)
        _check_rate("di_rate", self.di_rate, upper=1.0)
        _check_rate("dr_rate", self.dr_rate, upper=1.0)


@dataclass
class InitICM:
    """Initial compartment counts"""
    s_num: int
    i_num: int
    r_num: int = 0

    def __post_init__(self):
        for name in ("s_num", "i_num", "r_num"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    @property
    def num(self) -> int:
        return self.s_num + self.i_num + self.r_num


@dataclass
class ControlICM:
    """Simulation controls: model type, number of steps and trials"""
    type: str = "SIR"
    nsteps: int = 100
    nsims: int = 1
    seed: Optional[int] = None

    def __post_init__(self):
        if self.type not in MODEL_TYPES:
            raise ValueError(f"type must be one of {MODEL_TYPES}, got {self.type!r}")
        if self.nsteps < 1:
            raise ValueError(f"nsteps must be >= 1, got {self.nsteps}")
        if self.nsims < 1:
            raise ValueError(f"nsims must be >= 1, got {self.nsims}")


@dataclass
class ICMResult:
    """Multi-trial output of run_icm.
    Attributes:
    param, init, control: the inputs the run was made with
    epi: Dict[str, np.ndarray]. One (nsteps, nsims) array per epidemic
        variable (compartment counts and flows)
    """
    param: ParamICM
    init: InitICM
    control: ControlICM
    epi: Dict[str, np.ndarray]

    def as_data_frame(self, out: str = "mean") -> pd.DataFrame:
        """Extract a tidy per-step table.
        Parameters:
        out: str. "mean" or "sd" for trial-averaged / trial standard
            deviation tables, "vals" for every trial in long format
            with a 1-based 'sim' column.
        """
        time = np.arange(1, self.control.nsteps + 1)
        if out == "mean":
            data = {key: self.epi[key].mean(axis=1) for key in EPI_KEYS}
            return pd.DataFrame({"time": time, **data})
        if out == "sd":
            if self.control.nsims > 1:
                data = {key: self.epi[key].std(axis=1, ddof=1) for key in EPI_KEYS}
            else:
                data = {key: np.zeros(len(time)) for key in EPI_KEYS}
            return pd.DataFrame({"time": time, **data})
        if out == "vals":
            frames = []
            for sim in range(self.control.nsims):
                data = {key: self.epi[key][:, sim] for key in EPI_KEYS}
                frames.append(pd.DataFrame({"sim": sim + 1, "time": time, **data}))
            return pd.concat(frames, ignore_index=True)
        raise ValueError("out must be 'mean', 'sd' or 'vals'")


def _validate(init: InitICM, control: ControlICM):
    if control.type != "SIR" and init.r_num > 0:
        raise ValueError(f"r_num must be 0 for {control.type} models")


def _infection_step(status: np.ndarray, param: ParamICM,
                    rng: np.random.Generator) -> np.ndarray:
    """Return the indices of susceptibles infected this step.
    Acts are drawn as round(act_rate * n / 2) random pairs among the
    living population; self-pairs are discarded.
    """
    n_alive = status.size
    n_acts = int(round(param.act_rate * n_alive / 2))
    if n_acts == 0 or n_alive < 2:
        return np.empty(0, dtype=int)
    if not ((status == _I).any() and (status == _S).any()):
        return np.empty(0, dtype=int)

    p1 = rng.integers(0, n_alive, n_acts)
    p2 = rng.integers(0, n_alive, n_acts)
    keep = p1 != p2
    p1, p2 = p1[keep], p2[keep]

    s1, s2 = status[p1], status[p2]
    discordant = ((s1 == _S) & (s2 == _I)) | ((s1 == _I) & (s2 == _S))
    if not discordant.any():
        return np.empty(0, dtype=int)

    p1, p2, s1 = p1[discordant], p2[discordant], s1[discordant]
    susceptible = np.where(s1 == _S, p1, p2)
    transmitted = rng.random(susceptible.size) < param.inf_prob
    # a susceptible can only be infected once per step
    return np.unique(susceptible[transmitted])


def _record(epi: Dict[str, np.ndarray], step: int, status: np.ndarray):
    epi["s_num"][step] = np.count_nonzero(status == _S)
    epi["i_num"][step] = np.count_nonzero(status == _I)
    epi["r_num"][step] = np.count_nonzero(status == _R)
    epi["num"][step] = status.size


def _simulate_trial(param: ParamICM, init: InitICM, control: ControlICM,
                    rng: np.random.Generator) -> Dict[str, np.ndarray]:
    """Run one stochastic trial and return a time series per variable"""
    epi = {key: np.zeros(control.nsteps, dtype=int) for key in EPI_KEYS}
    status = np.concatenate([
        np.full(init.s_num, _S, dtype=np.int8),
        np.full(init.i_num, _I, dtype=np.int8),
        np.full(init.r_num, _R, dtype=np.int8),
    ])
    _record(epi, 0, status)  # record initial state

    departure_probs = np.array([param.ds_rate, param.di_rate, param.dr_rate])

    for step in range(1, control.nsteps):
        n_start = status.size
        infected_at_start = np.flatnonzero(status == _I)

        # transmission dynamics
        newly_infected = _infection_step(status, param, rng)
        status[newly_infected] = _I
        epi["si_flow"][step] = newly_infected.size

        # recovery of those infectious at the start of the step
        if control.type != "SI" and infected_at_start.size > 0:
            recovering = infected_at_start[
                rng.random(infected_at_start.size) < param.rec_rate
            ]
            if control.type == "SIR":
                status[recovering] = _R
                epi["ir_flow"][step] = recovering.size
            else:
                status[recovering] = _S
                epi["is_flow"][step] = recovering.size

        # departures
        if departure_probs.any() and status.size > 0:
            leaving = rng.random(status.size) < departure_probs[status]
            epi["ds_flow"][step] = np.count_nonzero(leaving & (status == _S))
            epi["di_flow"][step] = np.count_nonzero(leaving & (status == _I))
            epi["dr_flow"][step] = np.count_nonzero(leaving & (status == _R))
            status = status[~leaving]

        # arrivals enter as susceptible
        if param.a_rate > 0 and n_start > 0:
            n_arrivals = int(rng.binomial(n_start, param.a_rate))
            if n_arrivals:
                status = np.concatenate([status, np.full(n_arrivals, _S, dtype=np.int8)])
            epi["a_flow"][step] = n_arrivals

        _record(epi, step, status)

    return epi


def run_icm(param: ParamICM, init: InitICM, control: ControlICM) -> ICMResult:
    """Run control.nsims independent trials of the ICM.
    Parameters:
    param: ParamICM. Transmission, recovery and demographic rates
    init: InitICM. Initial compartment counts
    control: ControlICM. Model type, number of time steps and trials

    Returns:
    ICMResult holding a (nsteps, nsims) array per epidemic variable
    """
    _validate(init, control)
    rng = np.random.default_rng(control.seed)

    trials = [_simulate_trial(param, init, control, rng)
              for _ in range(control.nsims)]
    epi = {key: np.column_stack([trial[key] for trial in trials])
           for key in EPI_KEYS}
    return ICMResult(param=param, init=init, control=control, epi=epi)
