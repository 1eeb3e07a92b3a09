"""
===========================================================
reproduction.py
Last Updated: 2026-10-16
===========================================================
Maximum-likelihood estimation of the basic reproduction number
==============================================================

Estimates R0 from an incidence series and a serial-interval
distribution using the method of White & Pagano (2008):

    N_t ~ Poisson(R0 * sum_{i>=1} N_{t-i} w_i)

where w_i is the discretised serial interval. The MLE has a
closed form; a profile-likelihood interval is found with
scipy's root finder.

Example Usage:
    from icm_interventions.reproduction import estimate_r0_ml
    est = estimate_r0_ml(incidence, mean=4.7, sd=2.9)
    est.r0, est.ci_lower, est.ci_upper

Notes:
    - Time steps whose expected case mass is zero (no earlier
      cases to explain them) are treated as imported cases and
      left out of the likelihood.
    - Incidence may be non-integer (e.g. trial-averaged counts).
-----------------------------------------------------------
License: MIT
===========================================================
"""
import numpy as np
import warnings
from dataclasses import dataclass
from typing import Optional, Sequence
from scipy.optimize import brentq
from scipy.special import gammaln, xlogy
from scipy.stats import chi2, gamma


class EstimationError(ValueError):
    """The incidence series carries no information about R0"""


@dataclass(frozen=True)
class R0Estimate:
    """Point estimate and profile-likelihood interval for R0"""
    r0: float
    ci_lower: float
    ci_upper: float
    log_likelihood: float


def discretize_serial_interval(mean: float, sd: float,
                               truncate: Optional[int] = None) -> np.ndarray:
    """Discretise a gamma serial interval on unit time steps.
    Parameters:
    mean: float. Mean serial interval
    sd: float. Standard deviation of the serial interval
    truncate: int, optional. Largest lag kept; defaults to the 99.9% quantile

    Returns:
    weights: ndarray. weights[i] is the probability of lag i; weights[0] = 0
        and the weights sum to 1
    """
    if mean <= 0 or sd <= 0:
        raise ValueError("Serial interval mean and sd must be positive")
    shape = (mean / sd) ** 2
    scale = sd ** 2 / mean
    if truncate is None:
        truncate = int(np.ceil(gamma.ppf(0.999, shape, scale=scale)))
    truncate = max(int(truncate), 1)

    # mass of lag i is the probability of (i - 0.5, i + 0.5]
    cdf = gamma.cdf(np.arange(truncate + 1) + 0.5, shape, scale=scale)
    weights = np.diff(np.concatenate([[0.0], cdf]))
    weights[0] = 0.0
    total = weights.sum()
    if total <= 0:
        raise ValueError("Serial interval puts no mass on lags >= 1")
    return weights / total


def expected_case_mass(incidence: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """sum_{i>=1} N_{t-i} w_i for every t (R0 = 1 expectation)"""
    return np.convolve(incidence, weights)[: incidence.size]


def _log_likelihood(r: float, cases: np.ndarray, mass: np.ndarray) -> float:
    mu = r * mass
    return float(np.sum(xlogy(cases, mu) - mu - gammaln(cases + 1)))


def _profile_interval(cases: np.ndarray, mass: np.ndarray, r_hat: float,
                      ci_level: float, max_expansions: int = 60):
    """Bounds where the log-likelihood drops chi2(1)/2 below its maximum"""
    target = _log_likelihood(r_hat, cases, mass) - chi2.ppf(ci_level, 1) / 2

    def excess(r):
        return _log_likelihood(r, cases, mass) - target

    if r_hat == 0:
        lower = 0.0
    else:
        lo = r_hat / 2
        for _ in range(max_expansions):
            if excess(lo) < 0:
                break
            lo /= 2
        lower = brentq(excess, lo, r_hat) if excess(lo) < 0 else 0.0

    hi = max(2 * r_hat, 1.0)
    for _ in range(max_expansions):
        if excess(hi) < 0:
            break
        hi *= 2
    upper = brentq(excess, r_hat, hi)
    return lower, upper


def estimate_r0_ml(incidence: Sequence[float], mean: float, sd: float,
                   ci_level: float = 0.95,
                   truncate: Optional[int] = None) -> R0Estimate:
    """Maximum-likelihood R0 from an incidence series.
    Parameters:
    incidence: sequence of float. New cases per time step
    mean, sd: float. Serial-interval parameters (gamma distribution)
    ci_level: float. Coverage of the profile-likelihood interval
    truncate: int, optional. Largest serial-interval lag

    Returns:
    R0Estimate with the point estimate, interval and maximised log-likelihood

    Raises:
    ValueError for negative incidence or invalid serial-interval parameters,
    EstimationError when no time step can be explained by earlier cases
    """
    incidence = np.asarray(incidence, dtype=float)
    if incidence.ndim != 1:
        raise ValueError("incidence must be one-dimensional")
    if np.any(incidence < 0) or not np.all(np.isfinite(incidence)):
        raise ValueError("incidence must be finite and non-negative")

    weights = discretize_serial_interval(mean, sd, truncate=truncate)
    mass = expected_case_mass(incidence, weights)

    informative = mass > 0
    if not informative.any():
        raise EstimationError(
            "No time step has earlier cases to explain it; R0 is not identifiable"
        )
    cases, mass = incidence[informative], mass[informative]

    r_hat = float(cases.sum() / mass.sum())
    lower, upper = _profile_interval(cases, mass, r_hat, ci_level)

    if informative.sum() < 5:
        warnings.warn(
            f"Only {int(informative.sum())} informative time steps; "
            "confidence interval is approximate"
        )

    return R0Estimate(
        r0=r_hat,
        ci_lower=float(lower),
        ci_upper=float(upper),
        log_likelihood=_log_likelihood(r_hat, cases, mass),
    )
