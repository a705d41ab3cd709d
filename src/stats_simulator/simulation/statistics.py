"""Summary statistics and z-tests over simulated binomial results."""

import math
from typing import Optional, Sequence

import numpy as np

from stats_simulator.schemas import (
    ExperimentResult,
    SelectedBarStats,
    SimulationParams,
    SimulationStats,
)

# Abramowitz & Stegun 7.1.26, max absolute error ~1.5e-7
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def erf(x: float) -> float:
    """Rational approximation of the error function."""
    sign = -1.0 if x < 0 else 1.0
    x = abs(x)

    t = 1.0 / (1.0 + _P * x)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(
        -x * x
    )
    return sign * y


def normal_cdf(x: float, mean: float = 0.0, std_dev: float = 1.0) -> float:
    """Cumulative distribution function of a normal distribution."""
    return 0.5 * (1.0 + erf((x - mean) / (std_dev * math.sqrt(2.0))))


def z_score(observed: float, expected: float, std_dev: float) -> float:
    """Standardized distance of `observed` from `expected`; 0 when `std_dev` is 0."""
    if std_dev == 0:
        return 0.0
    return (observed - expected) / std_dev


def two_tailed_p_value(z: float) -> float:
    return 2.0 * (1.0 - normal_cdf(abs(z)))


def binomial_std_dev(params: SimulationParams) -> float:
    """Theoretical standard deviation of the success count of one experiment."""
    p = params.probability_of_success
    return math.sqrt(params.trials_per_experiment * p * (1.0 - p))


def expected_successes(params: SimulationParams) -> float:
    return params.probability_of_success * params.trials_per_experiment


def compute_statistics(
    results: Sequence[ExperimentResult], params: SimulationParams
) -> SimulationStats:
    """
    Compute summary statistics and a z-test of the sample mean.

    The z-test compares the observed mean success count against the
    theoretical binomial mean. By the Central Limit Theorem the sample mean
    of `n` experiments has standard error `sigma / sqrt(n)`, where `sigma`
    is the binomial standard deviation of a single experiment.

    Parameters
    ----------
    results : Sequence[ExperimentResult]
        The experiments completed so far.
    params : SimulationParams
        The current parameters. The expected value is always derived from
        these, even if the results were produced under other parameters.

    Returns
    -------
    SimulationStats
        All fields are zero when `results` is empty.
    """
    if len(results) == 0:
        return SimulationStats()

    successes = np.fromiter((r.successes for r in results), dtype=float)
    n = successes.size

    mean = float(successes.mean())
    # Population variance
    variance = float(successes.var())
    expected = expected_successes(params)
    standard_error = binomial_std_dev(params) / math.sqrt(n)
    z = z_score(mean, expected, standard_error)

    return SimulationStats(
        mean=mean,
        variance=variance,
        standard_deviation=math.sqrt(variance),
        min=float(successes.min()),
        max=float(successes.max()),
        expected_value=expected,
        z_score=z,
        p_value=two_tailed_p_value(z),
    )


def compute_selected_bar_stats(
    selected: Optional[int],
    results: Sequence[ExperimentResult],
    params: SimulationParams,
) -> Optional[SelectedBarStats]:
    """
    Score a single success count against the binomial distribution.

    Unlike `compute_statistics`, the z-score uses the theoretical standard
    deviation of one experiment directly, since it scores a single draw and
    not a sample mean.
    """
    if selected is None or len(results) == 0:
        return None

    frequency = sum(1 for r in results if r.successes == selected)
    z = z_score(selected, expected_successes(params), binomial_std_dev(params))

    return SelectedBarStats(
        successes=selected,
        frequency=frequency,
        z_score=z,
        p_value=two_tailed_p_value(z),
    )
