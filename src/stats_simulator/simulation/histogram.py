"""Binning of per-experiment success counts into histogram data."""

import math
from enum import Enum
from typing import Sequence

import numpy as np

from stats_simulator.config import MAX_HISTOGRAM_BINS
from stats_simulator.schemas import ExperimentResult, HistogramData


class BinningPolicy(str, Enum):
    UNLIMITED = "unlimited"
    CAPPED = "capped"


def compute_histogram(
    results: Sequence[ExperimentResult],
    policy: BinningPolicy = BinningPolicy.UNLIMITED,
    max_bins: int = MAX_HISTOGRAM_BINS,
) -> HistogramData:
    """
    Count how many experiments produced each number of successes.

    Parameters
    ----------
    results : Sequence[ExperimentResult]
        The experiments to aggregate.
    policy : BinningPolicy, optional
        `UNLIMITED` emits one bin per integer between the observed minimum and
        maximum, including empty ones. `CAPPED` groups values into at most
        `max_bins` equal-width ranges labelled "start-end".
    max_bins : int, optional
        Upper bound on the number of bins for the capped policy.

    Returns
    -------
    HistogramData
        Labels and frequencies in ascending order of success count.
    """
    if len(results) == 0:
        return HistogramData()

    counts = np.fromiter((r.successes for r in results), dtype=np.int64)
    low = int(counts.min())
    high = int(counts.max())

    if BinningPolicy(policy) is BinningPolicy.CAPPED:
        return _capped_histogram(counts, low, high, max_bins)

    frequencies = np.bincount(counts - low, minlength=high - low + 1)
    return HistogramData(
        labels=[str(value) for value in range(low, high + 1)],
        data=[int(f) for f in frequencies],
    )


def _capped_histogram(
    counts: np.ndarray, low: int, high: int, max_bins: int
) -> HistogramData:
    span = high - low + 1
    bin_count = min(max_bins, span)
    bin_width = math.ceil(span / bin_count)

    bin_indices = (counts - low) // bin_width
    frequencies = np.bincount(bin_indices, minlength=bin_count)

    labels = []
    for i in range(bin_count):
        start = low + i * bin_width
        labels.append(f"{start}-{start + bin_width - 1}")

    return HistogramData(labels=labels, data=[int(f) for f in frequencies])
