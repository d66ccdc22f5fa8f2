# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Empirical distributions built from evenly spaced bins.

The cumulative distributions produced here are counts rather than
probabilities. Quantile mapping only depends on the relative position of a
value within a distribution, so the counts are never normalised.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy import ndarray

from climbc.constants import DEFAULT_N_QUANTILES


@dataclass(frozen=True)
class Bins(Sequence):
    """Evenly spaced bin edges over [min, max).

    Edges are evaluated on access rather than stored. Edge i is
    min + (max - min) / n_quantiles * i for i in range(n_quantiles), so the
    final edge sits one bin width below max.

    Args:
        min:
            Value of the first edge.
        max:
            Upper limit of the range spanned by the edges.
        n_quantiles:
            Number of edges, at least 2.
    """

    min: float
    max: float
    n_quantiles: int = DEFAULT_N_QUANTILES

    def __post_init__(self):
        if self.n_quantiles < 2:
            raise ValueError(
                f"n_quantiles must be at least 2, got {self.n_quantiles}"
            )

    @property
    def width(self) -> float:
        """Spacing between adjacent edges."""
        return (self.max - self.min) / self.n_quantiles

    def __len__(self) -> int:
        return self.n_quantiles

    def __getitem__(self, index: Union[int, slice]) -> Union[float, ndarray]:
        if isinstance(index, slice):
            return self.min + self.width * np.arange(self.n_quantiles)[index]
        if index < 0:
            index += self.n_quantiles
        if not 0 <= index < self.n_quantiles:
            raise IndexError(f"bin index {index} out of range")
        return self.min + self.width * index

    def __array__(self, dtype=None, copy=None) -> ndarray:
        edges = self[:]
        return edges if dtype is None else edges.astype(dtype)


def compute_bins(
    sample: Union[Sequence, ndarray],
    n_quantiles: int = DEFAULT_N_QUANTILES,
    floor_at_zero: bool = False,
) -> Bins:
    """Build bins spanning the range of a sample.

    Args:
        sample:
            Values defining the range.
        n_quantiles:
            Number of bin edges.
        floor_at_zero:
            If True the first edge is set to 0 whatever the sample minimum.
            Used for quantities which cannot be negative, e.g. precipitation.

    Returns:
        Bins over the sample range. An empty sample gives NaN limits, which
        propagate through any calculation that uses the bins.
    """
    sample = np.asarray(sample, dtype=np.float64)
    if sample.size == 0:
        return Bins(np.nan, np.nan, n_quantiles)
    minimum = 0.0 if floor_at_zero else float(np.min(sample))
    return Bins(minimum, float(np.max(sample)), n_quantiles)


def compute_cdf(sample: Union[Sequence, ndarray], bins: Bins) -> ndarray:
    """Calculate the cumulative distribution of a sample as counts per bin.

    Entry i counts the values strictly less than edge i. The final entry
    counts every value, so it always equals the sample size.

    Args:
        sample:
            Values to count.
        bins:
            Bin edges to count against.

    Returns:
        Non-decreasing array of counts, one per bin edge.
    """
    sample = np.asarray(sample, dtype=np.float64).ravel()
    edges = np.asarray(bins)[:-1]
    cdf = np.empty(len(bins), dtype=np.float64)
    # NaN values sort last so are never counted below a finite edge.
    below = np.searchsorted(np.sort(sample), edges, side="left")
    cdf[:-1] = np.where(np.isnan(edges), 0, below)
    cdf[-1] = sample.size
    return cdf
