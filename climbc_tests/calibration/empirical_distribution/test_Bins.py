# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Unit tests for the Bins class."""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from climbc.calibration.empirical_distribution import Bins


def test_edges():
    """Test edges are evenly spaced from min, stopping one bin width short
    of max."""
    bins = Bins(0.0, 10.0, 5)
    assert len(bins) == 5
    assert list(bins) == [0.0, 2.0, 4.0, 6.0, 8.0]
    np.testing.assert_array_equal(np.asarray(bins), [0.0, 2.0, 4.0, 6.0, 8.0])


def test_default_n_quantiles():
    """Test the default number of edges."""
    assert len(Bins(0.0, 1.0)) == 100


@pytest.mark.parametrize("minimum, maximum", [(-3.5, 7.25), (0.0, 1e-3), (2.0, 2.0)])
def test_edge_formula(minimum, maximum):
    """Test the first edge is the minimum, the last edge follows the edge
    formula and edges are non-decreasing."""
    n_quantiles = 100
    bins = Bins(minimum, maximum, n_quantiles)
    edges = np.asarray(bins)
    assert bins[0] == minimum
    assert bins[n_quantiles - 1] == pytest.approx(
        minimum + (maximum - minimum) / n_quantiles * (n_quantiles - 1)
    )
    assert np.all(np.diff(edges) >= 0)


def test_negative_index():
    """Test negative indices count from the end."""
    bins = Bins(0.0, 4.0, 4)
    assert bins[-1] == 3.0
    assert bins[-4] == 0.0


def test_slice():
    """Test slicing returns an array of edges."""
    bins = Bins(0.0, 4.0, 4)
    np.testing.assert_array_equal(bins[1:3], [1.0, 2.0])


def test_reversed():
    """Test the sequence protocol supports reverse iteration."""
    assert list(reversed(Bins(0.0, 4.0, 4))) == [3.0, 2.0, 1.0, 0.0]


@pytest.mark.parametrize("index", [4, -5])
def test_index_out_of_range(index):
    """Test an IndexError is raised outside of the edges."""
    with pytest.raises(IndexError, match="out of range"):
        Bins(0.0, 4.0, 4)[index]


def test_immutable():
    """Test the limits cannot be changed after construction."""
    bins = Bins(0.0, 4.0, 4)
    with pytest.raises(FrozenInstanceError):
        bins.max = 10.0


@pytest.mark.parametrize("n_quantiles", [1, 0, -1])
def test_invalid_n_quantiles(n_quantiles):
    """Test a ValueError is raised with fewer than two edges."""
    with pytest.raises(ValueError, match="n_quantiles must be at least 2"):
        Bins(0.0, 1.0, n_quantiles)


def test_nan_limits():
    """Test undefined limits give undefined edges."""
    bins = Bins(np.nan, np.nan, 10)
    assert np.all(np.isnan(np.asarray(bins)))
