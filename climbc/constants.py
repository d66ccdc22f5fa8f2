# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Module to contain generally useful constants."""

#: Number of evenly spaced bins used to build empirical distributions. A
#: resolution of 100 is sufficient for daily climate series.
DEFAULT_N_QUANTILES = 100

#: Bound applied symmetrically to the multiplicative factor in relative
#: quantile delta mapping.
MAX_SCALE_FACTOR = 10.0
