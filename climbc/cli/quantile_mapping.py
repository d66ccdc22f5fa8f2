#!/usr/bin/env python
# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""CLI to apply quantile mapping"""

from climbc import cli


@cli.clizefy
@cli.with_output
def process(
    reference_cube: cli.inputcube,
    control_cube: cli.inputcube,
    forecast_cube: cli.inputcube,
    *,
    change_type: str = "absolute",
    n_quantiles: int = 100,
):
    """Bias correct a forecast by quantile mapping.

    At each grid point the forecast values are located within the distribution
    of the control and replaced with the values at the same positions within
    the reference distribution. Distributions are built from the values along
    the time dimension of each input.

    Args:
        reference_cube:
            Reference data, e.g. observations, for the historical period.
        control_cube:
            Model data for the same historical period.
        forecast_cube:
            Model data to correct.
        change_type:
            "absolute" for variables such as temperature, or "relative" for
            non-negative variables such as precipitation.
        n_quantiles:
            Number of bins used for each empirical distribution.

    Returns:
        Bias corrected forecast cube.
    """
    from climbc.calibration.quantile_mapping import QuantileMapping

    plugin = QuantileMapping(change_type=change_type, n_quantiles=n_quantiles)
    return plugin(reference_cube, control_cube, forecast_cube)
