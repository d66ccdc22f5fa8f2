# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Fixtures for quantile mapping plugin tests."""

from datetime import datetime

import numpy as np
import pytest

from climbc.synthetic_data.set_up_test_cubes import set_up_time_series_cube

RNG = np.random.default_rng(0)

ATTRIBUTES = {"title": "Regional Climate Model Projection"}


@pytest.fixture
def reference_cube():
    """Reference air temperatures over 40 days on a 2x3 grid."""
    data = RNG.normal(283.0, 4.0, (40, 2, 3)).astype(np.float32)
    return set_up_time_series_cube(data, start_time=datetime(1991, 1, 1))


@pytest.fixture
def control_cube():
    """Model air temperatures over the reference period, biased warm."""
    data = RNG.normal(285.0, 5.0, (40, 2, 3)).astype(np.float32)
    return set_up_time_series_cube(
        data, start_time=datetime(1991, 1, 1), attributes=ATTRIBUTES
    )


@pytest.fixture
def forecast_cube():
    """Model air temperatures over 30 days of a future period."""
    data = RNG.normal(287.0, 5.0, (30, 2, 3)).astype(np.float32)
    return set_up_time_series_cube(
        data, start_time=datetime(2051, 1, 1), attributes=ATTRIBUTES
    )


@pytest.fixture
def precipitation_cubes():
    """Reference, control and forecast precipitation accumulations with many
    dry days."""
    cubes = []
    for shape, scale, start in [
        ((40, 2, 2), 2.0, datetime(1991, 1, 1)),
        ((40, 2, 2), 3.0, datetime(1991, 1, 1)),
        ((30, 2, 2), 4.0, datetime(2051, 1, 1)),
    ]:
        data = RNG.gamma(0.5, scale, shape).astype(np.float32)
        data[data < 0.2] = 0.0
        cubes.append(
            set_up_time_series_cube(
                data, name="lwe_thickness_of_precipitation_amount", units="mm",
                start_time=start,
            )
        )
    return cubes
