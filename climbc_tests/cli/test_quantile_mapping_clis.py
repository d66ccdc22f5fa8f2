# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Tests for the quantile mapping CLIs."""

from datetime import datetime

import numpy as np
import pytest

from climbc import cli
from climbc.calibration.quantile_mapping import QuantileDeltaMapping, QuantileMapping
from climbc.cli import quantile_delta_mapping as qdm_cli
from climbc.cli import quantile_mapping as qm_cli
from climbc.synthetic_data.set_up_test_cubes import set_up_time_series_cube
from climbc.utilities.load import load_cube
from climbc.utilities.save import save_netcdf

RNG = np.random.default_rng(5)


@pytest.fixture
def cubes():
    """Reference, control and forecast precipitation cubes."""
    result = []
    for ntimes, scale, start in [
        (60, 2.0, datetime(1991, 1, 1)),
        (60, 3.0, datetime(1991, 1, 1)),
        (30, 3.5, datetime(2051, 1, 1)),
    ]:
        data = RNG.gamma(1.5, scale, (ntimes, 2, 2)).astype(np.float32)
        result.append(
            set_up_time_series_cube(
                data,
                name="lwe_thickness_of_precipitation_amount",
                units="mm",
                start_time=start,
                attributes={"title": "Regional Climate Model Projection"},
            )
        )
    return result


@pytest.fixture
def files(tmp_path, cubes):
    """Paths of the reference, control and forecast cubes saved to file."""
    paths = []
    for name, cube in zip(["reference", "control", "forecast"], cubes):
        path = str(tmp_path / f"{name}.nc")
        save_netcdf(cube, path)
        paths.append(path)
    return paths


@pytest.mark.parametrize(
    "cli_module, plugin_class",
    [(qm_cli, QuantileMapping), (qdm_cli, QuantileDeltaMapping)],
)
def test_process(cubes, cli_module, plugin_class):
    """Test the CLI process function matches the plugin."""
    expected = plugin_class(change_type="relative", n_quantiles=50).process(*cubes)
    result = cli_module.process(*cubes, change_type="relative", n_quantiles=50)
    np.testing.assert_array_equal(result.data, expected.data)
    assert result.attributes["title"] == (
        "Post-Processed Regional Climate Model Projection"
    )


@pytest.mark.parametrize(
    "command, plugin_class",
    [
        ("quantile-mapping", QuantileMapping),
        ("quantile-delta-mapping", QuantileDeltaMapping),
    ],
)
def test_command_line(tmp_path, cubes, files, command, plugin_class):
    """Test running a subcommand from files writes the corrected forecast."""
    output = str(tmp_path / "output.nc")
    result = cli.main(
        "climbc", command, *files, "--change-type", "relative", "--output", output
    )
    assert result is None
    expected = plugin_class(change_type="relative").process(*cubes)
    corrected = load_cube(output)
    np.testing.assert_allclose(corrected.data, expected.data, rtol=1e-6)
    assert corrected.units == "mm"


@pytest.mark.parametrize("command", ["quantile-mapping", "quantile-delta-mapping"])
def test_single_quantile(tmp_path, files, command):
    """Test a single quantile from the command line raises a ValueError and
    writes no output."""
    output = tmp_path / "output.nc"
    with pytest.raises(ValueError, match="n_quantiles must be at least 2"):
        cli.main("climbc", command, *files, "--n-quantiles", "1", "--output", str(output))
    assert not output.exists()
