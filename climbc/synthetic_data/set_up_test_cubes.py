# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""
Functions to set up time series cubes for unit tests. Standardises time units
and spatial coordinates, with time as the leading dimension.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

import numpy as np
from cf_units import Unit, date2num
from iris.coord_systems import GeogCS
from iris.coords import DimCoord
from iris.cube import Cube
from numpy import ndarray

from climbc.metadata.constants.attributes import MANDATORY_ATTRIBUTE_DEFAULTS
from climbc.metadata.constants.time_types import TIME_COORDS

GEOG_CS = GeogCS(6371229.0)


def construct_yx_coords(
    ypoints: int, xpoints: int, grid_spacing: float = 10.0
) -> Tuple[DimCoord, DimCoord]:
    """
    Construct latitude/longitude dimension coordinates centred on (0, 0).

    Args:
        ypoints:
            Number of grid points required along the y-axis
        xpoints:
            Number of grid points required along the x-axis
        grid_spacing:
            Grid resolution in degrees

    Returns:
        Tuple containing y and x iris.coords.DimCoords
    """
    coords = []
    for npoints, name in [(ypoints, "latitude"), (xpoints, "longitude")]:
        start = -((npoints - 1) * grid_spacing) / 2
        points = np.linspace(
            start, start + grid_spacing * (npoints - 1), npoints, dtype=np.float32
        )
        coord = DimCoord(points, name, units="degrees", coord_system=GEOG_CS)
        if npoints > 1:
            coord.guess_bounds()
        coords.append(coord)
    return tuple(coords)


def construct_time_coord(
    npoints: int, start_time: datetime, time_step: timedelta
) -> DimCoord:
    """
    Construct a time dimension coordinate with regularly spaced points.

    Args:
        npoints:
            Number of times
        start_time:
            First time in the series
        time_step:
            Interval between successive times

    Returns:
        Time coordinate with the units and datatype in TIME_COORDS
    """
    coord_spec = TIME_COORDS["time"]
    times = [start_time + i * time_step for i in range(npoints)]
    points = np.around(date2num(times, coord_spec.units, coord_spec.calendar))
    return DimCoord(
        points.astype(coord_spec.dtype),
        "time",
        units=Unit(coord_spec.units, calendar=coord_spec.calendar),
    )


def set_up_time_series_cube(
    data: ndarray,
    name: str = "air_temperature",
    units: str = "K",
    start_time: datetime = datetime(2000, 1, 1),
    time_step: timedelta = timedelta(days=1),
    grid_spacing: float = 10.0,
    attributes: Optional[Dict[str, Any]] = None,
) -> Cube:
    """
    Set up a cube containing a time series at each point of a latitude /
    longitude grid.

    Args:
        data:
            Array of shape (time,) or (time, y, x). 1D data is placed on a
            single point grid.
        name:
            Variable name (standard / long)
        units:
            Variable units
        start_time:
            First time in the series
        time_step:
            Interval between successive times
        grid_spacing:
            Grid resolution in degrees
        attributes:
            Optional cube attributes. Mandatory attributes default to the
            values in MANDATORY_ATTRIBUTE_DEFAULTS.

    Returns:
        Cube with dimensions (time, latitude, longitude)

    Raises:
        ValueError: If the data is not 1D or 3D.
    """
    data = np.ma.asarray(data) if np.ma.isMaskedArray(data) else np.asarray(data)
    if data.ndim == 1:
        data = data.reshape(data.shape + (1, 1))
    if data.ndim != 3:
        raise ValueError(
            f"Expected data with dimensions (time,) or (time, y, x), got {data.shape}"
        )

    time_coord = construct_time_coord(data.shape[0], start_time, time_step)
    y_coord, x_coord = construct_yx_coords(data.shape[1], data.shape[2], grid_spacing)

    cube_attributes = dict(MANDATORY_ATTRIBUTE_DEFAULTS)
    if attributes is not None:
        cube_attributes.update(attributes)

    cube = Cube(
        data,
        units=units,
        attributes=cube_attributes,
        dim_coords_and_dims=[(time_coord, 0), (y_coord, 1), (x_coord, 2)],
    )
    cube.rename(name)
    return cube
