# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Module to contain interpolation functions."""

from typing import Sequence, Union

import numpy as np
from numpy import ndarray


def interpolate(
    x_data: Union[Sequence, ndarray],
    y_data: Union[Sequence, ndarray],
    x: Union[float, ndarray],
    extrapolate: bool = False,
) -> Union[float, ndarray]:
    """Find x within x_data and return the linearly interpolated value from
    y_data.

    The bracketing interval is found by scanning x_data from the left. Any x at
    or beyond the second to last point uses the final interval, so the last
    segment defines the gradient above the data. Below the data the first
    segment is used.

    The two arrays are interchangeable, which allows a value to be converted
    to a position within a cumulative distribution and back again.

    Args:
        x_data:
            Non-decreasing coordinates of at least two points.
        y_data:
            Values at each point in x_data.
        x:
            Value or array of values to interpolate to.
        extrapolate:
            If True, linearly extrapolate outside of x_data. Otherwise values
            outside of x_data are held at the nearest end value.

    Returns:
        Interpolated value, or array of values matching the shape of x.
    """
    x_data = np.asarray(x_data, dtype=np.float64)
    y_data = np.asarray(y_data, dtype=np.float64)
    assert x_data.ndim == 1 and x_data.shape == y_data.shape, (
        f"x_data and y_data must be 1D arrays of equal length, "
        f"got shapes {x_data.shape} and {y_data.shape}"
    )
    size = x_data.size
    assert size >= 2, f"At least two points are required, got {size}"

    x = np.asarray(x, dtype=np.float64)
    index = np.zeros(x.shape, dtype=np.intp)
    if size > 2:
        beyond = x[..., np.newaxis] > x_data[1 : size - 1]
        index = np.where(beyond.all(axis=-1), size - 2, beyond.argmin(axis=-1))
    index = np.where(x >= x_data[size - 2], size - 2, index)

    x_left = x_data[index]
    x_right = x_data[index + 1]
    y_left = y_data[index]
    y_right = y_data[index + 1]

    if not extrapolate:
        y_right = np.where(x < x_left, y_left, y_right)
        y_left = np.where(x > x_right, y_right, y_left)

    width = x_right - x_left
    with np.errstate(divide="ignore", invalid="ignore"):
        gradient = np.where(width == 0, 0.0, (y_right - y_left) / width)
        result = y_left + gradient * (x - x_left)

    if result.ndim == 0:
        return float(result)
    return result
