# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Module containing quantile mapping and quantile delta mapping bias
correction.

Both methods use three samples: a reference (e.g. observations) and a
control (the model) covering the same historical period, and a forecast
from the model to be corrected. See Cannon et al. (2015) for quantile delta
mapping and https://link.springer.com/article/10.1007/s00382-020-05447-4 for
a comparison of the methods.
"""

import warnings
from abc import abstractmethod
from enum import Enum
from typing import Sequence, Tuple, Union

import numpy as np
from iris.cube import Cube
from numpy import ndarray

from climbc import PostProcessingPlugin
from climbc.calibration.empirical_distribution import compute_bins, compute_cdf
from climbc.constants import DEFAULT_N_QUANTILES, MAX_SCALE_FACTOR
from climbc.metadata.constants import FLOAT_DTYPE
from climbc.utilities.interpolation import interpolate


class ChangeType(Enum):
    """How a forecast departs from its control climate."""

    #: Additive change, e.g. temperature.
    ABSOLUTE = "absolute"
    #: Multiplicative change of a non-negative quantity, e.g. precipitation.
    RELATIVE = "relative"


def quantile_mapping(
    reference: Union[Sequence[float], ndarray],
    control: Union[Sequence[float], ndarray],
    forecast: Union[Sequence[float], ndarray],
    change_type: Union[ChangeType, str],
    n_quantiles: int = DEFAULT_N_QUANTILES,
) -> ndarray:
    """Map forecast values through the control distribution onto the
    reference distribution.

    Each forecast value is located within the cumulative distribution of the
    control, and replaced with the reference value found at the same position
    in the reference distribution.

    Args:
        reference:
            Reference values for the historical period.
        control:
            Model values for the historical period.
        forecast:
            Model values to correct.
        change_type:
            ABSOLUTE holds values outside the historical range at the edge of
            the distribution. RELATIVE bins from zero, extrapolates linearly
            and floors each step at zero.
        n_quantiles:
            Number of bins used for each empirical distribution.

    Returns:
        Corrected values in the same order as the forecast.
    """
    change_type = ChangeType(change_type)
    relative = change_type is ChangeType.RELATIVE
    forecast = np.asarray(forecast, dtype=np.float64)

    bins_reference = compute_bins(reference, n_quantiles, floor_at_zero=relative)
    bins_control = compute_bins(control, n_quantiles, floor_at_zero=relative)
    cdf_reference = compute_cdf(reference, bins_reference)
    cdf_control = compute_cdf(control, bins_control)

    position = interpolate(bins_control, cdf_control, forecast, extrapolate=relative)
    if relative:
        position = np.maximum(position, 0)
    corrected = interpolate(
        cdf_reference, bins_reference, position, extrapolate=relative
    )
    if relative:
        corrected = np.maximum(corrected, 0)
    return np.asarray(corrected)


def quantile_delta_mapping(
    reference: Union[Sequence[float], ndarray],
    control: Union[Sequence[float], ndarray],
    forecast: Union[Sequence[float], ndarray],
    change_type: Union[ChangeType, str],
    n_quantiles: int = DEFAULT_N_QUANTILES,
) -> ndarray:
    """Correct the forecast while preserving its change relative to the
    control.

    Each forecast value is located within the forecast's own distribution. The
    reference value at that position is then adjusted by the difference
    (ABSOLUTE) or ratio (RELATIVE) between the forecast value and the control
    value at the same position. All three distributions share bins computed
    from the control sample.

    Args:
        reference:
            Reference values for the historical period.
        control:
            Model values for the historical period.
        forecast:
            Model values to correct.
        change_type:
            ABSOLUTE applies the change as a difference. RELATIVE bins from
            zero and applies the change as a ratio, limited to
            +/- MAX_SCALE_FACTOR.
        n_quantiles:
            Number of bins used for the empirical distributions.

    Returns:
        Corrected values in the same order as the forecast.
    """
    change_type = ChangeType(change_type)
    relative = change_type is ChangeType.RELATIVE
    forecast = np.asarray(forecast, dtype=np.float64)

    bins = compute_bins(control, n_quantiles, floor_at_zero=relative)
    cdf_reference = compute_cdf(reference, bins)
    cdf_control = compute_cdf(control, bins)
    cdf_forecast = compute_cdf(forecast, bins)

    position = interpolate(bins, cdf_forecast, forecast)
    reference_value = interpolate(cdf_reference, bins, position)
    control_value = interpolate(cdf_control, bins, position)

    if not relative:
        return np.asarray(reference_value + forecast - control_value)

    with np.errstate(divide="ignore", invalid="ignore"):
        scale = np.clip(forecast / control_value, -MAX_SCALE_FACTOR, MAX_SCALE_FACTOR)
        return np.asarray(reference_value / scale)


class _BaseQuantileCorrection(PostProcessingPlugin):
    """Apply a sample-based bias correction independently at each grid point
    of a cube with a time dimension."""

    def __init__(
        self,
        change_type: Union[ChangeType, str] = ChangeType.ABSOLUTE,
        n_quantiles: int = DEFAULT_N_QUANTILES,
    ) -> None:
        """Initialise the plugin.

        Args:
            change_type:
                Whether the forecast change is additive ("absolute") or
                multiplicative ("relative").
            n_quantiles:
                Number of bins used for each empirical distribution.

        Raises:
            ValueError: If the change type or number of quantiles is invalid.
        """
        self.change_type = ChangeType(change_type)
        if n_quantiles < 2:
            raise ValueError(f"n_quantiles must be at least 2, got {n_quantiles}")
        self.n_quantiles = n_quantiles

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__}: change_type: {self.change_type.value}; "
            f"n_quantiles: {self.n_quantiles}>"
        )

    @staticmethod
    @abstractmethod
    def correction(*args, **kwargs) -> ndarray:
        """Correction applied to the samples at a single grid point."""

    @staticmethod
    def _convert_cubes_to_forecast_units(
        reference_cube: Cube, control_cube: Cube, forecast_cube: Cube
    ) -> Tuple[Cube, Cube]:
        """Convert the reference and control cubes to the forecast units
        without modifying the originals.

        Returns:
            Tuple of (reference_cube, control_cube) in the forecast units.

        Raises:
            ValueError: If a cube has units incompatible with the forecast.
        """
        target_units = forecast_cube.units
        converted_cubes = []
        for cube in [reference_cube, control_cube]:
            if cube.units != target_units:
                cube = cube.copy()
                try:
                    cube.convert_units(target_units)
                except ValueError:
                    raise ValueError(
                        f"Cannot convert {cube.name()} cube with units "
                        f"{cube.units} to target units {target_units}"
                    )
            converted_cubes.append(cube)
        return tuple(converted_cubes)

    @staticmethod
    def _time_series_by_point(cube: Cube) -> Tuple[np.ma.MaskedArray, Tuple[int]]:
        """Arrange cube data as a (time, point) masked array.

        Returns:
            Tuple of the 2D masked array and the shape of the non-time
            dimensions.

        Raises:
            ValueError: If the cube has no time dimension.
        """
        time_dims = cube.coord_dims("time") if cube.coords("time") else ()
        if len(time_dims) != 1:
            raise ValueError(
                f"The {cube.name()} cube must have a time dimension coordinate"
            )
        data = np.ma.masked_invalid(
            np.moveaxis(np.ma.asarray(cube.data, dtype=np.float64), time_dims[0], 0)
        )
        point_shape = data.shape[1:]
        return data.reshape(data.shape[0], -1), point_shape

    def process(
        self, reference_cube: Cube, control_cube: Cube, forecast_cube: Cube
    ) -> Cube:
        """Bias correct a forecast cube at every grid point.

        The samples at each grid point are the unmasked values along the time
        dimension of each cube. The number of times may differ between the
        cubes but the remaining dimensions must match.

        Args:
            reference_cube:
                Reference data, e.g. observations, for the historical period.
            control_cube:
                Model data for the historical period.
            forecast_cube:
                Model data to correct.

        Returns:
            Copy of the forecast cube containing the corrected values, with
            the forecast mask preserved.

        Raises:
            ValueError: If the cubes have incompatible units, lack a time
                dimension or have mismatched grids.
        """
        reference_cube, control_cube = self._convert_cubes_to_forecast_units(
            reference_cube, control_cube, forecast_cube
        )
        reference, reference_shape = self._time_series_by_point(reference_cube)
        control, control_shape = self._time_series_by_point(control_cube)
        forecast, forecast_shape = self._time_series_by_point(forecast_cube)
        if not reference_shape == control_shape == forecast_shape:
            raise ValueError(
                "The grids of the reference, control and forecast cubes do not "
                f"match: {reference_shape}, {control_shape}, {forecast_shape}"
            )

        corrected = np.ma.masked_all(forecast.shape, dtype=np.float64)
        empty_points = 0
        for point in range(forecast.shape[1]):
            reference_sample = reference[:, point].compressed()
            control_sample = control[:, point].compressed()
            valid = ~np.ma.getmaskarray(forecast[:, point])
            if reference_sample.size == 0 or control_sample.size == 0:
                empty_points += 1
            if not valid.any():
                continue
            corrected[valid, point] = self.correction(
                reference_sample,
                control_sample,
                forecast[valid, point].data,
                self.change_type,
                n_quantiles=self.n_quantiles,
            )
        if empty_points:
            warnings.warn(
                f"{empty_points} grid points have no valid reference or control "
                "data. Corrected values at these points are NaN."
            )

        time_dim = forecast_cube.coord_dims("time")[0]
        corrected = np.moveaxis(
            corrected.reshape(corrected.shape[:1] + forecast_shape), 0, time_dim
        ).astype(FLOAT_DTYPE)
        if not np.ma.is_masked(forecast_cube.data):
            corrected = corrected.filled(np.nan)
        return forecast_cube.copy(data=corrected)


class QuantileMapping(_BaseQuantileCorrection):
    """Apply quantile mapping bias correction at each grid point."""

    correction = staticmethod(quantile_mapping)


class QuantileDeltaMapping(_BaseQuantileCorrection):
    """Apply trend preserving quantile delta mapping bias correction at each
    grid point."""

    correction = staticmethod(quantile_delta_mapping)
