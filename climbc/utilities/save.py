# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Module for saving netcdf cubes."""

import os
import warnings
from typing import Union

import cf_units
import iris
from iris.cube import Cube, CubeList


def _order_cell_methods(cube: Cube) -> None:
    """
    Sorts the cell methods on a cube such that if there are multiple methods
    they are always written in a consistent order in the output cube. The
    input cube is modified.

    Args:
        cube:
            The cube on which the cell methods are to be sorted.
    """
    cube.cell_methods = tuple(sorted(cube.cell_methods))


def save_netcdf(
    cubelist: Union[Cube, CubeList], filename: str, compression_level: int = 1
) -> None:
    """Save the input Cube or CubeList as a NetCDF file.

    The file is written to a temporary name and renamed once complete, so an
    interrupted run never leaves a truncated output behind.

    Args:
        cubelist:
            Cube or list of cubes to be saved
        filename:
            Filename to save input cube(s)
        compression_level:
            1-9 to specify compression level, or 0 to not compress (default
            compress with complevel 1)

    Raises:
        ValueError: If a cube has unknown units or the compression level is
            invalid.
    """
    if isinstance(cubelist, Cube):
        cubelist = CubeList([cubelist])
    elif not isinstance(cubelist, CubeList):
        cubelist = CubeList(cubelist)

    if compression_level not in range(10):
        raise ValueError(
            "Compression level must be an integer value between 0 and 9 "
            "(0 to disable compression)"
        )

    for cube in cubelist:
        _order_cell_methods(cube)
        if cf_units.Unit(cube.units).is_unknown():
            raise ValueError(f"{cube.name()} has unknown units")

    # One time step of the full grid per chunk when all cubes share a grid
    chunksizes = None
    if len({cube.shape[1:] for cube in cubelist}) == 1:
        cube = cubelist[0]
        if cube.ndim >= 2:
            chunksizes = (1,) + cube.shape[1:]
    else:
        warnings.warn("Chunksize not set as cubelist contains cubes of varying grids")

    dirname = os.path.dirname(filename)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    ftmp = str(filename) + ".tmp"
    iris.fileformats.netcdf.save(
        cubelist,
        ftmp,
        complevel=compression_level,
        shuffle=True,
        zlib=compression_level > 0,
        chunksizes=chunksizes,
    )
    os.rename(ftmp, filename)
