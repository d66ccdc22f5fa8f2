# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Module for loading cubes."""

from typing import List, Optional, Union

import iris
from iris import Constraint
from iris.cube import Cube, CubeList


def load_cube(
    filepath: Union[str, List[str]],
    constraints: Optional[Union[Constraint, str]] = None,
    no_lazy_load: bool = False,
) -> Cube:
    """Load the filepath(s) provided using Iris into a single cube.

    Args:
        filepath:
            Filepath that will be loaded or list of filepaths that can be
            merged into a single cube, e.g. a time series split by year.
        constraints:
            Constraint to be applied when loading from the input filepath.
            This can be in the form of an iris.Constraint or could be a string
            that is intended to match the name of the cube.
        no_lazy_load:
            If True, bypass cube deferred (lazy) loading and load the whole
            cube into memory.

    Returns:
        Cube that has been loaded from the input filepath given the
        constraints provided.

    Raises:
        ValueError: If no cubes are found, or the cubes found cannot be
            combined into a single cube.
    """
    if isinstance(filepath, str):
        cubes = iris.load(filepath, constraints=constraints)
    else:
        cubes = CubeList([])
        for item in filepath:
            cubes.extend(iris.load(item, constraints=constraints))

    if not cubes:
        raise ValueError(f"No cubes found using constraints {constraints}")

    if len(cubes) == 1:
        cube = cubes[0]
    else:
        try:
            cube = cubes.concatenate_cube()
        except iris.exceptions.ConcatenateError:
            cube = cubes.merge_cube()

    if no_lazy_load:
        # Force cube's data into memory by touching the .data attribute.
        cube.data
    return cube
