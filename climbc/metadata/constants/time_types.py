# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Expected datatypes and units for time-type coordinates"""

from collections import namedtuple

import numpy as np

TimeSpec = namedtuple("TimeSpec", ("calendar", "dtype", "units"))

TIME_COORDS = {
    "time": TimeSpec(
        calendar="gregorian", dtype=np.int64, units="seconds since 1970-01-01 00:00:00"
    ),
}
