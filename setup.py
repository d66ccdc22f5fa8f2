# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
from setuptools import find_packages, setup

if __name__ == "__main__":
    setup(
        name="climbc",
        version="0.1.0",
        description="Quantile mapping bias correction of climate model output",
        license="BSD-3-Clause",
        python_requires=">=3.8",
        packages=find_packages(include=["climbc", "climbc.*"]),
        install_requires=[
            "numpy",
            "scitools-iris",
            "cf-units",
            "clize",
            "sigtools",
            "sphinx",
            "netCDF4",
        ],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["climbc = climbc.cli:run_main"]},
    )
