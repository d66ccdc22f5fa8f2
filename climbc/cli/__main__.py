# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Main to run clize on the cli"""

from climbc import cli

if __name__ == "__main__":
    cli.run_main()
