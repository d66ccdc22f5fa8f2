# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Defaults for mandatory attributes"""

MANDATORY_ATTRIBUTE_DEFAULTS = {
    "title": "unknown",
    "source": "climbc",
    "institution": "unknown",
}
