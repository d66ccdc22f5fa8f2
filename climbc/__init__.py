# (C) Crown Copyright, Met Office. All rights reserved.
#
# This file is part of 'climbc' and is released under the BSD 3-Clause license.
# See LICENSE in the root of the repository for full licensing details.
"""Module containing plugin base classes."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from importlib.metadata import PackageNotFoundError, version
from typing import Any

try:
    __version__ = version("climbc")
except PackageNotFoundError:
    # package is not installed
    pass


class BasePlugin(ABC):
    """An abstract class for climbc plugins.
    Subclasses must be callable. We preserve the process
    method by redirecting to __call__.
    """

    def __call__(self, *args, **kwargs):
        """Makes subclasses callable to use process
        Args:
            *args:
                Positional arguments.
            **kwargs:
                Keyword arguments.
        Returns:
            Output of self.process()
        """
        return self.process(*args, **kwargs)

    @abstractmethod
    def process(self, *args, **kwargs) -> Any:
        """Abstract class for rest to implement."""
        pass


class PostProcessingPlugin(BasePlugin):
    """An abstract class for plugins that bias correct model output.
    Marks corrected cubes as post-processed in their title attribute.
    """

    def __call__(self, *args, **kwargs):
        """Run self.process() and update the title of any returned cubes.

        Args:
            *args:
                Positional arguments.
            **kwargs:
                Keyword arguments.

        Returns:
            Output of self.process() with updated title attribute
        """
        from iris.cube import Cube

        result = super().__call__(*args, **kwargs)
        if isinstance(result, Cube):
            self.post_processed_title(result)
        elif isinstance(result, Iterable) and not isinstance(result, str):
            for item in result:
                if isinstance(item, Cube):
                    self.post_processed_title(item)
        return result

    @staticmethod
    def post_processed_title(cube):
        """Prefix the title attribute of the cube with "Post-Processed",
        unless it is the default title or is already marked.
        """
        from climbc.metadata.constants.attributes import MANDATORY_ATTRIBUTE_DEFAULTS

        title = cube.attributes.get("title")
        if (
            title is not None
            and title != MANDATORY_ATTRIBUTE_DEFAULTS["title"]
            and "Post-Processed" not in title
        ):
            cube.attributes["title"] = f"Post-Processed {title}"
