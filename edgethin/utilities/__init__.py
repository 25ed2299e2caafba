"""
This package provides the configuration plumbing shared by the edgethin processing classes.

The :mod:`.options` module provides the :class:`.UserOptions` dataclass base used to describe the settings of a class
and the :mod:`.mixin_classes` package provides the :class:`.UserOptionConfigured` mixin that applies them.
"""

from edgethin.utilities.options import UserOptions
from edgethin.utilities.mixin_classes import UserOptionConfigured

__all__ = ["UserOptions", "UserOptionConfigured"]
