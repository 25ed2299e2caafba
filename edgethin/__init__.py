"""
edgethin: gradient based edge detection and edge thinning for 2D images.

The tools live in :mod:`edgethin.image_processing`.  Errors due to invalid inputs are reported with
:class:`edgethin.exceptions.ConfigurationError`.
"""

from edgethin.exceptions import ConfigurationError

__version__ = "1.0.0"

__all__ = ["ConfigurationError"]
