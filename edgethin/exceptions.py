"""
This module provides the exceptions raised by edgethin.
"""


class ConfigurationError(ValueError):
    """
    Raised when an edge thinning or detection routine is called with inputs that can never be processed.

    This includes things like a search radius less than 1 pixel, a non-positive angular step, arrays whose shapes do not
    agree, preallocated output arrays of the wrong dtype, and unknown border modes or gradient methods.

    All of these conditions are checked before any output array is modified, so catching this exception leaves caller
    owned buffers untouched.
    """
