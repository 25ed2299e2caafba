"""
This module provides the border handling used when sampling outside of an image.

Border handling is expressed as an index lookup: for an axis of ``size`` pixels padded by ``pad`` pixels on each side,
:func:`padded_indices` returns an array mapping every padded coordinate to a valid in-image coordinate.  Coordinate
``k`` (which may be negative or past the end of the axis) is resolved as ``padded_indices(size, pad, mode)[k + pad]``.
The same lookup is reused for every pixel, so the border policy is resolved once per axis rather than once per sample.

The available policies are enumerated in :class:`BorderMode`.
"""

from enum import Enum

import numpy as np

from edgethin.exceptions import ConfigurationError
from edgethin._typing import INT_ARRAY


class BorderMode(Enum):
    """
    An enum specifying how coordinates outside of an image are mapped back into it.

    Each value is a tuple of the equivalent ``numpy.pad`` mode and ``scipy.ndimage`` mode.  For an axis ``a b c d``:
    """

    REPLICATE = ("edge", "nearest")
    """
    Repeat the edge pixel: ``a a | a b c d | d d``
    """

    SYMMETRIC = ("symmetric", "reflect")
    """
    Mirror about the image edge, repeating the edge pixel: ``b a | a b c d | d c``
    """

    REFLECT = ("reflect", "mirror")
    """
    Mirror about the edge pixel without repeating it: ``c b | a b c d | c b``
    """

    CIRCULAR = ("wrap", "wrap")
    """
    Wrap around to the opposite side: ``c d | a b c d | a b``
    """

    @property
    def numpy_mode(self) -> str:
        """
        The name of this mode for ``numpy.pad``
        """
        return self.value[0]

    @property
    def ndimage_mode(self) -> str:
        """
        The name of this mode for the ``scipy.ndimage`` filters
        """
        return self.value[1]

    @classmethod
    def parse(cls, mode: "str | BorderMode") -> "BorderMode":
        """
        Interpret a border mode given either as a :class:`BorderMode` or as its (case insensitive) name.

        :param mode: the mode to interpret, for instance ``"replicate"``
        :return: the matching :class:`BorderMode`
        :raises ConfigurationError: if the name is not a known border mode
        """
        if isinstance(mode, cls):
            return mode

        try:
            return cls[str(mode).upper()]
        except KeyError:
            raise ConfigurationError(f'Unknown border mode {mode!r}.  '
                                     f'Must be one of {[m.name.lower() for m in cls]}') from None


def padded_indices(size: int, pad: int, mode: str | BorderMode = BorderMode.REPLICATE) -> INT_ARRAY:
    """
    Build the index lookup for an axis of length `size` padded by `pad` pixels on each side.

    >>> from edgethin.image_processing import padded_indices
    >>> padded_indices(4, 2, "replicate")
    array([0, 0, 0, 1, 2, 3, 3, 3])
    >>> padded_indices(4, 2, "circular")
    array([2, 3, 0, 1, 2, 3, 0, 1])

    :param size: The number of pixels along the axis
    :param pad: The number of padded coordinates to support on each side
    :param mode: The border policy to apply
    :return: An integer array of length ``size + 2*pad`` where entry ``k`` is the valid index for coordinate ``k - pad``
    :raises ConfigurationError: if the axis is empty, the pad is negative, or the mode is unknown
    """

    border_mode = BorderMode.parse(mode)

    if size < 1:
        raise ConfigurationError('Cannot build border indices for an empty axis')
    if pad < 0:
        raise ConfigurationError('The pad width must be non-negative')

    return np.pad(np.arange(size, dtype=np.int64), pad, mode=border_mode.numpy_mode)  # type: ignore
