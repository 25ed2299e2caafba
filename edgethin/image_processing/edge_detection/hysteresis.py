"""
This module provides hysteresis thresholding of thinned edge images.

Hysteresis thresholding uses two thresholds.  Pixels above the upper threshold are strong edges and are always kept.
Pixels between the two thresholds are weak edges and are kept only if they are connected (through 8-connected
neighbors) to a strong edge, possibly through a chain of other weak edges.  Everything at or below the lower threshold
is discarded.  This keeps faint portions of real edges while rejecting isolated faint responses due to noise.
"""

import logging

from collections import deque

import numpy as np
from numpy.typing import NDArray

from edgethin.exceptions import ConfigurationError
from edgethin._typing import DOUBLE_ARRAY, ARRAY_LIKE_2D


_LOGGER: logging.Logger = logging.getLogger(__name__)
"""
This is the logging interface for reporting status, results, issues, and other information.
"""


STRONG: float = 1.0
"""
The classification of pixels above the upper threshold.
"""

WEAK: float = 0.5
"""
The classification of pixels above the lower threshold but not above the upper threshold.
"""

BACKGROUND: float = 0.0
"""
The classification of pixels at or below the lower threshold.
"""

CONFIRMED: float = 0.9
"""
The value given to pixels that are part of a region containing a strong edge.
"""


def classify(image: NDArray, upper: float, lower: float) -> DOUBLE_ARRAY:
    """
    Classify each pixel as :data:`STRONG`, :data:`WEAK`, or :data:`BACKGROUND`.

    :param image: The edge image
    :param upper: The upper threshold
    :param lower: The lower threshold
    :return: The classification of each pixel as a new float64 array
    """
    return np.where(image > lower, np.where(image > upper, STRONG, WEAK), BACKGROUND).astype(np.float64)


def hysteresis_threshold(image: ARRAY_LIKE_2D, upper: float, lower: float) -> DOUBLE_ARRAY:
    """
    Perform hysteresis thresholding on a (typically thinned) edge image.

    Each pixel is first classified with :func:`classify`.  Then, starting from each strong pixel in raster order, the
    connected region of strong and weak pixels is flood filled (8-connected) and every pixel in it is set to
    :data:`CONFIRMED`.

    The result holds :data:`CONFIRMED` (0.9) for accepted edges, :data:`WEAK` (0.5) for weak pixels that were not
    connected to a strong one, and :data:`BACKGROUND` (0.0) elsewhere.  Binarize it with ``result >= CONFIRMED``.

    >>> import numpy as np
    >>> from edgethin.image_processing import hysteresis_threshold
    >>> hysteresis_threshold(np.array([[0.9, 0.5, 0.0, 0.5]]), 0.8, 0.2)
    array([[0.9, 0.9, 0. , 0.5]])

    :param image: The 2d edge image to threshold.  It is not modified.
    :param upper: The upper threshold.  Pixels greater than this are strong edges
    :param lower: The lower threshold.  Pixels greater than this are weak edges
    :return: The thresholded image
    :raises ConfigurationError: If the image is not 2d
    """

    image = np.asanyarray(image)

    if image.ndim != 2:
        raise ConfigurationError(f'The image must be 2d, not {image.ndim}d')

    thresholded = classify(image, upper, lower)

    last_row, last_col = thresholded.shape[0] - 1, thresholded.shape[1] - 1

    queue: deque[tuple[int, int]] = deque()

    # np.argwhere walks the pixels in raster order
    for seed_row, seed_col in np.argwhere(thresholded == STRONG):
        # already absorbed by an earlier region
        if thresholded[seed_row, seed_col] != STRONG:
            continue

        thresholded[seed_row, seed_col] = CONFIRMED
        queue.append((seed_row, seed_col))

        while queue:
            row, col = queue.popleft()

            for neighbor_row in range(max(row - 1, 0), min(row + 1, last_row) + 1):
                for neighbor_col in range(max(col - 1, 0), min(col + 1, last_col) + 1):
                    value = thresholded[neighbor_row, neighbor_col]
                    if value == STRONG or value == WEAK:
                        thresholded[neighbor_row, neighbor_col] = CONFIRMED
                        queue.append((neighbor_row, neighbor_col))

    _LOGGER.debug(f'{np.count_nonzero(thresholded == CONFIRMED)} confirmed edge pixels, '
                  f'{np.count_nonzero(thresholded == WEAK)} unconnected weak pixels '
                  f'(upper={upper}, lower={lower})')

    return thresholded
