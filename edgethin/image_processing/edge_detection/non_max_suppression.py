"""
This module provides edge thinning through non-maximal suppression.

Description of the Technique
----------------------------

Non-maximal suppression takes an edge strength image (typically the gradient magnitude) together with the gradient
angle at each pixel and keeps only the pixels that are a local maximum in the direction of the gradient.  Every other
pixel is set to 0, which thins the broad ridges of the edge strength image down to single pixel wide edges.

For each non-zero pixel the edge strength is sampled at a distance of :attr:`~.NonMaxSuppressorOptions.radius` pixels on
either side of the pixel along the gradient direction.  Since these locations generally fall between pixels, the values
are estimated through bilinear interpolation (:func:`interpolate_offset`).  The pixel is retained only if it is strictly
greater than both interpolated values and at least as large as the nearest pixel in each direction.  The second test
prevents double edges when the true edge falls between two pixels of equal strength.

To avoid computing trigonometric functions for every pixel, the gradient angles are discretized into bins of width
:attr:`~.NonMaxSuppressorOptions.theta` and the sampling offsets for each bin are computed once
(:class:`AngleOffsetTable`).  The offsets are stored split into sign, integer, and fractional parts
(:class:`CoordOffset`) so the interpolation indices can be computed exactly.

Optionally the location of each retained edge can be refined to subpixel accuracy by fitting a parabola through the
three samples along the gradient direction and solving for its vertex.  For floating point images the retained value is
also replaced with the value of the parabola at its vertex.

Use
---

The simplest interface is the :func:`non_max_suppress` function which allocates and returns the thinned image (and the
subpixel locations if requested).  :func:`non_max_suppress_into` writes into caller provided arrays instead.  The
:class:`NonMaxSuppressor` class wraps the same algorithm with its settings stored in a :class:`NonMaxSuppressorOptions`.

>>> import numpy as np
>>> from edgethin.image_processing import magnitude_phase_from_image, non_max_suppress
>>> image = np.zeros((20, 20))
>>> image[:, 10:] = 1
>>> mag, angles = magnitude_phase_from_image(image)
>>> thinned, _ = non_max_suppress(mag, angles)

The thinning algorithm is adapted from Peter Kovesi's nonmaxsup.m, Copyright (c) 1996-2013 Peter Kovesi, Centre for
Exploration Targeting, The University of Western Australia.
"""

import logging

from dataclasses import dataclass

from math import ceil, pi

from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from edgethin.exceptions import ConfigurationError
from edgethin.image_processing.border import BorderMode, padded_indices
from edgethin.utilities.mixin_classes import UserOptionConfigured
from edgethin.utilities.options import UserOptions
from edgethin._typing import INT_ARRAY, F_SCALAR_OR_ARRAY, I_SCALAR_OR_ARRAY


_LOGGER: logging.Logger = logging.getLogger(__name__)
"""
This is the logging interface for reporting status, results, issues, and other information.
"""


POINT_DTYPE: np.dtype = np.dtype([("row", np.float64), ("col", np.float64)])
"""
The structured dtype used for arrays of subpixel edge locations.

Each element holds the refined row (y) and column (x) of an edge point.
"""


class Point(NamedTuple):
    """
    A (row, column) location in an image, in pixels.

    This is the scalar view of one :data:`POINT_DTYPE` record.  Use :func:`point_at` to read one from a location grid.
    """

    row: float
    col: float

    @classmethod
    def zero(cls) -> "Point":
        """
        The origin.
        """
        return cls(0.0, 0.0)


def point_at(locations: NDArray, row: int, col: int) -> Point:
    """
    Get the subpixel location stored for a pixel of a :data:`POINT_DTYPE` location grid.

    Pixels that were not local maxima hold :meth:`Point.zero`.

    :param locations: The location grid (from :func:`non_max_suppress` with ``subpixel=True``)
    :param row: The row of the pixel
    :param col: The column of the pixel
    :return: The refined location as a :class:`Point`
    :raises ConfigurationError: If `locations` is not a :data:`POINT_DTYPE` array
    """
    if locations.dtype != POINT_DTYPE:
        raise ConfigurationError(f'The location grid must have dtype POINT_DTYPE, not {locations.dtype}')

    record = locations[row, col]

    return Point(float(record["row"]), float(record["col"]))


@dataclass(frozen=True)
class CoordOffset:
    """
    An offset along one axis split into its sign, integer, and fractional parts.

    The real valued offset is ``integer + sign*fraction``.  For instance -1.35 is stored as sign -1, integer -1, and
    fraction 0.35.  Storing the parts separately lets the interpolation find the bracketing pixels (``integer`` and
    ``integer + sign``) and the interpolation weight (``fraction``) without rounding the real offset again.

    The fields may be scalars or arrays of the same shape, in which case the instance represents many offsets at once.
    """

    sign: I_SCALAR_OR_ARRAY
    """
    The sign of the fractional part (-1, 0, or 1).  0 when the offset is a whole number of pixels.
    """

    integer: I_SCALAR_OR_ARRAY
    """
    The integer part of the offset (truncated towards 0).
    """

    fraction: F_SCALAR_OR_ARRAY
    """
    The absolute value of the fractional part of the offset, in [0, 1).
    """

    @classmethod
    def from_value(cls, offset: F_SCALAR_OR_ARRAY) -> "CoordOffset":
        """
        Split a real valued offset (or array of offsets) into its parts.

        :param offset: the offset(s) in pixels
        :return: the split offset(s)
        """
        fraction, integer = np.modf(offset)

        return cls(np.sign(fraction).astype(np.int64), np.round(integer).astype(np.int64), np.abs(fraction))

    def negate(self) -> "CoordOffset":
        """
        The offset pointing in the opposite direction.

        The magnitude of the fraction is unchanged; the integer part and the sign flip.
        """
        return CoordOffset(-self.sign, -self.integer, self.fraction)

    @property
    def value(self) -> F_SCALAR_OR_ARRAY:
        """
        The real valued offset.
        """
        return self.integer + self.sign * self.fraction

    def scale(self, factor: F_SCALAR_OR_ARRAY) -> F_SCALAR_OR_ARRAY:
        """
        The real valued offset multiplied by `factor`.
        """
        return factor * self.value

    def add_to(self, coordinate: F_SCALAR_OR_ARRAY) -> F_SCALAR_OR_ARRAY:
        """
        The coordinate shifted by the real valued offset.
        """
        return coordinate + self.integer + self.sign * self.fraction

    def __getitem__(self, item) -> "CoordOffset":
        return CoordOffset(np.asarray(self.sign)[item], np.asarray(self.integer)[item], np.asarray(self.fraction)[item])


@dataclass(frozen=True, eq=False)
class AngleOffsetTable:
    """
    The sampling offsets for each discretized gradient angle.

    Entry ``k`` holds the x (column) and y (row) offsets of the point at :attr:`radius` pixels from a pixel in the
    direction ``k*theta``.  Angles are measured counter-clockwise as seen on screen, so the row offset is negated since
    rows increase downwards.  There are ``count + 1`` entries with the last one duplicating the first (angle 2 pi) so
    that angles just below 2 pi round onto a valid entry.

    Use :meth:`build` to create the table and :meth:`discretize` to convert angles into entries.
    """

    theta: float
    """
    The angular width of each bin in radians.

    This is ``2 pi/count`` and may differ slightly from the requested step.
    """

    radius: float
    """
    The distance in pixels from the center pixel that the offsets point to.
    """

    transposed: bool
    """
    Whether the offsets are for an image stored with x along the first axis.
    """

    x_offsets: CoordOffset
    """
    The offsets along the second axis of the arrays (x unless transposed) for each bin.
    """

    y_offsets: CoordOffset
    """
    The offsets along the first axis of the arrays (y unless transposed) for each bin.
    """

    @classmethod
    def build(cls, theta: float, radius: float, transposed: bool = False) -> "AngleOffsetTable":
        """
        Precompute the offsets for each discretized angle.

        :param theta: The requested angular step in radians
        :param radius: The distance in pixels to offset
        :param transposed: Whether the image is stored with x along the first axis
        :return: The offset table
        :raises ConfigurationError: if theta is not positive
        """

        if not theta > 0:
            raise ConfigurationError(f'theta must be positive, not {theta}')

        count = round(2 * pi / theta)
        if count < 1:
            raise ConfigurationError(f'theta must be no larger than 4 pi, not {theta}')

        actual_theta = 2 * pi / count
        angles = np.arange(count + 1) * actual_theta

        if transposed:
            x_offsets = CoordOffset.from_value(-radius * np.sin(angles))
            y_offsets = CoordOffset.from_value(radius * np.cos(angles))
        else:
            x_offsets = CoordOffset.from_value(radius * np.cos(angles))
            y_offsets = CoordOffset.from_value(-radius * np.sin(angles))

        return cls(actual_theta, radius, transposed, x_offsets, y_offsets)

    def __len__(self) -> int:
        return np.size(self.x_offsets.integer)

    def __getitem__(self, item) -> tuple[CoordOffset, CoordOffset]:
        """
        The x and y offsets for the given bin(s).
        """
        return self.x_offsets[item], self.y_offsets[item]

    def discretize(self, angles: F_SCALAR_OR_ARRAY) -> I_SCALAR_OR_ARRAY:
        """
        Find the nearest bin for each angle.

        Negative angles are wrapped into [0, 2 pi) first.  Rounding is to the nearest bin (ties to even).

        :param angles: The angle(s) in radians, in [-pi, pi]
        :return: The bin index(es)
        """
        angles = np.asarray(angles, dtype=np.float64)

        inverse_theta = 1 / self.theta

        return np.round(np.where(angles < 0, angles + 2 * pi, angles) * inverse_theta).astype(np.int64)


def interpolate_offset(image: NDArray, rows: I_SCALAR_OR_ARRAY, cols: I_SCALAR_OR_ARRAY,
                       x_offset: CoordOffset, y_offset: CoordOffset,
                       row_index: INT_ARRAY, col_index: INT_ARRAY,
                       pad: int) -> tuple[F_SCALAR_OR_ARRAY, F_SCALAR_OR_ARRAY]:
    """
    Interpolate the image at an offset from the given pixel(s).

    The four pixels surrounding the offset location are found using the border lookups `row_index` and `col_index`
    (from :func:`.padded_indices` with pad width `pad`) and combined with bilinear interpolation.

    The second value returned is the value of the adjacent pixel in the direction of the offset.  When the offset is
    shorter than a pixel along both axes (so the top left sample is the center pixel itself) this is the smaller of the
    two pixels next to it instead.  A pixel smaller than this value cannot be a local maximum, which removes double edges
    where the interpolated values alone would accept both of two equal pixels.

    The arithmetic is done in float64 regardless of the image type.

    :param image: The 2d image to sample
    :param rows: The row(s) of the center pixel(s)
    :param cols: The column(s) of the center pixel(s)
    :param x_offset: The column offset(s)
    :param y_offset: The row offset(s)
    :param row_index: The border lookup for the rows
    :param col_index: The border lookup for the columns
    :param pad: The pad width the lookups were built with
    :return: The interpolated value(s) and the adjacent value(s)
    """

    floor_x = col_index[cols + x_offset.integer + pad]
    floor_y = row_index[rows + y_offset.integer + pad]
    ceil_x = col_index[cols + x_offset.integer + x_offset.sign + pad]
    ceil_y = row_index[rows + y_offset.integer + y_offset.sign + pad]

    top_left = image[floor_y, floor_x].astype(np.float64)
    top_right = image[floor_y, ceil_x].astype(np.float64)
    bottom_left = image[ceil_y, floor_x].astype(np.float64)
    bottom_right = image[ceil_y, ceil_x].astype(np.float64)

    upper_average = top_left + x_offset.fraction * (top_right - top_left)
    lower_average = bottom_left + x_offset.fraction * (bottom_right - bottom_left)

    min_adjacent = np.where((floor_x == cols) & (floor_y == rows),
                            np.minimum(top_right, bottom_left), top_left)

    return upper_average + y_offset.fraction * (lower_average - upper_average), min_adjacent


def _check_inputs(out: NDArray, image: NDArray, angles: NDArray, locations: NDArray | None, radius: float) -> None:
    """
    Raise a ConfigurationError if the arrays or radius can't be processed.
    """

    if image.ndim != 2:
        raise ConfigurationError(f'The image must be 2d, not {image.ndim}d')
    if not (image.shape == angles.shape == out.shape):
        raise ConfigurationError('image, gradient angle, and output image must all be the same size '
                                 f'({image.shape}, {angles.shape}, {out.shape})')
    if locations is not None:
        if locations.shape != image.shape:
            raise ConfigurationError('subpixel location has a different size than the input image '
                                     f'({locations.shape} != {image.shape})')
        if locations.dtype != POINT_DTYPE:
            raise ConfigurationError(f'Preallocated subpixel location arrays must have dtype POINT_DTYPE, '
                                     f'not {locations.dtype}')
    if not radius >= 1.0:
        raise ConfigurationError(f'radius must be >= 1, not {radius}')


def non_max_suppress_into(out: NDArray, image: NDArray, angles: NDArray,
                          border_mode: str | BorderMode = BorderMode.REPLICATE, radius: float = 1.35,
                          theta: float = pi / 180, locations: NDArray | None = None,
                          transposed: bool = False) -> None:
    """
    Thin the edges in `image` with non-maximal suppression, writing the results into caller owned arrays.

    Pixels of `out` that are local maxima are set to the (possibly refined) edge strength.  All other pixels of `out` are
    left untouched, so `out` should normally be zeros on input.  Pixels of `image` that are 0 are skipped entirely,
    which makes thinning a thresholded edge image cheap.

    If `locations` is provided it must be an array of :data:`POINT_DTYPE` and the subpixel location of each local
    maximum is written into it.  In this case floating point images also have their maxima replaced with the value at
    the subpixel location.

    :param out: The array to write the thinned edges into.  Same shape as `image`
    :param image: The 2d edge strength image to thin
    :param angles: The gradient angle at each pixel in radians, in [-pi, pi]
    :param border_mode: How to sample outside of the image
    :param radius: The distance in pixels to look on each side of each pixel.  Must be at least 1 (1.2-1.5 suggested)
    :param theta: The step in radians used to discretize the gradient angles
    :param locations: Optional array to receive the subpixel edge locations.  Same shape as `image`
    :param transposed: Whether the arrays are stored with x along the first axis
    :raises ConfigurationError: If any of the inputs are invalid.  Nothing is written in this case.
    """

    image = np.asanyarray(image)
    angles = np.asanyarray(angles)

    _check_inputs(out, image, angles, locations, radius)

    table = AngleOffsetTable.build(theta, radius, transposed)

    pad = ceil(radius)
    height, width = image.shape
    row_index = padded_indices(height, pad, border_mode)
    col_index = padded_indices(width, pad, border_mode)

    # only non-zero pixels can be edges
    rows, cols = np.nonzero(image)
    center = image[rows, cols].astype(np.float64)

    bins = table.discretize(angles[rows, cols])
    x_offsets, y_offsets = table[bins]

    value_1, adjacent_1 = interpolate_offset(image, rows, cols, x_offsets, y_offsets, row_index, col_index, pad)

    # we need to check the other side only for the pixels that passed the first side
    candidates = np.flatnonzero((center > value_1) & (center >= adjacent_1))

    rows = rows[candidates]
    cols = cols[candidates]
    center = center[candidates]
    value_1 = value_1[candidates]
    x_offsets = x_offsets[candidates]
    y_offsets = y_offsets[candidates]

    value_2, adjacent_2 = interpolate_offset(image, rows, cols, x_offsets.negate(), y_offsets.negate(),
                                             row_index, col_index, pad)

    maxima = (center > value_2) & (center >= adjacent_2)

    _LOGGER.debug(f'{bins.size} non-zero pixels, {candidates.size} passed the first side, '
                  f'{np.count_nonzero(maxima)} local maxima (theta={table.theta}, radius={radius})')

    rows = rows[maxima]
    cols = cols[maxima]

    if locations is None:
        out[rows, cols] = image[rows, cols]
        return

    center = center[maxima]
    value_1 = value_1[maxima]
    value_2 = value_2[maxima]
    x_offsets = x_offsets[maxima]
    y_offsets = y_offsets[maxima]

    # solve for the coefficients of the parabola v = a*r**2 + b*r + c through (-1, value_2), (0, center), (1, value_1)
    a = (value_1 + value_2) / 2 - center
    b = a + center - value_2

    # location of the vertex of the parabola.  A flat fit (a == 0) can't be refined
    flat = a == 0
    r = np.zeros_like(a)
    r[~flat] = -b[~flat] / (2 * a[~flat])

    refined_first = rows + y_offsets.scale(r)
    refined_second = cols + x_offsets.scale(r)

    if transposed:
        locations["row"][rows, cols] = refined_second
        locations["col"][rows, cols] = refined_first
    else:
        locations["row"][rows, cols] = refined_first
        locations["col"][rows, cols] = refined_second

    if np.issubdtype(out.dtype, np.floating):
        out[rows, cols] = a * r ** 2 + b * r + center
    else:
        out[rows, cols] = image[rows, cols]


def non_max_suppress(image: NDArray, angles: NDArray, border_mode: str | BorderMode = BorderMode.REPLICATE,
                     radius: float = 1.35, theta: float = pi / 180, subpixel: bool = False,
                     transposed: bool = False) -> tuple[NDArray, NDArray | None]:
    """
    Thin the edges in `image` with non-maximal suppression.

    This allocates the output arrays and then calls :func:`non_max_suppress_into`.  See that function for details.

    :param image: The 2d edge strength image to thin (typically the gradient magnitude)
    :param angles: The gradient angle at each pixel in radians, in [-pi, pi] (typically the :func:`.phase`)
    :param border_mode: How to sample outside of the image
    :param radius: The distance in pixels to look on each side of each pixel.  Must be at least 1 (1.2-1.5 suggested)
    :param theta: The step in radians used to discretize the gradient angles
    :param subpixel: Whether to estimate the subpixel location (and value) of each edge point
    :param transposed: Whether the arrays are stored with x along the first axis
    :return: The thinned image (same dtype as `image`, 0 except at local maxima) and the array of subpixel
             locations (:data:`POINT_DTYPE`, 0 except at local maxima) if requested, otherwise ``None``
    :raises ConfigurationError: If any of the inputs are invalid
    """

    image = np.asanyarray(image)

    out = np.zeros_like(image)
    locations = np.zeros(image.shape, dtype=POINT_DTYPE) if subpixel else None

    non_max_suppress_into(out, image, angles, border_mode=border_mode, radius=radius, theta=theta,
                          locations=locations, transposed=transposed)

    return out, locations


def thin_edges(image: NDArray, angles: NDArray, border_mode: str | BorderMode = BorderMode.REPLICATE) -> NDArray:
    """
    Thin the edges in `image` using non-maximal suppression with the default settings.

    :param image: The 2d edge strength image to thin
    :param angles: The gradient angle at each pixel in radians
    :param border_mode: How to sample outside of the image
    :return: The thinned image
    """
    return non_max_suppress(image, angles, border_mode)[0]


def thin_edges_subpix(image: NDArray, angles: NDArray,
                      border_mode: str | BorderMode = BorderMode.REPLICATE) -> tuple[NDArray, NDArray]:
    """
    Thin the edges in `image` using non-maximal suppression with the default settings and locate them to subpixel
    accuracy.

    :param image: The 2d edge strength image to thin
    :param angles: The gradient angle at each pixel in radians
    :param border_mode: How to sample outside of the image
    :return: The thinned image and the subpixel locations
    """
    out, locations = non_max_suppress(image, angles, border_mode, subpixel=True)

    assert locations is not None

    return out, locations


@dataclass
class NonMaxSuppressorOptions(UserOptions):

    radius: float = 1.35
    """
    The distance in pixels to look on each side of a pixel when determining whether it is a local maximum.

    This cannot be less than 1.  Values between 1.2 and 1.5 are suggested.
    """

    theta: float = pi / 180
    """
    The step size in radians used to discretize the gradient angles (1 degree by default).
    """

    border_mode: BorderMode = BorderMode.REPLICATE
    """
    How to sample locations outside of the image.
    """

    transposed: bool = False
    """
    Whether the images are stored with x along the first axis instead of y.
    """

    def validate(self) -> None:
        if not self.radius >= 1.0:
            raise ConfigurationError(f'radius must be >= 1, not {self.radius}')
        if not self.theta > 0:
            raise ConfigurationError(f'theta must be positive, not {self.theta}')
        BorderMode.parse(self.border_mode)


class NonMaxSuppressor(UserOptionConfigured[NonMaxSuppressorOptions], NonMaxSuppressorOptions):
    """
    This class thins edge images using non-maximal suppression.

    The settings (search radius, angle discretization, border handling, and storage order) are stored as attributes
    from a :class:`NonMaxSuppressorOptions`.  Calling the instance with an edge strength image and its gradient angles
    returns the thinned image (see :func:`non_max_suppress`), while :meth:`suppress_into` writes into existing arrays
    (see :func:`non_max_suppress_into`).

    The instance holds no state besides its settings so it can be reused for any number of images.
    """

    def __init__(self, options: NonMaxSuppressorOptions | None = None) -> None:
        """
        :param options: the options to configure the class with
        """
        super().__init__(NonMaxSuppressorOptions, options=options)

    def __call__(self, image: NDArray, angles: NDArray, subpixel: bool = False) -> tuple[NDArray, NDArray | None]:
        """
        Thin the edges in `image`.

        :param image: The 2d edge strength image to thin
        :param angles: The gradient angle at each pixel in radians
        :param subpixel: Whether to estimate the subpixel location of each edge point
        :return: The thinned image and the subpixel locations (``None`` unless `subpixel`)
        """
        return non_max_suppress(image, angles, border_mode=self.border_mode, radius=self.radius, theta=self.theta,
                                subpixel=subpixel, transposed=self.transposed)

    def suppress_into(self, out: NDArray, image: NDArray, angles: NDArray, locations: NDArray | None = None) -> None:
        """
        Thin the edges in `image` writing the results into `out` (and `locations` if given).

        :param out: The array to write the thinned edges into
        :param image: The 2d edge strength image to thin
        :param angles: The gradient angle at each pixel in radians
        :param locations: Optional :data:`POINT_DTYPE` array to receive the subpixel locations
        """
        non_max_suppress_into(out, image, angles, border_mode=self.border_mode, radius=self.radius, theta=self.theta,
                              locations=locations, transposed=self.transposed)
