"""
This module provides the Canny edge detector.

Description of the Technique
----------------------------

The Canny edge detector finds thin, connected edges in an image in a few steps:

#. The image is converted to a single channel intensity image and smoothed with a Gaussian kernel to suppress noise
   (:class:`.GaussianSmoothing`).
#. The horizontal and vertical gradients of the smoothed image are computed (:func:`.image_gradients`) along with the
   magnitude and phase of the gradient (:func:`.magnitude_phase`).
#. The gradient magnitude is thinned with non-maximal suppression along the gradient direction
   (:class:`.NonMaxSuppressor`).
#. The thinned edges are split into strong and weak edges using two thresholds and only the weak edges connected to
   strong edges are kept (:func:`.hysteresis_threshold`).

By default the thresholds are given as fractions in [0, 1] and interpreted as percentiles of the thinned gradient
magnitude.  The percentiles are taken over every pixel in the image, including the pixels zeroed by the suppression,
so for typical images a large portion of the distribution is 0.  Set :attr:`~.CannyEdgeDetectorOptions.percentile` to
``False`` to use absolute thresholds on the gradient magnitude instead.

Use
---

For a binary edge map use :func:`canny`.  The :class:`CannyEdgeDetector` class provides the same pipeline within the
:class:`.EdgeDetector` interface and keeps the intermediate products for inspection.

>>> import numpy as np
>>> from edgethin.image_processing import canny
>>> image = np.zeros((50, 50), dtype=np.uint8)
>>> image[10:40, 10:40] = 255
>>> edges = canny(image)
"""

import logging

from dataclasses import dataclass

from math import pi

import numpy as np
from numpy.typing import NDArray

from edgethin.exceptions import ConfigurationError
from edgethin.image_processing.border import BorderMode
from edgethin.image_processing.denoising.gaussian import GaussianSmoothing, GaussianSmoothingOptions
from edgethin.image_processing.edge_detection.edge_detector_base import EdgeDetector
from edgethin.image_processing.edge_detection.hysteresis import hysteresis_threshold, CONFIRMED
from edgethin.image_processing.edge_detection.non_max_suppression import (NonMaxSuppressor, NonMaxSuppressorOptions,
                                                                          POINT_DTYPE)
from edgethin.image_processing.utilities.image_validation_mixin import to_intensity
from edgethin.utilities.mixin_classes import UserOptionConfigured
from edgethin.utilities.options import UserOptions
from edgethin._typing import DOUBLE_ARRAY


_LOGGER: logging.Logger = logging.getLogger(__name__)
"""
This is the logging interface for reporting status, results, issues, and other information.
"""


@dataclass
class CannyEdgeDetectorOptions(UserOptions):

    sigma: float = 1.4
    """
    The standard deviation in pixels of the Gaussian kernel used to smooth the image (both axes).
    """

    upper_threshold: float = 0.90
    """
    The upper bound for hysteresis thresholding.

    A fraction in [0, 1] giving the percentile of the thinned gradient magnitude if :attr:`percentile` is ``True``,
    otherwise an absolute gradient magnitude.
    """

    lower_threshold: float = 0.10
    """
    The lower bound for hysteresis thresholding.

    A fraction in [0, 1] giving the percentile of the thinned gradient magnitude if :attr:`percentile` is ``True``,
    otherwise an absolute gradient magnitude.
    """

    percentile: bool = True
    """
    Whether the thresholds are fractions to be converted to percentiles of the thinned gradient magnitude.
    """

    gradient_method: str = "sobel"
    """
    The kernel used to compute the image gradients.  See :func:`.image_gradients`.
    """

    border_mode: BorderMode = BorderMode.REPLICATE
    """
    How pixels outside of the image are handled when computing the gradients and thinning the edges.
    """

    radius: float = 1.35
    """
    The non-maximal suppression search radius in pixels.  See :class:`.NonMaxSuppressorOptions`.
    """

    theta: float = pi / 180
    """
    The non-maximal suppression angular step in radians.  See :class:`.NonMaxSuppressorOptions`.
    """

    subpixel: bool = False
    """
    Whether to locate the edges to subpixel accuracy in :meth:`.CannyEdgeDetector.identify_edges`.

    The binary edge map is not affected by this setting.
    """

    def validate(self) -> None:
        if not self.sigma > 0:
            raise ConfigurationError(f'sigma must be positive, not {self.sigma}')
        # absolute thresholds in either order still classify every pixel
        if self.percentile:
            if not (0 <= self.lower_threshold <= 1 and 0 <= self.upper_threshold <= 1):
                raise ConfigurationError('Percentile thresholds must be fractions in [0, 1]')
            if self.lower_threshold > self.upper_threshold:
                raise ConfigurationError(f'The lower percentile ({self.lower_threshold}) cannot be greater than the '
                                         f'upper percentile ({self.upper_threshold})')
        NonMaxSuppressorOptions(radius=self.radius, theta=self.theta, border_mode=self.border_mode).validate()


class CannyEdgeDetector(UserOptionConfigured[CannyEdgeDetectorOptions],
                        EdgeDetector[DOUBLE_ARRAY],
                        CannyEdgeDetectorOptions):
    """
    This class implements the Canny edge detector.

    The image is smoothed, its gradients are thinned with non-maximal suppression, and the thinned edges are selected
    with hysteresis thresholding.  See the module documentation for details.

    :meth:`detect` returns the binary edge map.  :meth:`identify_edges` returns the edge locations as a 2xn array of
    [x; y] (refined to subpixel accuracy if :attr:`subpixel` is set) and :meth:`refine_edges` refines already known
    pixel level edges using the subpixel estimates of the non-maximal suppression.

    The intermediate products of the last call are kept as attributes (:attr:`gradient_magnitude`,
    :attr:`suppressed`, :attr:`thresholded`, and so on).
    """

    def __init__(self, options: CannyEdgeDetectorOptions | None = None) -> None:
        """
        :param options: the options to configure the class with
        """
        super().__init__(CannyEdgeDetectorOptions, options=options)

        self.suppressed: NDArray | None = None
        """
        The thinned gradient magnitude from the last detection
        """

        self.subpixel_locations: NDArray | None = None
        """
        The subpixel locations (:data:`.POINT_DTYPE`) of the local maxima from the last detection, if computed
        """

        self.thresholded: DOUBLE_ARRAY | None = None
        """
        The result of the hysteresis thresholding from the last detection
        """

        self.edge_mask: NDArray[np.bool_] | None = None
        """
        The binary edges from the last detection (``True`` at an edge)
        """

    def _suppressor(self) -> NonMaxSuppressor:
        return NonMaxSuppressor(NonMaxSuppressorOptions(radius=self.radius, theta=self.theta,
                                                        border_mode=self.border_mode))

    def suppress(self, subpixel: bool = False) -> None:
        """
        Thin the stored gradient magnitude and store the result in :attr:`suppressed`.

        :attr:`suppressed` always holds the unrefined local maxima so that the thresholds and the edge map do not
        depend on `subpixel`.  If `subpixel` is set the subpixel locations are computed in a separate pass into
        :attr:`subpixel_locations`, otherwise that attribute is reset to ``None``.

        :param subpixel: Whether to also compute the subpixel locations of the local maxima
        """

        assert self.gradient_magnitude is not None and self.gradient_phase is not None, "This should never happen"

        suppressor = self._suppressor()

        self.suppressed, _ = suppressor(self.gradient_magnitude, self.gradient_phase)

        if subpixel:
            self.subpixel_locations = np.zeros(self.suppressed.shape, dtype=POINT_DTYPE)
            # the refined peak values go into a scratch array and are discarded
            suppressor.suppress_into(np.zeros_like(self.suppressed), self.gradient_magnitude, self.gradient_phase,
                                     locations=self.subpixel_locations)
        else:
            self.subpixel_locations = None

    def select_thresholds(self, suppressed: NDArray) -> tuple[float, float]:
        """
        Determine the absolute upper and lower thresholds to use for the thinned gradient magnitude.

        If :attr:`percentile` is set the thresholds are the corresponding percentiles of every pixel of `suppressed`
        (zeros included).  Otherwise they are returned unchanged.

        :param suppressed: The thinned gradient magnitude
        :return: The upper and lower thresholds
        """
        if not self.percentile:
            return self.upper_threshold, self.lower_threshold

        upper, lower = np.percentile(suppressed.ravel(), [100 * self.upper_threshold, 100 * self.lower_threshold])

        return float(upper), float(lower)

    def prepare_edge_inputs(self, image: NDArray, method: str | None = None,
                            border_mode: str | BorderMode | None = None) -> None:
        """
        Smooth the image and then compute and store its gradients along with their magnitude and phase.

        :param image: The image to compute the gradients of.  Colour and integer images are converted to intensity.
        :param method: The gradient kernel to use.  Defaults to :attr:`gradient_method`
        :param border_mode: How to fill pixels outside of the image.  Defaults to :attr:`border_mode`
        """
        smoothed = GaussianSmoothing(GaussianSmoothingOptions(sigma_x=self.sigma))(to_intensity(image))

        super().prepare_edge_inputs(smoothed,
                                    self.gradient_method if method is None else method,
                                    self.border_mode if border_mode is None else border_mode)

    def detect(self, image: NDArray) -> NDArray[np.uint8]:
        """
        Detect the edges in an image.

        :param image: The image to detect the edges in.  2d or an RGB(A) colour image
        :return: A uint8 array the same shape as the image with 1 at edges and 0 elsewhere
        """

        self.prepare_edge_inputs(image)

        self.suppress(self.subpixel)

        assert self.suppressed is not None, "This should never happen"

        upper, lower = self.select_thresholds(self.suppressed)

        _LOGGER.debug(f'Hysteresis thresholds upper={upper}, lower={lower}')

        self.thresholded = hysteresis_threshold(self.suppressed, upper, lower)

        self.edge_mask = self.thresholded >= CONFIRMED

        return self.edge_mask.astype(np.uint8)

    def refine_edges(self, image: NDArray, edges: NDArray[np.int64]) -> DOUBLE_ARRAY:
        """
        Refine pixel level edges to subpixel accuracy.

        Edges that are local maxima of the non-maximal suppression get their subpixel location from the parabola fit.
        Any other edges are returned at their pixel location.

        :param image: The image the edges were found in
        :param edges: The pixel level edges as a 2xn array with x in the first row and y in the second row
        :return: The refined edges as a 2xn float array with x in the first row and y in the second row
        """

        edges = np.asarray(edges, dtype=np.int64)

        if self.subpixel_locations is None or self.suppressed is None:
            self.prepare_edge_inputs(image)

            self.suppress(subpixel=True)

        assert self.subpixel_locations is not None and self.suppressed is not None, "This should never happen"

        cols, rows = edges
        refined = edges.astype(np.float64)

        maxima = self.suppressed[rows, cols] != 0
        refined[0, maxima] = self.subpixel_locations["col"][rows[maxima], cols[maxima]]
        refined[1, maxima] = self.subpixel_locations["row"][rows[maxima], cols[maxima]]

        return refined

    def identify_edges(self, image: NDArray) -> DOUBLE_ARRAY:
        """
        Identify the edges in the image and return their locations.

        The edges are found with :meth:`detect`.  If :attr:`subpixel` is set they are then refined with
        :meth:`refine_edges`.

        :param image: The image to detect the edges in.
        :return: The edges as a 2xn array with x (column) components in the first row and y (row) components in the
                 second row
        """

        self.detect(image)

        assert self.edge_mask is not None, "This should never happen"

        edges = np.vstack(np.where(self.edge_mask))[::-1]

        if self.subpixel:
            return self.refine_edges(image, edges)

        return edges.astype(np.float64)


def canny(image: NDArray, sigma: float = 1.4, upper: float = 0.90, lower: float = 0.10,
          percentile: bool = True) -> NDArray[np.uint8]:
    """
    Perform Canny edge detection on an image.

    :param image: The image to detect the edges in.  2d or an RGB(A) colour image
    :param sigma: The standard deviation of the Gaussian smoothing kernel in pixels
    :param upper: The upper hysteresis threshold
    :param lower: The lower hysteresis threshold
    :param percentile: Whether `upper` and `lower` are fractions giving percentiles of the thinned gradient magnitude
                       (``True``) or absolute values (``False``)
    :return: A uint8 array the same shape as the image with 1 at edges and 0 elsewhere
    :raises ConfigurationError: If the settings are invalid
    """

    options = CannyEdgeDetectorOptions(sigma=sigma, upper_threshold=upper, lower_threshold=lower,
                                       percentile=percentile)

    return CannyEdgeDetector(options).detect(image)
