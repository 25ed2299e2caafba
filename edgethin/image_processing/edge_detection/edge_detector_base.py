from typing import TypeVar, Generic

from abc import ABCMeta, abstractmethod

import numpy as np
from numpy.typing import NDArray

from edgethin.image_processing.border import BorderMode
from edgethin.image_processing.gradients import image_gradients, magnitude_phase
from edgethin._typing import DOUBLE_ARRAY


EdgeType = TypeVar('EdgeType')
"""
A typevar for the EdgeDetection meta class specifying the type of the returned edges.
"""


class EdgeDetector(Generic[EdgeType], metaclass=ABCMeta):
    """
    An ABC for edge detectors.

    Generally, an edge detector should subclass this class.  The :meth:`prepare_edge_inputs` method computes and
    stores the gradient products most detectors need.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)

        self.horizontal_gradient: DOUBLE_ARRAY | None = None
        """
        The gradient in the horizontal (left to right) direction
        """

        self.vertical_gradient: DOUBLE_ARRAY | None = None
        """
        The gradient in the vertical (top to bottom) direction
        """

        self.gradient_magnitude: DOUBLE_ARRAY | None = None
        """
        The magnitude of the gradient vector
        """

        self.gradient_phase: DOUBLE_ARRAY | None = None
        """
        The direction of steepest ascent in radians (see :func:`.phase`)
        """

    def prepare_edge_inputs(self, image: NDArray, method: str = "sobel",
                            border_mode: str | BorderMode = BorderMode.REPLICATE) -> None:
        """
        Compute and store the gradients of the image along with their magnitude and phase.

        :param image: The 2d (already smoothed) image to compute the gradients of
        :param method: The gradient kernel to use (see :func:`.image_gradients`)
        :param border_mode: How to fill pixels outside of the image
        """

        horizontal_gradient, vertical_gradient = image_gradients(image, method, border_mode)

        gradient_magnitude, gradient_phase = magnitude_phase(horizontal_gradient, vertical_gradient)

        self.horizontal_gradient = horizontal_gradient
        self.vertical_gradient = vertical_gradient
        self.gradient_magnitude = gradient_magnitude
        self.gradient_phase = gradient_phase

    @abstractmethod
    def refine_edges(self, image: NDArray, edges: NDArray[np.int64]) -> EdgeType:
        """
        This method should take prior edge locations and refine them to be more accurate (or just return the input).

        :param image: The image the edges are to be refined in
        :param edges: The rough edge locations that are to be refined as a 2xn array of [x; y]
        """
        pass

    @abstractmethod
    def identify_edges(self, image: NDArray) -> EdgeType:
        """
        This method should identify edges in an image and then refine them according to the method.

        This differs from :meth:`.refine_edges` in that the rough edge points are not already known.

        :param image: the image the edges are to be identified in.
        """
        pass
