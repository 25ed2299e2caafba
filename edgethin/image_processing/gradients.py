"""
This module provides the gradient computations that feed edge detection and edge thinning.

The image gradients are computed by correlating a small finite-difference kernel with the image (:func:`image_gradients`).
From the horizontal and vertical gradients the magnitude of the gradient (:func:`magnitude`), the direction of steepest
ascent (:func:`phase`), and the direction of the edge itself (:func:`orientation`) can then be computed.

Throughout, the horizontal gradient is the derivative with respect to increasing column index and the vertical gradient
is the derivative with respect to increasing row index (that is, down the image).  The phase negates the vertical gradient
so that angles are measured counter-clockwise as seen on screen, which is the convention expected by
:func:`.non_max_suppress`.
"""

import numpy as np
from numpy.typing import NDArray

import scipy.ndimage as ndimage

from edgethin.exceptions import ConfigurationError
from edgethin.image_processing.border import BorderMode
from edgethin._typing import DOUBLE_ARRAY, ARRAY_LIKE_2D


SOBEL_KERNEL: DOUBLE_ARRAY = np.array([[-1, 0, 1],
                                       [-2, 0, 2],
                                       [-1, 0, 1]]) / 8
"""
The horizontal Sobel kernel for correlating with an image when computing the horizontal image gradients.

The vertical kernel is the transpose.  The kernel is scaled so that a ramp increasing by 1 per pixel has a gradient of 1.

https://www.researchgate.net/publication/239398674_An_Isotropic_3x3_Image_Gradient_Operator
"""

PREWITT_KERNEL: DOUBLE_ARRAY = np.array([[-1, 0, 1],
                                         [-1, 0, 1],
                                         [-1, 0, 1]]) / 6
"""
The horizontal Prewitt kernel for correlating with an image when computing the horizontal image gradients.
"""

ANDO3_KERNEL: DOUBLE_ARRAY = np.array([[-0.112737, 0, 0.112737],
                                       [-0.274526, 0, 0.274526],
                                       [-0.112737, 0, 0.112737]])
"""
The horizontal 3x3 consistent gradient kernel of Ando, which minimizes the error in the gradient direction.

S. Ando, "Consistent gradient operators," IEEE PAMI, 22(3), 2000.
"""

SCHARR_KERNEL: DOUBLE_ARRAY = np.array([[-3, 0, 3],
                                        [-10, 0, 10],
                                        [-3, 0, 3]]) / 32
"""
The horizontal Scharr kernel for correlating with an image when computing the horizontal image gradients.
"""

GRADIENT_KERNELS: dict[str, DOUBLE_ARRAY] = {"sobel": SOBEL_KERNEL,
                                             "prewitt": PREWITT_KERNEL,
                                             "ando3": ANDO3_KERNEL,
                                             "scharr": SCHARR_KERNEL}
"""
The available gradient methods mapped to their horizontal kernels.
"""


def _check_gradient_shapes(grad_x: NDArray, grad_y: NDArray) -> None:
    if grad_x.shape != grad_y.shape:
        raise ConfigurationError(f'The gradient arrays must be the same shape ({grad_x.shape} != {grad_y.shape})')


def _angle_tolerance(values: NDArray) -> float:
    """
    The tolerance below which a gradient component is considered to be 0.

    This is the square root of the machine epsilon of the result type (float64 for integer inputs).
    """
    return float(np.sqrt(np.finfo(np.result_type(values, np.float32)).eps))


def image_gradients(image: ARRAY_LIKE_2D, method: str = "ando3",
                    border_mode: str | BorderMode = BorderMode.REPLICATE) -> tuple[DOUBLE_ARRAY, DOUBLE_ARRAY]:
    """
    Compute the horizontal and vertical gradients of a 2d image.

    The gradients are computed by correlating the kernel named by `method` (and its transpose) with the image using
    ``scipy.ndimage.correlate``.  Pixels outside of the image are filled according to `border_mode`.

    >>> import numpy as np
    >>> from edgethin.image_processing import image_gradients
    >>> ramp = np.tile(np.arange(5, dtype=np.float64), (4, 1))
    >>> grad_x, grad_y = image_gradients(ramp, "sobel")
    >>> float(grad_x[1, 2]), float(grad_y[1, 2])
    (1.0, 0.0)

    :param image: The 2d image to compute the gradients of
    :param method: The gradient kernel to use.  One of the keys of :data:`GRADIENT_KERNELS`
    :param border_mode: How to fill pixels outside of the image
    :return: The horizontal (left to right) and vertical (top to bottom) gradients as float64 arrays
    :raises ConfigurationError: If the image is not 2d or the method/border mode are unknown
    """

    image = np.asarray(image, dtype=np.float64)

    if image.ndim != 2:
        raise ConfigurationError('The image must be 2d to compute the gradients')

    try:
        kernel = GRADIENT_KERNELS[method.lower()]
    except KeyError:
        raise ConfigurationError(f'Unknown gradient method {method!r}.  '
                                 f'Must be one of {list(GRADIENT_KERNELS.keys())}') from None

    mode = BorderMode.parse(border_mode).ndimage_mode

    grad_x = ndimage.correlate(image, kernel, mode=mode)
    grad_y = ndimage.correlate(image, kernel.T, mode=mode)

    return grad_x, grad_y


def magnitude(grad_x: ARRAY_LIKE_2D, grad_y: ARRAY_LIKE_2D) -> NDArray[np.floating]:
    """
    Calculate the magnitude of the gradient from the horizontal and vertical gradients.

    This is equivalent to ``sqrt(grad_x**2 + grad_y**2)`` but avoids overflow.

    :param grad_x: The horizontal gradient
    :param grad_y: The vertical gradient
    :return: The gradient magnitude, the same shape as the inputs
    """
    grad_x = np.asanyarray(grad_x)
    grad_y = np.asanyarray(grad_y)

    _check_gradient_shapes(grad_x, grad_y)

    return np.hypot(grad_x, grad_y)


def phase(grad_x: ARRAY_LIKE_2D, grad_y: ARRAY_LIKE_2D) -> NDArray[np.floating]:
    """
    Calculate the direction of steepest ascent from the horizontal and vertical gradients.

    This is equivalent to ``arctan2(-grad_y, grad_x)``.  Where both gradients are within ``sqrt(eps)`` of 0 the phase
    is set to 0.

    :param grad_x: The horizontal gradient
    :param grad_y: The vertical gradient
    :return: The phase in radians, in [-pi, pi], the same shape as the inputs
    """
    grad_x = np.asanyarray(grad_x)
    grad_y = np.asanyarray(grad_y)

    _check_gradient_shapes(grad_x, grad_y)

    tol = _angle_tolerance(grad_x)
    flat = (np.abs(grad_x) <= tol) & (np.abs(grad_y) <= tol)

    return np.where(flat, 0.0, np.arctan2(-grad_y, grad_x))


def orientation(grad_x: ARRAY_LIKE_2D, grad_y: ARRAY_LIKE_2D) -> NDArray[np.floating]:
    """
    Calculate the orientation of the strongest edge from the horizontal and vertical gradients.

    This is equivalent to ``arctan2(grad_x, grad_y)``.  Where both gradients are within ``sqrt(eps)`` of 0 the
    orientation is set to 0.

    .. note::
        The vertical gradient is not negated here (unlike :func:`phase`) so the result is not simply the phase rotated
        by 90 degrees.  This matches the long standing behavior of this function and is kept for consistency.

    :param grad_x: The horizontal gradient
    :param grad_y: The vertical gradient
    :return: The orientation in radians, in [-pi, pi], the same shape as the inputs
    """
    grad_x = np.asanyarray(grad_x)
    grad_y = np.asanyarray(grad_y)

    _check_gradient_shapes(grad_x, grad_y)

    tol = _angle_tolerance(grad_x)
    flat = (np.abs(grad_x) <= tol) & (np.abs(grad_y) <= tol)

    return np.where(flat, 0.0, np.arctan2(grad_x, grad_y))


def magnitude_phase(grad_x: ARRAY_LIKE_2D, grad_y: ARRAY_LIKE_2D) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
    """
    Convenience function returning both the :func:`magnitude` and the :func:`phase` of the gradients.

    :param grad_x: The horizontal gradient
    :param grad_y: The vertical gradient
    :return: The magnitude and phase arrays
    """
    return magnitude(grad_x, grad_y), phase(grad_x, grad_y)


def magnitude_phase_from_image(image: ARRAY_LIKE_2D, method: str = "ando3",
                               border_mode: str | BorderMode = BorderMode.REPLICATE) -> tuple[DOUBLE_ARRAY, DOUBLE_ARRAY]:
    """
    Compute the gradients of an image with :func:`image_gradients` and return their magnitude and phase.

    :param image: The 2d image
    :param method: The gradient kernel to use
    :param border_mode: How to fill pixels outside of the image
    :return: The magnitude and phase arrays
    """
    return magnitude_phase(*image_gradients(image, method, border_mode))


def imedge(image: ARRAY_LIKE_2D, method: str = "ando3",
           border_mode: str | BorderMode = BorderMode.REPLICATE) -> tuple[DOUBLE_ARRAY, DOUBLE_ARRAY,
                                                                          DOUBLE_ARRAY, DOUBLE_ARRAY]:
    """
    Edge-detection filtering.

    Computes the gradients of the image with :func:`image_gradients` and then the magnitude and :func:`orientation` of
    the strongest edge at each pixel.

    :param image: The 2d image
    :param method: The gradient kernel to use
    :param border_mode: How to fill pixels outside of the image
    :return: The horizontal gradient, vertical gradient, magnitude, and orientation arrays
    """
    grad_x, grad_y = image_gradients(image, method, border_mode)

    return grad_x, grad_y, magnitude(grad_x, grad_y), orientation(grad_x, grad_y)
