from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

import cv2


from edgethin.exceptions import ConfigurationError
from edgethin.image_processing.utilities.image_validation_mixin import ImageValidationMixin
from edgethin.utilities.mixin_classes import UserOptionConfigured
from edgethin.utilities.options import UserOptions


@dataclass
class GaussianSmoothingOptions(UserOptions):

    sigma_x: float = 1.4
    """
    Gaussian kernel standard deviation in the x (column) direction in pixels.
    """

    sigma_y: float | None = None
    """
    Gaussian kernel standard deviation in the y (row) direction in pixels.

    If ``None`` then this is the same as :attr:`sigma_x`.
    """

    size: tuple[int, int] = (0, 0)
    """
    Gaussian kernel size width, height.

    Must both be positive and odd or 0 which implies they should be computed from the sigmas.
    """

    border_type: int = cv2.BORDER_REPLICATE
    """
    The OpenCV pixel extrapolation method.

    BORDER_WRAP is not supported.
    """

    def validate(self) -> None:
        if self.sigma_x <= 0 or (self.sigma_y is not None and self.sigma_y <= 0):
            raise ConfigurationError('The Gaussian standard deviations must be positive')
        if any(s < 0 or (s > 0 and s % 2 == 0) for s in self.size):
            raise ConfigurationError('The Gaussian kernel size must be odd and positive or 0')
        if self.border_type == cv2.BORDER_WRAP:
            raise ConfigurationError('BORDER_WRAP is not supported for Gaussian smoothing')


class GaussianSmoothing(UserOptionConfigured[GaussianSmoothingOptions], GaussianSmoothingOptions,
                        ImageValidationMixin):
    """
    Uses gaussian smoothing to reduce noise in an image before its gradients are computed.

    All we do is convolve a 2d gaussian kernel with the image.  This suppresses the noise spikes that would otherwise
    show up as spurious edges, at the cost of blurring (and slightly displacing) the true edges.  Larger sigmas give
    cleaner but less detailed edge maps.

    The image is converted to a float64 intensity image first (see :func:`.to_intensity`).
    """

    allowed_dtypes = [np.float64]
    """
    The allowed datatype.  Everything else is converted to float64 intensity.
    """

    def __init__(self, options: GaussianSmoothingOptions | None = None) -> None:
        """
        :param options: the options to configure the class with
        """
        super().__init__(GaussianSmoothingOptions, options=options)

    def __call__(self, image: NDArray) -> NDArray[np.float64]:
        sigma_y = self.sigma_x if self.sigma_y is None else self.sigma_y
        return cv2.GaussianBlur(self._validate_and_convert_image(image), self.size, self.sigma_x, None, sigma_y,
                                self.border_type)
