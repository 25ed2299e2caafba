import numpy as np
from numpy.typing import NDArray, DTypeLike

import cv2

from edgethin.exceptions import ConfigurationError


def to_intensity(image: NDArray, dtype: DTypeLike = np.float64) -> NDArray[np.floating]:
    """
    Convert an image into a single channel floating point intensity image.

    Colour images (3d arrays with 3 or 4 channels in the last axis, RGB or RGBA order) are converted to grayscale with
    OpenCV.  Integer images are scaled into [0, 1] by the maximum of their integer type (so a uint8 image is divided by
    255).  Boolean images become 0/1.  Floating point images are only cast.

    :param image: The image to convert
    :param dtype: The floating point type of the result
    :return: The 2d intensity image
    :raises ConfigurationError: If the image is not 2d and not a 3 or 4 channel colour image
    """

    image = np.asarray(image)

    if image.dtype == np.bool_:
        image = image.astype(dtype)
    elif np.issubdtype(image.dtype, np.integer):
        # scale before casting so the colour conversion sees normalized data
        image = image.astype(np.float64) / np.iinfo(image.dtype).max

    if image.ndim == 3:
        if image.shape[-1] == 3:
            conversion = cv2.COLOR_RGB2GRAY
        elif image.shape[-1] == 4:
            conversion = cv2.COLOR_RGBA2GRAY
        else:
            raise ConfigurationError(f'Unable to convert an image with {image.shape[-1]} channels to intensity')

        # cvtColor does not accept float64
        image = cv2.cvtColor(image.astype(np.float32), conversion)

    if image.ndim != 2:
        raise ConfigurationError(f'The image must be 2d (or a colour image) not {image.ndim}d')

    return image.astype(dtype, copy=False)


class ImageValidationMixin:
    """
    A mixin class that provides functionality for validating and converting image data types.

    This mixin is designed to be used with image processing classes that require specific data types for their input
    images.  It ensures that the input image is a 2d image of an allowed data type before processing, and converts it if
    necessary.

    Attributes:
        allowed_dtypes (list[DTypeLike]): A list of allowed data types for the image.  The first one is the conversion
            target.  This must be implemented by subclasses.
    """

    allowed_dtypes: list[DTypeLike]
    """
    A list of dtypes allowed by the class.

    This must be implemented by subclasses.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)

        if not getattr(self, 'allowed_dtypes', None):
            raise NotImplementedError(f'allowed_dtypes must be specified as a class attribute for {self.__class__.__name__}')

    def _validate_and_convert_image(self, image: NDArray) -> NDArray:
        """
        Checks if an image is a 2d image of an allowed dtype and converts it with :func:`to_intensity` if not.

        :param image: the image to validate
        :returns: The image as the right dtype
        """
        image = np.asarray(image)

        if image.ndim == 2 and image.dtype in self.allowed_dtypes:
            return image

        return to_intensity(image, self.allowed_dtypes[0])
