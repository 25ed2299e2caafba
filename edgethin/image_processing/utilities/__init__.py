"""
Helpers shared by the image processing classes.
"""

from edgethin.image_processing.utilities.image_validation_mixin import ImageValidationMixin, to_intensity

__all__ = ["ImageValidationMixin", "to_intensity"]
