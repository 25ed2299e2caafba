"""
This package provides the smoothing filters applied to images before their gradients are computed.
"""

from edgethin.image_processing.denoising.gaussian import GaussianSmoothing, GaussianSmoothingOptions

__all__ = ["GaussianSmoothing", "GaussianSmoothingOptions"]
