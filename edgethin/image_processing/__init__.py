"""
This package provides the image processing techniques of edgethin.

The functionality provided in this package computes image gradients and their magnitude, phase, and orientation
(:mod:`.gradients`), smooths images (:class:`.GaussianSmoothing`), thins edge images with non-maximal suppression
(:class:`.NonMaxSuppressor`), thresholds them with hysteresis (:func:`.hysteresis_threshold`), and puts it all together
into the Canny edge detector (:class:`.CannyEdgeDetector`, :func:`.canny`).
"""

import edgethin.image_processing.border as border
import edgethin.image_processing.gradients as gradients
import edgethin.image_processing.denoising as denoising
import edgethin.image_processing.edge_detection as edge_detection

from edgethin.image_processing.border import BorderMode, padded_indices
from edgethin.image_processing.gradients import (image_gradients, magnitude, phase, orientation, magnitude_phase,
                                                 magnitude_phase_from_image, imedge)
from edgethin.image_processing.denoising import GaussianSmoothing, GaussianSmoothingOptions
from edgethin.image_processing.edge_detection import (EdgeDetector, EdgeDetectionMethods,
                                                      Point, POINT_DTYPE, point_at, CoordOffset, AngleOffsetTable,
                                                      interpolate_offset, NonMaxSuppressor, NonMaxSuppressorOptions,
                                                      non_max_suppress, non_max_suppress_into,
                                                      thin_edges, thin_edges_subpix,
                                                      hysteresis_threshold,
                                                      CannyEdgeDetector, CannyEdgeDetectorOptions, canny)

__all__ = ["BorderMode", "padded_indices",
           "image_gradients", "magnitude", "phase", "orientation", "magnitude_phase", "magnitude_phase_from_image",
           "imedge",
           "GaussianSmoothing", "GaussianSmoothingOptions",
           "EdgeDetector", "EdgeDetectionMethods",
           "Point", "POINT_DTYPE", "point_at", "CoordOffset", "AngleOffsetTable", "interpolate_offset",
           "NonMaxSuppressor", "NonMaxSuppressorOptions", "non_max_suppress", "non_max_suppress_into",
           "thin_edges", "thin_edges_subpix",
           "hysteresis_threshold",
           "CannyEdgeDetector", "CannyEdgeDetectorOptions", "canny"]
