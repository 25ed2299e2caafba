"""
This package provides edge detection and edge thinning.

The :mod:`.non_max_suppression` module thins edge strength images down to single pixel wide edges (optionally locating
them to subpixel accuracy), the :mod:`.hysteresis` module selects edges using two connected thresholds, and the
:mod:`.canny_edge_detector` module combines them with smoothing and gradient computation into the Canny edge detector.
"""

from enum import Enum, auto

import edgethin.image_processing.edge_detection.edge_detector_base as edge_detector_base
import edgethin.image_processing.edge_detection.non_max_suppression as non_max_suppression
import edgethin.image_processing.edge_detection.hysteresis as hysteresis
import edgethin.image_processing.edge_detection.canny_edge_detector as canny_edge_detector

from edgethin.image_processing.edge_detection.edge_detector_base import EdgeDetector
from edgethin.image_processing.edge_detection.non_max_suppression import (Point, POINT_DTYPE, point_at, CoordOffset,
                                                                          AngleOffsetTable, interpolate_offset,
                                                                          NonMaxSuppressor, NonMaxSuppressorOptions,
                                                                          non_max_suppress, non_max_suppress_into,
                                                                          thin_edges, thin_edges_subpix)
from edgethin.image_processing.edge_detection.hysteresis import hysteresis_threshold
from edgethin.image_processing.edge_detection.canny_edge_detector import (CannyEdgeDetector, CannyEdgeDetectorOptions,
                                                                          canny)


__all__ = ["EdgeDetector",
           "Point", "POINT_DTYPE", "point_at", "CoordOffset", "AngleOffsetTable", "interpolate_offset",
           "NonMaxSuppressor", "NonMaxSuppressorOptions", "non_max_suppress", "non_max_suppress_into",
           "thin_edges", "thin_edges_subpix",
           "hysteresis_threshold",
           "CannyEdgeDetector", "CannyEdgeDetectorOptions", "canny",
           "EdgeDetectionMethods"]


class EdgeDetectionMethods(Enum):
    """
    An enum specifying the available edge detection techniques
    """

    CANNY_EDGE_DETECTOR = auto()
    """
    Detect thin, connected edges using the Canny method (smoothing, non-maximal suppression, and hysteresis
    thresholding).

    See :class:`.CannyEdgeDetector` for more details.
    """

    CUSTOM_DETECTOR = auto()
    """
    Detect edges with a custom, user implemented detector.

    See the :class:`.EdgeDetector` abstract base class for the required interface.
    """
