"""
Danielsson distance maps for binary images.

This package computes the discrete distance map of a 2D binary mask with
Danielsson's four-pass vector propagation, and provides the image loading
and display helpers used by the ``danielsson-distance-map`` script.
"""

from .errors import InvalidInput
from .core import (
    DistanceFieldComputer,
    VectorField,
    compute_distance_field,
    extract_distance_map,
    initialize_vector_field,
    propagate,
    PASSES,
)
