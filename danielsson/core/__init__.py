"""Core distance transform functionality for the danielsson package."""

from danielsson.core.vector_field import (
    UNREACHABLE,
    VectorField,
    as_mask,
    extract_distance_map,
    initialize_vector_field,
)
from danielsson.core.propagation import (
    PASSES,
    ScanPass,
    get_pass,
    propagate,
)
from danielsson.core.distance_transform import (
    DistanceFieldComputer,
    compute_distance_field,
)

__all__ = [
    "UNREACHABLE",
    "VectorField",
    "as_mask",
    "extract_distance_map",
    "initialize_vector_field",
    "PASSES",
    "ScanPass",
    "get_pass",
    "propagate",
    "DistanceFieldComputer",
    "compute_distance_field",
]
