"""
Padded vector field used by Danielsson's distance transform.

The field stores, for every pixel of the mask, the displacement vector
(drow, dcol) to the nearest foreground pixel found so far together with its
Euclidean norm. A one-cell ring of sentinel cells surrounds the mask so that
every interior cell has four neighbours and propagation never wraps around
the image edges.
"""

from typing import Optional, Sequence, Union

import numpy as np
import torch

from danielsson.errors import InvalidInput


# Channels of the field tensor
ROW = 0
COL = 1
NORM = 2

# Sentinel value for cells without a known foreground pixel
UNREACHABLE = float("inf")

MaskLike = Union[np.ndarray, torch.Tensor, Sequence[Sequence[object]]]


def as_mask(mask: MaskLike) -> torch.Tensor:
    """
    Convert a mask to a 2D boolean tensor.

    Non-zero entries are foreground. Nested sequences must be rectangular.

    Args:
        mask: Binary mask as numpy array, torch tensor or nested sequence

    Returns:
        Boolean tensor of shape [H, W] on the CPU

    Raises:
        InvalidInput: If the mask is not a non-empty rectangular 2D grid
    """
    if isinstance(mask, torch.Tensor):
        tensor = mask.detach().cpu()
    elif isinstance(mask, np.ndarray):
        tensor = torch.from_numpy(np.ascontiguousarray(mask != 0))
    elif isinstance(mask, (list, tuple)):
        widths = set()
        for row in mask:
            if not isinstance(row, (list, tuple, np.ndarray)):
                raise InvalidInput(f"Mask rows must be sequences, got {type(row).__name__}")
            widths.add(len(row))
        if len(widths) > 1:
            raise InvalidInput(f"Mask is not rectangular, found row lengths {sorted(widths)}")
        tensor = torch.from_numpy(np.asarray(mask) != 0) if mask else torch.zeros((0, 0), dtype=torch.bool)
    else:
        raise InvalidInput(f"Unsupported mask type: {type(mask).__name__}")

    if tensor.dim() != 2:
        raise InvalidInput(f"Mask must be two-dimensional, got shape {tuple(tensor.shape)}")

    height, width = tensor.shape
    if height <= 0 or width <= 0:
        raise InvalidInput(f"Mask dimensions must be positive, got {height}x{width}")

    if tensor.dtype != torch.bool:
        tensor = tensor != 0
    return tensor


class VectorField:
    """
    Displacement vectors of every pixel, padded with a sentinel ring.

    The data tensor has shape [3, H + 2, W + 2] and dtype float64:
    - data[ROW]: row component of the displacement
    - data[COL]: column component of the displacement
    - data[NORM]: Euclidean norm of the displacement (current distance estimate)

    Interior cell (i, j) of the mask lives at data[:, i + 1, j + 1].
    """

    def __init__(self, height: int, width: int, device: Optional[Union[str, torch.device]] = None):
        """
        Allocate a field where every cell holds the sentinel vector.

        Args:
            height: Height of the mask in pixels
            width: Width of the mask in pixels
            device: Torch device of the field tensor

        Raises:
            InvalidInput: If height or width is not positive
        """
        if height <= 0 or width <= 0:
            raise InvalidInput(f"Field dimensions must be positive, got {height}x{width}")

        self.height = height
        self.width = width
        self.data = torch.full(
            (3, height + 2, width + 2), UNREACHABLE, dtype=torch.float64, device=device
        )

    @property
    def device(self) -> torch.device:
        return self.data.device

    @property
    def shape(self):
        """Shape (H, W) of the unpadded mask."""
        return (self.height, self.width)

    def interior(self) -> torch.Tensor:
        """View [3, H, W] of the field without the sentinel ring."""
        return self.data[:, 1:-1, 1:-1]

    def displacements(self) -> torch.Tensor:
        """Copy of the interior displacement vectors, shape [2, H, W]."""
        return self.interior()[ROW:COL + 1].clone()

    def norms(self) -> torch.Tensor:
        """Copy of the interior norms, shape [H, W]."""
        return self.interior()[NORM].clone()

    def clone(self) -> "VectorField":
        other = VectorField.__new__(VectorField)
        other.height = self.height
        other.width = self.width
        other.data = self.data.clone()
        return other

    def __repr__(self) -> str:
        return f"VectorField(height={self.height}, width={self.width}, device={self.device})"


def initialize_vector_field(
    mask: MaskLike,
    device: Optional[Union[str, torch.device]] = None
) -> VectorField:
    """
    Build the padded vector field for a binary mask.

    Foreground pixels get the zero vector (distance 0). Background pixels and
    the border ring get the sentinel vector of infinite norm.

    Args:
        mask: Binary mask [H, W], non-zero values are foreground
        device: Torch device of the field tensor

    Returns:
        Newly allocated VectorField

    Raises:
        InvalidInput: If the mask is not a non-empty rectangular 2D grid
    """
    mask = as_mask(mask)
    height, width = mask.shape

    field = VectorField(height, width, device=device)
    interior = field.interior()
    interior[:, mask.to(field.device)] = 0.0
    return field


def extract_distance_map(field: VectorField) -> torch.Tensor:
    """
    Project the norm channel of a field onto an [H, W] distance map.

    Args:
        field: Converged vector field

    Returns:
        Float64 tensor of distances; UNREACHABLE where no foreground exists
    """
    distance_map = field.norms()
    if distance_map.shape != (field.height, field.width):
        raise ValueError(
            f"Field interior has shape {tuple(distance_map.shape)}, expected {field.shape}"
        )
    return distance_map
