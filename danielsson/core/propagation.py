"""
Directional propagation passes of Danielsson's algorithm.

Each pass sweeps the padded vector field from one corner to the opposite one.
At every cell the vector is replaced by the shortest of three candidates:
the cell's own vector, the vertical upstream neighbour's vector plus a unit
offset, and the horizontal upstream neighbour's vector plus a unit offset.
Candidates are compared in that fixed order and a tie keeps the earlier one.

Two executors are provided:
- sequential: visits the cells in raster order, exactly as listed in PASSES
- wavefront: updates one anti-diagonal at a time with vectorized torch
  operations; both upstream neighbours of a cell lie on the previous
  anti-diagonal, so the result is identical to the raster order
"""

import logging
from typing import NamedTuple, Union

import numpy as np
import torch

from danielsson.core.vector_field import ROW, COL, NORM, VectorField

logger = logging.getLogger(__name__)


class ScanPass(NamedTuple):
    """
    Scan order and neighbourhood of one propagation pass.

    Attributes:
        index: Position of the pass in the fixed 1..4 sequence
        name: Direction the distance information travels toward
        row_step: -1 to scan rows from H to 1, +1 to scan rows from 1 to H
        col_step: -1 to scan columns from W to 1, +1 to scan columns from 1 to W
        vertical_offset: Row offset of the vertical upstream neighbour, also the
            unit vector added to its displacement
        horizontal_offset: Column offset of the horizontal upstream neighbour, also
            the unit vector added to its displacement
    """
    index: int
    name: str
    row_step: int
    col_step: int
    vertical_offset: int
    horizontal_offset: int


NORTH_WEST = ScanPass(1, "north-west", row_step=-1, col_step=-1, vertical_offset=1, horizontal_offset=1)
NORTH_EAST = ScanPass(2, "north-east", row_step=-1, col_step=1, vertical_offset=1, horizontal_offset=-1)
SOUTH_WEST = ScanPass(3, "south-west", row_step=1, col_step=-1, vertical_offset=-1, horizontal_offset=1)
SOUTH_EAST = ScanPass(4, "south-east", row_step=1, col_step=1, vertical_offset=-1, horizontal_offset=-1)

# Passes in the order they must run
PASSES = (NORTH_WEST, NORTH_EAST, SOUTH_WEST, SOUTH_EAST)

SEQUENTIAL = "sequential"
WAVEFRONT = "wavefront"
METHODS = (SEQUENTIAL, WAVEFRONT)
DEFAULT_METHOD = WAVEFRONT


def get_pass(scan_pass: Union[ScanPass, str, int]) -> ScanPass:
    """Look up a pass by ScanPass, name ("north-west", ...) or index (1..4)."""
    if isinstance(scan_pass, ScanPass):
        return scan_pass
    for candidate in PASSES:
        if scan_pass == candidate.name or scan_pass == candidate.index:
            return candidate
    raise ValueError(f"Unknown pass: {scan_pass!r}")


def _padded_range(size: int, step: int) -> range:
    # Interior cells occupy padded indices 1..size
    if step > 0:
        return range(1, size + 1)
    return range(size, 0, -1)


# Candidates in comparison order
SELF = 0
VERTICAL = 1
HORIZONTAL = 2


def _first_minimum(self_sq: float, vertical_sq: float, horizontal_sq: float) -> int:
    """Candidate with the smallest squared norm; a tie goes to the earlier candidate."""
    choice, best = SELF, self_sq
    if vertical_sq < best:
        choice, best = VERTICAL, vertical_sq
    if horizontal_sq < best:
        choice = HORIZONTAL
    return choice


def _first_minimum_batch(
    self_sq: torch.Tensor,
    vertical_sq: torch.Tensor,
    horizontal_sq: torch.Tensor
) -> torch.Tensor:
    """Elementwise _first_minimum, returns a long tensor of SELF/VERTICAL/HORIZONTAL."""
    choice = torch.full(self_sq.shape, SELF, dtype=torch.long, device=self_sq.device)
    take_v = vertical_sq < self_sq
    choice = choice.masked_fill(take_v, VERTICAL)
    best = torch.where(take_v, vertical_sq, self_sq)
    return choice.masked_fill(horizontal_sq < best, HORIZONTAL)


def _refresh_norms(field: VectorField) -> None:
    """Recompute the norm channel from the displacements."""
    # Squared norms of integer displacements are exact; numpy's sqrt is
    # correctly rounded, torch's vectorized one is not on every CPU.
    rows = field.data[ROW].cpu().numpy()
    cols = field.data[COL].cpu().numpy()
    norms = np.sqrt(rows * rows + cols * cols)
    field.data[NORM] = torch.from_numpy(norms).to(field.device)


def _propagate_sequential(field: VectorField, scan_pass: ScanPass) -> int:
    """Raster-order executor. Returns the number of cells that adopted a neighbour."""
    data = field.data.cpu()
    rows = data[ROW].tolist()
    cols = data[COL].tolist()

    dv = scan_pass.vertical_offset
    dh = scan_pass.horizontal_offset
    updated = 0

    for i in _padded_range(field.height, scan_pass.row_step):
        row_i = rows[i]
        col_i = cols[i]
        row_up = rows[i + dv]
        col_up = cols[i + dv]
        for j in _padded_range(field.width, scan_pass.col_step):
            sr = row_i[j]
            sc = col_i[j]
            vr = row_up[j] + dv
            vc = col_up[j]
            hr = row_i[j + dh]
            hc = col_i[j + dh] + dh

            choice = _first_minimum(sr * sr + sc * sc, vr * vr + vc * vc, hr * hr + hc * hc)
            if choice == VERTICAL:
                row_i[j] = vr
                col_i[j] = vc
                updated += 1
            elif choice == HORIZONTAL:
                row_i[j] = hr
                col_i[j] = hc
                updated += 1

    field.data[ROW:COL + 1] = torch.tensor([rows, cols], dtype=torch.float64)
    return updated


def _propagate_wavefront(field: VectorField, scan_pass: ScanPass) -> int:
    """Anti-diagonal executor. Returns the number of cells that adopted a neighbour."""
    data = field.data
    device = data.device
    height, width = field.height, field.width
    dv = scan_pass.vertical_offset
    dh = scan_pass.horizontal_offset
    updated = 0

    # Steps a (rows) and b (columns) count cells from the pass's starting corner;
    # cells with equal a + b are independent of each other within the pass.
    for k in range(height + width - 1):
        a = torch.arange(max(0, k - width + 1), min(height - 1, k) + 1, device=device)
        b = k - a
        i = a + 1 if scan_pass.row_step > 0 else height - a
        j = b + 1 if scan_pass.col_step > 0 else width - b

        # Candidate vectors stacked in comparison order: [3, n]
        cand_r = torch.stack([data[ROW, i, j], data[ROW, i + dv, j] + dv, data[ROW, i, j + dh]])
        cand_c = torch.stack([data[COL, i, j], data[COL, i + dv, j], data[COL, i, j + dh] + dh])
        squares = cand_r * cand_r + cand_c * cand_c

        choice = _first_minimum_batch(squares[SELF], squares[VERTICAL], squares[HORIZONTAL])
        data[ROW, i, j] = cand_r.gather(0, choice.unsqueeze(0)).squeeze(0)
        data[COL, i, j] = cand_c.gather(0, choice.unsqueeze(0)).squeeze(0)
        updated += int((choice != SELF).sum().item())

    return updated


def propagate(
    field: VectorField,
    scan_pass: Union[ScanPass, str, int],
    method: str = DEFAULT_METHOD
) -> VectorField:
    """
    Run one propagation pass over the field, in place.

    Candidates are compared on their exact squared norms; the norm channel is
    recomputed once the pass is complete.

    Args:
        field: Vector field to update
        scan_pass: Pass to run (ScanPass, name or index)
        method: "sequential" for raster order, "wavefront" for anti-diagonal order

    Returns:
        The same field, for chaining
    """
    scan_pass = get_pass(scan_pass)
    if method == SEQUENTIAL:
        updated = _propagate_sequential(field, scan_pass)
    elif method == WAVEFRONT:
        updated = _propagate_wavefront(field, scan_pass)
    else:
        raise ValueError(f"Unknown propagation method: {method!r}, expected one of {METHODS}")
    _refresh_norms(field)

    logger.debug(f"Pass {scan_pass.index} ({scan_pass.name}, {method}): {updated} cells updated")
    return field
