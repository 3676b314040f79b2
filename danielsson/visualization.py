"""
Visualization utilities for distance maps.

Distance maps are drawn as images with equal aspect ratio, tight limits and
no axes. Unreachable (infinite) cells are masked out.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
import matplotlib.pyplot as plt
import torch

logger = logging.getLogger(__name__)


def to_numpy(distance_map: Union[np.ndarray, torch.Tensor]) -> np.ndarray:
    """Return the distance map as a float64 numpy array."""
    if isinstance(distance_map, torch.Tensor):
        distance_map = distance_map.detach().cpu().numpy()
    distance_map = np.asarray(distance_map, dtype=np.float64)
    if distance_map.ndim != 2:
        raise ValueError(f"Expected a distance map with shape [H, W], got {distance_map.shape}")
    return distance_map


def plot_distance_map(distance_map: Union[np.ndarray, torch.Tensor], ax: Optional[plt.Axes] = None,
                      cmap: str = "viridis", title: Optional[str] = None,
                      colorbar: bool = False) -> plt.Axes:
    """
    Draw a distance map.

    Args:
        distance_map: Distances [H, W]; inf marks unreachable cells
        ax: Optional axes to draw on
        cmap: Matplotlib colormap name
        title: Optional title for the plot
        colorbar: Whether to add a colorbar

    Returns:
        The matplotlib Axes used for plotting
    """
    values = np.ma.masked_invalid(to_numpy(distance_map))

    if ax is None:
        fig = plt.figure(figsize=(8, 8))
        ax = fig.add_subplot(111)

    image = ax.imshow(values, cmap=cmap, interpolation="nearest")
    ax.set_aspect("equal")
    ax.autoscale(tight=True)
    ax.axis("off")

    if title:
        ax.set_title(title)
    if colorbar:
        ax.figure.colorbar(image, ax=ax, label="distance (pixels)")

    return ax


def show_distance_map(distance_map: Union[np.ndarray, torch.Tensor],
                      output_path: Optional[Union[str, Path]] = None,
                      show: bool = True, cmap: str = "viridis",
                      title: Optional[str] = None) -> plt.Axes:
    """
    Plot a distance map, optionally save it, and show or close the figure.

    Args:
        distance_map: Distances [H, W]
        output_path: Optional path of an image file to save the figure to
        show: Whether to open a window with the figure
        cmap: Matplotlib colormap name
        title: Optional title for the plot

    Returns:
        The matplotlib Axes used for plotting
    """
    ax = plot_distance_map(distance_map, cmap=cmap, title=title, colorbar=True)
    fig = ax.figure
    fig.tight_layout()

    if output_path is not None:
        fig.savefig(output_path)
        logger.info(f"Saved distance map figure to {output_path}")

    if show:
        plt.show()
    else:
        plt.close(fig)

    return ax
