"""
Image loading and binarization.

Turns an image file into the binary mask consumed by the distance transform:
read the file, reduce colour images to a single luminance channel, normalize
intensities to [0, 1] and threshold them.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from danielsson.errors import InvalidInput

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.5

# Full-scale value of single channel modes, used to normalize to [0, 1]
_MODE_SCALE = {
    "L": 255.0,
    "I;16": 65535.0,
    "I;16L": 65535.0,
    "I;16B": 65535.0,
    "I;16N": 65535.0,
    "I": 65535.0,
    "F": 1.0,
}


def read_image(path: Union[str, Path]) -> Image.Image:
    """
    Read an image file fully into memory.

    Raises:
        FileNotFoundError: If the path does not exist
        PIL.UnidentifiedImageError: If the file is not a readable image
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Image file not found: {path}")

    with Image.open(path) as image:
        image.load()
        logger.debug(f"Read {path}: mode={image.mode}, size={image.size}")
        return image.copy()


def to_grayscale(image: Image.Image) -> np.ndarray:
    """
    Convert an image to a float64 array of intensities in [0, 1].

    Colour and palette images are reduced with Pillow's luminance conversion
    (alpha is dropped). Binary images map to 0.0 and 1.0.

    Args:
        image: Pillow image of any mode

    Returns:
        Array of shape [H, W]
    """
    if image.mode == "1":
        return np.asarray(image, dtype=np.float64)

    if image.mode not in _MODE_SCALE:
        logger.debug(f"Converting {image.mode} image to grayscale")
        image = image.convert("L")

    gray = np.asarray(image, dtype=np.float64) / _MODE_SCALE[image.mode]
    return np.clip(gray, 0.0, 1.0)


def validate_threshold(threshold: float) -> float:
    """Raise InvalidInput unless threshold is a number in [0, 1]."""
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float, np.floating)):
        raise InvalidInput(f"threshold must be a number, got {threshold!r}")
    if not 0.0 <= threshold <= 1.0:
        raise InvalidInput(f"threshold must satisfy 0 <= threshold <= 1, got {threshold}")
    return float(threshold)


def binarize(gray: np.ndarray, threshold: float = DEFAULT_THRESHOLD) -> np.ndarray:
    """
    Threshold normalized intensities into a binary mask.

    Args:
        gray: Intensities in [0, 1], shape [H, W]
        threshold: Pixels strictly above this level become foreground

    Returns:
        Boolean array of shape [H, W]
    """
    threshold = validate_threshold(threshold)
    gray = np.asarray(gray, dtype=np.float64)
    if gray.ndim != 2:
        raise InvalidInput(f"Expected a single channel image, got shape {gray.shape}")
    return gray > threshold


def load_mask(path: Union[str, Path], threshold: float = DEFAULT_THRESHOLD) -> np.ndarray:
    """
    Read an image file and return its binary mask.

    Images that are already binary (mode "1") are used as they are; all
    others are converted to grayscale and thresholded.

    Args:
        path: Image file path
        threshold: Binarization level in [0, 1]

    Returns:
        Boolean array of shape [H, W], True for foreground pixels
    """
    threshold = validate_threshold(threshold)
    image = read_image(path)

    if image.mode == "1":
        mask = np.asarray(image, dtype=bool)
    else:
        mask = binarize(to_grayscale(image), threshold)

    logger.info(f"Mask {mask.shape[0]}x{mask.shape[1]} with {int(mask.sum())} foreground pixels")
    return mask
