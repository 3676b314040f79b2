#!/usr/bin/env python3
"""
Compute the Danielsson distance map of an image.

The image is read, converted to grayscale if it has several channels,
thresholded into a binary mask (unless it is already binary), and the distance
of every pixel to the nearest foreground pixel is computed and displayed.

Usage:
    danielsson_distance_map.py <image> [--threshold 0.5] [--no-display]
                               [--params params.json] [--output map.npy]
                               [--figure map.png]
"""

import sys
import logging
import argparse
from typing import List, Optional

import numpy as np
import torch

from danielsson.config import DistanceMapParams
from danielsson.core import DistanceFieldComputer
from danielsson.core.propagation import METHODS
from danielsson.errors import InvalidInput
from danielsson.imaging import load_mask

logger = logging.getLogger("danielsson_distance_map")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute the Danielsson distance map of an image")
    parser.add_argument('image', help='Path to the image file')
    parser.add_argument('--threshold', type=float, default=None,
                        help='Binarization level in [0, 1] (default: 0.5)')
    parser.add_argument('--no-display', dest='display', action='store_false', default=None,
                        help='Do not show the distance map')
    parser.add_argument('--params', help='JSON file with parameters')
    parser.add_argument('--method', choices=METHODS, default=None,
                        help='Pass executor (default: wavefront)')
    parser.add_argument('--device', default=None, help='Torch device (default: cpu)')
    parser.add_argument('--colormap', default=None, help='Matplotlib colormap for display')
    parser.add_argument('--output', help='Save the distance map to this .npy file')
    parser.add_argument('--figure', help='Save the rendered distance map to this image file')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the script and return its exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        params = DistanceMapParams.from_json(args.params) if args.params else DistanceMapParams()
        params = params.update(
            threshold=args.threshold,
            display=args.display,
            method=args.method,
            device=args.device,
            colormap=args.colormap,
        ).validate()
    except (InvalidInput, OSError, ValueError) as e:
        logger.error(f"Invalid parameters: {e}")
        return 1

    logger.info(f"Parameters: {params}")

    try:
        mask = load_mask(args.image, params.threshold)
    except OSError as e:
        logger.error(f"Error reading image: {e}")
        return 1

    computer = DistanceFieldComputer(method=params.method, device=params.device)
    try:
        distance_map = computer.compute(mask).cpu()
    except RuntimeError as e:
        logger.error(f"Error computing distance map on {params.device}: {e}")
        return 1

    finite = distance_map[torch.isfinite(distance_map)]
    if finite.numel() == 0:
        logger.warning("Image has no foreground pixels, every distance is infinite")
    else:
        logger.info(f"Maximum distance: {finite.max().item():.3f} pixels")

    if args.output:
        np.save(args.output, distance_map.numpy())
        logger.info(f"Saved distance map to {args.output}")

    if params.display or args.figure:
        from danielsson.visualization import show_distance_map
        show_distance_map(
            distance_map,
            output_path=args.figure,
            show=bool(params.display),
            cmap=params.colormap,
            title=args.image,
        )

    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
