"""
Parameters of a distance map run.

Parameters come from defaults, an optional JSON file and command line
overrides, in that order of precedence.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import torch

from danielsson.errors import InvalidInput
from danielsson.core.propagation import METHODS, DEFAULT_METHOD

logger = logging.getLogger(__name__)


class DistanceMapParams:
    """
    Settings for reading, binarizing, transforming and displaying an image.

    Attributes:
        threshold: Binarization level in [0, 1]
        display: Whether to show the resulting distance map
        method: Pass executor ("sequential" or "wavefront")
        device: Torch device for the distance transform
        colormap: Matplotlib colormap used for display
    """

    DEFAULTS = {
        "threshold": 0.5,
        "display": True,
        "method": DEFAULT_METHOD,
        "device": "cpu",
        "colormap": "viridis",
    }

    def __init__(self, **overrides: Any):
        values = dict(self.DEFAULTS)
        values.update({k: v for k, v in overrides.items() if v is not None})
        unknown = set(values) - set(self.DEFAULTS)
        if unknown:
            raise TypeError(f"Unknown parameters: {sorted(unknown)}")

        self.threshold = values["threshold"]
        self.display = values["display"]
        self.method = values["method"]
        self.device = values["device"]
        self.colormap = values["colormap"]

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "DistanceMapParams":
        """Build parameters from a mapping, ignoring unknown keys."""
        for key in params:
            if key not in cls.DEFAULTS:
                logger.warning(f"Ignoring unknown parameter: {key}")
        return cls(**{key: params.get(key) for key in cls.DEFAULTS})

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "DistanceMapParams":
        """Load parameters from a JSON file."""
        with open(path, 'r') as f:
            params = json.load(f)
        if not isinstance(params, dict):
            raise InvalidInput(f"Parameter file {path} must contain a JSON object")
        logger.info(f"Loaded parameters from {path}")
        return cls.from_dict(params)

    def update(self, **overrides: Any) -> "DistanceMapParams":
        """Return a copy with the non-None overrides applied."""
        values = self.to_dict()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return DistanceMapParams(**values)

    def validate(self) -> "DistanceMapParams":
        """
        Check parameter values.

        Raises:
            InvalidInput: If the threshold is not a number in [0, 1], display is not
                a boolean or 0/1, the method is unknown or the device is invalid
        """
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, (int, float)):
            raise InvalidInput(f"threshold must be a number, got {self.threshold!r}")
        if not 0.0 <= self.threshold <= 1.0:
            raise InvalidInput(f"threshold must satisfy 0 <= threshold <= 1, got {self.threshold}")
        if self.display not in (True, False, 0, 1):
            raise InvalidInput(f"display must be true/false or 1/0, got {self.display!r}")
        if self.method not in METHODS:
            raise InvalidInput(f"method must be one of {METHODS}, got {self.method!r}")
        try:
            torch.device(self.device)
        except (RuntimeError, TypeError) as e:
            raise InvalidInput(f"device is not a valid torch device: {self.device!r}") from e
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, key) for key in self.DEFAULTS}

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"DistanceMapParams({fields})"
