"""Exceptions raised by the distance map package."""


class InvalidInput(ValueError):
    """Raised when a mask or a parameter cannot be used to compute a distance map."""
