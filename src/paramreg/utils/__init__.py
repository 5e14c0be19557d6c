"""The `paramreg.utils` module contains various utility functions."""

from ._points import as_parameters, as_points

__all__ = [
    "as_parameters",
    "as_points",
]
