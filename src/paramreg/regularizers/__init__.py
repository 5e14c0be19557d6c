"""Regularizers penalizing transformation parameters.

- [`Regularizer`][paramreg.regularizers.Regularizer]: The abstract base class.
- [`L2Regularizer`][paramreg.regularizers.L2Regularizer]: The squared norm of
  the parameters, or of a subset of them.
"""

from ._l2 import L2Regularizer
from .base import Regularizer

__all__ = ["L2Regularizer", "Regularizer"]
