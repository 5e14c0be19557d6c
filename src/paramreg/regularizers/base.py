"""This module defines the abstract base class for regularizers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import ArrayLike, NDArray


class Regularizer(ABC):
    """Abstract base class for regularizers.

    A regularizer penalizes parameter vectors of a transformation space,
    independently of the images. Registration adds its value, scaled by a
    weight, to the value of the image metric.

    Subclasses must implement:

    - `value`:      The penalty of a parameter vector.
    - `derivative`: The gradient of the penalty.
    """

    @abstractmethod
    def value(self, parameters: ArrayLike) -> float:
        """Compute the penalty of a parameter vector.

        Args:
            parameters: The parameter vector.

        Returns:
            The penalty.
        """

    @abstractmethod
    def derivative(self, parameters: ArrayLike) -> NDArray[np.float64]:
        """Compute the gradient of the penalty.

        Args:
            parameters: The parameter vector.

        Returns:
            The gradient vector, with the length of the parameter vector.
        """
