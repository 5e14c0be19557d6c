"""This module defines the protocol for objective functions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray


class Objective(Protocol):
    """Defines the call signature of an objective function.

    Optimizers call the objective to obtain the value of the function that is
    minimized, together with its gradient, at a given parameter vector. Any
    callable with this signature can be used, for instance a plain function
    or a bound method.
    """

    def __call__(
        self, parameters: NDArray[np.float64], /
    ) -> tuple[float, NDArray[np.float64]]:
        """Evaluate the objective.

        The parameter vector passed by the optimizer must not be modified.

        Args:
            parameters: A 1D array of parameters.

        Returns:
            The objective value and its gradient, a 1D array with the same length.
        """
