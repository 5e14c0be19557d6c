"""This module defines the iteration state of the optimizer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass(frozen=True, slots=True)
class OptimizerState:
    """Stores the state of an optimizer after an iteration.

    The arrays stored in the state are read-only copies, they are not shared
    with the optimizer or with other states.

    Attributes:
        iteration:  The iteration index, `0` for the initial parameters.
        value:      The objective value.
        parameters: The parameter vector.
        gradient:   The gradient of the objective.
    """

    iteration: int
    value: float
    parameters: NDArray[np.float64]
    gradient: NDArray[np.float64]

    @property
    def gradient_norm(self) -> float:
        """Return the Euclidean norm of the gradient."""
        return float(np.linalg.norm(self.gradient))
