"""The squared L2 norm regularizer."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from paramreg.config.utils import immutable_array
from paramreg.utils import as_parameters

from .base import Regularizer

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import ArrayLike, NDArray

    from paramreg.transformations import TransformationSpace


class L2Regularizer(Regularizer):
    """Penalizes the squared Euclidean norm of the parameters.

    The value is `sum(p[i] ** 2)` and the gradient is `2 * p[i]`. By default
    all parameters are penalized. The optional `indices` argument restricts
    the penalty to a subset of the parameters, for instance to the
    coefficients of a Gaussian process in a product space that also contains
    a translation. Parameters that are not selected have a zero gradient.

    For the coefficients of a low-rank Gaussian process the squared norm is
    the negative log-density of the deformation, up to a constant, which makes
    this the natural regularizer of non-rigid registration.
    """

    def __init__(
        self, space: TransformationSpace, indices: Sequence[int] | None = None
    ) -> None:
        """Initialize the regularizer.

        Args:
            space:   The transformation space of the parameters.
            indices: The indices of the penalized parameters (default: all).

        Raises:
            ValueError: If an index is out of range, or repeated.
        """
        self._number_of_parameters = space.number_of_parameters
        if indices is None:
            selection = np.arange(self._number_of_parameters)
        else:
            selection = np.asarray(indices, dtype=np.intp).reshape(-1)
            if np.any(selection < 0) or np.any(
                selection >= self._number_of_parameters
            ):
                msg = (
                    "regularizer indices must be in the range "
                    f"[0, {self._number_of_parameters})"
                )
                raise ValueError(msg)
            if np.unique(selection).size != selection.size:
                msg = "regularizer indices must be unique"
                raise ValueError(msg)
        self._indices = immutable_array(selection)

    @property
    def indices(self) -> NDArray[np.intp]:
        return self._indices

    def value(self, parameters: ArrayLike) -> float:
        selected = as_parameters(parameters, self._number_of_parameters)[
            self._indices
        ]
        return float(np.dot(selected, selected))

    def derivative(self, parameters: ArrayLike) -> NDArray[np.float64]:
        parameters = as_parameters(parameters, self._number_of_parameters)
        gradient = np.zeros_like(parameters)
        gradient[self._indices] = 2.0 * parameters[self._indices]
        return gradient
