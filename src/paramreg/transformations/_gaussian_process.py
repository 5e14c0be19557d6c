"""Non-rigid transformations given by low-rank Gaussian processes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from paramreg.config.utils import immutable_array

from .base import Transformation, TransformationSpace

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from paramreg.gaussian_process import LowRankGaussianProcess


class GaussianProcessTransformation(Transformation):
    """A displacement of each point by a Gaussian process instance.

    The transformation is `x -> x + u(x)`, where `u` is the displacement
    field of the Gaussian process for the given coefficients.
    """

    def __init__(self, gp: LowRankGaussianProcess, coefficients: ArrayLike) -> None:
        self._gp = gp
        self._coefficients = immutable_array(coefficients, dtype=np.float64, ndmin=1)

    @property
    def dimensionality(self) -> int:
        return self._gp.dimensionality

    @property
    def coefficients(self) -> NDArray[np.float64]:
        return self._coefficients

    def _apply(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        return points + self._gp.instance(self._coefficients, points)

    def _jacobian(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.eye(self.dimensionality) + self._gp.instance_jacobian(
            self._coefficients, points
        )


class GaussianProcessTransformationSpace(TransformationSpace):
    """The space of deformations of a low-rank Gaussian process.

    The parameters are the coefficients of the basis functions of the
    process; their number equals its rank. The identity is given by zero
    coefficients, which produce a zero displacement.
    """

    def __init__(self, gp: LowRankGaussianProcess) -> None:
        self._gp = gp

    @property
    def dimensionality(self) -> int:
        return self._gp.dimensionality

    @property
    def number_of_parameters(self) -> int:
        return self._gp.rank

    @property
    def gp(self) -> LowRankGaussianProcess:
        return self._gp

    def _transformation(
        self, parameters: NDArray[np.float64]
    ) -> GaussianProcessTransformation:
        return GaussianProcessTransformation(self._gp, parameters)

    def _parameters_jacobian(
        self,
        parameters: NDArray[np.float64],  # noqa: ARG002
        points: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        return self._gp.basis(points)
