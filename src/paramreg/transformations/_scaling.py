"""Isotropic scaling."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .base import Transformation, TransformationSpace

if TYPE_CHECKING:
    from numpy.typing import NDArray


class ScalingTransformation(Transformation):
    """An isotropic scaling about the origin: `x -> s x`."""

    def __init__(self, factor: float, dimensionality: int) -> None:
        self._factor = float(factor)
        self._dimensionality = dimensionality

    @property
    def dimensionality(self) -> int:
        return self._dimensionality

    @property
    def factor(self) -> float:
        return self._factor

    def _apply(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        return self._factor * points

    def _jacobian(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        dim = self._dimensionality
        return np.broadcast_to(
            self._factor * np.eye(dim), (points.shape[0], dim, dim)
        ).copy()

    def inverse(self) -> ScalingTransformation:
        if self._factor == 0.0:
            msg = "a scaling with a factor of zero cannot be inverted"
            raise ZeroDivisionError(msg)
        return ScalingTransformation(1.0 / self._factor, self._dimensionality)


class ScalingSpace(TransformationSpace):
    """The space of isotropic scalings about the origin.

    The single parameter is the scale factor; the identity is a factor of one.
    """

    def __init__(self, dimensionality: int) -> None:
        if dimensionality not in {2, 3}:
            msg = "only 2D and 3D scalings are supported"
            raise ValueError(msg)
        self._dimensionality = dimensionality

    @property
    def dimensionality(self) -> int:
        return self._dimensionality

    @property
    def number_of_parameters(self) -> int:
        return 1

    def identity_parameters(self) -> NDArray[np.float64]:
        return np.ones(1, dtype=np.float64)

    def _transformation(
        self, parameters: NDArray[np.float64]
    ) -> ScalingTransformation:
        return ScalingTransformation(float(parameters[0]), self._dimensionality)

    def _parameters_jacobian(
        self,
        parameters: NDArray[np.float64],  # noqa: ARG002
        points: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        return points[:, :, np.newaxis].copy()
