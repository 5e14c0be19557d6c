"""Translations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from paramreg.config.utils import immutable_array

from .base import Transformation, TransformationSpace

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class TranslationTransformation(Transformation):
    """A translation `x -> x + t`."""

    def __init__(self, translation: ArrayLike) -> None:
        self._translation = immutable_array(translation, dtype=np.float64, ndmin=1)

    @property
    def dimensionality(self) -> int:
        return self._translation.size

    @property
    def translation(self) -> NDArray[np.float64]:
        return self._translation

    def _apply(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        return points + self._translation

    def _jacobian(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        dim = self.dimensionality
        return np.broadcast_to(np.eye(dim), (points.shape[0], dim, dim)).copy()

    def inverse(self) -> TranslationTransformation:
        return TranslationTransformation(-self._translation)


class TranslationSpace(TransformationSpace):
    """The space of translations.

    The parameters are the components of the translation vector, the
    identity is given by a vector of zeros.
    """

    def __init__(self, dimensionality: int) -> None:
        if dimensionality not in {2, 3}:
            msg = "only 2D and 3D translations are supported"
            raise ValueError(msg)
        self._dimensionality = dimensionality

    @property
    def dimensionality(self) -> int:
        return self._dimensionality

    @property
    def number_of_parameters(self) -> int:
        return self._dimensionality

    def _transformation(
        self, parameters: NDArray[np.float64]
    ) -> TranslationTransformation:
        return TranslationTransformation(parameters)

    def _parameters_jacobian(
        self,
        parameters: NDArray[np.float64],  # noqa: ARG002
        points: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        dim = self._dimensionality
        return np.broadcast_to(np.eye(dim), (points.shape[0], dim, dim)).copy()
