"""Products of transformation spaces."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from paramreg.utils import as_parameters

from .base import CompositeTransformation, TransformationSpace

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class ProductTransformationSpace(TransformationSpace):
    """The product of two transformation spaces.

    A parameter vector of the product space is the concatenation
    `[first | second]` of a parameter vector of the `first` space and one of
    the `second` space. The transformation for such a vector applies the
    transformation of the first space, followed by the transformation of the
    second space:

        x -> second(first(x))

    The order matters: in general the product of `A` and `B` differs from the
    product of `B` and `A`. Product spaces can be nested; each level stores
    the split index of its parameter vector.

    The derivative with respect to the parameters follows from the chain rule.
    For the parameters of the first space it is the spatial Jacobian of the
    second transformation, evaluated at the intermediate points, multiplied
    by the parameter derivative of the first space. For the parameters of the
    second space, it is the parameter derivative of the second space at the
    intermediate points.
    """

    def __init__(
        self, first: TransformationSpace, second: TransformationSpace
    ) -> None:
        if first.dimensionality != second.dimensionality:
            msg = "cannot combine transformation spaces of different dimensionality"
            raise ValueError(msg)
        self._first = first
        self._second = second
        self._split = first.number_of_parameters

    @property
    def dimensionality(self) -> int:
        return self._first.dimensionality

    @property
    def number_of_parameters(self) -> int:
        return self._split + self._second.number_of_parameters

    @property
    def first(self) -> TransformationSpace:
        return self._first

    @property
    def second(self) -> TransformationSpace:
        return self._second

    def split_parameters(
        self, parameters: ArrayLike
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Split a parameter vector into the parts of the two spaces.

        Args:
            parameters: A parameter vector of the product space.

        Returns:
            The parameters of the first and of the second space.

        Raises:
            ValueError: If the length of the vector does not match.
        """
        array = as_parameters(parameters, self.number_of_parameters)
        return array[: self._split].copy(), array[self._split :].copy()

    def identity_parameters(self) -> NDArray[np.float64]:
        return np.concatenate(
            [self._first.identity_parameters(), self._second.identity_parameters()]
        )

    def _transformation(
        self, parameters: NDArray[np.float64]
    ) -> CompositeTransformation:
        first, second = self.split_parameters(parameters)
        return CompositeTransformation(
            self._first.transformation_for_parameters(first),
            self._second.transformation_for_parameters(second),
        )

    def _parameters_jacobian(
        self, parameters: NDArray[np.float64], points: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        first, second = self.split_parameters(parameters)
        intermediate = self._first.transformation_for_parameters(first)(points)
        second_transformation = self._second.transformation_for_parameters(second)
        first_jacobian = np.matmul(
            second_transformation.jacobian(intermediate),
            self._first.parameters_jacobian(first, points),
        )
        second_jacobian = self._second.parameters_jacobian(second, intermediate)
        return np.concatenate([first_jacobian, second_jacobian], axis=-1)
