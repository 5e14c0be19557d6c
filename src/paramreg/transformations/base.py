"""This module defines the abstract base classes for transformations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from paramreg.utils import as_parameters, as_points

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from ._product import ProductTransformationSpace


class Transformation(ABC):
    """Abstract base class for differentiable spatial transformations.

    A transformation maps points to points. It is immutable once constructed,
    and provides its spatial Jacobian, which is needed to propagate image
    gradients through the transformation.

    Both `__call__` and `jacobian` accept a single point of shape `(d,)`, or
    an array of points of shape `(n, d)`.

    Subclasses must implement:

    - `dimensionality`: The number of coordinates of a point.
    - `_apply`:         The transformation of an `(n, d)` array of points.
    - `_jacobian`:      The `(n, d, d)` spatial Jacobians at those points.

    Subclasses can optionally override:

    - `inverse`: To return the inverse transformation, if known in closed form.
    """

    @property
    @abstractmethod
    def dimensionality(self) -> int:
        """Return the number of coordinates of the transformed points."""

    @abstractmethod
    def _apply(self, points: NDArray[np.float64]) -> NDArray[np.float64]: ...

    @abstractmethod
    def _jacobian(self, points: NDArray[np.float64]) -> NDArray[np.float64]: ...

    def __call__(self, points: ArrayLike) -> NDArray[np.float64]:
        """Transform points.

        Args:
            points: A single point or an `(n, d)` array of points.

        Returns:
            The transformed points, with the same shape as the input.
        """
        array, single = as_points(points, self.dimensionality)
        result = self._apply(array)
        return result[0] if single else result

    def jacobian(self, points: ArrayLike) -> NDArray[np.float64]:
        """Compute the spatial Jacobian of the transformation.

        The entry `[n, i, j]` of the result is the derivative of coordinate
        `i` of the transformed point `n` with respect to coordinate `j` of
        the input point.

        Args:
            points: A single point or an `(n, d)` array of points.

        Returns:
            An `(n, d, d)` array, or a `(d, d)` matrix for a single point.
        """
        array, single = as_points(points, self.dimensionality)
        result = self._jacobian(array)
        return result[0] if single else result

    def inverse(self) -> Transformation:
        """Return the inverse transformation.

        Raises:
            NotImplementedError: If no closed-form inverse is available.
        """
        msg = f"{self.__class__.__name__} has no closed-form inverse"
        raise NotImplementedError(msg)


class CompositeTransformation(Transformation):
    """The composition of two transformations.

    The composite transformation applies `first`, and then `second` to the
    result: `x -> second(first(x))`. Composition is associative, but not
    commutative.
    """

    def __init__(self, first: Transformation, second: Transformation) -> None:
        if first.dimensionality != second.dimensionality:
            msg = "cannot compose transformations of different dimensionality"
            raise ValueError(msg)
        self._first = first
        self._second = second

    @property
    def dimensionality(self) -> int:
        return self._first.dimensionality

    @property
    def first(self) -> Transformation:
        return self._first

    @property
    def second(self) -> Transformation:
        return self._second

    def _apply(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        return self._second(self._first(points))

    def _jacobian(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.matmul(
            self._second.jacobian(self._first(points)), self._first.jacobian(points)
        )

    def inverse(self) -> CompositeTransformation:
        return CompositeTransformation(self._second.inverse(), self._first.inverse())


class TransformationSpace(ABC):
    """Abstract base class for parametric families of transformations.

    A transformation space constructs a transformation from a parameter
    vector of fixed length `number_of_parameters`. To drive gradient-based
    registration, it also provides the derivative of the transformed points
    with respect to the parameters.

    Two spaces can be combined with the
    [`product`][paramreg.transformations.TransformationSpace.product] method.

    Subclasses must implement:

    - `dimensionality`:        The number of coordinates of a point.
    - `number_of_parameters`:  The length of the parameter vector.
    - `_transformation`:       The construction of a transformation from a
                               validated parameter vector.
    - `_parameters_jacobian`:  The `(n, d, P)` parameter derivatives at an
                               `(n, d)` array of points.

    Subclasses can optionally override:

    - `identity_parameters`: The default returns a vector of zeros.
    """

    @property
    @abstractmethod
    def dimensionality(self) -> int:
        """Return the number of coordinates of the transformed points."""

    @property
    @abstractmethod
    def number_of_parameters(self) -> int:
        """Return the length of the parameter vectors of the space."""

    @abstractmethod
    def _transformation(self, parameters: NDArray[np.float64]) -> Transformation: ...

    @abstractmethod
    def _parameters_jacobian(
        self, parameters: NDArray[np.float64], points: NDArray[np.float64]
    ) -> NDArray[np.float64]: ...

    def identity_parameters(self) -> NDArray[np.float64]:
        """Return the parameters of the identity transformation.

        Returns:
            A new parameter vector.
        """
        return np.zeros(self.number_of_parameters, dtype=np.float64)

    def transformation_for_parameters(self, parameters: ArrayLike) -> Transformation:
        """Construct the transformation for a parameter vector.

        Args:
            parameters: The parameter vector.

        Returns:
            The transformation.

        Raises:
            ValueError: If the length of the parameter vector is wrong.
        """
        return self._transformation(
            as_parameters(parameters, self.number_of_parameters)
        )

    def parameters_jacobian(
        self, parameters: ArrayLike, points: ArrayLike
    ) -> NDArray[np.float64]:
        """Compute the derivative of transformed points to the parameters.

        The entry `[n, i, k]` of the result is the derivative of coordinate
        `i` of the transformed point `n` with respect to parameter `k`.

        Args:
            parameters: The parameter vector.
            points:     A single point or an `(n, d)` array of points.

        Returns:
            An `(n, d, P)` array, or a `(d, P)` matrix for a single point.

        Raises:
            ValueError: If the length of the parameter vector is wrong.
        """
        parameters = as_parameters(parameters, self.number_of_parameters)
        array, single = as_points(points, self.dimensionality)
        result = self._parameters_jacobian(parameters, array)
        return result[0] if single else result

    def product(self, other: TransformationSpace) -> ProductTransformationSpace:
        """Combine this space with another space.

        The transformations of the product space apply a transformation of
        this space first, followed by a transformation of `other`. The
        parameter vector of the product is the concatenation of the
        parameters of this space and of `other`, in that order.

        Args:
            other: The space whose transformations are applied second.

        Returns:
            The product space.
        """
        from ._product import ProductTransformationSpace  # noqa: PLC0415

        return ProductTransformationSpace(self, other)
