"""This module defines the abstract base class for differentiable fields."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from paramreg.exceptions import DomainError
from paramreg.utils import as_points

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from paramreg.transformations.base import Transformation


class DifferentiableField(ABC):
    """Abstract base class for scalar fields with a spatial gradient.

    A differentiable field maps points in 2D or 3D space to scalar values and
    provides the spatial gradient of those values. Fields are bounded: the
    `is_defined_at` method reports where the field can be evaluated, and
    evaluating the field or its gradient anywhere else raises a
    [`DomainError`][paramreg.exceptions.DomainError].

    All methods accept either a single point of shape `(d,)`, or an array of
    points of shape `(n, d)`, and return results of matching shape.

    Subclasses must implement:

    - `dimensionality`: The number of coordinates of a point.
    - `is_defined_at`:  The membership test of the domain of the field.
    - `_evaluate`:      The values at an `(n, d)` array of valid points.
    - `_gradient`:      The gradients at an `(n, d)` array of valid points.
    """

    @property
    @abstractmethod
    def dimensionality(self) -> int:
        """Return the number of coordinates of the points of the field."""

    @abstractmethod
    def is_defined_at(self, points: ArrayLike) -> NDArray[np.bool_]:
        """Test at which points the field is defined.

        Args:
            points: A single point or an `(n, d)` array of points.

        Returns:
            A boolean mask, or a single boolean for a single point.
        """

    @abstractmethod
    def _evaluate(self, points: NDArray[np.float64]) -> NDArray[np.float64]: ...

    @abstractmethod
    def _gradient(self, points: NDArray[np.float64]) -> NDArray[np.float64]: ...

    def __call__(self, points: ArrayLike) -> NDArray[np.float64]:
        """Evaluate the field.

        Args:
            points: A single point or an `(n, d)` array of points.

        Returns:
            The values of the field, a scalar for a single point.

        Raises:
            DomainError: If any of the points lies outside the domain.
        """
        array, single = self._checked_points(points)
        values = self._evaluate(array)
        return values[0] if single else values

    def gradient(self, points: ArrayLike) -> NDArray[np.float64]:
        """Evaluate the spatial gradient of the field.

        Args:
            points: A single point or an `(n, d)` array of points.

        Returns:
            The gradients as an `(n, d)` array, or a `(d,)` vector for a
            single point.

        Raises:
            DomainError: If any of the points lies outside the domain.
        """
        array, single = self._checked_points(points)
        gradients = self._gradient(array)
        return gradients[0] if single else gradients

    def compose(self, transformation: Transformation) -> WarpedField:
        """Compose the field with a transformation.

        The resulting field has the value `self(transformation(x))` at `x`.

        Args:
            transformation: The transformation applied before the field.

        Returns:
            The composed field.
        """
        return WarpedField(self, transformation)

    def _checked_points(
        self, points: ArrayLike
    ) -> tuple[NDArray[np.float64], bool]:
        array, single = as_points(points, self.dimensionality)
        inside = np.atleast_1d(self.is_defined_at(array))
        if not np.all(inside):
            msg = (
                f"{np.count_nonzero(~inside)} of {inside.size} point(s) "
                "lie outside the domain of the field"
            )
            raise DomainError(msg)
        return array, single


class WarpedField(DifferentiableField):
    """A field composed with a transformation.

    The warped field evaluates the underlying field at the transformed
    points. It is defined wherever the transformed point lies inside the
    domain of the underlying field. Its gradient follows from the chain rule,
    using the spatial Jacobian of the transformation.
    """

    def __init__(
        self, field: DifferentiableField, transformation: Transformation
    ) -> None:
        if field.dimensionality != transformation.dimensionality:
            msg = (
                f"cannot compose a {field.dimensionality}D field with a "
                f"{transformation.dimensionality}D transformation"
            )
            raise ValueError(msg)
        self._field = field
        self._transformation = transformation

    @property
    def dimensionality(self) -> int:
        return self._field.dimensionality

    @property
    def field(self) -> DifferentiableField:
        return self._field

    @property
    def transformation(self) -> Transformation:
        return self._transformation

    def is_defined_at(self, points: ArrayLike) -> NDArray[np.bool_]:
        return self._field.is_defined_at(self._transformation(points))

    def _evaluate(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        return self._field(self._transformation(points))

    def _gradient(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        gradients = self._field.gradient(self._transformation(points))
        jacobians = self._transformation.jacobian(points)
        return np.einsum("nij,ni->nj", jacobians, gradients)
