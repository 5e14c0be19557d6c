"""Axis-aligned box domains."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from paramreg.config.utils import immutable_array
from paramreg.utils import as_points

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class BoxDomain:
    """An axis-aligned box in 2D or 3D space.

    The box is given by its `origin`, the corner with the smallest
    coordinates, and its `opposite_corner`. Both corners belong to the domain.
    Membership tests allow for a tolerance of a few ulps relative to the size
    of the box, so that points computed by sampling the box are never rejected
    due to round-off.
    """

    def __init__(self, origin: ArrayLike, opposite_corner: ArrayLike) -> None:
        """Initialize a box domain.

        Args:
            origin:          The corner with the smallest coordinates.
            opposite_corner: The corner with the largest coordinates.

        Raises:
            ValueError: If the corners are inconsistent.
        """
        self._origin = immutable_array(origin, dtype=np.float64, ndmin=1)
        self._opposite_corner = immutable_array(
            opposite_corner, dtype=np.float64, ndmin=1
        )
        if self._origin.ndim != 1 or self._origin.shape != self._opposite_corner.shape:
            msg = "the corners of a box domain must be vectors of equal length"
            raise ValueError(msg)
        if np.any(self._opposite_corner < self._origin):
            msg = "the opposite corner of a box domain must not precede its origin"
            raise ValueError(msg)
        self._tolerance = 1e-9 * max(float(np.max(self.extent)), 1.0)

    @property
    def origin(self) -> NDArray[np.float64]:
        return self._origin

    @property
    def opposite_corner(self) -> NDArray[np.float64]:
        return self._opposite_corner

    @property
    def dimensionality(self) -> int:
        return self._origin.size

    @property
    def extent(self) -> NDArray[np.float64]:
        return immutable_array(self._opposite_corner - self._origin)

    @property
    def volume(self) -> float:
        return float(np.prod(self.extent))

    @property
    def center(self) -> NDArray[np.float64]:
        return immutable_array(0.5 * (self._origin + self._opposite_corner))

    def is_defined_at(self, points: ArrayLike) -> NDArray[np.bool_]:
        """Test which points lie inside the box.

        Args:
            points: A single point or an `(n, d)` array of points.

        Returns:
            A boolean mask, or a single boolean for a single point.
        """
        array, single = as_points(points, self.dimensionality)
        inside = np.all(
            (array >= self._origin - self._tolerance)
            & (array <= self._opposite_corner + self._tolerance),
            axis=1,
        )
        return inside[0] if single else inside

    def __repr__(self) -> str:
        return (
            f"BoxDomain(origin={self._origin.tolist()}, "
            f"opposite_corner={self._opposite_corner.tolist()})"
        )
