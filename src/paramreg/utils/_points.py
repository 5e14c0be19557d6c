"""Conversion of point arguments."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray


def as_points(
    points: ArrayLike, dimensionality: int
) -> tuple[NDArray[np.float64], bool]:
    """Convert a point, or an array of points, to a 2D array.

    Points are stored as an array of shape `(n, d)`. A single point of shape
    `(d,)` is accepted as well; the returned flag signals this case so that
    callers can remove the leading axis from their result again.

    Args:
        points:         A single point or an array of points.
        dimensionality: The expected number of coordinates per point.

    Returns:
        The points as a `(n, d)` array, and whether a single point was given.

    Raises:
        ValueError: If the points do not have `dimensionality` coordinates.
    """
    array = np.asarray(points, dtype=np.float64)
    single = array.ndim == 1
    if single:
        array = array[np.newaxis, :]
    if array.ndim != 2 or array.shape[1] != dimensionality:  # noqa: PLR2004
        msg = (
            f"expected points with {dimensionality} coordinates, "
            f"got shape {np.shape(points)}"
        )
        raise ValueError(msg)
    return array, single


def as_parameters(
    parameters: ArrayLike, number_of_parameters: int
) -> NDArray[np.float64]:
    """Convert a parameter vector to a 1D float array and check its length.

    Args:
        parameters:           The parameter vector.
        number_of_parameters: The required length.

    Returns:
        A 1D copy of the parameters.

    Raises:
        ValueError: If the length of the vector does not match.
    """
    array = np.array(parameters, dtype=np.float64, ndmin=1)
    if array.ndim != 1 or array.size != number_of_parameters:
        msg = (
            f"expected a parameter vector of length {number_of_parameters}, "
            f"got shape {array.shape}"
        )
        raise ValueError(msg)
    return array
