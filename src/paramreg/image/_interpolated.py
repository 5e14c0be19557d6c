"""B-spline interpolation of discrete images."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import numpy as np
from scipy.ndimage import map_coordinates, spline_filter

from paramreg.utils import as_points

from .base import DifferentiableField

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from paramreg.domain import BoxDomain

    from ._discrete import DiscreteScalarImage

# Step of the central differences, in units of the grid spacing.
_GRADIENT_STEP: Final = 1e-3

_MAX_ORDER: Final = 5


class InterpolatedImage(DifferentiableField):
    """A discrete image turned into a continuous field by B-spline interpolation.

    The values of the field are computed with
    [`scipy.ndimage.map_coordinates`](https://docs.scipy.org/doc/scipy/reference/generated/scipy.ndimage.map_coordinates.html).
    For orders above one, the B-spline coefficients are computed once on
    construction using `scipy.ndimage.spline_filter`, with mirrored
    boundaries.

    The spatial gradient is approximated by central differences of the
    interpolant itself, with a step that is a small fraction of the grid
    spacing. Because the differences are taken on the interpolant rather than
    on the discrete samples, the gradient is consistent with the values
    returned by the field up to the truncation error of the difference scheme.

    The field is defined on the box spanned by the first and last grid
    points of the image.
    """

    def __init__(self, image: DiscreteScalarImage, order: int = 3) -> None:
        """Initialize the interpolated image.

        Args:
            image: The discrete image to interpolate.
            order: The order of the B-spline interpolation, in the range 0-5.

        Raises:
            ValueError: If the order is out of range.
        """
        if not 0 <= order <= _MAX_ORDER:
            msg = f"the interpolation order must be in the range 0-{_MAX_ORDER}"
            raise ValueError(msg)
        self._image = image
        self._order = order
        values = np.asarray(image.values, dtype=np.float64)
        self._coefficients = (
            spline_filter(values, order=order, mode="mirror") if order > 1 else values
        )
        self._coefficients.setflags(write=False)
        dim = image.dimensionality
        self._offsets = np.concatenate(
            [_GRADIENT_STEP * np.eye(dim), -_GRADIENT_STEP * np.eye(dim)]
        )

    @property
    def dimensionality(self) -> int:
        return self._image.dimensionality

    @property
    def domain(self) -> BoxDomain:
        return self._image.domain

    @property
    def order(self) -> int:
        return self._order

    @property
    def image(self) -> DiscreteScalarImage:
        return self._image

    def is_defined_at(self, points: ArrayLike) -> NDArray[np.bool_]:
        return self._image.domain.is_defined_at(points)

    def _evaluate(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        return self._interpolate(self._to_indices(points))

    def _gradient(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        dim = self.dimensionality
        indices = self._to_indices(points)
        # All shifted positions are interpolated in a single call, shape (2d, n, d):
        shifted = indices[np.newaxis, :, :] + self._offsets[:, np.newaxis, :]
        values = self._interpolate(shifted.reshape(-1, dim)).reshape(2 * dim, -1)
        differences = (values[:dim] - values[dim:]) / (2.0 * _GRADIENT_STEP)
        return differences.T / self._image.spacing

    def _to_indices(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        points, _ = as_points(points, self.dimensionality)
        return (points - self._image.origin) / self._image.spacing

    def _interpolate(self, indices: NDArray[np.float64]) -> NDArray[np.float64]:
        return map_coordinates(
            self._coefficients,
            indices.T,
            order=self._order,
            mode="mirror",
            prefilter=False,
        )
