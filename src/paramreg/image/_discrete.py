"""Discrete scalar images."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from paramreg.config.utils import broadcast_1d_array, immutable_array
from paramreg.domain import BoxDomain

from ._interpolated import InterpolatedImage

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class DiscreteScalarImage:
    """A scalar image sampled on a regular grid.

    The value `values[i, j]` (or `values[i, j, k]` in 3D) is located at the
    point `origin + (i, j) * spacing`, that is, the first array axis runs
    along the first spatial coordinate. The image is only a container; use
    [`interpolate`][paramreg.image.DiscreteScalarImage.interpolate] to obtain
    a differentiable field that can be registered.
    """

    def __init__(
        self,
        values: ArrayLike,
        origin: ArrayLike = 0.0,
        spacing: ArrayLike = 1.0,
    ) -> None:
        """Initialize a discrete image.

        The `origin` and `spacing` may be given as scalars, which apply to all
        axes, or as vectors with one entry per axis.

        Args:
            values:  A 2D or 3D array of intensities.
            origin:  The position of the first sample.
            spacing: The distance between samples along each axis.

        Raises:
            ValueError: If the values, origin or spacing are invalid.
        """
        self._values = immutable_array(values, dtype=np.float64)
        if self._values.ndim not in {2, 3}:
            msg = "only 2D and 3D images are supported"
            raise ValueError(msg)
        if any(size < 2 for size in self._values.shape):  # noqa: PLR2004
            msg = "an image needs at least two samples along each axis"
            raise ValueError(msg)
        dim = self._values.ndim
        self._origin = broadcast_1d_array(origin, "origin", dim)
        self._spacing = broadcast_1d_array(spacing, "spacing", dim)
        if np.any(self._spacing <= 0.0):
            msg = "the spacing of an image must be positive"
            raise ValueError(msg)
        self._domain = BoxDomain(
            self._origin,
            self._origin + (np.array(self._values.shape) - 1) * self._spacing,
        )

    @property
    def values(self) -> NDArray[np.float64]:
        return self._values

    @property
    def origin(self) -> NDArray[np.float64]:
        return self._origin

    @property
    def spacing(self) -> NDArray[np.float64]:
        return self._spacing

    @property
    def shape(self) -> tuple[int, ...]:
        return self._values.shape

    @property
    def dimensionality(self) -> int:
        return self._values.ndim

    @property
    def domain(self) -> BoxDomain:
        return self._domain

    def points(self) -> NDArray[np.float64]:
        """Return the positions of all samples.

        Returns:
            An `(n, d)` array of points, in the order of `values.ravel()`.
        """
        axes = [
            origin + spacing * np.arange(size)
            for origin, spacing, size in zip(
                self._origin, self._spacing, self._values.shape, strict=True
            )
        ]
        grid = np.meshgrid(*axes, indexing="ij")
        return np.stack([axis.ravel() for axis in grid], axis=1)

    def interpolate(self, order: int = 3) -> InterpolatedImage:
        """Interpolate the image with B-splines.

        Args:
            order: The order of the B-spline interpolation.

        Returns:
            The interpolated, differentiable image.
        """
        return InterpolatedImage(self, order)
