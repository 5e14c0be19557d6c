"""This module implements the grid sampler."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from paramreg.config import GridSamplerConfig
from paramreg.config.utils import immutable_array

from .base import Sampler

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

    from paramreg.domain import BoxDomain


class GridSampler(Sampler):
    """A sampler producing the points of a regular grid.

    The grid has `size[k]` points along axis `k`, at the coordinates

        origin[k] + i * extent[k] / size[k],   i = 0, ..., size[k] - 1

    The upper end of each axis is excluded, so that every grid point lies
    inside the domain. The points are the cross-product of these
    coordinates, with the last axis varying fastest. All points have the same
    weight, `1 / N`, where `N` is the total number of points.

    The sampler is deterministic, the points are computed once on
    construction.
    """

    def __init__(self, domain: BoxDomain, size: Sequence[int]) -> None:
        """Initialize the grid sampler.

        Args:
            domain: The domain to sample.
            size:   The number of points along each axis.

        Raises:
            ValueError: If `size` contains non-positive values or does not
                        match the dimensionality of the domain.
        """
        self._config = GridSamplerConfig(size=tuple(size))
        if len(self._config.size) != domain.dimensionality:
            msg = (
                f"the grid size must have {domain.dimensionality} entries, "
                f"got {len(self._config.size)}"
            )
            raise ValueError(msg)
        self._domain = domain
        axes = [
            origin + extent * np.arange(count) / count
            for origin, extent, count in zip(
                domain.origin, domain.extent, self._config.size, strict=True
            )
        ]
        grid = np.meshgrid(*axes, indexing="ij")
        self._points = immutable_array(
            np.stack([axis.ravel() for axis in grid], axis=1)
        )
        self._weights = immutable_array(
            np.full(self._points.shape[0], 1.0 / self._points.shape[0])
        )

    @property
    def domain(self) -> BoxDomain:
        return self._domain

    @property
    def size(self) -> tuple[int, ...]:
        return self._config.size

    @property
    def number_of_points(self) -> int:
        return self._points.shape[0]

    def sample(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Return the grid points and their weights.

        See the [paramreg.samplers.base.Sampler][] abstract base class.

        # noqa
        """
        return self._points, self._weights
