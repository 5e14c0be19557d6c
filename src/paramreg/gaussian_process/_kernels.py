"""Kernels for Gaussian processes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy.spatial.distance import cdist

if TYPE_CHECKING:
    from numpy.typing import NDArray


class GaussianKernel:
    """A Gaussian (squared exponential) kernel.

    The kernel is given by `scale * exp(-|x - y|^2 / sigma^2)`. Used as the
    covariance of a vector-valued Gaussian process, it is applied to each
    component of the vector independently (a diagonal matrix-valued kernel).
    """

    def __init__(self, sigma: float, scale: float = 1.0) -> None:
        if sigma <= 0.0:
            msg = "the width of a Gaussian kernel must be positive"
            raise ValueError(msg)
        if scale <= 0.0:
            msg = "the scale of a Gaussian kernel must be positive"
            raise ValueError(msg)
        self._sigma = float(sigma)
        self._scale = float(scale)

    @property
    def sigma(self) -> float:
        return self._sigma

    @property
    def scale(self) -> float:
        return self._scale

    def __call__(
        self, x: NDArray[np.float64], y: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Evaluate the kernel between two sets of points.

        Args:
            x: An `(n, d)` array of points.
            y: An `(m, d)` array of points.

        Returns:
            The `(n, m)` kernel matrix.
        """
        distances = cdist(x, y, metric="sqeuclidean")
        return self._scale * np.exp(-distances / self._sigma**2)

    def derivative(
        self, x: NDArray[np.float64], y: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Compute the derivative of the kernel with respect to `x`.

        Args:
            x: An `(n, d)` array of points.
            y: An `(m, d)` array of points.

        Returns:
            An `(n, m, d)` array of derivatives.
        """
        values = self(x, y)
        differences = x[:, np.newaxis, :] - y[np.newaxis, :, :]
        return (-2.0 / self._sigma**2) * values[:, :, np.newaxis] * differences
