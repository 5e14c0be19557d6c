"""The mean squares metric."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import MeanPointwiseLossMetric

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray


class MeanSquaresMetric(MeanPointwiseLossMetric):
    """The mean of the squared intensity differences.

    The value is non-negative, and zero exactly when the warped moving image
    matches the fixed image at every overlapping sample.
    """

    def _loss(self, differences: NDArray[np.float64]) -> NDArray[np.float64]:
        return differences**2

    def _loss_derivative(
        self, differences: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        return 2.0 * differences
