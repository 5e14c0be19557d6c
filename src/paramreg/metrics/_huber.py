"""The mean Huber loss metric."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import numpy as np

from .base import MeanPointwiseLossMetric

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from paramreg.image import DifferentiableField
    from paramreg.samplers import Sampler
    from paramreg.transformations import TransformationSpace

_DEFAULT_DELTA: Final = 1.345


class MeanHuberLossMetric(MeanPointwiseLossMetric):
    r"""The mean Huber loss of the intensity differences.

    The Huber loss of a difference $v$ is quadratic for small differences,
    and linear beyond the threshold $\delta$:

    $$
    L_\delta(v) = \begin{cases}
        \frac{1}{2} v^2 & \text{if $|v| \le \delta$}, \\
        \delta \left(|v| - \frac{1}{2}\delta\right) & \text{otherwise}
    \end{cases}
    $$

    Large, sparse intensity discrepancies therefore affect the metric less
    than with the mean squares metric. The derivative of the loss is the
    difference clipped to $[-\delta, \delta]$.
    """

    def __init__(
        self,
        fixed_image: DifferentiableField,
        moving_image: DifferentiableField,
        transformation_space: TransformationSpace,
        sampler: Sampler,
        delta: float = _DEFAULT_DELTA,
    ) -> None:
        """Initialize the metric.

        Args:
            fixed_image:          The fixed image.
            moving_image:         The moving image.
            transformation_space: The space of transformations of the moving image.
            sampler:              The sampler selecting the evaluation points.
            delta:                The threshold of the Huber loss.

        Raises:
            ValueError: If `delta` is not positive.
        """
        if delta <= 0.0:
            msg = "the Huber loss threshold must be positive"
            raise ValueError(msg)
        super().__init__(fixed_image, moving_image, transformation_space, sampler)
        self._delta = float(delta)

    @property
    def delta(self) -> float:
        return self._delta

    def _loss(self, differences: NDArray[np.float64]) -> NDArray[np.float64]:
        magnitudes = np.abs(differences)
        return np.where(
            magnitudes <= self._delta,
            0.5 * differences**2,
            self._delta * (magnitudes - 0.5 * self._delta),
        )

    def _loss_derivative(
        self, differences: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        return np.clip(differences, -self._delta, self._delta)
