"""The mutual information metric."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import numpy as np

from paramreg.exceptions import DomainError
from paramreg.samplers import GridSampler

from .base import ImageMetric

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from paramreg.domain import BoxDomain
    from paramreg.image import DifferentiableField
    from paramreg.samplers import Sampler
    from paramreg.transformations import TransformationSpace

# Two bins at each end of the histogram are reserved for the support of the
# cubic B-spline Parzen window.
_PADDING: Final = 2
_MIN_BINS: Final = 2 * _PADDING + 2
_RANGE_MARGIN: Final = 0.05
_RANGE_GRID_SIZE: Final = 64


def _cubic_bspline(u: NDArray[np.float64]) -> NDArray[np.float64]:
    a = np.abs(u)
    return np.where(
        a < 1.0,
        (4.0 - 6.0 * a**2 + 3.0 * a**3) / 6.0,
        np.where(a < 2.0, (2.0 - a) ** 3 / 6.0, 0.0),  # noqa: PLR2004
    )


def _cubic_bspline_derivative(u: NDArray[np.float64]) -> NDArray[np.float64]:
    a = np.abs(u)
    return np.where(
        a < 1.0,
        -2.0 * u + 1.5 * u * a,
        np.where(a < 2.0, -0.5 * np.sign(u) * (2.0 - a) ** 2, 0.0),  # noqa: PLR2004
    )


def _intensity_range(values: NDArray[np.float64]) -> tuple[float, float]:
    low, high = float(values.min()), float(values.max())
    margin = _RANGE_MARGIN * (high - low) if high > low else 0.5
    return low - margin, high + margin


class _Histogram:
    """Bins intensities of one image into a padded Parzen histogram."""

    def __init__(
        self, intensity_range: tuple[float, float], number_of_bins: int
    ) -> None:
        self.low, high = intensity_range
        self.bin_width = (high - self.low) / (number_of_bins - 2 * _PADDING - 1)
        self._bins = np.arange(number_of_bins, dtype=np.float64)
        self._max_position = number_of_bins - _PADDING

    def positions(
        self, values: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], NDArray[np.bool_]]:
        # Positions stay within [1, K - 2], where the window weights sum to one:
        positions = (values - self.low) / self.bin_width + _PADDING
        clipped = np.clip(positions, _PADDING - 1, self._max_position)
        return clipped[:, np.newaxis] - self._bins, clipped == positions


class MutualInformationMetric(ImageMetric):
    """The negated Mattes mutual information of the image intensities.

    The joint probability distribution of the fixed and warped moving
    intensities is estimated from the samples with cubic B-spline Parzen
    windows, as proposed by Mattes et al.[^1]. The mutual information of this
    distribution is high for well aligned images. To make it a metric that is
    minimized, `value` returns the **negated** mutual information, and lower
    values mean more similar images.

    The intensity ranges of the histograms are fixed on construction: for the
    fixed image from a grid over `fixed_domain`, for the moving image from the
    points of the sampler, both widened by a small margin. Because the ranges
    do not depend on the parameters, the gradient has a closed form:

        d(MI)/dp = sum_{l,k} dp(l,k)/dp * log(p(l,k) / p_moving(k))

    where `p(l,k)` is the joint distribution and `p_moving` the marginal
    distribution of the moving intensities.

    All samples at which the fixed image is defined enter the joint
    distribution, also when their transformed position lies outside the
    moving image. The moving image is not evaluated at those samples, they
    are spread uniformly over the moving intensity bins instead. The sample
    set and the fixed marginal distribution therefore do not change with the
    parameters, and a sample leaving the moving image no longer adds
    information about the alignment.

    [^1]: Mattes, D., Haynor, D. R., Vesselle, H., Lewellen, T. K., Eubank,
        W. PET-CT image registration in the chest using free-form
        deformations. IEEE Transactions on Medical Imaging, 22(1), 120-8, 2003.
    """

    def __init__(  # noqa: PLR0913
        self,
        fixed_image: DifferentiableField,
        fixed_domain: BoxDomain,
        moving_image: DifferentiableField,
        transformation_space: TransformationSpace,
        sampler: Sampler,
        number_of_bins: int = 32,
    ) -> None:
        """Initialize the metric.

        Args:
            fixed_image:          The fixed image.
            fixed_domain:         The domain of the fixed image.
            moving_image:         The moving image.
            transformation_space: The space of transformations of the moving image.
            sampler:              The sampler selecting the evaluation points.
            number_of_bins:       The number of histogram bins per image.

        Raises:
            ValueError:  If the number of bins is too small.
            DomainError: If the intensity ranges cannot be determined.
        """
        if number_of_bins < _MIN_BINS:
            msg = f"the number of bins must be at least {_MIN_BINS}"
            raise ValueError(msg)
        super().__init__(fixed_image, moving_image, transformation_space, sampler)
        self._number_of_bins = number_of_bins

        grid, _ = GridSampler(
            fixed_domain, (_RANGE_GRID_SIZE,) * fixed_domain.dimensionality
        ).sample()
        points, _ = sampler.sample()
        fixed_points = grid[fixed_image.is_defined_at(grid)]
        moving_points = points[moving_image.is_defined_at(points)]
        if fixed_points.shape[0] == 0 or moving_points.shape[0] == 0:
            msg = "the intensity ranges of the images cannot be determined"
            raise DomainError(msg)
        self._fixed_histogram = _Histogram(
            _intensity_range(fixed_image(fixed_points)), number_of_bins
        )
        self._moving_histogram = _Histogram(
            _intensity_range(moving_image(moving_points)), number_of_bins
        )

    @property
    def number_of_bins(self) -> int:
        return self._number_of_bins

    def _evaluate(
        self, parameters: NDArray[np.float64], *, derivative: bool
    ) -> tuple[float, NDArray[np.float64] | None]:
        points, transformed, weights, overlap = self._sample_points(parameters)

        fixed_offsets, _ = self._fixed_histogram.positions(self._fixed_image(points))
        moving_offsets, inside = self._moving_histogram.positions(
            self._moving_image(transformed[overlap])
        )
        fixed_windows = _cubic_bspline(fixed_offsets)
        # Samples outside the moving image carry no information about its
        # intensity, their moving window is uniform:
        moving_windows = np.full_like(fixed_windows, 1.0 / self._number_of_bins)
        moving_windows[overlap] = _cubic_bspline(moving_offsets)

        joint = fixed_windows.T @ (weights[:, np.newaxis] * moving_windows)
        joint /= joint.sum()
        fixed_marginal = joint.sum(axis=1)
        moving_marginal = joint.sum(axis=0)

        nonzero = joint > 0.0
        outer = np.outer(fixed_marginal, moving_marginal)
        mutual_information = float(
            np.sum(joint[nonzero] * np.log(joint[nonzero] / outer[nonzero]))
        )
        if not derivative:
            return -mutual_information, None

        log_ratio = np.zeros_like(joint)
        log_ratio[nonzero] = np.log(
            joint[nonzero] / np.broadcast_to(moving_marginal, joint.shape)[nonzero]
        )
        # Derivative of each sample's joint histogram contribution, contracted
        # with the log ratio, per unit change of the moving intensity:
        factors = np.sum(
            (fixed_windows[overlap] @ log_ratio)
            * _cubic_bspline_derivative(moving_offsets),
            axis=1,
        )
        factors *= weights[overlap] * inside / self._moving_histogram.bin_width
        gradient = factors @ self._moving_derivatives(
            parameters, points[overlap], transformed[overlap]
        )
        return -mutual_information, -gradient
