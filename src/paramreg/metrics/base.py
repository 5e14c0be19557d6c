"""This module defines the abstract base classes for image metrics."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from paramreg.exceptions import DomainError
from paramreg.utils import as_parameters

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from paramreg.image import DifferentiableField
    from paramreg.samplers import Sampler
    from paramreg.transformations import TransformationSpace


@dataclass(frozen=True, slots=True)
class MetricSamples:
    """The sampled quantities a metric is computed from.

    Only the samples that lie in the overlap of the fixed image and the
    warped moving image are kept. Their weights are normalized to sum to
    one.

    Attributes:
        points:        The `(n, d)` sample points in the fixed image domain.
        transformed:   The points mapped into the moving image domain.
        weights:       The normalized weights of the points.
        fixed_values:  The fixed image intensities at `points`.
        moving_values: The moving image intensities at `transformed`.
    """

    points: NDArray[np.float64]
    transformed: NDArray[np.float64]
    weights: NDArray[np.float64]
    fixed_values: NDArray[np.float64]
    moving_values: NDArray[np.float64]


class ImageMetric(ABC):
    """Abstract base class for image metrics.

    An image metric compares a fixed image with a moving image that is warped
    by a transformation of a transformation space. Its `value` is a function
    of the parameter vector of that space, and lower values mean more similar
    images. The `derivative` method returns the analytic gradient of the value
    with respect to the parameters.

    A metric is evaluated at the points returned by its sampler. A sample
    contributes only if the fixed image is defined at the point, and the
    moving image is defined at the transformed point. The fields are never
    evaluated anywhere else. If no sample lies in this overlap, a
    [`DomainError`][paramreg.exceptions.DomainError] is raised. Pointwise
    metrics average over the overlap only. Metrics of the joint intensity
    distribution may account for the samples that leave the moving image in
    their own way, as long as the moving image is not evaluated there.

    Metrics hold no mutable state, every call samples and evaluates the
    images anew.

    Subclasses must implement:

    - `_evaluate`: Compute the value and, on request, the gradient.
    """

    def __init__(
        self,
        fixed_image: DifferentiableField,
        moving_image: DifferentiableField,
        transformation_space: TransformationSpace,
        sampler: Sampler,
    ) -> None:
        """Initialize the metric.

        Args:
            fixed_image:          The fixed image.
            moving_image:         The moving image.
            transformation_space: The space of transformations of the moving image.
            sampler:              The sampler selecting the evaluation points.

        Raises:
            ValueError: If the dimensionality of the arguments differs.
        """
        dimensionalities = {
            fixed_image.dimensionality,
            moving_image.dimensionality,
            transformation_space.dimensionality,
            sampler.domain.dimensionality,
        }
        if len(dimensionalities) > 1:
            msg = (
                "the images, transformation space and sampler must have "
                "equal dimensionality"
            )
            raise ValueError(msg)
        self._fixed_image = fixed_image
        self._moving_image = moving_image
        self._transformation_space = transformation_space
        self._sampler = sampler

    @property
    def fixed_image(self) -> DifferentiableField:
        return self._fixed_image

    @property
    def moving_image(self) -> DifferentiableField:
        return self._moving_image

    @property
    def transformation_space(self) -> TransformationSpace:
        return self._transformation_space

    @property
    def sampler(self) -> Sampler:
        return self._sampler

    def value(self, parameters: ArrayLike) -> float:
        """Compute the value of the metric.

        Args:
            parameters: The parameters of the transformation.

        Returns:
            The metric value.
        """
        value, _ = self._evaluate(self._check_parameters(parameters), derivative=False)
        return value

    def derivative(self, parameters: ArrayLike) -> NDArray[np.float64]:
        """Compute the gradient of the metric with respect to the parameters.

        Args:
            parameters: The parameters of the transformation.

        Returns:
            The gradient vector.
        """
        _, gradient = self._evaluate(
            self._check_parameters(parameters), derivative=True
        )
        assert gradient is not None
        return gradient

    def value_and_derivative(
        self, parameters: ArrayLike
    ) -> tuple[float, NDArray[np.float64]]:
        """Compute the value and gradient of the metric in one pass.

        Args:
            parameters: The parameters of the transformation.

        Returns:
            The metric value and its gradient.
        """
        value, gradient = self._evaluate(
            self._check_parameters(parameters), derivative=True
        )
        assert gradient is not None
        return value, gradient

    @abstractmethod
    def _evaluate(
        self, parameters: NDArray[np.float64], *, derivative: bool
    ) -> tuple[float, NDArray[np.float64] | None]: ...

    def _check_parameters(self, parameters: ArrayLike) -> NDArray[np.float64]:
        return as_parameters(
            parameters, self._transformation_space.number_of_parameters
        )

    def _sample_points(
        self, parameters: NDArray[np.float64]
    ) -> tuple[
        NDArray[np.float64],
        NDArray[np.float64],
        NDArray[np.float64],
        NDArray[np.bool_],
    ]:
        # Returns the samples at which the fixed image is defined, their
        # transformed positions, their normalized weights, and a mask marking
        # the samples that lie in the overlap.
        points, weights = self._sampler.sample()
        transformation = self._transformation_space.transformation_for_parameters(
            parameters
        )
        defined = self._fixed_image.is_defined_at(points)
        points = points[defined]
        weights = weights[defined]
        transformed = transformation(points)
        overlap = self._moving_image.is_defined_at(transformed)
        if not np.any(overlap):
            msg = "no sample point lies in the overlap of the fixed and moving image"
            raise DomainError(msg)
        return points, transformed, weights / weights.sum(), overlap

    def _samples(self, parameters: NDArray[np.float64]) -> MetricSamples:
        points, transformed, weights, overlap = self._sample_points(parameters)
        points = points[overlap]
        transformed = transformed[overlap]
        weights = weights[overlap]
        return MetricSamples(
            points=points,
            transformed=transformed,
            weights=weights / weights.sum(),
            fixed_values=self._fixed_image(points),
            moving_values=self._moving_image(transformed),
        )

    def _moving_derivatives(
        self,
        parameters: NDArray[np.float64],
        points: NDArray[np.float64],
        transformed: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        # Chain rule: (n, d) image gradients times (n, d, P) parameter Jacobians.
        gradients = self._moving_image.gradient(transformed)
        jacobians = self._transformation_space.parameters_jacobian(parameters, points)
        return np.einsum("ni,nip->np", gradients, jacobians)


class MeanPointwiseLossMetric(ImageMetric):
    """Base class for metrics that average a pointwise intensity loss.

    The value of the metric is the weighted mean over the samples of
    `loss(moving(T(x)) - fixed(x))`. Its gradient is the weighted mean of
    `loss'(v) * grad_moving(T(x)) @ dT(x)/dp`.

    Subclasses must implement:

    - `_loss`:            The loss of an array of intensity differences.
    - `_loss_derivative`: The derivative of the loss.
    """

    @abstractmethod
    def _loss(self, differences: NDArray[np.float64]) -> NDArray[np.float64]: ...

    @abstractmethod
    def _loss_derivative(
        self, differences: NDArray[np.float64]
    ) -> NDArray[np.float64]: ...

    def _evaluate(
        self, parameters: NDArray[np.float64], *, derivative: bool
    ) -> tuple[float, NDArray[np.float64] | None]:
        samples = self._samples(parameters)
        differences = samples.moving_values - samples.fixed_values
        value = float(np.dot(samples.weights, self._loss(differences)))
        if not derivative:
            return value, None
        factors = samples.weights * self._loss_derivative(differences)
        return value, factors @ self._moving_derivatives(
            parameters, samples.points, samples.transformed
        )
