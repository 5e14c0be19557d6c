"""This module implements the registration driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from paramreg.config import RegistrationConfig
from paramreg.optimization import LBFGSOptimizer
from paramreg.utils import as_parameters

if TYPE_CHECKING:
    from collections.abc import Generator

    from numpy.typing import ArrayLike, NDArray

    from paramreg.enums import TerminationReason
    from paramreg.metrics import ImageMetric
    from paramreg.regularizers import Regularizer

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RegistrationState:
    """Stores the state of a registration after an iteration.

    The `parameters` of the last state of a run are the result of the
    registration. The parameter array is read-only.

    Attributes:
        iteration:     The iteration index, `0` for the initial parameters.
        value:         The objective value, metric plus weighted regularizer.
        parameters:    The transformation parameters.
        gradient_norm: The norm of the gradient of the objective.
    """

    iteration: int
    value: float
    parameters: NDArray[np.float64]
    gradient_norm: float


class Registration:
    """Aligns a moving image to a fixed image.

    A registration minimizes the sum of an image metric and a weighted
    regularizer over the parameters of the transformation space of the
    metric:

        objective(p) = metric.value(p) + regularization_weight * regularizer.value(p)

    The [`iterator`][paramreg.registration.Registration.iterator] method starts
    a run and returns a lazy stream of
    [`RegistrationState`][paramreg.registration.RegistrationState] objects,
    one per iteration of the optimizer. The caller decides when to stop
    consuming it, usually by taking the last state. Every call starts a new
    run that is independent of previous ones.

    Errors raised while evaluating the metric, such as a
    [`DomainError`][paramreg.exceptions.DomainError] when the images no
    longer overlap, propagate to the consumer of the stream.
    """

    def __init__(
        self,
        metric: ImageMetric,
        regularizer: Regularizer,
        regularization_weight: float,
        optimizer: LBFGSOptimizer,
    ) -> None:
        """Initialize the registration.

        Args:
            metric:                The image metric.
            regularizer:           The regularizer of the parameters.
            regularization_weight: The weight of the regularizer.
            optimizer:             The optimizer that minimizes the objective.

        Raises:
            ValueError: If the regularization weight is negative.
        """
        if not regularization_weight >= 0.0:
            msg = "the regularization weight must be non-negative"
            raise ValueError(msg)
        self._metric = metric
        self._regularizer = regularizer
        self._regularization_weight = float(regularization_weight)
        self._optimizer = optimizer

    @classmethod
    def from_config(
        cls,
        metric: ImageMetric,
        regularizer: Regularizer,
        config: RegistrationConfig | dict[str, Any],
    ) -> Registration:
        """Create a registration from a configuration.

        Args:
            metric:      The image metric.
            regularizer: The regularizer of the parameters.
            config:      A configuration object, or a dictionary to validate.

        Returns:
            The registration.
        """
        if not isinstance(config, RegistrationConfig):
            config = RegistrationConfig.model_validate(config)
        return cls(
            metric,
            regularizer,
            config.regularization_weight,
            LBFGSOptimizer.from_config(config.optimizer),
        )

    @property
    def metric(self) -> ImageMetric:
        return self._metric

    @property
    def regularizer(self) -> Regularizer:
        return self._regularizer

    @property
    def regularization_weight(self) -> float:
        return self._regularization_weight

    def objective(self, parameters: ArrayLike) -> tuple[float, NDArray[np.float64]]:
        """Evaluate the objective and its gradient.

        Args:
            parameters: The transformation parameters.

        Returns:
            The objective value and its gradient.
        """
        value, gradient = self._metric.value_and_derivative(parameters)
        if self._regularization_weight > 0.0:
            value += self._regularization_weight * self._regularizer.value(parameters)
            gradient = gradient + (
                self._regularization_weight * self._regularizer.derivative(parameters)
            )
        return value, gradient

    def iterator(
        self, initial_parameters: ArrayLike
    ) -> Generator[RegistrationState, None, TerminationReason]:
        """Start a registration run.

        Args:
            initial_parameters: The parameters the optimizer starts from.

        Returns:
            A generator of registration states, returning the reason of termination.

        Raises:
            ValueError: If the number of initial parameters is wrong.
        """
        parameters = as_parameters(
            initial_parameters,
            self._metric.transformation_space.number_of_parameters,
        )
        _logger.info("Starting registration with %d parameters", parameters.size)
        return self._run(parameters)

    def _run(
        self, parameters: NDArray[np.float64]
    ) -> Generator[RegistrationState, None, TerminationReason]:
        states = self._optimizer.iterate(self.objective, parameters)
        while True:
            try:
                state = next(states)
            except StopIteration as stop:
                return stop.value
            yield RegistrationState(
                iteration=state.iteration,
                value=state.value,
                parameters=state.parameters,
                gradient_norm=state.gradient_norm,
            )
