"""This module implements the limited-memory BFGS optimizer."""

from __future__ import annotations

import logging
import warnings
from collections import deque
from typing import TYPE_CHECKING, Final

import numpy as np
from scipy.optimize import line_search

from paramreg.config import OptimizerConfig
from paramreg.config.utils import immutable_array
from paramreg.enums import TerminationReason

from ._state import OptimizerState

if TYPE_CHECKING:
    from collections.abc import Generator

    from numpy.typing import ArrayLike, NDArray

    from ._objective import Objective

_logger = logging.getLogger(__name__)

# Sufficient decrease and curvature constants of the Wolfe conditions:
_C1: Final = 1e-4
_C2: Final = 0.9

# Correction pairs with a smaller relative curvature are not stored:
_MIN_CURVATURE: Final = 1e-10


class _CachedObjective:
    """Evaluates an objective once per distinct parameter vector.

    The line search requests values and gradients through separate functions,
    usually at the same points. Only the last evaluation is cached.
    """

    def __init__(self, objective: Objective) -> None:
        self._objective = objective
        self._parameters: NDArray[np.float64] | None = None
        self._result: tuple[float, NDArray[np.float64]] | None = None

    def __call__(
        self, parameters: NDArray[np.float64]
    ) -> tuple[float, NDArray[np.float64]]:
        if (
            self._result is None
            or self._parameters is None
            or not np.array_equal(parameters, self._parameters)
        ):
            self._parameters = np.array(parameters, dtype=np.float64)
            value, gradient = self._objective(self._parameters.copy())
            self._result = (
                float(value),
                np.array(gradient, dtype=np.float64).reshape(-1),
            )
            if self._result[1].size != self._parameters.size:
                msg = (
                    "the gradient of the objective has length "
                    f"{self._result[1].size}, expected {self._parameters.size}"
                )
                raise ValueError(msg)
        return self._result

    def value(self, parameters: NDArray[np.float64]) -> float:
        return self(parameters)[0]

    def gradient(self, parameters: NDArray[np.float64]) -> NDArray[np.float64]:
        return self(parameters)[1]


class LBFGSOptimizer:
    """A limited-memory BFGS optimizer producing a lazy stream of states.

    The optimizer minimizes an objective function, given as a callable that
    returns the value and the gradient for a parameter vector (see
    [`Objective`][paramreg.optimization.Objective]). Rather than running to
    completion, the [`iterate`][paramreg.optimization.LBFGSOptimizer.iterate]
    method returns a generator that performs one iteration each time the next
    state is requested. The consumer can stop a run at any time by no longer
    pulling states from the generator.

    Each iteration computes a search direction from the gradient and a bounded
    history of parameter and gradient differences, using the two-loop
    recursion of Nocedal[^1]. A step along that direction is found with the
    Wolfe line search of `scipy.optimize.line_search`. If that fails, a
    backtracking search enforcing sufficient decrease is used instead. If the
    direction is not a descent direction, or no step along it decreases the
    objective, the history is discarded and the steepest descent direction is
    tried. The objective values of the produced states are therefore
    non-increasing.

    The first state of a run holds the initial parameters. A run ends when:

    - The gradient norm drops to `gradient_tolerance` or below.
    - The relative decrease of the objective in a step drops below
      `function_tolerance`.
    - No step decreases the objective.
    - `max_iterations` states have been produced.

    The history is created anew by every call to `iterate`, so that runs are
    independent of each other.

    [^1]: Nocedal, J. Updating quasi-Newton matrices with limited storage.
        Mathematics of Computation, 35(151), 773-782, 1980.
    """

    def __init__(  # noqa: PLR0913
        self,
        max_iterations: int = 100,
        *,
        memory: int = 10,
        gradient_tolerance: float = 1e-8,
        function_tolerance: float = 1e-12,
        max_line_search_iterations: int = 20,
    ) -> None:
        """Initialize the optimizer.

        Args:
            max_iterations:             The maximum number of produced states.
            memory:                     The number of stored correction pairs.
            gradient_tolerance:         The gradient norm stopping tolerance.
            function_tolerance:         The relative decrease stopping tolerance.
            max_line_search_iterations: The maximum number of line search trials.

        Raises:
            pydantic.ValidationError: If a setting is invalid.
        """
        self._config = OptimizerConfig(
            max_iterations=max_iterations,
            memory=memory,
            gradient_tolerance=gradient_tolerance,
            function_tolerance=function_tolerance,
            max_line_search_iterations=max_line_search_iterations,
        )

    @classmethod
    def from_config(cls, config: OptimizerConfig) -> LBFGSOptimizer:
        """Create an optimizer from a configuration object.

        Args:
            config: The optimizer configuration.

        Returns:
            The optimizer.
        """
        return cls(**config.model_dump())

    @property
    def config(self) -> OptimizerConfig:
        return self._config

    def iterate(
        self, objective: Objective, initial: ArrayLike
    ) -> Generator[OptimizerState, None, TerminationReason]:
        """Minimize an objective, producing the state after each iteration.

        The returned generator produces at most `max_iterations` states. When
        it is exhausted, the reason of termination is available as its return
        value, for instance as the result of a `yield from` expression.

        Errors raised by the objective propagate to the consumer of the
        generator and end the run.

        Args:
            objective: The objective function.
            initial:   The initial parameter vector.

        Returns:
            A generator of optimizer states.

        Raises:
            ValueError: If the initial parameter vector is not a non-empty 1D array.
        """
        parameters = np.array(initial, dtype=np.float64, ndmin=1)
        if parameters.ndim != 1 or parameters.size == 0:
            msg = "the initial parameters must be a non-empty 1D array"
            raise ValueError(msg)
        return self._run(_CachedObjective(objective), parameters)

    def _run(
        self, objective: _CachedObjective, parameters: NDArray[np.float64]
    ) -> Generator[OptimizerState, None, TerminationReason]:
        config = self._config
        history: deque[tuple[NDArray[np.float64], NDArray[np.float64], float]] = (
            deque(maxlen=config.memory)
        )
        value, gradient = objective(parameters)
        iteration = 0
        yield _make_state(iteration, value, parameters, gradient)

        while True:
            gradient_norm = float(np.linalg.norm(gradient))
            if gradient_norm <= config.gradient_tolerance:
                return _terminate(TerminationReason.GRADIENT_TOLERANCE, iteration)
            if iteration + 1 >= config.max_iterations:
                return _terminate(TerminationReason.MAX_ITERATIONS, iteration)

            step = self._step(objective, parameters, value, gradient, history)
            if step is None and history:
                _logger.debug("Restarting with the steepest descent direction")
                history.clear()
                step = self._step(objective, parameters, value, gradient, history)
            if step is None:
                return _terminate(TerminationReason.LINE_SEARCH_FAILED, iteration)

            new_parameters, new_value, new_gradient = step
            difference = new_parameters - parameters
            change = new_gradient - gradient
            curvature = float(np.dot(difference, change))
            if curvature > _MIN_CURVATURE * float(np.dot(change, change)):
                history.append((difference, change, 1.0 / curvature))

            decrease = value - new_value
            parameters, value, gradient = new_parameters, new_value, new_gradient
            iteration += 1
            _logger.debug(
                "Iteration %d: value=%.8g, gradient norm=%.4g",
                iteration,
                value,
                float(np.linalg.norm(gradient)),
            )
            yield _make_state(iteration, value, parameters, gradient)

            if decrease < config.function_tolerance * max(abs(value), 1.0):
                return _terminate(TerminationReason.FUNCTION_TOLERANCE, iteration)

    def _step(
        self,
        objective: _CachedObjective,
        parameters: NDArray[np.float64],
        value: float,
        gradient: NDArray[np.float64],
        history: deque[tuple[NDArray[np.float64], NDArray[np.float64], float]],
    ) -> tuple[NDArray[np.float64], float, NDArray[np.float64]] | None:
        if history:
            direction = -_two_loop_recursion(gradient, history)
            slope = float(np.dot(direction, gradient))
            if not slope < 0.0:
                _logger.debug("No descent direction, discarding the history")
                history.clear()
        if not history:
            # Without curvature information, start with a unit length step:
            direction = -gradient / max(float(np.linalg.norm(gradient)), 1.0)
            slope = float(np.dot(direction, gradient))

        step_length = self._wolfe_line_search(
            objective, parameters, value, gradient, direction
        )
        if step_length is None:
            step_length = self._backtracking_line_search(
                objective, parameters, value, direction, slope
            )
        if step_length is None:
            return None
        new_parameters = parameters + step_length * direction
        new_value, new_gradient = objective(new_parameters)
        if not new_value <= value:
            return None
        return new_parameters, new_value, new_gradient

    def _wolfe_line_search(
        self,
        objective: _CachedObjective,
        parameters: NDArray[np.float64],
        value: float,
        gradient: NDArray[np.float64],
        direction: NDArray[np.float64],
    ) -> float | None:
        # Line search failures are signaled by a None step length, the
        # accompanying warnings are redundant:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", RuntimeWarning)
            result = line_search(
                objective.value,
                objective.gradient,
                parameters,
                direction,
                gfk=gradient,
                old_fval=value,
                c1=_C1,
                c2=_C2,
                maxiter=self._config.max_line_search_iterations,
            )
        step_length = result[0]
        if step_length is None or not np.isfinite(step_length) or step_length <= 0:
            return None
        return float(step_length)

    def _backtracking_line_search(
        self,
        objective: _CachedObjective,
        parameters: NDArray[np.float64],
        value: float,
        direction: NDArray[np.float64],
        slope: float,
    ) -> float | None:
        step_length = 1.0
        for _ in range(self._config.max_line_search_iterations):
            trial = objective.value(parameters + step_length * direction)
            if np.isfinite(trial) and trial <= value + _C1 * step_length * slope:
                return step_length
            step_length *= 0.5
        return None


def _two_loop_recursion(
    gradient: NDArray[np.float64],
    history: deque[tuple[NDArray[np.float64], NDArray[np.float64], float]],
) -> NDArray[np.float64]:
    # Computes the product of the approximate inverse Hessian and the gradient.
    result = gradient.copy()
    alphas = []
    for difference, change, rho in reversed(history):
        alpha = rho * float(np.dot(difference, result))
        result -= alpha * change
        alphas.append(alpha)
    difference, change, _ = history[-1]
    result *= float(np.dot(difference, change)) / float(np.dot(change, change))
    for (difference, change, rho), alpha in zip(
        history, reversed(alphas), strict=True
    ):
        beta = rho * float(np.dot(change, result))
        result += (alpha - beta) * difference
    return result


def _make_state(
    iteration: int,
    value: float,
    parameters: NDArray[np.float64],
    gradient: NDArray[np.float64],
) -> OptimizerState:
    return OptimizerState(
        iteration=iteration,
        value=value,
        parameters=immutable_array(parameters),
        gradient=immutable_array(gradient),
    )


def _terminate(reason: TerminationReason, iteration: int) -> TerminationReason:
    _logger.info(
        "Optimization terminated after %d iterations: %s", iteration, reason.name
    )
    return reason
