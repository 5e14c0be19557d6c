from typing import Any

import numpy as np
import pytest
from numpy.typing import NDArray
from pydantic import ValidationError

from paramreg.config import OptimizerConfig
from paramreg.enums import TerminationReason
from paramreg.optimization import LBFGSOptimizer, OptimizerState


def _quadratic(
    parameters: NDArray[np.float64],
) -> tuple[float, NDArray[np.float64]]:
    scales = np.arange(1.0, parameters.size + 1.0)
    differences = parameters - 1.0
    return float(np.sum(scales * differences**2)), 2.0 * scales * differences


def _rosenbrock(
    parameters: NDArray[np.float64],
) -> tuple[float, NDArray[np.float64]]:
    x, y = parameters
    value = (1.0 - x) ** 2 + 100.0 * (y - x**2) ** 2
    gradient = np.array(
        [-2.0 * (1.0 - x) - 400.0 * x * (y - x**2), 200.0 * (y - x**2)]
    )
    return value, gradient


def _run(
    optimizer: LBFGSOptimizer, objective: Any, initial: Any
) -> tuple[list[OptimizerState], TerminationReason]:
    states = []
    iterator = optimizer.iterate(objective, initial)
    while True:
        try:
            states.append(next(iterator))
        except StopIteration as stop:
            return states, stop.value


def test_lbfgs_quadratic() -> None:
    states, reason = _run(LBFGSOptimizer(100), _quadratic, np.zeros(5))
    assert reason in {
        TerminationReason.GRADIENT_TOLERANCE,
        TerminationReason.FUNCTION_TOLERANCE,
    }
    assert np.allclose(states[-1].parameters, 1.0, atol=1e-5)
    assert states[-1].value == pytest.approx(0.0, abs=1e-10)
    assert len(states) < 30


def test_lbfgs_rosenbrock() -> None:
    states, _ = _run(LBFGSOptimizer(500), _rosenbrock, [-1.2, 1.0])
    assert np.allclose(states[-1].parameters, 1.0, atol=1e-4)


def test_lbfgs_initial_state() -> None:
    states, _ = _run(LBFGSOptimizer(10), _quadratic, [3.0, -1.0])
    assert states[0].iteration == 0
    assert np.array_equal(states[0].parameters, [3.0, -1.0])
    assert states[0].value == pytest.approx(_quadratic(np.array([3.0, -1.0]))[0])
    assert [state.iteration for state in states] == list(range(len(states)))


@pytest.mark.parametrize("max_iterations", [1, 2, 5, 17])
def test_lbfgs_max_iterations(max_iterations: int) -> None:
    states, reason = _run(LBFGSOptimizer(max_iterations), _rosenbrock, [-1.2, 1.0])
    assert len(states) == max_iterations
    assert reason == TerminationReason.MAX_ITERATIONS


def test_lbfgs_non_increasing() -> None:
    states, _ = _run(LBFGSOptimizer(200), _rosenbrock, [-1.2, 1.0])
    values = np.array([state.value for state in states])
    assert np.all(np.diff(values) <= 0.0)


def test_lbfgs_states_are_copies() -> None:
    states, _ = _run(LBFGSOptimizer(10), _quadratic, np.zeros(3))
    assert not states[0].parameters.flags.writeable
    assert not states[0].gradient.flags.writeable
    assert np.array_equal(states[0].parameters, np.zeros(3))
    assert states[0].gradient_norm == pytest.approx(
        np.linalg.norm(_quadratic(np.zeros(3))[1])
    )


def test_lbfgs_does_not_modify_initial() -> None:
    initial = np.zeros(3)
    _run(LBFGSOptimizer(10), _quadratic, initial)
    assert np.array_equal(initial, np.zeros(3))


def test_lbfgs_runs_are_independent() -> None:
    optimizer = LBFGSOptimizer(50)
    states1, _ = _run(optimizer, _rosenbrock, [-1.2, 1.0])
    states2, _ = _run(optimizer, _rosenbrock, [-1.2, 1.0])
    assert len(states1) == len(states2)
    assert np.array_equal(states1[-1].parameters, states2[-1].parameters)


def test_lbfgs_lazy() -> None:
    count = 0

    def _counting(parameters: NDArray[np.float64]) -> tuple[float, NDArray[np.float64]]:
        nonlocal count
        count += 1
        return _quadratic(parameters)

    iterator = LBFGSOptimizer(100).iterate(_counting, np.zeros(2))
    assert count == 0
    next(iterator)
    assert count == 1


def test_lbfgs_converged_at_start() -> None:
    states, reason = _run(LBFGSOptimizer(100), _quadratic, np.ones(4))
    assert len(states) == 1
    assert reason == TerminationReason.GRADIENT_TOLERANCE


def test_lbfgs_linear_objective() -> None:
    # A linear objective has no minimum, the run ends after max_iterations.
    def _linear(parameters: NDArray[np.float64]) -> tuple[float, NDArray[np.float64]]:
        return float(np.sum(parameters)), np.ones_like(parameters)

    states, _ = _run(LBFGSOptimizer(20), _linear, np.zeros(2))
    assert len(states) == 20
    values = np.array([state.value for state in states])
    assert np.all(np.diff(values) <= 0.0)


def test_lbfgs_objective_error() -> None:
    def _failing(parameters: NDArray[np.float64]) -> tuple[float, NDArray[np.float64]]:
        if parameters[0] > 0.5:  # noqa: PLR2004
            msg = "evaluation failed"
            raise RuntimeError(msg)
        return _quadratic(parameters)

    iterator = LBFGSOptimizer(100).iterate(_failing, np.zeros(2))
    with pytest.raises(RuntimeError, match="evaluation failed"):
        list(iterator)


def test_lbfgs_invalid_initial() -> None:
    with pytest.raises(ValueError, match="initial parameters"):
        LBFGSOptimizer(10).iterate(_quadratic, np.zeros((2, 2)))


def test_lbfgs_invalid_settings() -> None:
    with pytest.raises(ValidationError):
        LBFGSOptimizer(0)
    with pytest.raises(ValidationError):
        LBFGSOptimizer(10, memory=0)
    with pytest.raises(ValidationError):
        LBFGSOptimizer(10, gradient_tolerance=-1.0)


def test_lbfgs_from_config() -> None:
    config = OptimizerConfig.model_validate({"max_iterations": 7, "memory": 3})
    optimizer = LBFGSOptimizer.from_config(config)
    assert optimizer.config == config
    states, _ = _run(optimizer, _rosenbrock, [-1.2, 1.0])
    assert len(states) == 7
