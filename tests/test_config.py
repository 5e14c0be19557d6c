import numpy as np
import pytest
from pydantic import ValidationError

from paramreg.config import (
    GridSamplerConfig,
    OptimizerConfig,
    RegistrationConfig,
    UniformSamplerConfig,
)
from paramreg.config.utils import broadcast_1d_array, immutable_array


def test_optimizer_config_defaults() -> None:
    config = OptimizerConfig()
    assert config.max_iterations == 100
    assert config.memory == 10
    assert config.gradient_tolerance == 1e-8
    assert config.function_tolerance == 1e-12
    assert config.max_line_search_iterations == 20


@pytest.mark.parametrize(
    "values",
    [
        {"max_iterations": 0},
        {"memory": -1},
        {"gradient_tolerance": -1e-3},
        {"function_tolerance": -1e-3},
        {"max_line_search_iterations": 0},
        {"tolerance": 1e-3},
    ],
)
def test_optimizer_config_invalid(values: dict[str, float]) -> None:
    with pytest.raises(ValidationError):
        OptimizerConfig.model_validate(values)


def test_optimizer_config_frozen() -> None:
    config = OptimizerConfig()
    with pytest.raises(ValidationError):
        config.max_iterations = 10  # type: ignore[misc]


def test_registration_config() -> None:
    config = RegistrationConfig.model_validate(
        {"regularization_weight": 0.1, "optimizer": {"max_iterations": 300}}
    )
    assert config.regularization_weight == 0.1
    assert config.optimizer.max_iterations == 300
    assert config.optimizer.memory == 10

    assert RegistrationConfig().regularization_weight == 0.0
    with pytest.raises(ValidationError):
        RegistrationConfig.model_validate({"regularization_weight": -0.1})
    with pytest.raises(ValidationError):
        RegistrationConfig.model_validate({"optimizer": {"max_iterations": 0}})


def test_sampler_configs() -> None:
    assert GridSamplerConfig(size=[4, 5]).size == (4, 5)
    with pytest.raises(ValidationError):
        GridSamplerConfig(size=[])
    assert UniformSamplerConfig(number_of_points=10).seed is None
    with pytest.raises(ValidationError):
        UniformSamplerConfig(number_of_points=10, rng=1)


def test_immutable_array() -> None:
    array = immutable_array([1, 2, 3], dtype=np.float64)
    assert array.dtype == np.float64
    with pytest.raises(ValueError, match="read-only"):
        array[0] = 0.0


def test_broadcast_1d_array() -> None:
    assert np.array_equal(broadcast_1d_array(2.0, "spacing", 3), [2.0, 2.0, 2.0])
    assert np.array_equal(broadcast_1d_array([1.0, 2.0], "spacing", 2), [1.0, 2.0])
    with pytest.raises(ValueError, match="spacing cannot be broadcasted"):
        broadcast_1d_array([1.0, 2.0], "spacing", 3)
