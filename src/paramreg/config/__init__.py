"""The `paramreg.config` module provides configuration classes.

The classes in this module hold the settings of the optimizer, the samplers
and of a complete registration run. They are built using
[`pydantic`](https://docs.pydantic.dev/), which validates the values on
construction, so that invalid settings (for instance a non-positive number of
sample points) are rejected before any computation starts.

Configuration objects are typically created from dictionaries of configuration
values using the `model_validate` method provided by `pydantic`.
"""

from ._optimizer_config import OptimizerConfig
from ._registration_config import RegistrationConfig
from ._sampler_config import GridSamplerConfig, UniformSamplerConfig

__all__ = [
    "GridSamplerConfig",
    "OptimizerConfig",
    "RegistrationConfig",
    "UniformSamplerConfig",
]
