"""Configuration class for a registration run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, NonNegativeFloat

from ._optimizer_config import OptimizerConfig


class RegistrationConfig(BaseModel):
    """Configuration class for a registration run.

    The objective minimized by a registration is the metric value plus the
    regularizer value scaled by `regularization_weight`. A weight of zero
    disables the regularizer. The nested `optimizer` field configures the
    optimizer that is used to minimize the objective.

    Attributes:
        regularization_weight: Weight of the regularization term (default: 0).
        optimizer:             Optimizer configuration.
    """

    regularization_weight: NonNegativeFloat = 0.0
    optimizer: OptimizerConfig = OptimizerConfig()

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        frozen=True,
    )
