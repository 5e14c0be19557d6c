"""Configuration class for the optimizer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, NonNegativeFloat, PositiveInt


class OptimizerConfig(BaseModel):
    """Configuration class for the L-BFGS optimizer.

    This class, `OptimizerConfig`, defines the settings of the
    [`LBFGSOptimizer`][paramreg.optimization.LBFGSOptimizer]:

    - **`max_iterations`**: The maximum number of states produced by a run,
      including the state at the initial parameters. A run never produces more
      states than this, whether or not it has converged.
    - **`memory`**: The number of past parameter and gradient differences
      that are kept to approximate the inverse Hessian.
    - **`gradient_tolerance`**: The run stops when the Euclidean norm of the
      gradient drops to this value or below.
    - **`function_tolerance`**: The run stops when the relative decrease of
      the objective in one step drops below this value.
    - **`max_line_search_iterations`**: The maximum number of trial steps of
      the line search in each iteration.

    Attributes:
        max_iterations:             Maximum number of iterations.
        memory:                     Number of stored correction pairs (default: 10).
        gradient_tolerance:         Gradient norm stopping tolerance.
        function_tolerance:         Relative decrease stopping tolerance.
        max_line_search_iterations: Maximum number of line search trials.
    """

    max_iterations: PositiveInt = 100
    memory: PositiveInt = 10
    gradient_tolerance: NonNegativeFloat = 1e-8
    function_tolerance: NonNegativeFloat = 1e-12
    max_line_search_iterations: PositiveInt = 20

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        frozen=True,
    )
