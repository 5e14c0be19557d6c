"""Gradient-based optimization.

The [`LBFGSOptimizer`][paramreg.optimization.LBFGSOptimizer] minimizes an
[`Objective`][paramreg.optimization.Objective], a callable returning a value
and a gradient. Its `iterate` method produces a lazy stream of
[`OptimizerState`][paramreg.optimization.OptimizerState] objects, one per
iteration, that the caller consumes for as long as needed.
"""

from ._lbfgs import LBFGSOptimizer
from ._objective import Objective
from ._state import OptimizerState

__all__ = ["LBFGSOptimizer", "Objective", "OptimizerState"]
