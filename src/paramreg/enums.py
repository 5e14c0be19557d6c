"""Enumerations used within the `paramreg` library."""

from enum import IntEnum


class TerminationReason(IntEnum):
    """Enumerates the reasons for terminating an optimization run."""

    MAX_ITERATIONS = 1
    """The configured maximum number of iterations was reached."""

    GRADIENT_TOLERANCE = 2
    """The norm of the gradient dropped below the gradient tolerance."""

    FUNCTION_TOLERANCE = 3
    """The relative decrease of the objective dropped below its tolerance."""

    LINE_SEARCH_FAILED = 4
    """The line search did not find a point with a lower objective value."""
