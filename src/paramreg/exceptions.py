"""Exceptions raised within the `paramreg` library."""


class DomainError(ValueError):
    """Raised when a field is evaluated outside of its domain.

    Image fields are only defined on the region covered by their samples.
    Evaluating a field, or a field composed with a transformation, at a point
    that lies outside that region raises this exception instead of returning
    a substitute value.

    Metrics also raise it when none of the sampled points lies in the overlap
    of the fixed image and the warped moving image, since no value or
    gradient can be computed in that case.
    """
