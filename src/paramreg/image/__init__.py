"""Images and differentiable fields.

Registration operates on continuous images: scalar fields that can be
evaluated, and differentiated, anywhere within their domain.
[`DiscreteScalarImage`][paramreg.image.DiscreteScalarImage] holds the samples
of an image on a regular grid, and its `interpolate` method returns an
[`InterpolatedImage`][paramreg.image.InterpolatedImage] field. Any field can be
composed with a transformation, giving a
[`WarpedField`][paramreg.image.WarpedField].
"""

from ._discrete import DiscreteScalarImage
from ._interpolated import InterpolatedImage
from .base import DifferentiableField, WarpedField

__all__ = [
    "DifferentiableField",
    "DiscreteScalarImage",
    "InterpolatedImage",
    "WarpedField",
]
