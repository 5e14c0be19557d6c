"""Transformations and parametric transformation spaces.

A [`TransformationSpace`][paramreg.transformations.TransformationSpace]
constructs a [`Transformation`][paramreg.transformations.Transformation] from
a parameter vector, and provides the derivatives of the transformed points
with respect to those parameters. Registration searches such a space for the
parameters that best align two images.

The following spaces are available:

- [`TranslationSpace`][paramreg.transformations.TranslationSpace]: Shifts.
- [`RotationSpace`][paramreg.transformations.RotationSpace]: Rotations about a
  fixed center.
- [`ScalingSpace`][paramreg.transformations.ScalingSpace]: Isotropic scaling.
- [`RigidTransformationSpace`][paramreg.transformations.RigidTransformationSpace]:
  A rotation followed by a translation.
- [`GaussianProcessTransformationSpace`][paramreg.transformations.GaussianProcessTransformationSpace]:
  Non-rigid deformations of a low-rank Gaussian process.
- [`ProductTransformationSpace`][paramreg.transformations.ProductTransformationSpace]:
  The composition of transformations of two spaces.
"""

from ._gaussian_process import (
    GaussianProcessTransformation,
    GaussianProcessTransformationSpace,
)
from ._product import ProductTransformationSpace
from ._rigid import RigidTransformationSpace
from ._rotation import RotationSpace, RotationTransformation
from ._scaling import ScalingSpace, ScalingTransformation
from ._translation import TranslationSpace, TranslationTransformation
from .base import CompositeTransformation, Transformation, TransformationSpace

__all__ = [
    "CompositeTransformation",
    "GaussianProcessTransformation",
    "GaussianProcessTransformationSpace",
    "ProductTransformationSpace",
    "RigidTransformationSpace",
    "RotationSpace",
    "RotationTransformation",
    "ScalingSpace",
    "ScalingTransformation",
    "Transformation",
    "TransformationSpace",
    "TranslationSpace",
    "TranslationTransformation",
]
