"""Rigid transformations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._product import ProductTransformationSpace
from ._rotation import RotationSpace
from ._translation import TranslationSpace

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


class RigidTransformationSpace(ProductTransformationSpace):
    """The space of rigid transformations.

    A rigid transformation rotates about `center`, and then translates:
    `x -> R (x - c) + c + t`. The parameter vector holds the rotation
    parameters of a [`RotationSpace`][paramreg.transformations.RotationSpace],
    followed by the components of the translation.
    """

    def __init__(self, center: ArrayLike) -> None:
        rotation = RotationSpace(center)
        super().__init__(rotation, TranslationSpace(rotation.dimensionality))
