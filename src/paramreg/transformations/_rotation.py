"""Rotations about a fixed center."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from paramreg.config.utils import immutable_array

from .base import Transformation, TransformationSpace

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


def _rotation_2d(
    angle: float,
) -> tuple[NDArray[np.float64], list[NDArray[np.float64]]]:
    cos, sin = np.cos(angle), np.sin(angle)
    matrix = np.array([[cos, -sin], [sin, cos]])
    derivative = np.array([[-sin, -cos], [cos, -sin]])
    return matrix, [derivative]


def _rotation_3d(
    angles: NDArray[np.float64],
) -> tuple[NDArray[np.float64], list[NDArray[np.float64]]]:
    phi, theta, psi = angles
    cphi, sphi = np.cos(phi), np.sin(phi)
    ctheta, stheta = np.cos(theta), np.sin(theta)
    cpsi, spsi = np.cos(psi), np.sin(psi)

    rz = np.array([[cphi, -sphi, 0.0], [sphi, cphi, 0.0], [0.0, 0.0, 1.0]])
    ry = np.array([[ctheta, 0.0, stheta], [0.0, 1.0, 0.0], [-stheta, 0.0, ctheta]])
    rx = np.array([[1.0, 0.0, 0.0], [0.0, cpsi, -spsi], [0.0, spsi, cpsi]])

    drz = np.array([[-sphi, -cphi, 0.0], [cphi, -sphi, 0.0], [0.0, 0.0, 0.0]])
    dry = np.array(
        [[-stheta, 0.0, ctheta], [0.0, 0.0, 0.0], [-ctheta, 0.0, -stheta]]
    )
    drx = np.array([[0.0, 0.0, 0.0], [0.0, -spsi, -cpsi], [0.0, cpsi, -spsi]])

    return rz @ ry @ rx, [drz @ ry @ rx, rz @ dry @ rx, rz @ ry @ drx]


class RotationTransformation(Transformation):
    """A rotation about a center point: `x -> R (x - c) + c`."""

    def __init__(self, matrix: ArrayLike, center: ArrayLike) -> None:
        self._matrix = immutable_array(matrix, dtype=np.float64)
        self._center = immutable_array(center, dtype=np.float64, ndmin=1)
        dim = self._center.size
        if self._matrix.shape != (dim, dim):
            msg = "the rotation matrix does not match the dimension of the center"
            raise ValueError(msg)

    @property
    def dimensionality(self) -> int:
        return self._center.size

    @property
    def matrix(self) -> NDArray[np.float64]:
        return self._matrix

    @property
    def center(self) -> NDArray[np.float64]:
        return self._center

    def _apply(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        return (points - self._center) @ self._matrix.T + self._center

    def _jacobian(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        dim = self.dimensionality
        return np.broadcast_to(self._matrix, (points.shape[0], dim, dim)).copy()

    def inverse(self) -> RotationTransformation:
        return RotationTransformation(self._matrix.T, self._center)


class RotationSpace(TransformationSpace):
    """The space of rotations about a fixed center.

    In 2D the single parameter is the counter-clockwise rotation angle in
    radians. In 3D the three parameters are the Euler angles
    `(phi, theta, psi)`, and the rotation matrix is given by
    `Rz(phi) @ Ry(theta) @ Rx(psi)`, where `Rx`, `Ry` and `Rz` are the
    rotations about the coordinate axes. The identity is given by zero angles.
    """

    def __init__(self, center: ArrayLike) -> None:
        self._center = immutable_array(center, dtype=np.float64, ndmin=1)
        if self._center.size not in {2, 3}:
            msg = "only 2D and 3D rotations are supported"
            raise ValueError(msg)

    @property
    def dimensionality(self) -> int:
        return self._center.size

    @property
    def number_of_parameters(self) -> int:
        return 1 if self.dimensionality == 2 else 3  # noqa: PLR2004

    @property
    def center(self) -> NDArray[np.float64]:
        return self._center

    def _matrices(
        self, parameters: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], list[NDArray[np.float64]]]:
        if self.dimensionality == 2:  # noqa: PLR2004
            return _rotation_2d(float(parameters[0]))
        return _rotation_3d(parameters)

    def _transformation(
        self, parameters: NDArray[np.float64]
    ) -> RotationTransformation:
        matrix, _ = self._matrices(parameters)
        return RotationTransformation(matrix, self._center)

    def _parameters_jacobian(
        self, parameters: NDArray[np.float64], points: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        _, derivatives = self._matrices(parameters)
        centered = points - self._center
        return np.stack(
            [centered @ derivative.T for derivative in derivatives], axis=-1
        )
