from typing import Callable

import numpy as np
import pytest
from numpy.typing import NDArray

from paramreg.domain import BoxDomain
from paramreg.gaussian_process import GaussianKernel, LowRankGaussianProcess
from paramreg.samplers import GridSampler
from paramreg.transformations import (
    CompositeTransformation,
    GaussianProcessTransformationSpace,
    ProductTransformationSpace,
    RigidTransformationSpace,
    RotationSpace,
    ScalingSpace,
    TransformationSpace,
    TranslationSpace,
)

_POINTS_2D = np.array([[1.0, 2.0], [-3.0, 0.5], [10.0, -4.0], [0.0, 0.0]])
_POINTS_3D = np.array([[1.0, 2.0, 3.0], [-3.0, 0.5, 2.0], [10.0, -4.0, 0.0]])


def _gp_space() -> GaussianProcessTransformationSpace:
    domain = BoxDomain([-10.0, -10.0], [10.0, 10.0])
    gp = LowRankGaussianProcess.approximate_nystrom(
        GaussianKernel(sigma=8.0, scale=2.0), GridSampler(domain, (6, 6)), 5
    )
    return GaussianProcessTransformationSpace(gp)


_SPACES: dict[str, Callable[[], tuple[TransformationSpace, NDArray[np.float64]]]] = {
    "translation": lambda: (TranslationSpace(2), _POINTS_2D),
    "rotation_2d": lambda: (RotationSpace([1.0, -1.0]), _POINTS_2D),
    "rotation_3d": lambda: (RotationSpace([1.0, -1.0, 0.5]), _POINTS_3D),
    "scaling": lambda: (ScalingSpace(3), _POINTS_3D),
    "rigid": lambda: (RigidTransformationSpace([0.5, 0.5]), _POINTS_2D),
    "gaussian_process": lambda: (_gp_space(), _POINTS_2D),
    "product": lambda: (
        RotationSpace([0.0, 0.0]).product(TranslationSpace(2)).product(_gp_space()),
        _POINTS_2D,
    ),
}


@pytest.mark.parametrize("name", sorted(_SPACES))
def test_identity_parameters(name: str) -> None:
    space, points = _SPACES[name]()
    parameters = space.identity_parameters()
    assert parameters.shape == (space.number_of_parameters,)
    transformation = space.transformation_for_parameters(parameters)
    assert np.allclose(transformation(points), points)
    assert np.allclose(
        transformation.jacobian(points), np.eye(space.dimensionality), atol=1e-12
    )


@pytest.mark.parametrize("name", sorted(_SPACES))
def test_wrong_number_of_parameters(name: str) -> None:
    space, _ = _SPACES[name]()
    with pytest.raises(ValueError, match="parameter vector"):
        space.transformation_for_parameters(np.zeros(space.number_of_parameters + 1))


@pytest.mark.parametrize("name", sorted(_SPACES))
def test_parameters_jacobian(name: str) -> None:
    space, points = _SPACES[name]()
    rng = np.random.default_rng(123)
    parameters = space.identity_parameters() + 0.3 * rng.standard_normal(
        space.number_of_parameters
    )
    jacobian = space.parameters_jacobian(parameters, points)
    assert jacobian.shape == (
        points.shape[0],
        space.dimensionality,
        space.number_of_parameters,
    )
    step = 1e-6
    for idx in range(space.number_of_parameters):
        delta = np.zeros_like(parameters)
        delta[idx] = step
        forward = space.transformation_for_parameters(parameters + delta)(points)
        backward = space.transformation_for_parameters(parameters - delta)(points)
        assert np.allclose(
            jacobian[..., idx], (forward - backward) / (2 * step), atol=1e-6
        )


@pytest.mark.parametrize("name", sorted(_SPACES))
def test_spatial_jacobian(name: str) -> None:
    space, points = _SPACES[name]()
    rng = np.random.default_rng(123)
    parameters = space.identity_parameters() + 0.3 * rng.standard_normal(
        space.number_of_parameters
    )
    transformation = space.transformation_for_parameters(parameters)
    jacobian = transformation.jacobian(points)
    step = 1e-6
    for idx in range(space.dimensionality):
        delta = np.zeros(space.dimensionality)
        delta[idx] = step
        expected = (transformation(points + delta) - transformation(points - delta)) / (
            2 * step
        )
        assert np.allclose(jacobian[..., idx], expected, atol=1e-6)


def test_single_point() -> None:
    space = RotationSpace([0.0, 0.0])
    transformation = space.transformation_for_parameters([np.pi / 2])
    assert np.allclose(transformation([1.0, 0.0]), [0.0, 1.0])
    assert transformation.jacobian([1.0, 0.0]).shape == (2, 2)
    assert space.parameters_jacobian([0.0], [1.0, 0.0]).shape == (2, 1)
    with pytest.raises(ValueError, match="coordinates"):
        transformation([1.0, 0.0, 0.0])


@pytest.mark.parametrize(
    ("space", "parameters", "points"),
    [
        (TranslationSpace(2), [-10.0, 5.0], _POINTS_2D),
        (TranslationSpace(3), [1.0, 2.0, -3.0], _POINTS_3D),
        (RotationSpace([64.0, 64.0]), [np.pi / 8], _POINTS_2D),
        (RotationSpace([1.0, 2.0, 3.0]), [0.3, -0.2, 1.1], _POINTS_3D),
        (ScalingSpace(2), [1.5], _POINTS_2D),
        (RigidTransformationSpace([5.0, 5.0]), [0.4, 2.0, -1.0], _POINTS_2D),
    ],
)
def test_inverse_round_trip(
    space: TransformationSpace, parameters: list[float], points: NDArray[np.float64]
) -> None:
    transformation = space.transformation_for_parameters(parameters)
    inverse = transformation.inverse()
    assert np.allclose(inverse(transformation(points)), points)
    assert np.allclose(transformation(inverse(points)), points)


def test_translation_inverse_by_negation() -> None:
    space = TranslationSpace(2)
    forward = space.transformation_for_parameters([-10.0, 5.0])
    backward = space.transformation_for_parameters([10.0, -5.0])
    assert np.allclose(backward(forward(_POINTS_2D)), _POINTS_2D)


def test_rotation_3d_orthogonal() -> None:
    space = RotationSpace([0.0, 0.0, 0.0])
    transformation = space.transformation_for_parameters([0.3, -0.2, 1.1])
    jacobian = transformation.jacobian(_POINTS_3D[0])
    assert np.allclose(jacobian @ jacobian.T, np.eye(3))
    assert np.linalg.det(jacobian) == pytest.approx(1.0)


def test_gaussian_process_has_no_inverse() -> None:
    space = _gp_space()
    transformation = space.transformation_for_parameters(np.ones(5))
    with pytest.raises(NotImplementedError):
        transformation.inverse()


def test_product_order() -> None:
    rotation = RotationSpace([0.0, 0.0])
    translation = TranslationSpace(2)
    parameters = [np.pi / 2, 1.0, 0.0]

    # Rotate first, then translate:
    product = rotation.product(translation)
    assert isinstance(product, ProductTransformationSpace)
    assert product.number_of_parameters == 3
    assert np.allclose(
        product.transformation_for_parameters(parameters)([1.0, 0.0]), [1.0, 1.0]
    )

    # Translate first, then rotate:
    reversed_product = translation.product(rotation)
    assert np.allclose(
        reversed_product.transformation_for_parameters([1.0, 0.0, np.pi / 2])(
            [1.0, 0.0]
        ),
        [0.0, 2.0],
    )


def test_product_parameters() -> None:
    product = TranslationSpace(2).product(_gp_space())
    assert product.number_of_parameters == 7
    first, second = product.split_parameters(np.arange(7.0))
    assert np.array_equal(first, [0.0, 1.0])
    assert np.array_equal(second, [2.0, 3.0, 4.0, 5.0, 6.0])

    transformation = product.transformation_for_parameters(np.arange(7.0))
    assert isinstance(transformation, CompositeTransformation)
    expected = transformation.second(transformation.first(_POINTS_2D))
    assert np.allclose(transformation(_POINTS_2D), expected)
    assert np.allclose(transformation.first(_POINTS_2D), _POINTS_2D + [0.0, 1.0])


@pytest.mark.parametrize("length", [0, 6, 8])
def test_product_split_wrong_length(length: int) -> None:
    product = TranslationSpace(2).product(_gp_space())
    with pytest.raises(ValueError, match="parameter vector of length 7"):
        product.split_parameters(np.zeros(length))


def test_product_dimensionality_mismatch() -> None:
    with pytest.raises(ValueError, match="dimensionality"):
        TranslationSpace(2).product(TranslationSpace(3))


def test_scaling_identity() -> None:
    space = ScalingSpace(2)
    assert np.array_equal(space.identity_parameters(), [1.0])
    transformation = space.transformation_for_parameters([2.0])
    assert np.allclose(transformation(_POINTS_2D), 2.0 * _POINTS_2D)
