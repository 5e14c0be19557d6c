from typing import Any, Callable, Sequence

import numpy as np
import pytest
from numpy.typing import NDArray

from paramreg.domain import BoxDomain
from paramreg.image import DiscreteScalarImage, InterpolatedImage
from paramreg.transformations import Transformation

# Centers, widths and amplitudes of the Gaussian blobs of the synthetic
# images. The intensity is close to zero near the borders of the images.
_BLOBS: dict[int, tuple[NDArray[np.float64], ...]] = {
    2: (
        np.array([[50.0, 45.0], [80.0, 60.0], [58.0, 85.0], [75.0, 38.0]]),
        np.array([[12.0, 8.0], [9.0, 14.0], [10.0, 10.0], [7.0, 9.0]]),
        np.array([1.0, 0.8, 0.6, 0.5]),
    ),
    3: (
        np.array([[18.0, 17.0, 22.0], [29.0, 24.0, 20.0], [22.0, 31.0, 28.0]]),
        np.array([[5.0, 4.0, 6.0], [4.0, 6.0, 5.0], [5.0, 5.0, 4.0]]),
        np.array([1.0, 0.8, 0.6]),
    ),
}
_SIZES = {2: 128, 3: 48}

ImageFactory = Callable[..., InterpolatedImage]


def pytest_addoption(parser: Any) -> Any:
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="run slow tests"
    )


def pytest_collection_modifyitems(config: Any, items: Sequence[Any]) -> None:
    if not config.getoption("--run-slow"):
        skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


def _blobs(points: NDArray[np.float64]) -> NDArray[np.float64]:
    centers, widths, amplitudes = _BLOBS[points.shape[1]]
    distances = (points[:, np.newaxis, :] - centers) / widths
    return np.exp(-0.5 * np.sum(distances**2, axis=-1)) @ amplitudes


@pytest.fixture(scope="session")
def image_factory() -> ImageFactory:
    def _image_factory(
        dimensionality: int = 2,
        transformation: Transformation | None = None,
        intensity: Callable[[NDArray[np.float64]], NDArray[np.float64]] | None = None,
    ) -> InterpolatedImage:
        # The image at x is the blob function at transformation(x). Registering
        # it as the fixed image against the untransformed image as the moving
        # image recovers the parameters of the transformation.
        shape = (_SIZES[dimensionality],) * dimensionality
        grid = DiscreteScalarImage(np.zeros(shape))
        points = grid.points()
        if transformation is not None:
            points = transformation(points)
        values = _blobs(points)
        if intensity is not None:
            values = intensity(values)
        return DiscreteScalarImage(values.reshape(grid.shape)).interpolate()

    return _image_factory


@pytest.fixture(name="image_domain")
def image_domain_fixture() -> BoxDomain:
    return BoxDomain([0.0, 0.0], [127.0, 127.0])


@pytest.fixture(name="sampling_domain")
def sampling_domain_fixture() -> BoxDomain:
    # Small transformations keep these points inside the moving image.
    return BoxDomain([24.0, 24.0], [104.0, 104.0])
