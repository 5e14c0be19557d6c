"""Example of the registration of a translated 2D image.

This example creates a synthetic image, a sum of Gaussian blobs, and a
translated copy of it. The translation is recovered by minimizing the mean
squared intensity difference of the two images over the space of
translations. It shows how to set up the images, the sampler, the metric and
the registration, and how to monitor the registration run.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from paramreg.domain import BoxDomain
from paramreg.image import DiscreteScalarImage, InterpolatedImage
from paramreg.metrics import MeanSquaresMetric
from paramreg.registration import Registration, RegistrationState
from paramreg.regularizers import L2Regularizer
from paramreg.samplers import GridSampler
from paramreg.transformations import TranslationSpace

SIZE = 128
TRANSLATION = np.array([-10.0, 5.0])

# Each blob is given by its center, its widths, and its amplitude:
BLOBS = [
    ((50.0, 45.0), (12.0, 8.0), 1.0),
    ((80.0, 60.0), (9.0, 14.0), 0.8),
    ((58.0, 85.0), (10.0, 10.0), 0.6),
]

CONFIG: dict[str, Any] = {
    "regularization_weight": 0.0,
    "optimizer": {
        "max_iterations": 300,
    },
}


def blobs(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Evaluate the synthetic intensity function.

    Args:
        points: An `(n, 2)` array of points.

    Returns:
        The intensities at the points.
    """
    values = np.zeros(points.shape[0])
    for center, width, amplitude in BLOBS:
        values += amplitude * np.exp(
            -0.5 * np.sum(((points - center) / np.array(width)) ** 2, axis=1)
        )
    return values


def make_image(translation: NDArray[np.float64]) -> InterpolatedImage:
    """Create an image of the blobs, shifted by `-translation`.

    Args:
        translation: The translation.

    Returns:
        The interpolated image.
    """
    grid = DiscreteScalarImage(np.zeros((SIZE, SIZE)))
    values = blobs(grid.points() + translation).reshape(grid.shape)
    return DiscreteScalarImage(values).interpolate()


def report(state: RegistrationState) -> None:
    """Report the state of a registration.

    Args:
        state: The registration state.
    """
    print(f"  iteration: {state.iteration}")
    print(f"  parameters: {state.parameters}")
    print(f"  value: {state.value}\n")


def run_registration(config: dict[str, Any]) -> RegistrationState:
    """Run the registration.

    Args:
        config: The configuration of the registration.

    Returns:
        The final state.
    """
    # The moving image at x + translation equals the fixed image at x:
    fixed_image = make_image(TRANSLATION)
    moving_image = make_image(np.zeros(2))

    space = TranslationSpace(2)
    sampler = GridSampler(BoxDomain([24.0, 24.0], [104.0, 104.0]), (64, 64))
    metric = MeanSquaresMetric(fixed_image, moving_image, space, sampler)
    registration = Registration.from_config(metric, L2Regularizer(space), config)

    state = None
    for state in registration.iterator(space.identity_parameters()):
        if state.iteration % 10 == 0:
            report(state)
    assert state is not None

    report(state)
    return state


def main() -> None:
    """Run the example and check the result."""
    state = run_registration(CONFIG)
    assert np.allclose(state.parameters, TRANSLATION, atol=0.01)


if __name__ == "__main__":
    main()
