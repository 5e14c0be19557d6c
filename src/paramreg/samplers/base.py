"""This module defines the abstract base class for samplers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from paramreg.domain import BoxDomain


class Sampler(ABC):
    """Abstract Base Class for Sampler Implementations.

    Samplers select the points at which metrics evaluate the images. The
    value and gradient of a metric are integrals over the domain of the fixed
    image, which are approximated by weighted sums over the sampled points.

    The core functionality, generating samples, is performed by the `sample`
    method, which must be implemented by subclasses.

    Subclasses must implement:

    - `domain`:           The domain that is sampled.
    - `number_of_points`: The number of points returned by `sample`.
    - `sample`:           To contain the sample generation logic.
    """

    @property
    @abstractmethod
    def domain(self) -> BoxDomain:
        """Return the sampled domain."""

    @property
    @abstractmethod
    def number_of_points(self) -> int:
        """Return the number of points produced by each call to `sample`."""

    @abstractmethod
    def sample(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Generate sample points and their weights.

        This method must return a tuple of two arrays. The first is an array
        of shape `(n, d)` containing the sampled points, where `n` equals
        `number_of_points` and `d` is the dimensionality of the domain. The
        second is an array of shape `(n,)` holding the weight of each point.
        The weights sum to one.

        Returns:
            The points and their weights.
        """
