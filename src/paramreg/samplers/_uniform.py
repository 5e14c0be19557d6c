"""This module implements the uniform random sampler."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.random import Generator, default_rng

from paramreg.config import UniformSamplerConfig

from .base import Sampler

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from paramreg.domain import BoxDomain


class UniformSampler(Sampler):
    """A sampler drawing independent, uniformly distributed points.

    The random source is passed explicitly, either as a NumPy random
    generator or as an integer seed:

    - With a generator, every call to `sample` draws new points from it.
    - With a seed, the sampler is deterministic: every call creates a fresh
      generator from the seed and returns the same points.

    All points have the same weight, `1 / N`.
    """

    def __init__(
        self, domain: BoxDomain, number_of_points: int, rng: Generator | int
    ) -> None:
        """Initialize the uniform sampler.

        Args:
            domain:           The domain to sample.
            number_of_points: The number of points drawn per call.
            rng:              A random generator, or a seed.

        Raises:
            ValueError: If the number of points is not positive.
        """
        self._config = UniformSamplerConfig(
            number_of_points=number_of_points,
            seed=None if isinstance(rng, Generator) else rng,
        )
        self._domain = domain
        self._rng = rng if isinstance(rng, Generator) else None

    @property
    def domain(self) -> BoxDomain:
        return self._domain

    @property
    def number_of_points(self) -> int:
        return self._config.number_of_points

    @property
    def is_deterministic(self) -> bool:
        return self._config.seed is not None

    def sample(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Draw uniformly distributed points.

        See the [paramreg.samplers.base.Sampler][] abstract base class.

        # noqa
        """
        rng = self._rng if self._rng is not None else default_rng(self._config.seed)
        count = self._config.number_of_points
        points = self._domain.origin + self._domain.extent * rng.random(
            (count, self._domain.dimensionality)
        )
        return points, np.full(count, 1.0 / count)
