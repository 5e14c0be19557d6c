"""Samplers selecting the evaluation points of metrics.

Metrics approximate integrals over the image domain by weighted sums over
sampled points. A [`Sampler`][paramreg.samplers.base.Sampler] returns such a
point set together with the weights of the points:

- [`GridSampler`][paramreg.samplers.GridSampler]: The points of a regular grid.
- [`UniformSampler`][paramreg.samplers.UniformSampler]: Uniformly distributed
  random points.
"""

from ._grid import GridSampler
from ._uniform import UniformSampler
from .base import Sampler

__all__ = [
    "GridSampler",
    "Sampler",
    "UniformSampler",
]
