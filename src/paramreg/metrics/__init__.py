"""Image metrics.

A metric scores the alignment of a fixed image and a moving image that is
warped by a transformation of a transformation space. Metrics are minimized:
lower values mean better alignment. Each metric provides its `value` and the
analytic gradient of that value with respect to the transformation
parameters, computed from a set of sampled points:

- [`MeanSquaresMetric`][paramreg.metrics.MeanSquaresMetric]: Mean squared
  intensity difference.
- [`MeanHuberLossMetric`][paramreg.metrics.MeanHuberLossMetric]: Mean Huber
  loss of the intensity difference, robust to outliers.
- [`MutualInformationMetric`][paramreg.metrics.MutualInformationMetric]:
  Negated Mattes mutual information, for images of different modalities.
"""

from ._huber import MeanHuberLossMetric
from ._mean_squares import MeanSquaresMetric
from ._mutual_information import MutualInformationMetric
from .base import ImageMetric, MeanPointwiseLossMetric, MetricSamples

__all__ = [
    "ImageMetric",
    "MeanHuberLossMetric",
    "MeanPointwiseLossMetric",
    "MeanSquaresMetric",
    "MetricSamples",
    "MutualInformationMetric",
]
