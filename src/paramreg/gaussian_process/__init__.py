"""Low-rank Gaussian processes for non-rigid deformations.

A [`LowRankGaussianProcess`][paramreg.gaussian_process.LowRankGaussianProcess]
models smooth displacement fields by a small number of basis coefficients. It
is the source of the non-rigid deformations of the
[`GaussianProcessTransformationSpace`][paramreg.transformations.GaussianProcessTransformationSpace].
"""

from ._kernels import GaussianKernel
from ._low_rank import LowRankGaussianProcess

__all__ = [
    "GaussianKernel",
    "LowRankGaussianProcess",
]
