"""Low-rank Gaussian processes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy.linalg import eigh

from paramreg.config.utils import immutable_array
from paramreg.utils import as_parameters, as_points

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from paramreg.samplers.base import Sampler

    from ._kernels import GaussianKernel


class LowRankGaussianProcess:
    """A zero-mean, vector-valued Gaussian process of finite rank.

    The process is represented by a truncated basis expansion

        u(x) = sum_i alpha_i * sqrt(lambda_i) * phi_i(x)

    where `lambda_i` and `phi_i` approximate the leading eigenvalues and
    eigenfunctions of the covariance kernel, and the coefficients `alpha_i`
    are independent standard normal variables. Its samples are smooth
    displacement fields, described by `rank` coefficients.

    The eigenpairs are computed with the Nystrom method from a set of
    inducing points, see
    [`approximate_nystrom`][paramreg.gaussian_process.LowRankGaussianProcess.approximate_nystrom].
    Internally, the scaled basis functions `sqrt(lambda_i) * phi_i(x)` are
    stored as `k(x, X) @ W`, where `X` are the inducing points and `W` is a
    fixed weight matrix.
    """

    def __init__(
        self,
        kernel: GaussianKernel,
        inducing_points: ArrayLike,
        weights: ArrayLike,
        eigenvalues: ArrayLike,
    ) -> None:
        """Initialize a low-rank Gaussian process.

        Args:
            kernel:          The scalar covariance kernel.
            inducing_points: The `(m, d)` inducing points.
            weights:         The `(m, d, rank)` basis weights.
            eigenvalues:     The `rank` eigenvalues of the basis functions.
        """
        self._kernel = kernel
        self._inducing_points = immutable_array(inducing_points, dtype=np.float64)
        self._weights = immutable_array(weights, dtype=np.float64)
        self._eigenvalues = immutable_array(eigenvalues, dtype=np.float64, ndmin=1)
        count, dim = self._inducing_points.shape
        if self._weights.shape != (count, dim, self._eigenvalues.size):
            msg = "the basis weights do not match the inducing points and rank"
            raise ValueError(msg)

    @classmethod
    def approximate_nystrom(
        cls,
        kernel: GaussianKernel,
        sampler: Sampler,
        number_of_basis_functions: int,
    ) -> LowRankGaussianProcess:
        """Approximate a Gaussian process with the Nystrom method.

        The inducing points are drawn once from `sampler`. The kernel matrix
        of the vector-valued process on these points is decomposed, and the
        leading `number_of_basis_functions` eigenvectors define the basis.

        Args:
            kernel:                    The scalar covariance kernel.
            sampler:                   The sampler providing the inducing points.
            number_of_basis_functions: The rank of the approximation.

        Returns:
            The low-rank Gaussian process.

        Raises:
            ValueError: If the requested rank cannot be provided.
        """
        points, _ = sampler.sample()
        count, dim = points.shape
        if not 0 < number_of_basis_functions <= count * dim:
            msg = (
                f"the number of basis functions must be in the range "
                f"1-{count * dim}"
            )
            raise ValueError(msg)
        matrix = np.kron(kernel(points, points), np.eye(dim))
        values, vectors = eigh(matrix)
        order = np.argsort(values)[::-1][:number_of_basis_functions]
        values, vectors = values[order], vectors[:, order]
        if np.any(values <= np.finfo(np.float64).eps * values[0]):
            msg = "the kernel matrix has too few positive eigenvalues for this rank"
            raise ValueError(msg)
        weights = (vectors / np.sqrt(values)).reshape(
            count, dim, number_of_basis_functions
        )
        return cls(kernel, points, weights, values / count)

    @property
    def dimensionality(self) -> int:
        return self._inducing_points.shape[1]

    @property
    def rank(self) -> int:
        return self._eigenvalues.size

    @property
    def eigenvalues(self) -> NDArray[np.float64]:
        return self._eigenvalues

    @property
    def kernel(self) -> GaussianKernel:
        return self._kernel

    def truncate(self, rank: int) -> LowRankGaussianProcess:
        """Keep only the leading basis functions.

        Args:
            rank: The number of basis functions to keep.

        Returns:
            A new Gaussian process of the given rank.
        """
        if not 0 < rank <= self.rank:
            msg = f"the rank must be in the range 1-{self.rank}"
            raise ValueError(msg)
        return LowRankGaussianProcess(
            self._kernel,
            self._inducing_points,
            self._weights[..., :rank],
            self._eigenvalues[:rank],
        )

    def basis(self, points: ArrayLike) -> NDArray[np.float64]:
        """Evaluate the scaled basis functions.

        The entry `[n, i, k]` is component `i` of basis function `k` at point
        `n`. It is also the derivative of the displacement with respect to
        coefficient `k`.

        Args:
            points: A single point or an `(n, d)` array of points.

        Returns:
            An `(n, d, rank)` array, or a `(d, rank)` matrix for a single point.
        """
        array, single = as_points(points, self.dimensionality)
        result = np.einsum(
            "nm,mik->nik", self._kernel(array, self._inducing_points), self._weights
        )
        return result[0] if single else result

    def instance(
        self, coefficients: ArrayLike, points: ArrayLike
    ) -> NDArray[np.float64]:
        """Evaluate the displacement field for a set of coefficients.

        Args:
            coefficients: The `rank` basis coefficients.
            points:       A single point or an `(n, d)` array of points.

        Returns:
            The displacements, with the same shape as the points.
        """
        coefficients = as_parameters(coefficients, self.rank)
        array, single = as_points(points, self.dimensionality)
        result = self._kernel(array, self._inducing_points) @ (
            self._weights @ coefficients
        )
        return result[0] if single else result

    def instance_jacobian(
        self, coefficients: ArrayLike, points: ArrayLike
    ) -> NDArray[np.float64]:
        """Compute the spatial Jacobian of the displacement field.

        Args:
            coefficients: The `rank` basis coefficients.
            points:       A single point or an `(n, d)` array of points.

        Returns:
            An `(n, d, d)` array, or a `(d, d)` matrix for a single point.
        """
        coefficients = as_parameters(coefficients, self.rank)
        array, single = as_points(points, self.dimensionality)
        result = np.einsum(
            "nmj,mi->nij",
            self._kernel.derivative(array, self._inducing_points),
            self._weights @ coefficients,
        )
        return result[0] if single else result

    def sample(self, rng: np.random.Generator) -> NDArray[np.float64]:
        """Draw random coefficients of the process.

        Args:
            rng: The random generator to use.

        Returns:
            A vector of `rank` standard normal coefficients.
        """
        return rng.standard_normal(self.rank)
