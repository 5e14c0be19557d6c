import numpy as np
import pytest
from pydantic import ValidationError

from paramreg.domain import BoxDomain
from paramreg.samplers import GridSampler, UniformSampler


@pytest.fixture(name="domain")
def domain_fixture() -> BoxDomain:
    return BoxDomain([-1.0, 2.0], [3.0, 4.0])


def test_grid_sampler(domain: BoxDomain) -> None:
    sampler = GridSampler(domain, (4, 2))
    points, weights = sampler.sample()
    assert sampler.number_of_points == 8
    assert points.shape == (8, 2)
    assert np.allclose(weights, 1.0 / 8)
    assert np.allclose(np.unique(points[:, 0]), [-1.0, 0.0, 1.0, 2.0])
    assert np.allclose(np.unique(points[:, 1]), [2.0, 3.0])
    assert np.all(domain.is_defined_at(points))


def test_grid_sampler_deterministic(domain: BoxDomain) -> None:
    sampler = GridSampler(domain, (3, 5))
    points1, _ = sampler.sample()
    points2, _ = sampler.sample()
    assert np.array_equal(points1, points2)
    assert not points1.flags.writeable


@pytest.mark.parametrize("size", [(0, 2), (-1, 3), ()])
def test_grid_sampler_invalid_size(domain: BoxDomain, size: tuple[int, ...]) -> None:
    with pytest.raises(ValidationError):
        GridSampler(domain, size)


def test_grid_sampler_dimension_mismatch(domain: BoxDomain) -> None:
    with pytest.raises(ValueError, match="entries"):
        GridSampler(domain, (2, 2, 2))


def test_uniform_sampler(domain: BoxDomain) -> None:
    sampler = UniformSampler(domain, 1000, np.random.default_rng(123))
    assert not sampler.is_deterministic
    points, weights = sampler.sample()
    assert points.shape == (1000, 2)
    assert np.allclose(weights, 1e-3)
    assert np.all(domain.is_defined_at(points))
    assert np.allclose(points.mean(axis=0), domain.center, atol=0.1)

    # A generator produces new points on each call:
    points2, _ = sampler.sample()
    assert not np.allclose(points, points2)


def test_uniform_sampler_seeded(domain: BoxDomain) -> None:
    sampler = UniformSampler(domain, 100, 42)
    assert sampler.is_deterministic
    points1, _ = sampler.sample()
    points2, _ = sampler.sample()
    assert np.array_equal(points1, points2)
    points3, _ = UniformSampler(domain, 100, 43).sample()
    assert not np.allclose(points1, points3)


@pytest.mark.parametrize("count", [0, -5])
def test_uniform_sampler_invalid_count(domain: BoxDomain, count: int) -> None:
    with pytest.raises(ValidationError):
        UniformSampler(domain, count, 42)
