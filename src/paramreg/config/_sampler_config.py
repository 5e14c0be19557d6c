"""Configuration classes for samplers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class GridSamplerConfig(BaseModel):
    """Configuration class for grid samplers.

    The `size` field holds the number of grid points along each spatial axis;
    its length must match the dimensionality of the sampled domain.

    Attributes:
        size: Number of points per axis.
    """

    size: tuple[PositiveInt, ...] = Field(min_length=1)

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        frozen=True,
    )


class UniformSamplerConfig(BaseModel):
    """Configuration class for uniform random samplers.

    If a `seed` is given, the sampler is deterministic and returns the same
    points on every call. Otherwise the points are drawn anew from the random
    generator passed to the sampler on every call.

    Attributes:
        number_of_points: Number of points drawn per call.
        seed:             Optional seed making the sampler deterministic.
    """

    number_of_points: PositiveInt
    seed: int | None = None

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        frozen=True,
    )
