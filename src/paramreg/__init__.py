"""Parametric image registration with analytic metric gradients."""

__version__ = "0.1.0"
