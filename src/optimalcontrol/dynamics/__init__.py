"""Dynamical system contract and implementations."""

from .base import DynamicalSystem
from .linear import LinearSystem

__all__ = ["DynamicalSystem", "LinearSystem"]
