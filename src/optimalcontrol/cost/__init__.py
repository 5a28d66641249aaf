"""Cost terms for optimal control problems."""

from .base import Cost
from .l2_norm import L2NormCost
from .quadratic import QuadraticCost

__all__ = ["Cost", "QuadraticCost", "L2NormCost"]
