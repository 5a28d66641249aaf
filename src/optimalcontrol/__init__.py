"""Dynamics and cost building blocks for continuous-time optimal control."""

from .cost import Cost, L2NormCost, QuadraticCost
from .dynamics import DynamicalSystem, LinearSystem
from .events import ErrorEvent, FailureSeverity, add_error_sink, remove_error_sink
from .sparsity import SparsityPattern
from .trajectories import (
    SampledVectorTrajectory,
    TimeInvariantDouble,
    TimeInvariantMatrix,
    TimeInvariantVector,
    TimeVaryingDouble,
    TimeVaryingMatrix,
    TimeVaryingVector,
)

__all__ = [
    "Cost",
    "QuadraticCost",
    "L2NormCost",
    "DynamicalSystem",
    "LinearSystem",
    "ErrorEvent",
    "FailureSeverity",
    "add_error_sink",
    "remove_error_sink",
    "SparsityPattern",
    "TimeVaryingVector",
    "TimeVaryingMatrix",
    "TimeVaryingDouble",
    "TimeInvariantVector",
    "TimeInvariantMatrix",
    "TimeInvariantDouble",
    "SampledVectorTrajectory",
]
