"""Factory functions for building components from configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .config import L2NormCostConfig, LinearSystemConfig, PortionConfig, ProblemConfig
from .cost import Cost, L2NormCost
from .dynamics import DynamicalSystem, LinearSystem
from .trajectories import SampledVectorTrajectory


@dataclass
class Problem:
    """Dynamical system and cost terms built from a ProblemConfig."""

    system: DynamicalSystem
    costs: list[Cost] = field(default_factory=list)


def _selector(portion: PortionConfig) -> np.ndarray:
    if portion.selector is not None:
        if not portion.selector:
            return np.zeros((0, 0))
        return np.array(portion.selector, dtype=np.float64)
    return np.eye(portion.dimension)


def _configure_portion(cost: L2NormCost, portion: PortionConfig, label: str) -> None:
    set_weight = cost.set_state_weight if label == "state" else cost.set_control_weight
    set_point = cost.set_state_desired_point if label == "state" else cost.set_control_desired_point
    set_trajectory = (
        cost.set_state_desired_trajectory if label == "state" else cost.set_control_desired_trajectory
    )

    weight = None
    if portion.weight is not None:
        weight = np.array(portion.weight, dtype=np.float64)
    elif portion.weight_diag is not None:
        weight = np.diag(portion.weight_diag)

    if weight is not None and not set_weight(weight):
        raise ValueError(f"Invalid {label} weight for cost '{cost.name}'")

    if portion.desired_point is not None and not set_point(np.array(portion.desired_point)):
        raise ValueError(f"Invalid {label} desired point for cost '{cost.name}'")

    if portion.desired_trajectory is not None:
        trajectory = SampledVectorTrajectory(
            times=portion.desired_trajectory.times,
            samples=portion.desired_trajectory.samples,
        )
        if not set_trajectory(trajectory):
            raise ValueError(f"Invalid {label} desired trajectory for cost '{cost.name}'")


def make_l2_norm_cost(cfg: L2NormCostConfig) -> L2NormCost:
    """Create an L2-norm cost and apply its weights and targets."""
    if cfg.type != "l2_norm":
        raise ValueError(f"Unknown cost type: {cfg.type}")

    cost = L2NormCost.from_selectors(cfg.name, _selector(cfg.state), _selector(cfg.control))
    _configure_portion(cost, cfg.state, "state")
    _configure_portion(cost, cfg.control, "control")
    return cost


def make_linear_system(cfg: LinearSystemConfig) -> LinearSystem:
    """Create a linear system and set its stored buffers."""
    if cfg.type != "linear":
        raise ValueError(f"Unknown system type: {cfg.type}")

    nx, nu = cfg.state_space_size, cfg.control_space_size
    system = LinearSystem(nx, nu)

    if not system.set_state_matrix(np.array(cfg.A, dtype=np.float64).reshape(nx, nx)):
        raise ValueError("Invalid state matrix")
    if not system.set_control_matrix(np.array(cfg.B, dtype=np.float64).reshape(nx, nu)):
        raise ValueError("Invalid control matrix")

    if cfg.initial_state is not None and not system.set_initial_state(np.array(cfg.initial_state)):
        raise ValueError(f"Initial state must have size {nx}")
    if cfg.control_input is not None and not system.set_control_input(np.array(cfg.control_input)):
        raise ValueError(f"Control input must have size {nu}")

    return system


def make_problem(cfg: ProblemConfig) -> Problem:
    """Create the system and every cost, checking that their sizes agree."""
    system = make_linear_system(cfg.system)
    costs: list[Cost] = []

    for cost_cfg in cfg.costs:
        cost = make_l2_norm_cost(cost_cfg)
        state_cols = _selector(cost_cfg.state).shape[1]
        control_cols = _selector(cost_cfg.control).shape[1]
        if cost.has_state_cost and state_cols != system.state_space_size:
            raise ValueError(
                f"Cost '{cost.name}' tracks a state of size {state_cols}, system has {system.state_space_size}"
            )
        if cost.has_control_cost and control_cols != system.control_space_size:
            raise ValueError(
                f"Cost '{cost.name}' tracks a control of size {control_cols}, "
                f"system has {system.control_space_size}"
            )
        costs.append(cost)

    return Problem(system=system, costs=costs)
