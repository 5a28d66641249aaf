"""Weighted L2-norm tracking cost.

For each portion (state and control) the cost penalizes

    1/2 || S v - d(t) ||^2_W = 1/2 v' S'WS v - d(t)'WS v + const

where S is a selector, W a square weight (identity by default) and d(t) the
desired trajectory in the selected space. The constant term is dropped, so

    Hessian  = S' W S          (recomputed only when W changes)
    gradient = -(d(t)' W S)    (recomputed at every query)

A portion whose selector has no rows or no columns is disabled: it
contributes nothing and its setters fail.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from loguru import logger

from ..events import report_error, report_warning
from ..sparsity import SparsityPattern
from ..trajectories import TimeInvariantMatrix, TimeInvariantVector, TimeVaryingVector
from .quadratic import QuadraticCost


class _TimeVaryingGradient(TimeVaryingVector):
    """Gradient provider -(d(t)' W S) of one tracking portion."""

    def __init__(self, selector: np.ndarray) -> None:
        self._selector = np.array(selector, dtype=np.float64)
        self._weight = np.eye(self._selector.shape[0])
        self._sub_matrix = self._weight @ self._selector
        self._desired_trajectory: TimeVaryingVector | None = None
        self._output = np.zeros(self._selector.shape[1])

    @property
    def selector(self) -> np.ndarray:
        return self._selector

    @property
    def weight(self) -> np.ndarray:
        return self._weight

    @property
    def sub_matrix(self) -> np.ndarray:
        """Cached W S."""
        return self._sub_matrix

    @property
    def desired_trajectory(self) -> TimeVaryingVector | None:
        return self._desired_trajectory

    def set_desired_trajectory(self, desired_trajectory: TimeVaryingVector | None) -> bool:
        if desired_trajectory is None:
            report_error("TimeVaryingGradient", "setDesiredTrajectory", "Empty desired trajectory pointer.")
            return False
        self._desired_trajectory = desired_trajectory
        return True

    def set_weight_matrix(self, weights: np.ndarray) -> bool:
        if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
            report_error("TimeVaryingGradient", "setWeightMatrix", "The weights matrix is supposed to be squared.")
            return False

        if weights.shape[1] != self._selector.shape[0]:
            report_error(
                "TimeVaryingGradient",
                "setWeightMatrix",
                "The weights matrix dimensions do not match those of the specified selector.",
            )
            return False

        if not np.allclose(weights, weights.T):
            report_warning(
                "TimeVaryingGradient",
                "setWeightMatrix",
                "The weights matrix is not symmetric. Only its symmetric part affects the cost value.",
            )

        self._weight = weights.copy()
        self._sub_matrix = self._weight @ self._selector
        return True

    def get_object(self, time: float) -> tuple[np.ndarray, bool]:
        if self._desired_trajectory is None:
            self._output[:] = 0.0
            return self._output, True

        desired_point, ok = self._desired_trajectory.get_object(time)
        if not ok:
            self._output[:] = 0.0
            return self._output, False

        desired_point = np.asarray(desired_point, dtype=np.float64).reshape(-1)
        if desired_point.size != self._sub_matrix.shape[0]:
            report_error(
                "TimeVaryingGradient",
                "getObject",
                f"The specified desired point at time: {time} has size not matching the specified selector.",
            )
            self._output[:] = 0.0
            return self._output, False

        self._output[:] = -1.0 * (desired_point @ self._sub_matrix)
        return self._output, True


@dataclass
class _TrackingTerm:
    gradient: _TimeVaryingGradient
    hessian: TimeInvariantMatrix

    @classmethod
    def from_selector(cls, selector: np.ndarray) -> _TrackingTerm | None:
        if selector.shape[0] == 0 or selector.shape[1] == 0:
            return None
        gradient = _TimeVaryingGradient(selector)
        hessian = TimeInvariantMatrix(gradient.selector.T @ gradient.sub_matrix)
        return cls(gradient=gradient, hessian=hessian)

    def update_hessian(self) -> None:
        self.hessian.set(self.gradient.selector.T @ self.gradient.sub_matrix)

    def hessian_sparsity(self) -> SparsityPattern:
        """Entries of S'WS that can be nonzero for any weight W."""
        used = np.abs(self.gradient.selector)
        rows = used.shape[0]
        return SparsityPattern.from_dense(used.T @ np.ones((rows, rows)) @ used)


def _as_selector(selector: np.ndarray | list[list[float]] | None, label: str) -> np.ndarray:
    if selector is None:
        return np.zeros((0, 0))
    selector = np.asarray(selector, dtype=np.float64)
    if selector.size == 0 and selector.ndim < 2:
        return np.zeros((0, 0))
    if selector.ndim != 2:
        raise ValueError(f"The {label} selector must be a 2-D array, got shape {selector.shape}")
    return selector


class L2NormCost(QuadraticCost):
    """Weighted squared tracking error of selected state and control components.

    Args:
        name: Cost identifier
        state_dimension: Size of the state; the state selector is identity
        control_dimension: Size of the control; the control selector is identity
        state_selector: Explicit state selector (rows = tracked combinations);
            overrides ``state_dimension``
        control_selector: Explicit control selector; overrides
            ``control_dimension``

    Use :meth:`from_selectors` to build from selector matrices only.
    """

    def __init__(
        self,
        name: str,
        state_dimension: int = 0,
        control_dimension: int = 0,
        *,
        state_selector: np.ndarray | None = None,
        control_selector: np.ndarray | None = None,
    ) -> None:
        super().__init__(name)

        if state_dimension < 0 or control_dimension < 0:
            raise ValueError(f"Dimensions must be non-negative, got ({state_dimension}, {control_dimension})")

        if state_selector is None:
            state_selector = np.eye(state_dimension)
        if control_selector is None:
            control_selector = np.eye(control_dimension)

        self._state_term = _TrackingTerm.from_selector(_as_selector(state_selector, "state"))
        self._control_term = _TrackingTerm.from_selector(_as_selector(control_selector, "control"))

        if self._state_term is not None:
            self.set_state_cost(self._state_term.hessian, self._state_term.gradient)
        if self._control_term is not None:
            self.set_control_cost(self._control_term.hessian, self._control_term.gradient)

    @classmethod
    def from_selectors(
        cls,
        name: str,
        state_selector: np.ndarray | list[list[float]] | None,
        control_selector: np.ndarray | list[list[float]] | None,
    ) -> L2NormCost:
        """Build a cost from explicit selectors.

        A selector with zero rows or columns (or None) disables its portion.
        """
        return cls(
            name,
            state_selector=_as_selector(state_selector, "state"),
            control_selector=_as_selector(control_selector, "control"),
        )

    @property
    def has_state_cost(self) -> bool:
        return self._state_term is not None

    @property
    def has_control_cost(self) -> bool:
        return self._control_term is not None

    def state_hessian_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        if self._state_term is None:
            return SparsityPattern(), True
        return self._state_term.hessian_sparsity(), True

    def control_hessian_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        if self._control_term is None:
            return SparsityPattern(), True
        return self._control_term.hessian_sparsity(), True

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def set_state_weight(self, state_weights: np.ndarray) -> bool:
        return self._set_weight(self._state_term, state_weights, "state", "setStateWeight")

    def set_control_weight(self, control_weights: np.ndarray) -> bool:
        return self._set_weight(self._control_term, control_weights, "control", "setControlWeight")

    def set_state_desired_point(self, desired_point: np.ndarray) -> bool:
        return self._set_desired_point(self._state_term, desired_point, "state", "setStateDesiredPoint")

    def set_control_desired_point(self, desired_point: np.ndarray) -> bool:
        return self._set_desired_point(self._control_term, desired_point, "control", "setControlDesiredPoint")

    def set_state_desired_trajectory(self, state_desired_trajectory: TimeVaryingVector) -> bool:
        return self._set_desired_trajectory(
            self._state_term, state_desired_trajectory, "state", "setStateDesiredTrajectory"
        )

    def set_control_desired_trajectory(self, control_desired_trajectory: TimeVaryingVector) -> bool:
        return self._set_desired_trajectory(
            self._control_term, control_desired_trajectory, "control", "setControlDesiredTrajectory"
        )

    def _set_weight(self, term: _TrackingTerm | None, weights: np.ndarray, label: str, operation: str) -> bool:
        weights = np.atleast_2d(np.asarray(weights, dtype=np.float64))
        if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
            report_error("L2NormCost", operation, f"The {label}Weights matrix is supposed to be squared.")
            return False

        if term is None:
            report_error(
                "L2NormCost",
                operation,
                f"The {label} cost portion has been deactivated, given the provided selectors.",
            )
            return False

        if not term.gradient.set_weight_matrix(weights):
            report_error("L2NormCost", operation, f"Error when specifying the {label} weights.")
            return False

        term.update_hessian()
        logger.debug("Cost '{}': {} weight updated", self.name, label)
        return True

    def _set_desired_point(
        self, term: _TrackingTerm | None, desired_point: np.ndarray, label: str, operation: str
    ) -> bool:
        if term is None:
            report_error(
                "L2NormCost",
                operation,
                f"The {label} cost portion has been deactivated, given the provided selectors.",
            )
            return False

        desired_point = np.asarray(desired_point, dtype=np.float64).reshape(-1)
        if desired_point.size != term.gradient.sub_matrix.shape[0]:
            report_error(
                "L2NormCost",
                operation,
                "The desiredPoint size do not match the dimension of the specified selector.",
            )
            return False

        if not term.gradient.set_desired_trajectory(TimeInvariantVector(desired_point)):
            return False
        logger.debug("Cost '{}': {} desired point set to {}", self.name, label, desired_point)
        return True

    def _set_desired_trajectory(
        self,
        term: _TrackingTerm | None,
        desired_trajectory: TimeVaryingVector | None,
        label: str,
        operation: str,
    ) -> bool:
        if term is None:
            report_error(
                "L2NormCost",
                operation,
                f"The {label} cost portion has been deactivated, given the provided selectors.",
            )
            return False

        if desired_trajectory is None:
            report_error("L2NormCost", operation, "Empty desired trajectory pointer.")
            return False

        if not term.gradient.set_desired_trajectory(desired_trajectory):
            return False
        logger.debug("Cost '{}': {} desired trajectory set", self.name, label)
        return True
