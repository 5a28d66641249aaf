"""Quadratic cost with time-varying linear term.

    l(t, x, u) = 1/2 x' H_x(t) x + g_x(t)' x + c_x(t)
               + 1/2 u' H_u(t) u + g_u(t)' u + c_u(t)

The Hessians, gradients and biases are supplied by providers (see
:mod:`optimalcontrol.trajectories`). Providers are referenced, not copied,
so they can be shared between costs and updated in place.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from loguru import logger

from ..events import report_error
from ..sparsity import SparsityPattern
from ..trajectories import TimeInvariantMatrix, TimeVaryingDouble, TimeVaryingMatrix, TimeVaryingVector
from .base import Cost


@dataclass
class _QuadraticTerm:
    """Hessian and gradient providers of one portion (state or control)."""

    hessian: TimeVaryingMatrix | None = None
    gradient: TimeVaryingVector | None = None
    bias: TimeVaryingDouble | None = None

    @property
    def is_set(self) -> bool:
        return self.hessian is not None and self.gradient is not None


class QuadraticCost(Cost):
    """Cost quadratic in the state and in the control.

    A portion whose providers were never set contributes nothing: zero
    value, zero gradient and zero Hessian.
    """

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._state = _QuadraticTerm()
        self._control = _QuadraticTerm()

    def set_state_cost(self, hessian: TimeVaryingMatrix, gradient: TimeVaryingVector) -> bool:
        """Install the state Hessian and gradient providers."""
        if hessian is None or gradient is None:
            self._report("setStateCost", "Empty hessian or gradient pointer.")
            return False
        self._state.hessian = hessian
        self._state.gradient = gradient
        logger.debug("Cost '{}': state term set", self.name)
        return True

    def set_control_cost(self, hessian: TimeVaryingMatrix, gradient: TimeVaryingVector) -> bool:
        """Install the control Hessian and gradient providers."""
        if hessian is None or gradient is None:
            self._report("setControlCost", "Empty hessian or gradient pointer.")
            return False
        self._control.hessian = hessian
        self._control.gradient = gradient
        logger.debug("Cost '{}': control term set", self.name)
        return True

    def set_cost_bias(
        self,
        state_bias: TimeVaryingDouble | None,
        control_bias: TimeVaryingDouble | None,
    ) -> bool:
        """Install the constant terms c_x(t), c_u(t). None removes a term."""
        self._state.bias = state_bias
        self._control.bias = control_bias
        return True

    # ------------------------------------------------------------------
    # Provider sampling
    # ------------------------------------------------------------------

    def _report(self, operation: str, message: str) -> None:
        report_error("QuadraticCost", operation, f"{message} (cost '{self.name}')")

    def _hessian(self, term: _QuadraticTerm, time: float, size: int, operation: str) -> tuple[np.ndarray, bool]:
        if not term.is_set:
            return np.zeros((size, size)), True
        hessian, ok = term.hessian.get_object(time)
        if not ok:
            self._report(operation, f"Unable to evaluate the hessian at time {time}.")
            return np.zeros((size, size)), False
        if hessian.shape != (size, size):
            self._report(operation, f"The hessian at time {time} has shape {hessian.shape}, expected ({size}, {size}).")
            return np.zeros((size, size)), False
        return hessian, True

    def _gradient(self, term: _QuadraticTerm, time: float, size: int, operation: str) -> tuple[np.ndarray, bool]:
        if not term.is_set:
            return np.zeros(size), True
        gradient, ok = term.gradient.get_object(time)
        if not ok:
            self._report(operation, f"Unable to evaluate the gradient at time {time}.")
            return np.zeros(size), False
        if gradient.size != size:
            self._report(operation, f"The gradient at time {time} has size {gradient.size}, expected {size}.")
            return np.zeros(size), False
        return gradient.reshape(-1), True

    def _bias(self, term: _QuadraticTerm, time: float, operation: str) -> tuple[float, bool]:
        if term.bias is None:
            return 0.0, True
        bias, ok = term.bias.get_object(time)
        if not ok:
            self._report(operation, f"Unable to evaluate the cost bias at time {time}.")
            return 0.0, False
        return float(bias), True

    def _term_value(self, term: _QuadraticTerm, time: float, v: np.ndarray) -> tuple[float, bool]:
        hessian, ok_h = self._hessian(term, time, v.size, "costEvaluation")
        gradient, ok_g = self._gradient(term, time, v.size, "costEvaluation")
        bias, ok_b = self._bias(term, time, "costEvaluation")
        if not (ok_h and ok_g and ok_b):
            return 0.0, False
        return float(0.5 * v @ hessian @ v + gradient @ v + bias), True

    # ------------------------------------------------------------------
    # Cost interface
    # ------------------------------------------------------------------

    def evaluate(self, time: float, state: np.ndarray, control: np.ndarray) -> tuple[float, bool]:
        x = np.asarray(state, dtype=np.float64).reshape(-1)
        u = np.asarray(control, dtype=np.float64).reshape(-1)

        state_value, ok_x = self._term_value(self._state, time, x)
        control_value, ok_u = self._term_value(self._control, time, u)
        if not (ok_x and ok_u):
            return 0.0, False
        return state_value + control_value, True

    def state_gradient(self, time: float, state: np.ndarray, control: np.ndarray) -> tuple[np.ndarray, bool]:
        x = np.asarray(state, dtype=np.float64).reshape(-1)
        hessian, ok_h = self._hessian(self._state, time, x.size, "costFirstPartialDerivativeWRTState")
        gradient, ok_g = self._gradient(self._state, time, x.size, "costFirstPartialDerivativeWRTState")
        if not (ok_h and ok_g):
            return np.zeros(x.size), False
        return hessian @ x + gradient, True

    def control_gradient(self, time: float, state: np.ndarray, control: np.ndarray) -> tuple[np.ndarray, bool]:
        u = np.asarray(control, dtype=np.float64).reshape(-1)
        hessian, ok_h = self._hessian(self._control, time, u.size, "costFirstPartialDerivativeWRTControl")
        gradient, ok_g = self._gradient(self._control, time, u.size, "costFirstPartialDerivativeWRTControl")
        if not (ok_h and ok_g):
            return np.zeros(u.size), False
        return hessian @ u + gradient, True

    def state_hessian(self, time: float, state: np.ndarray, control: np.ndarray) -> tuple[np.ndarray, bool]:
        nx = np.asarray(state).size
        hessian, ok = self._hessian(self._state, time, nx, "costSecondPartialDerivativeWRTState")
        return hessian.copy(), ok

    def control_hessian(self, time: float, state: np.ndarray, control: np.ndarray) -> tuple[np.ndarray, bool]:
        nu = np.asarray(control).size
        hessian, ok = self._hessian(self._control, time, nu, "costSecondPartialDerivativeWRTControl")
        return hessian.copy(), ok

    def state_control_hessian(
        self, time: float, state: np.ndarray, control: np.ndarray
    ) -> tuple[np.ndarray, bool]:
        return np.zeros((np.asarray(state).size, np.asarray(control).size)), True

    def state_hessian_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        return self._term_sparsity(self._state)

    def control_hessian_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        return self._term_sparsity(self._control)

    def state_control_hessian_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        return SparsityPattern(), True

    @staticmethod
    def _term_sparsity(term: _QuadraticTerm) -> tuple[SparsityPattern | None, bool]:
        if not term.is_set:
            return SparsityPattern(), True
        # Only a constant Hessian has a fixed pattern
        if isinstance(term.hessian, TimeInvariantMatrix):
            return SparsityPattern.from_dense(term.hessian.get()), True
        return None, False
