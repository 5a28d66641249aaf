"""Abstract continuous-time dynamical system."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import overload

import numpy as np
from loguru import logger

from ..events import report_error
from ..sparsity import SparsityPattern


class DynamicalSystem(ABC):
    """Continuous-time dynamical system, x_dot = f(t, x, u).

    The control input is not an argument of :meth:`dynamics`: it is stored
    with :meth:`set_control_input` before each evaluation, so that an
    integrator sees an autonomous system f(t, x). The same object can then be
    driven by an integrator or by a closed-loop controller that manages u.

    Subclasses must implement :meth:`dynamics`. The derivative and sparsity
    hooks return ``(None, False)`` unless overridden.

    Args:
        state_space_size: Dimension of the state space
        control_space_size: Dimension of the control space
    """

    def __init__(self, state_space_size: int, control_space_size: int) -> None:
        if state_space_size < 0 or control_space_size < 0:
            raise ValueError(
                f"Space sizes must be non-negative, got ({state_space_size}, {control_space_size})"
            )
        self._state_size = int(state_space_size)
        self._control_size = int(control_space_size)
        self._initial_state = np.zeros(self._state_size)
        self._control_input = np.zeros(self._control_size)

    @property
    def state_space_size(self) -> int:
        return self._state_size

    @property
    def control_space_size(self) -> int:
        return self._control_size

    @abstractmethod
    def dynamics(self, state: np.ndarray, time: float) -> tuple[np.ndarray, bool]:
        """Compute the state derivative f(t, x) with the stored control input.

        Args:
            state: State at which the dynamics is computed (nx,)
            time: Time at which the dynamics is computed

        Returns:
            ``(state_derivative, ok)``. When ``ok`` is False the derivative
            is meaningless and the step must be treated as invalid.
        """
        ...

    # ------------------------------------------------------------------
    # Stored buffers
    # ------------------------------------------------------------------

    def set_control_input(self, control: np.ndarray) -> bool:
        """Store the control input used by subsequent :meth:`dynamics` calls.

        Returns:
            False (and keeps the previous value) if the size does not match
            ``control_space_size``
        """
        control = np.asarray(control, dtype=np.float64).reshape(-1)
        if control.size != self._control_size:
            report_error(
                type(self).__name__,
                "setControlInput",
                f"The control input has size {control.size}, expected {self._control_size}.",
            )
            return False
        self._control_input = control.copy()
        logger.debug("{} control input set to {}", type(self).__name__, self._control_input)
        return True

    @overload
    def control_input(self) -> np.ndarray: ...

    @overload
    def control_input(self, index: int) -> float: ...

    def control_input(self, index: int | None = None) -> np.ndarray | float:
        """Return a read-only view of the control input, or one of its elements."""
        if index is None:
            return self._read_only(self._control_input)
        return self._element(self._control_input, index, "controlInput")

    def set_initial_state(self, state: np.ndarray) -> bool:
        """Store the initial state.

        Returns:
            False (and keeps the previous value) if the size does not match
            ``state_space_size``
        """
        state = np.asarray(state, dtype=np.float64).reshape(-1)
        if state.size != self._state_size:
            report_error(
                type(self).__name__,
                "setInitialState",
                f"The initial state has size {state.size}, expected {self._state_size}.",
            )
            return False
        self._initial_state = state.copy()
        logger.debug("{} initial state set to {}", type(self).__name__, self._initial_state)
        return True

    @overload
    def initial_state(self) -> np.ndarray: ...

    @overload
    def initial_state(self, index: int) -> float: ...

    def initial_state(self, index: int | None = None) -> np.ndarray | float:
        """Return a read-only view of the initial state, or one of its elements."""
        if index is None:
            return self._read_only(self._initial_state)
        return self._element(self._initial_state, index, "initialState")

    @staticmethod
    def _read_only(buffer: np.ndarray) -> np.ndarray:
        view = buffer.view()
        view.flags.writeable = False
        return view

    def _element(self, buffer: np.ndarray, index: int, operation: str) -> float:
        if not 0 <= index < buffer.size:
            message = f"Index {index} is out of range for a buffer of size {buffer.size}."
            report_error(type(self).__name__, operation, message)
            raise IndexError(message)
        return float(buffer[index])

    # ------------------------------------------------------------------
    # Optional derivative information
    # ------------------------------------------------------------------

    def dynamics_state_first_derivative(
        self, state: np.ndarray, time: float
    ) -> tuple[np.ndarray | None, bool]:
        """Partial derivative of f wrt the state, (nx, nx).

        Not available by default.
        """
        return None, False

    def dynamics_control_first_derivative(
        self, state: np.ndarray, time: float
    ) -> tuple[np.ndarray | None, bool]:
        """Partial derivative of f wrt the control, (nx, nu).

        Not available by default.
        """
        return None, False

    def dynamics_state_first_derivative_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        """Nonzero entries of the state Jacobian, if known."""
        return None, False

    def dynamics_control_first_derivative_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        """Nonzero entries of the control Jacobian, if known."""
        return None, False
