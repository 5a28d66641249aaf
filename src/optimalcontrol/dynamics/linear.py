"""Linear (possibly time-varying) dynamical system."""

from __future__ import annotations

import numpy as np
from loguru import logger

from ..events import report_error
from ..sparsity import SparsityPattern
from ..trajectories import TimeInvariantMatrix, TimeVaryingMatrix
from .base import DynamicalSystem


class LinearSystem(DynamicalSystem):
    """Linear system:
    x_dot = A(t) x + B(t) u

    A and B are given either as constant arrays or as TimeVaryingMatrix
    providers. They default to zero matrices of the right size.

    Sparsity is computed from the matrix values when the matrix is constant,
    and is dense otherwise, unless set explicitly.
    """

    def __init__(self, state_space_size: int, control_space_size: int) -> None:
        super().__init__(state_space_size, control_space_size)
        self._state_matrix: TimeVaryingMatrix = TimeInvariantMatrix(
            np.zeros((state_space_size, state_space_size))
        )
        self._control_matrix: TimeVaryingMatrix = TimeInvariantMatrix(
            np.zeros((state_space_size, control_space_size))
        )
        self._state_sparsity: SparsityPattern | None = None
        self._control_sparsity: SparsityPattern | None = None

    def set_state_matrix(self, state_matrix: np.ndarray | TimeVaryingMatrix) -> bool:
        """Set A, (nx, nx). Constant matrices are size-checked immediately."""
        provider = self._as_provider(state_matrix, (self.state_space_size, self.state_space_size), "setStateMatrix")
        if provider is None:
            return False
        self._state_matrix = provider
        logger.debug("LinearSystem state matrix updated")
        return True

    def set_control_matrix(self, control_matrix: np.ndarray | TimeVaryingMatrix) -> bool:
        """Set B, (nx, nu). Constant matrices are size-checked immediately."""
        provider = self._as_provider(
            control_matrix, (self.state_space_size, self.control_space_size), "setControlMatrix"
        )
        if provider is None:
            return False
        self._control_matrix = provider
        logger.debug("LinearSystem control matrix updated")
        return True

    def set_state_matrix_sparsity(self, sparsity: SparsityPattern) -> bool:
        if not sparsity.is_valid((self.state_space_size, self.state_space_size)):
            report_error("LinearSystem", "setStateMatrixSparsity", "Sparsity indices exceed the state matrix size.")
            return False
        self._state_sparsity = sparsity
        return True

    def set_control_matrix_sparsity(self, sparsity: SparsityPattern) -> bool:
        if not sparsity.is_valid((self.state_space_size, self.control_space_size)):
            report_error(
                "LinearSystem", "setControlMatrixSparsity", "Sparsity indices exceed the control matrix size."
            )
            return False
        self._control_sparsity = sparsity
        return True

    def _as_provider(
        self,
        matrix: np.ndarray | TimeVaryingMatrix | None,
        shape: tuple[int, int],
        operation: str,
    ) -> TimeVaryingMatrix | None:
        if matrix is None:
            report_error("LinearSystem", operation, "Empty matrix pointer.")
            return None
        if isinstance(matrix, TimeVaryingMatrix):
            return matrix
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != shape:
            report_error(
                "LinearSystem",
                operation,
                f"The matrix has shape {matrix.shape}, expected {shape}.",
            )
            return None
        return TimeInvariantMatrix(matrix)

    def _sample(
        self, provider: TimeVaryingMatrix, time: float, shape: tuple[int, int], operation: str
    ) -> tuple[np.ndarray | None, bool]:
        matrix, ok = provider.get_object(time)
        if not ok:
            report_error("LinearSystem", operation, f"Failed to evaluate the matrix at time {time}.")
            return None, False
        if matrix.shape != shape:
            report_error(
                "LinearSystem",
                operation,
                f"The matrix at time {time} has shape {matrix.shape}, expected {shape}.",
            )
            return None, False
        return matrix, True

    def dynamics(self, state: np.ndarray, time: float) -> tuple[np.ndarray, bool]:
        nx, nu = self.state_space_size, self.control_space_size
        state = np.asarray(state, dtype=np.float64).reshape(-1)
        if state.size != nx:
            report_error("LinearSystem", "dynamics", f"The state has size {state.size}, expected {nx}.")
            return np.zeros(nx), False

        A, ok_a = self._sample(self._state_matrix, time, (nx, nx), "dynamics")
        B, ok_b = self._sample(self._control_matrix, time, (nx, nu), "dynamics")
        if not (ok_a and ok_b):
            return np.zeros(nx), False

        return A @ state + B @ self.control_input(), True

    def dynamics_state_first_derivative(
        self, state: np.ndarray, time: float
    ) -> tuple[np.ndarray | None, bool]:
        nx = self.state_space_size
        A, ok = self._sample(self._state_matrix, time, (nx, nx), "dynamicsStateFirstDerivative")
        return (A.copy(), True) if ok else (None, False)

    def dynamics_control_first_derivative(
        self, state: np.ndarray, time: float
    ) -> tuple[np.ndarray | None, bool]:
        shape = (self.state_space_size, self.control_space_size)
        B, ok = self._sample(self._control_matrix, time, shape, "dynamicsControlFirstDerivative")
        return (B.copy(), True) if ok else (None, False)

    def dynamics_state_first_derivative_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        nx = self.state_space_size
        return self._sparsity(self._state_sparsity, self._state_matrix, (nx, nx)), True

    def dynamics_control_first_derivative_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        shape = (self.state_space_size, self.control_space_size)
        return self._sparsity(self._control_sparsity, self._control_matrix, shape), True

    @staticmethod
    def _sparsity(
        explicit: SparsityPattern | None, provider: TimeVaryingMatrix, shape: tuple[int, int]
    ) -> SparsityPattern:
        if explicit is not None:
            return explicit
        if isinstance(provider, TimeInvariantMatrix):
            return SparsityPattern.from_dense(provider.get())
        return SparsityPattern.full(*shape)
