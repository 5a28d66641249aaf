"""Abstract cost term of an optimal control problem."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from ..sparsity import SparsityPattern


class Cost(ABC):
    """Cost term l(t, x, u).

    Only :meth:`evaluate` is mandatory. Derivative and sparsity methods
    return ``(None, False)`` unless a subclass provides them.

    Args:
        name: Identifier of the cost, used in diagnostics
    """

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def evaluate(self, time: float, state: np.ndarray, control: np.ndarray) -> tuple[float, bool]:
        """Return ``(cost_value, ok)``."""
        ...

    def state_gradient(
        self, time: float, state: np.ndarray, control: np.ndarray
    ) -> tuple[np.ndarray | None, bool]:
        """First partial derivative wrt the state, (nx,)."""
        return None, False

    def control_gradient(
        self, time: float, state: np.ndarray, control: np.ndarray
    ) -> tuple[np.ndarray | None, bool]:
        """First partial derivative wrt the control, (nu,)."""
        return None, False

    def state_hessian(
        self, time: float, state: np.ndarray, control: np.ndarray
    ) -> tuple[np.ndarray | None, bool]:
        """Second partial derivative wrt the state, (nx, nx)."""
        return None, False

    def control_hessian(
        self, time: float, state: np.ndarray, control: np.ndarray
    ) -> tuple[np.ndarray | None, bool]:
        """Second partial derivative wrt the control, (nu, nu)."""
        return None, False

    def state_control_hessian(
        self, time: float, state: np.ndarray, control: np.ndarray
    ) -> tuple[np.ndarray | None, bool]:
        """Mixed second partial derivative, d2l/dxdu, (nx, nu)."""
        return None, False

    def state_hessian_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        return None, False

    def control_hessian_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        return None, False

    def state_control_hessian_sparsity(self) -> tuple[SparsityPattern | None, bool]:
        return None, False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"
