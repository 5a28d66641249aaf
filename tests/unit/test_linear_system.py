"""Tests for LinearSystem."""

from __future__ import annotations

import numpy as np
import pytest

from optimalcontrol.dynamics import LinearSystem
from optimalcontrol.sparsity import SparsityPattern
from optimalcontrol.trajectories import TimeVaryingMatrix


class RotatingStateMatrix(TimeVaryingMatrix):
    """A(t) = [[0, t], [-t, 0]], defined for t >= 0."""

    def get_object(self, time: float) -> tuple[np.ndarray, bool]:
        if time < 0.0:
            return np.zeros((2, 2)), False
        return np.array([[0.0, time], [-time, 0.0]]), True


@pytest.fixture
def double_integrator() -> LinearSystem:
    system = LinearSystem(2, 1)
    assert system.set_state_matrix(np.array([[0.0, 1.0], [0.0, 0.0]]))
    assert system.set_control_matrix(np.array([[0.0], [1.0]]))
    return system


@pytest.mark.unit
class TestLinearSystem:
    def test_dynamics_uses_stored_control(self, double_integrator: LinearSystem) -> None:
        assert double_integrator.set_control_input(np.array([3.0]))

        f, ok = double_integrator.dynamics(np.array([1.0, 2.0]), 0.0)
        assert ok
        np.testing.assert_allclose(f, [2.0, 3.0])

    def test_defaults_to_zero_dynamics(self) -> None:
        f, ok = LinearSystem(2, 1).dynamics(np.ones(2), 0.0)
        assert ok
        np.testing.assert_allclose(f, np.zeros(2))

    def test_derivatives(self, double_integrator: LinearSystem) -> None:
        A, ok = double_integrator.dynamics_state_first_derivative(np.zeros(2), 0.0)
        assert ok
        assert A.shape == (2, 2)
        np.testing.assert_allclose(A, [[0.0, 1.0], [0.0, 0.0]])

        B, ok = double_integrator.dynamics_control_first_derivative(np.zeros(2), 0.0)
        assert ok
        assert B.shape == (2, 1)
        np.testing.assert_allclose(B, [[0.0], [1.0]])

    def test_wrong_shape_rejected(self, double_integrator: LinearSystem, reported_errors: list) -> None:
        assert not double_integrator.set_state_matrix(np.eye(3))
        assert not double_integrator.set_control_matrix(np.ones((2, 2)))
        assert [e.operation for e in reported_errors] == ["setStateMatrix", "setControlMatrix"]

        A, _ = double_integrator.dynamics_state_first_derivative(np.zeros(2), 0.0)
        np.testing.assert_allclose(A, [[0.0, 1.0], [0.0, 0.0]])

    def test_wrong_state_size_in_dynamics(self, double_integrator: LinearSystem) -> None:
        _, ok = double_integrator.dynamics(np.zeros(3), 0.0)
        assert not ok

    def test_sparsity_from_constant_matrices(self, double_integrator: LinearSystem) -> None:
        pattern, ok = double_integrator.dynamics_state_first_derivative_sparsity()
        assert ok
        assert list(zip(pattern.rows, pattern.cols)) == [(0, 1)]

        pattern, ok = double_integrator.dynamics_control_first_derivative_sparsity()
        assert ok
        assert list(zip(pattern.rows, pattern.cols)) == [(1, 0)]

    def test_time_varying_state_matrix(self) -> None:
        system = LinearSystem(2, 0)
        assert system.set_state_matrix(RotatingStateMatrix())

        f, ok = system.dynamics(np.array([1.0, 1.0]), 2.0)
        assert ok
        np.testing.assert_allclose(f, [2.0, -2.0])

        _, ok = system.dynamics(np.array([1.0, 1.0]), -1.0)
        assert not ok
        assert system.dynamics_state_first_derivative(np.zeros(2), -1.0) == (None, False)

    def test_time_varying_sparsity_is_dense_unless_given(self) -> None:
        system = LinearSystem(2, 0)
        assert system.set_state_matrix(RotatingStateMatrix())

        pattern, ok = system.dynamics_state_first_derivative_sparsity()
        assert ok
        assert len(pattern) == 4

        assert system.set_state_matrix_sparsity(SparsityPattern(rows=[0, 1], cols=[1, 0]))
        pattern, _ = system.dynamics_state_first_derivative_sparsity()
        assert pattern.to_mask((2, 2)).tolist() == [[False, True], [True, False]]

    def test_out_of_bounds_sparsity_rejected(self) -> None:
        system = LinearSystem(2, 1)

        assert not system.set_state_matrix_sparsity(SparsityPattern(rows=[2], cols=[0]))
        assert not system.set_control_matrix_sparsity(SparsityPattern(rows=[0], cols=[1]))
