"""Tests for QuadraticCost and the Cost defaults."""

from __future__ import annotations

import numpy as np
import pytest

from optimalcontrol.cost import Cost, QuadraticCost
from optimalcontrol.trajectories import (
    TimeInvariantDouble,
    TimeInvariantMatrix,
    TimeInvariantVector,
    TimeVaryingDouble,
    TimeVaryingMatrix,
)


class ScaledIdentity(TimeVaryingMatrix):
    """H(t) = (1 + t) I, undefined for t < 0."""

    def __init__(self, size: int) -> None:
        self.size = size

    def get_object(self, time: float) -> tuple[np.ndarray, bool]:
        if time < 0.0:
            return np.zeros((self.size, self.size)), False
        return (1.0 + time) * np.eye(self.size), True


class MissingBias(TimeVaryingDouble):
    def get_object(self, time: float) -> tuple[float, bool]:
        return 0.0, False


class NormCost(Cost):
    """||x||^2 without derivative information."""

    def evaluate(self, time: float, state: np.ndarray, control: np.ndarray) -> tuple[float, bool]:
        return float(np.dot(state, state)), True


@pytest.fixture
def cost() -> QuadraticCost:
    cost = QuadraticCost("quadratic")
    assert cost.set_state_cost(
        TimeInvariantMatrix(np.array([[2.0, 0.0], [0.0, 4.0]])),
        TimeInvariantVector([1.0, -1.0]),
    )
    assert cost.set_control_cost(TimeInvariantMatrix([[1.0]]), TimeInvariantVector([0.5]))
    return cost


@pytest.mark.unit
class TestCostDefaults:
    def test_only_evaluate_is_required(self) -> None:
        cost = NormCost("norm")
        x, u = np.array([1.0, 2.0]), np.zeros(1)

        assert cost.evaluate(0.0, x, u) == (5.0, True)
        assert cost.state_gradient(0.0, x, u) == (None, False)
        assert cost.control_gradient(0.0, x, u) == (None, False)
        assert cost.state_hessian(0.0, x, u) == (None, False)
        assert cost.control_hessian(0.0, x, u) == (None, False)
        assert cost.state_control_hessian(0.0, x, u) == (None, False)
        assert cost.state_hessian_sparsity() == (None, False)
        assert cost.control_hessian_sparsity() == (None, False)
        assert cost.state_control_hessian_sparsity() == (None, False)

    def test_repr(self) -> None:
        assert repr(NormCost("norm")) == "NormCost(name='norm')"


@pytest.mark.unit
class TestQuadraticCost:
    def test_value(self, cost: QuadraticCost) -> None:
        x, u = np.array([1.0, 2.0]), np.array([2.0])

        value, ok = cost.evaluate(0.0, x, u)
        assert ok
        # 1/2 (2 + 16) + (1 - 2) + 1/2 * 4 + 1
        assert np.isclose(value, 9.0 - 1.0 + 2.0 + 1.0)

    def test_derivatives(self, cost: QuadraticCost) -> None:
        x, u = np.array([1.0, 2.0]), np.array([2.0])

        g_x, ok = cost.state_gradient(0.0, x, u)
        assert ok
        np.testing.assert_allclose(g_x, [3.0, 7.0])

        g_u, ok = cost.control_gradient(0.0, x, u)
        assert ok
        np.testing.assert_allclose(g_u, [2.5])

        H_xu, ok = cost.state_control_hessian(0.0, x, u)
        assert ok
        np.testing.assert_array_equal(H_xu, np.zeros((2, 1)))

    def test_hessian_is_a_copy(self, cost: QuadraticCost) -> None:
        H, _ = cost.state_hessian(0.0, np.zeros(2), np.zeros(1))
        H[0, 0] = 100.0

        H_again, _ = cost.state_hessian(0.0, np.zeros(2), np.zeros(1))
        assert H_again[0, 0] == 2.0

    def test_unset_portion_is_zero(self) -> None:
        cost = QuadraticCost("empty")

        assert cost.evaluate(0.0, np.ones(2), np.ones(3)) == (0.0, True)
        g, ok = cost.control_gradient(0.0, np.ones(2), np.ones(3))
        assert ok
        np.testing.assert_array_equal(g, np.zeros(3))

    def test_empty_providers_rejected(self, reported_errors: list) -> None:
        cost = QuadraticCost("q")

        assert not cost.set_state_cost(None, TimeInvariantVector([1.0]))
        assert not cost.set_control_cost(TimeInvariantMatrix([[1.0]]), None)
        assert len(reported_errors) == 2

    def test_size_mismatch_is_invalid(self, cost: QuadraticCost, reported_errors: list) -> None:
        value, ok = cost.evaluate(0.0, np.ones(3), np.ones(1))
        assert not ok
        assert value == 0.0

        g, ok = cost.state_gradient(0.0, np.ones(3), np.ones(1))
        assert not ok
        assert g.shape == (3,)
        assert reported_errors

    def test_time_varying_hessian(self) -> None:
        cost = QuadraticCost("tv")
        assert cost.set_state_cost(ScaledIdentity(2), TimeInvariantVector([0.0, 0.0]))

        H, ok = cost.state_hessian(1.0, np.zeros(2), np.zeros(0))
        assert ok
        np.testing.assert_allclose(H, 2.0 * np.eye(2))

        _, ok = cost.state_hessian(-1.0, np.zeros(2), np.zeros(0))
        assert not ok

        # Pattern of a time-varying Hessian is unknown
        assert cost.state_hessian_sparsity() == (None, False)

    def test_cost_bias(self, cost: QuadraticCost) -> None:
        x, u = np.zeros(2), np.zeros(1)
        assert cost.set_cost_bias(TimeInvariantDouble(1.5), TimeInvariantDouble(-0.5))

        value, ok = cost.evaluate(0.0, x, u)
        assert ok
        assert np.isclose(value, 1.0)

        assert cost.set_cost_bias(MissingBias(), None)
        _, ok = cost.evaluate(0.0, x, u)
        assert not ok

    def test_sparsity(self, cost: QuadraticCost) -> None:
        pattern, ok = cost.state_hessian_sparsity()
        assert ok
        assert sorted(zip(pattern.rows, pattern.cols)) == [(0, 0), (1, 1)]

        pattern, ok = cost.state_control_hessian_sparsity()
        assert ok
        assert len(pattern) == 0

        pattern, ok = QuadraticCost("empty").control_hessian_sparsity()
        assert ok
        assert len(pattern) == 0
