"""Configuration models for optimal-control components."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


def _check_rectangular(name: str, matrix: list[list[float]] | None) -> None:
    if matrix is None:
        return
    lengths = {len(row) for row in matrix}
    if len(lengths) > 1:
        raise ValueError(f"{name} has rows of different lengths: {sorted(lengths)}")


# =============================================================================
# Trajectory Configuration
# =============================================================================


class SampledTrajectoryConfig(BaseModel):
    """Desired trajectory given as samples, linearly interpolated."""

    times: list[float] = Field(..., description="Strictly increasing sample times.")
    samples: list[list[float]] = Field(..., description="One sample per time.")

    @model_validator(mode="after")
    def _check_samples(self) -> SampledTrajectoryConfig:
        _check_rectangular("samples", self.samples)
        if len(self.times) != len(self.samples):
            raise ValueError(f"{len(self.samples)} samples given for {len(self.times)} times")
        return self


# =============================================================================
# Cost Configuration
# =============================================================================


class PortionConfig(BaseModel):
    """State or control portion of an L2-norm cost.

    Either ``dimension`` (identity selector) or ``selector`` is given, not both. A zero
    dimension or an empty selector disables the portion.
    """

    dimension: int = Field(default=0, ge=0, description="Size of the tracked vector (identity selector).")
    selector: list[list[float]] | None = Field(default=None, description="Explicit selector matrix.")
    weight: list[list[float]] | None = Field(default=None, description="Full weight matrix.")
    weight_diag: list[float] | None = Field(default=None, description="Weight matrix diagonal.")
    desired_point: list[float] | None = Field(default=None, description="Constant desired point.")
    desired_trajectory: SampledTrajectoryConfig | None = Field(
        default=None, description="Sampled desired trajectory."
    )

    @model_validator(mode="after")
    def _check_exclusive(self) -> PortionConfig:
        _check_rectangular("selector", self.selector)
        _check_rectangular("weight", self.weight)
        if self.selector is not None and self.dimension != 0:
            raise ValueError("Specify either dimension or selector, not both")
        if self.weight is not None and self.weight_diag is not None:
            raise ValueError("Specify either weight or weight_diag, not both")
        if self.desired_point is not None and self.desired_trajectory is not None:
            raise ValueError("Specify either desired_point or desired_trajectory, not both")
        return self


class L2NormCostConfig(BaseModel):
    """L2-norm tracking cost configuration."""

    type: str = Field(default="l2_norm", description="Cost type identifier.")
    name: str = Field(..., description="Cost name.")
    state: PortionConfig = Field(default_factory=PortionConfig)
    control: PortionConfig = Field(default_factory=PortionConfig)


# =============================================================================
# System Configuration
# =============================================================================


class LinearSystemConfig(BaseModel):
    """Linear system x_dot = A x + B u."""

    type: str = Field(default="linear", description="System type identifier.")
    A: list[list[float]] = Field(..., description="State matrix (nx, nx).")
    B: list[list[float]] = Field(..., description="Control matrix (nx, nu).")
    initial_state: list[float] | None = None
    control_input: list[float] | None = None

    @model_validator(mode="after")
    def _check_shapes(self) -> LinearSystemConfig:
        _check_rectangular("A", self.A)
        _check_rectangular("B", self.B)
        if any(len(row) != len(self.A) for row in self.A):
            raise ValueError("A must be square")
        if len(self.B) != len(self.A):
            raise ValueError(f"B has {len(self.B)} rows, A has {len(self.A)}")
        return self

    @property
    def state_space_size(self) -> int:
        return len(self.A)

    @property
    def control_space_size(self) -> int:
        return len(self.B[0]) if self.B else 0


# =============================================================================
# Top-Level Problem Configuration
# =============================================================================


class ProblemConfig(BaseModel):
    """A dynamical system together with its cost terms."""

    system: LinearSystemConfig
    costs: list[L2NormCostConfig] = Field(default_factory=list)
