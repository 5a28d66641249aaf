"""Time-indexed value providers.

A provider answers "what is the value at time t?" together with a validity
flag. Time-invariant providers ignore t and are always valid; time-varying
providers may refuse a query, in which case the returned value is zeroed and
must not be used.

The returned arrays may be internal buffers: callers must not mutate them
and must not assume they stay unchanged across calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class TimeVaryingVector(ABC):
    """Vector-valued function of time."""

    @abstractmethod
    def get_object(self, time: float) -> tuple[np.ndarray, bool]:
        """Return ``(value, is_valid)`` at ``time``."""
        ...


class TimeVaryingMatrix(ABC):
    """Matrix-valued function of time."""

    @abstractmethod
    def get_object(self, time: float) -> tuple[np.ndarray, bool]:
        """Return ``(value, is_valid)`` at ``time``."""
        ...


class TimeVaryingDouble(ABC):
    """Scalar function of time."""

    @abstractmethod
    def get_object(self, time: float) -> tuple[float, bool]:
        """Return ``(value, is_valid)`` at ``time``."""
        ...


class TimeInvariantVector(TimeVaryingVector):
    """Constant vector, valid at every time."""

    def __init__(self, value: np.ndarray | list[float] | None = None) -> None:
        self._value = np.zeros(0) if value is None else np.array(value, dtype=np.float64).reshape(-1)

    def get(self) -> np.ndarray:
        return self._value

    def set(self, value: np.ndarray | list[float]) -> None:
        self._value = np.array(value, dtype=np.float64).reshape(-1)

    def get_object(self, time: float) -> tuple[np.ndarray, bool]:
        return self._value, True


class TimeInvariantMatrix(TimeVaryingMatrix):
    """Constant matrix, valid at every time."""

    def __init__(self, value: np.ndarray | list[list[float]] | None = None) -> None:
        self._value = np.zeros((0, 0)) if value is None else np.atleast_2d(np.array(value, dtype=np.float64))

    def get(self) -> np.ndarray:
        return self._value

    def set(self, value: np.ndarray | list[list[float]]) -> None:
        self._value = np.atleast_2d(np.array(value, dtype=np.float64))

    def get_object(self, time: float) -> tuple[np.ndarray, bool]:
        return self._value, True


class TimeInvariantDouble(TimeVaryingDouble):
    """Constant scalar, valid at every time."""

    def __init__(self, value: float = 0.0) -> None:
        self._value = float(value)

    def get(self) -> float:
        return self._value

    def set(self, value: float) -> None:
        self._value = float(value)

    def get_object(self, time: float) -> tuple[float, bool]:
        return self._value, True


class SampledVectorTrajectory(TimeVaryingVector):
    """Vector trajectory defined by samples, linearly interpolated.

    Queries outside ``[times[0], times[-1]]`` are invalid and return a zero
    vector of the sample size.

    Args:
        times: Strictly increasing sample times (N,)
        samples: One sample per row (N, n)
    """

    def __init__(self, times: np.ndarray | list[float], samples: np.ndarray | list[list[float]]) -> None:
        times = np.asarray(times, dtype=np.float64).reshape(-1)
        samples = np.asarray(samples, dtype=np.float64)

        if samples.ndim != 2:
            raise ValueError(f"Samples must be a 2-D array (N, n), got shape {samples.shape}")
        if times.size == 0:
            raise ValueError("At least one sample is required")
        if samples.shape[0] != times.size:
            raise ValueError(
                f"Number of samples ({samples.shape[0]}) does not match number of times ({times.size})"
            )
        if np.any(np.diff(times) <= 0.0):
            raise ValueError("Sample times must be strictly increasing")

        self._times = times
        self._samples = samples
        self._output = np.zeros(samples.shape[1])

    @property
    def times(self) -> np.ndarray:
        return self._times

    @property
    def samples(self) -> np.ndarray:
        return self._samples

    def get_object(self, time: float) -> tuple[np.ndarray, bool]:
        # Also rejects NaN
        if not (self._times[0] <= time <= self._times[-1]):
            self._output[:] = 0.0
            return self._output, False

        # Index of the first sample strictly after `time`
        k = int(np.searchsorted(self._times, time, side="right"))
        if k >= self._times.size:
            self._output[:] = self._samples[-1]
            return self._output, True

        t0, t1 = self._times[k - 1], self._times[k]
        alpha = (time - t0) / (t1 - t0)
        self._output[:] = (1.0 - alpha) * self._samples[k - 1] + alpha * self._samples[k]
        return self._output, True
