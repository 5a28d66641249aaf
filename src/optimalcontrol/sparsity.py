"""Sparsity patterns of Jacobians and Hessians."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass
class SparsityPattern:
    """Structurally nonzero entries of a matrix.

    ``rows[i], cols[i]`` is the i-th nonzero coordinate. Entries are kept in
    insertion order, which carries no meaning.
    """

    rows: list[int] = field(default_factory=list)
    cols: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.rows) != len(self.cols):
            raise ValueError(
                f"Row and column index lists differ in length: {len(self.rows)} vs {len(self.cols)}"
            )
        self.rows = [int(r) for r in self.rows]
        self.cols = [int(c) for c in self.cols]

    @classmethod
    def from_dense(cls, matrix: np.ndarray, tol: float = 0.0) -> SparsityPattern:
        """Pattern of the entries of ``matrix`` with magnitude above ``tol``."""
        rows, cols = np.nonzero(np.abs(np.atleast_2d(matrix)) > tol)
        return cls(rows=rows.tolist(), cols=cols.tolist())

    @classmethod
    def full(cls, n_rows: int, n_cols: int) -> SparsityPattern:
        """Pattern of a dense ``n_rows x n_cols`` matrix."""
        rows, cols = np.indices((n_rows, n_cols))
        return cls(rows=rows.reshape(-1).tolist(), cols=cols.reshape(-1).tolist())

    def add(self, row: int, col: int) -> None:
        self.rows.append(int(row))
        self.cols.append(int(col))

    def to_mask(self, shape: tuple[int, int]) -> np.ndarray:
        """Boolean mask of ``shape`` that is True on the nonzero entries."""
        mask = np.zeros(shape, dtype=bool)
        if self.rows:
            mask[np.asarray(self.rows), np.asarray(self.cols)] = True
        return mask

    def is_valid(self, shape: tuple[int, int]) -> bool:
        """Whether every coordinate lies inside ``shape``."""
        return all(0 <= r < shape[0] for r in self.rows) and all(0 <= c < shape[1] for c in self.cols)

    def __len__(self) -> int:
        return len(self.rows)
