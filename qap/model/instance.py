"""Instance data structure for the Quadratic Assignment Problem."""

from dataclasses import dataclass, field
from typing import Optional
import numpy as np


@dataclass
class Instance:
    """
    Quadratic Assignment Problem instance.

    A permutation p assigns facility i to location p[i]; its cost is
    sum over i, j of matrix_a[i, j] * matrix_b[p[i], p[j]].

    Attributes:
        matrix_a: Flow (weight) matrix, shape (n, n), non-negative integers
        matrix_b: Distance matrix, shape (n, n), non-negative integers
        name: Instance name (e.g. the QAPLIB file stem)

        optimal_cost: Known optimal cost, or None
            Only used for reporting solution quality
        optimal_permutation: Known optimal permutation, shape (n,), or None
            Only used for reporting distance to the optimum
    """
    matrix_a: np.ndarray
    matrix_b: np.ndarray
    name: str = ""

    # Reference solution (benchmarking only)
    optimal_cost: Optional[int] = None
    optimal_permutation: Optional[np.ndarray] = None

    size: int = field(init=False)

    def __post_init__(self) -> None:
        self.matrix_a = np.array(self.matrix_a, dtype=np.int64)
        self.matrix_b = np.array(self.matrix_b, dtype=np.int64)
        # Shared read-only by every solver run
        self.matrix_a.setflags(write=False)
        self.matrix_b.setflags(write=False)
        self.size = self.matrix_a.shape[0]

        if self.optimal_permutation is not None:
            self.optimal_permutation = np.array(self.optimal_permutation, dtype=np.int64)
            self.optimal_permutation.setflags(write=False)

    def evaluate(self, permutation: np.ndarray) -> int:
        """Full O(n^2) cost of a permutation."""
        p = np.asarray(permutation)
        return int(np.sum(self.matrix_a * self.matrix_b[np.ix_(p, p)]))

    def validate(self) -> None:
        """
        Validate that both matrices are n x n and non-negative.
        Raises AssertionError if validation fails.
        """
        n = self.size
        assert self.matrix_a.shape == (n, n), \
            f"matrix_a shape {self.matrix_a.shape} != ({n}, {n})"
        assert self.matrix_b.shape == (n, n), \
            f"matrix_b shape {self.matrix_b.shape} != ({n}, {n})"

        assert np.all(self.matrix_a >= 0), "matrix_a must be non-negative"
        assert np.all(self.matrix_b >= 0), "matrix_b must be non-negative"

        if self.optimal_permutation is not None:
            assert self.optimal_permutation.shape == (n,), \
                f"optimal_permutation shape {self.optimal_permutation.shape} != ({n},)"
            assert np.array_equal(np.sort(self.optimal_permutation), np.arange(n)), \
                "optimal_permutation must be a permutation of 0..n-1"
