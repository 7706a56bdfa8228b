"""Solver result and run metrics data structures."""

from dataclasses import dataclass
from typing import Optional
import numpy as np


class SolvingError(RuntimeError):
    """Raised when a solver cannot proceed (e.g. an empty candidate list)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"Error while solving: {self.message}"


@dataclass(frozen=True)
class Solution:
    """
    Result of a single solve call.

    Attributes:
        permutation: Best permutation found, shape (n,)
            Read-only copy, never aliases a solver's working buffer
        evaluations: Number of delta / full cost evaluations performed,
            including the full evaluation of the starting permutation and
            the temperature calibration samples of simulated annealing
        solution_changes: Number of accepted moves (or best-so-far updates
            for the sampling baselines)
    """
    permutation: np.ndarray
    evaluations: int
    solution_changes: int

    def __post_init__(self) -> None:
        permutation = np.array(self.permutation, dtype=np.int64)
        permutation.setflags(write=False)
        object.__setattr__(self, 'permutation', permutation)


@dataclass
class RunMetrics:
    """
    One row of the metrics log.

    Attributes:
        instance_name: Name of the solved instance
        duration: Wall-clock duration of the solve call in nanoseconds
        cost: Cost of the returned permutation
        evaluations: Solution.evaluations
        solution_changes: Solution.solution_changes
        optimal_cost: Known optimal cost, or None
        initial_cost: Cost of the starting permutation
        time_limit: Time limit in nanoseconds, or None if unbounded
        solution_distance: Hamming distance to the known optimal permutation,
            or None if no reference permutation is known
    """
    instance_name: str
    duration: int
    cost: int
    evaluations: int
    solution_changes: int
    optimal_cost: Optional[int]
    initial_cost: int
    time_limit: Optional[int] = None
    solution_distance: Optional[int] = None
