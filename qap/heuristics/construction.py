"""Construction heuristic: row-sum matching."""

from typing import Optional, Sequence
import numpy as np

from ..model.instance import Instance
from ..model.result import Solution
from .base import Solver
from .utils import argsort


def greedy_mapping(sums_a: Sequence[int], sums_b: Sequence[int]) -> np.ndarray:
    """
    Map the k-th smallest entry of `sums_a` to the k-th largest of `sums_b`.

    Ties are broken by index (stable sort), lower index first.

    Args:
        sums_a: Per-facility weights, shape (n,)
        sums_b: Per-location weights, shape (n,)

    Returns:
        Permutation p with p[argsort_asc(sums_a)[k]] = argsort_desc(sums_b)[k]
    """
    sorted_a = argsort(sums_a, ascending=True)
    sorted_b = argsort(sums_b, ascending=False)

    permutation = np.zeros(len(sums_a), dtype=np.int64)
    permutation[sorted_a] = sorted_b
    return permutation


def heuristic_permutation(instance: Instance) -> np.ndarray:
    """
    Pair heavy-flow facilities with short-distance locations.

    Facilities are ranked by ascending row sum of A, locations by descending
    row sum of B, and the two rankings are matched position by position.

    Args:
        instance: Problem instance

    Returns:
        Permutation, shape (n,)
    """
    a_rows_sums = instance.matrix_a.sum(axis=1)
    b_rows_sums = instance.matrix_b.sum(axis=1)
    return greedy_mapping(a_rows_sums, b_rows_sums)


class HeuristicSolver(Solver):
    """Non-iterative baseline; ignores the initial permutation and the time limit."""

    name = "HeuristicSolver"

    def solve(self, initial_permutation: Optional[Sequence[int]] = None) -> Solution:
        return Solution(
            permutation=heuristic_permutation(self.instance),
            evaluations=0,
            solution_changes=0,
        )
