"""Random search baseline: pure restart sampling."""

from typing import Optional, Sequence

from ..model.instance import Instance
from ..model.result import Solution
from ..heuristics.base import Solver
from ..heuristics.utils import random_permutation

MAX_ITERATIONS = 10_000


class RandomSearchSolver(Solver):
    """
    Draw uniformly random permutations and keep the cheapest one.

    The initial permutation is ignored. Every sample is scored with a full
    evaluation. Stops after `max_iterations` samples (on top of the first
    one) or when the time limit is exceeded.
    """

    name = "RandomSearchSolver"

    def __init__(self, instance: Instance, max_iterations: int = MAX_ITERATIONS, **kwargs):
        super().__init__(instance, **kwargs)
        self.max_iterations = max_iterations

    def solve(self, initial_permutation: Optional[Sequence[int]] = None) -> Solution:
        self._start_clock()
        n = self.instance.size

        best_permutation = random_permutation(n, self.rng)
        best_cost = self.instance.evaluate(best_permutation)
        evaluations = 1
        solution_changes = 0
        iteration = 0

        while iteration < self.max_iterations and not self._time_exceeded():
            permutation = random_permutation(n, self.rng)
            cost = self.instance.evaluate(permutation)
            evaluations += 1
            if cost < best_cost:
                best_cost = cost
                best_permutation = permutation
                solution_changes += 1
            iteration += 1

        if self.verbose:
            print(f"{self.name}: {evaluations} samples, best_cost={best_cost}")

        return Solution(
            permutation=best_permutation,
            evaluations=evaluations,
            solution_changes=solution_changes,
        )


def random_search(
    instance: Instance,
    max_iterations: int = MAX_ITERATIONS,
    time_limit: Optional[int] = None,
    seed: Optional[int] = None,
) -> Solution:
    """Run RandomSearchSolver once; `time_limit` in nanoseconds."""
    solver = RandomSearchSolver(instance, max_iterations=max_iterations, time_limit=time_limit, seed=seed)
    return solver.solve()
