"""Random walk baseline over the swap neighborhood."""

from typing import Optional, Sequence

from ..model.instance import Instance
from ..model.result import Solution
from ..heuristics.base import Solver
from ..heuristics.neighborhoods import num_neighbours, eval_diff, move_to_neighbour
from ..heuristics.utils import copy_perm

MAX_ITERATIONS = 10_000


class RandomWalkSolver(Solver):
    """
    Apply a uniformly random swap at every step, whatever its diff.

    The walk's cost is tracked through the deltas and the cheapest permutation
    visited (the starting one included) is returned. `solution_changes`
    counts updates of that best-so-far permutation. Stops after
    `max_iterations` steps or when the time limit is exceeded.
    """

    name = "RandomWalkSolver"

    def __init__(self, instance: Instance, max_iterations: int = MAX_ITERATIONS, **kwargs):
        super().__init__(instance, **kwargs)
        self.max_iterations = max_iterations

    def solve(self, initial_permutation: Sequence[int]) -> Solution:
        self._start_clock()
        current = copy_perm(initial_permutation)
        moves = num_neighbours(len(current))
        current_cost = self.instance.evaluate(current)
        best = current.copy()
        best_cost = current_cost
        evaluations = 1  # full evaluation of the start
        solution_changes = 0

        for _ in range(self.max_iterations):
            if self._time_exceeded():
                break
            neighbour_idx = int(self.rng.integers(moves))
            diff = eval_diff(self.instance, current, neighbour_idx)
            evaluations += 1
            move_to_neighbour(current, neighbour_idx, inplace=True)
            current_cost -= diff

            if current_cost < best_cost:
                best_cost = current_cost
                best = current.copy()
                solution_changes += 1

        return Solution(
            permutation=best,
            evaluations=evaluations,
            solution_changes=solution_changes,
        )


def random_walk(
    instance: Instance,
    initial_permutation: Sequence[int],
    max_iterations: int = MAX_ITERATIONS,
    time_limit: Optional[int] = None,
    seed: Optional[int] = None,
) -> Solution:
    """Run RandomWalkSolver once; `time_limit` in nanoseconds."""
    solver = RandomWalkSolver(instance, max_iterations=max_iterations, time_limit=time_limit, seed=seed)
    return solver.solve(initial_permutation)
