"""Local search over the swap neighborhood: greedy (first improvement) and steepest descent."""

from typing import Optional, Sequence

from ..model.instance import Instance
from ..model.result import Solution
from .base import Solver
from .neighborhoods import num_neighbours, eval_diff, move_to_neighbour
from .utils import copy_perm

MAX_PLATEAU_ITERATIONS = 10


class GreedySolver(Solver):
    """
    First-improvement descent.

    Each sweep visits all moves in a fresh random order and applies the first
    one that lowers the cost, then starts a new sweep. Stops when a complete
    sweep finds no improving move or the time limit is exceeded.
    """

    name = "GreedySolver"

    def solve(self, initial_permutation: Sequence[int]) -> Solution:
        perm = copy_perm(initial_permutation)
        moves = num_neighbours(len(perm))
        evaluations = 0
        solution_changes = 0
        self._start_clock()

        while True:
            improving_idx = None
            timed_out = False

            for neighbour_idx in self.rng.permutation(moves):
                diff = eval_diff(self.instance, perm, int(neighbour_idx))
                evaluations += 1
                if diff > 0:
                    improving_idx = int(neighbour_idx)
                    break
                if self._time_exceeded():
                    timed_out = True
                    break

            if improving_idx is None:
                if self.verbose and not timed_out:
                    print(f"{self.name}: local optimum after {solution_changes} moves")
                break

            move_to_neighbour(perm, improving_idx, inplace=True)
            solution_changes += 1

            if self._time_exceeded():
                break

        return Solution(
            permutation=perm.copy(),
            evaluations=evaluations,
            solution_changes=solution_changes,
        )


class SteepestSolver(Solver):
    """
    Best-improvement descent with plateau moves.

    Every iteration scores the whole neighborhood. An improving best move is
    taken directly (the first move reaching the best diff wins). When no move
    improves, all zero-diff moves are collected and one of them is taken
    uniformly at random. The search stops when there is neither an improving
    nor a plateau move, after `max_plateau_iterations` consecutive plateau
    moves, or when the time limit is exceeded.
    """

    name = "SteepestSolver"

    def __init__(self, instance: Instance, max_plateau_iterations: int = MAX_PLATEAU_ITERATIONS, **kwargs):
        super().__init__(instance, **kwargs)
        self.max_plateau_iterations = max_plateau_iterations

    def solve(self, initial_permutation: Sequence[int]) -> Solution:
        perm = copy_perm(initial_permutation)
        moves = num_neighbours(len(perm))
        evaluations = 0
        solution_changes = 0
        plateau_iterations = 0
        self._start_clock()

        while True:
            best_diff = 0
            best_moves = []
            timed_out = False

            for neighbour_idx in range(moves):
                diff = eval_diff(self.instance, perm, neighbour_idx)
                evaluations += 1
                if diff > best_diff:
                    best_diff = diff
                    best_moves = [neighbour_idx]
                elif diff == 0 and best_diff == 0:
                    best_moves.append(neighbour_idx)
                if self._time_exceeded():
                    timed_out = True
                    break

            if not best_moves:
                break

            if best_diff == 0:
                plateau_iterations += 1
            else:
                plateau_iterations = 0

            chosen = best_moves[int(self.rng.integers(len(best_moves)))]
            move_to_neighbour(perm, chosen, inplace=True)
            solution_changes += 1

            if timed_out:
                break
            if plateau_iterations >= self.max_plateau_iterations:
                if self.verbose:
                    print(f"{self.name}: stopping after {plateau_iterations} plateau moves")
                break

        return Solution(
            permutation=perm.copy(),
            evaluations=evaluations,
            solution_changes=solution_changes,
        )


def greedy_local_search(
    instance: Instance,
    initial_permutation: Sequence[int],
    time_limit: Optional[int] = None,
    seed: Optional[int] = None,
) -> Solution:
    """Run GreedySolver once; `time_limit` in nanoseconds."""
    return GreedySolver(instance, time_limit=time_limit, seed=seed).solve(initial_permutation)


def steepest_local_search(
    instance: Instance,
    initial_permutation: Sequence[int],
    time_limit: Optional[int] = None,
    seed: Optional[int] = None,
    max_plateau_iterations: int = MAX_PLATEAU_ITERATIONS,
) -> Solution:
    """Run SteepestSolver once; `time_limit` in nanoseconds."""
    solver = SteepestSolver(
        instance,
        max_plateau_iterations=max_plateau_iterations,
        time_limit=time_limit,
        seed=seed,
    )
    return solver.solve(initial_permutation)
