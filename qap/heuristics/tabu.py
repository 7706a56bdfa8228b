"""Tabu Search over the swap neighborhood with a bounded candidate list."""

import heapq
from typing import List, Optional, Sequence, Tuple
import numpy as np

from ..model.instance import Instance
from ..model.result import Solution, SolvingError
from .base import Solver
from .neighborhoods import num_neighbours, swap_indices, eval_diff, move_to_neighbour
from .utils import copy_perm

MAX_ITERATIONS_WITHOUT_IMPROVEMENT = 100
CANDIDATE_LIST_SIZE = 10
TABU_TENURE = 5


class TabuSearchSolver(Solver):
    """
    Tabu Search with an elite candidate list.

    The candidate list holds the `candidate_list_size` moves with the largest
    diff found by a full neighborhood scan (a min-heap on diff, so the worst
    kept move is evicted when a better one shows up). The diff of the worst
    kept move at scan time is the acceptance threshold. After every applied
    move the remaining candidates are re-scored against the new solution and
    those that fall below the threshold are dropped; an exhausted list is
    rebuilt by a new scan.

    Each iteration applies the best candidate whose (i, j) pair is not tabu,
    even if it worsens the cost, and makes that pair tabu for `tabu_tenure`
    iterations. Tenures decay by one at the end of every iteration. The
    current cost is tracked through the deltas. The search stops after
    `max_iterations_without_improvement` iterations without a new best cost
    or when the time limit is exceeded.
    """

    name = "TabuSearch"

    def __init__(
        self,
        instance: Instance,
        tabu_tenure: int = TABU_TENURE,
        candidate_list_size: int = CANDIDATE_LIST_SIZE,
        max_iterations_without_improvement: int = MAX_ITERATIONS_WITHOUT_IMPROVEMENT,
        **kwargs,
    ):
        super().__init__(instance, **kwargs)
        self.tabu_tenure = tabu_tenure
        self.candidate_list_size = candidate_list_size
        self.max_iterations_without_improvement = max_iterations_without_improvement
        self.reset(np.arange(instance.size))

    def reset(self, initial_permutation: Sequence[int]) -> None:
        """Initialise the search state from a starting permutation."""
        n = self.instance.size
        self.current_solution = copy_perm(initial_permutation)
        self.current_cost = self.instance.evaluate(self.current_solution)
        self.best_solution = self.current_solution.copy()
        self.best_cost = self.current_cost
        self.tabu_list = np.zeros((n, n), dtype=np.int64)
        self.candidate_list: List[Tuple[int, int]] = []  # (diff, neighbour_idx)
        self.candidate_threshold: Optional[int] = None
        self.iteration = 0
        self.iterations_without_improvement = 0
        self.evaluations = 1  # full evaluation of the start
        self.solution_changes = 0

    def is_tabu(self, neighbour_idx: int) -> bool:
        i, j = swap_indices(self.instance.size, neighbour_idx)
        return self.tabu_list[i, j] > 0

    def mark_tabu(self, neighbour_idx: int) -> None:
        i, j = swap_indices(self.instance.size, neighbour_idx)
        self.tabu_list[i, j] = self.tabu_tenure

    def decay_tabu(self) -> None:
        """Advance the tabu clock by one iteration."""
        np.subtract(self.tabu_list, 1, out=self.tabu_list, where=self.tabu_list > 0)

    def generate_candidate_list(self) -> None:
        """Scan the whole neighborhood and keep the best moves."""
        heap: List[Tuple[int, int]] = []
        for neighbour_idx in range(num_neighbours(self.instance.size)):
            diff = eval_diff(self.instance, self.current_solution, neighbour_idx)
            self.evaluations += 1
            if len(heap) < self.candidate_list_size:
                heapq.heappush(heap, (diff, neighbour_idx))
            elif diff > heap[0][0]:
                heapq.heapreplace(heap, (diff, neighbour_idx))

        self.candidate_list = heap
        self.candidate_threshold = heap[0][0] if heap else None

    def choose_from_candidate_list(self) -> Optional[Tuple[int, int]]:
        """
        Best non-tabu candidate as (neighbour_idx, diff), or None if every
        candidate is tabu. Ties go to the lower move index.
        """
        best: Optional[Tuple[int, int]] = None
        for diff, neighbour_idx in self.candidate_list:
            if self.is_tabu(neighbour_idx):
                continue
            if best is None or (diff, -neighbour_idx) > (best[1], -best[0]):
                best = (neighbour_idx, diff)
        return best

    def select_move(self) -> Optional[Tuple[int, int]]:
        """
        Choose the next move, rebuilding a stale candidate list once.

        Returns None when even a freshly built list has no admissible move.
        """
        rebuilt = False
        while True:
            if not self.candidate_list:
                self.generate_candidate_list()
                rebuilt = True
                if not self.candidate_list:
                    raise SolvingError("candidate list is empty")

            choice = self.choose_from_candidate_list()
            if choice is not None or rebuilt:
                return choice

            # Every cached candidate is tabu: rebuild and retry
            self.candidate_list = []

    def _refresh_candidates(self, applied_idx: int) -> None:
        """Re-score the cached candidates against the new current solution."""
        refreshed = []
        for _, neighbour_idx in self.candidate_list:
            if neighbour_idx == applied_idx:
                continue
            diff = eval_diff(self.instance, self.current_solution, neighbour_idx)
            self.evaluations += 1
            if diff >= self.candidate_threshold:
                refreshed.append((diff, neighbour_idx))
        heapq.heapify(refreshed)
        self.candidate_list = refreshed

    def step(self) -> None:
        """Run one tabu iteration."""
        choice = self.select_move()

        if choice is not None:
            neighbour_idx, diff = choice
            move_to_neighbour(self.current_solution, neighbour_idx, inplace=True)
            self.current_cost -= diff
            self.solution_changes += 1

        self.decay_tabu()

        if choice is not None:
            self.mark_tabu(neighbour_idx)
            self._refresh_candidates(neighbour_idx)

        if self.current_cost < self.best_cost:
            self.best_solution = self.current_solution.copy()
            self.best_cost = self.current_cost
            self.iterations_without_improvement = 0
        else:
            self.iterations_without_improvement += 1

        self.iteration += 1

    def solve(self, initial_permutation: Sequence[int]) -> Solution:
        self._start_clock()
        self.reset(initial_permutation)

        while self.iterations_without_improvement < self.max_iterations_without_improvement:
            if self._time_exceeded():
                if self.verbose:
                    print(f"Stopping Tabu due to time limit ({self._elapsed()} ns)")
                break

            self.step()

            if self.verbose and self.iteration % 50 == 0:
                print(
                    f"Iteration {self.iteration}: best_cost={self.best_cost}, "
                    f"current_cost={self.current_cost}, "
                    f"tabu_size={int(np.count_nonzero(self.tabu_list))}"
                )

        if self.verbose and self.iterations_without_improvement >= self.max_iterations_without_improvement:
            print(f"Stopping early: no improvement for {self.max_iterations_without_improvement} iterations")

        return Solution(
            permutation=self.best_solution.copy(),
            evaluations=self.evaluations,
            solution_changes=self.solution_changes,
        )


def tabu_search(
    instance: Instance,
    initial_permutation: Sequence[int],
    tabu_tenure: int = TABU_TENURE,
    candidate_list_size: int = CANDIDATE_LIST_SIZE,
    max_iterations_without_improvement: int = MAX_ITERATIONS_WITHOUT_IMPROVEMENT,
    time_limit: Optional[int] = None,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> Solution:
    """Run TabuSearchSolver once; `time_limit` in nanoseconds."""
    solver = TabuSearchSolver(
        instance,
        tabu_tenure=tabu_tenure,
        candidate_list_size=candidate_list_size,
        max_iterations_without_improvement=max_iterations_without_improvement,
        time_limit=time_limit,
        seed=seed,
        verbose=verbose,
    )
    return solver.solve(initial_permutation)
