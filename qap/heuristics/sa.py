"""Simulated Annealing over the swap neighborhood (time-limited, single-start)."""

import math
from typing import Optional, Sequence

from ..model.instance import Instance
from ..model.result import Solution
from .base import Solver
from .neighborhoods import num_neighbours, eval_diff, move_to_neighbour
from .utils import copy_perm, random_permutation

NUM_INITIAL_TEMPERATURE_SAMPLES = 100
MAX_NO_IMPROVEMENT_ITERATIONS = 200_000
ITERATIONS_PER_TEMPERATURE = 1000
COOLING_RATE = 0.95
INITIAL_ACCEPTANCE = 0.9


class SimulatedAnnealingSolver(Solver):
    """
    Simulated Annealing with geometric cooling.

    Improving moves are always accepted and reset the no-improvement counter.
    Other moves are accepted with probability exp(diff / T) and increment the
    counter whether accepted or not. The temperature is multiplied by
    `cooling_rate` after every `iterations_per_temperature` moves. The search
    stops once `max_no_improvement` consecutive non-improving moves have been
    drawn or the time limit is exceeded, and returns the best permutation seen.

    Args:
        initial_temperature: Starting temperature; if None it is calibrated so
            that an average worsening move is accepted with probability 0.9
        num_temperature_samples: Random samples used for the calibration
    """

    name = "SimulatedAnnealing"

    def __init__(
        self,
        instance: Instance,
        initial_temperature: Optional[float] = None,
        cooling_rate: float = COOLING_RATE,
        iterations_per_temperature: int = ITERATIONS_PER_TEMPERATURE,
        max_no_improvement: int = MAX_NO_IMPROVEMENT_ITERATIONS,
        num_temperature_samples: int = NUM_INITIAL_TEMPERATURE_SAMPLES,
        **kwargs,
    ):
        super().__init__(instance, **kwargs)
        self.initial_temperature = initial_temperature
        self.cooling_rate = cooling_rate
        self.iterations_per_temperature = iterations_per_temperature
        self.max_no_improvement = max_no_improvement
        self.num_temperature_samples = num_temperature_samples

    def calibrate_temperature(self) -> float:
        """
        Uniformly sample the solution space, average |diff| of one random move
        per sample and solve exp(-avg_delta / T) = INITIAL_ACCEPTANCE for T.
        """
        n = self.instance.size
        moves = num_neighbours(n)
        total_delta = 0.0
        for _ in range(self.num_temperature_samples):
            perm = random_permutation(n, self.rng)
            neighbour_idx = int(self.rng.integers(moves))
            total_delta += abs(eval_diff(self.instance, perm, neighbour_idx))

        avg_delta = total_delta / self.num_temperature_samples
        return -avg_delta / math.log(INITIAL_ACCEPTANCE)

    def solve(self, initial_permutation: Sequence[int]) -> Solution:
        self._start_clock()
        current = copy_perm(initial_permutation)
        moves = num_neighbours(len(current))
        current_cost = self.instance.evaluate(current)
        best = current.copy()
        best_cost = current_cost

        evaluations = 1  # full evaluation of the start
        if self.initial_temperature is not None:
            T = self.initial_temperature
        else:
            T = self.calibrate_temperature()
            evaluations += self.num_temperature_samples
        if self.verbose:
            print(f"{self.name}: T0 = {T:.2f}, initial cost = {current_cost}")

        solution_changes = 0
        no_improve_count = 0
        level = 0
        stop = False

        while not stop and no_improve_count < self.max_no_improvement:
            for _ in range(self.iterations_per_temperature):
                neighbour_idx = int(self.rng.integers(moves))
                diff = eval_diff(self.instance, current, neighbour_idx)
                evaluations += 1

                if diff > 0:
                    accept = True
                    no_improve_count = 0
                else:
                    no_improve_count += 1
                    # diff <= 0, so the probability is at most 1
                    accept = self.rng.random() < math.exp(diff / max(T, 1e-9))

                if accept:
                    move_to_neighbour(current, neighbour_idx, inplace=True)
                    current_cost -= diff
                    solution_changes += 1
                    if current_cost < best_cost:
                        best_cost = current_cost
                        best = current.copy()

                if no_improve_count >= self.max_no_improvement:
                    if self.verbose:
                        print(f"Stopping early: no improvement for {self.max_no_improvement} iterations")
                    break
                if self._time_exceeded():
                    if self.verbose:
                        print(f"Stopping SA due to time limit ({self._elapsed()} ns)")
                    stop = True
                    break

            # Cool temperature
            T *= self.cooling_rate
            level += 1

            if self.verbose and level % 50 == 0:
                print(
                    f"Level {level}: best_cost={best_cost}, "
                    f"current_cost={current_cost}, T={T:.4f}"
                )

        return Solution(
            permutation=best,
            evaluations=evaluations,
            solution_changes=solution_changes,
        )


def simulated_annealing(
    instance: Instance,
    initial_permutation: Sequence[int],
    initial_temperature: Optional[float] = None,
    cooling_rate: float = COOLING_RATE,
    max_no_improvement: int = MAX_NO_IMPROVEMENT_ITERATIONS,
    time_limit: Optional[int] = None,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> Solution:
    """Run SimulatedAnnealingSolver once; `time_limit` in nanoseconds."""
    solver = SimulatedAnnealingSolver(
        instance,
        initial_temperature=initial_temperature,
        cooling_rate=cooling_rate,
        max_no_improvement=max_no_improvement,
        time_limit=time_limit,
        seed=seed,
        verbose=verbose,
    )
    return solver.solve(initial_permutation)
