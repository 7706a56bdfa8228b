"""Experimental harness for running all solvers on instances."""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import numpy as np
import pandas as pd

from ..model.instance import Instance
from ..model.result import RunMetrics, SolvingError
from ..baselines import RandomSearchSolver, RandomWalkSolver
from ..heuristics.base import Solver
from ..heuristics.construction import HeuristicSolver
from ..heuristics.local_search import GreedySolver, SteepestSolver
from ..heuristics.sa import SimulatedAnnealingSolver
from ..heuristics.tabu import TabuSearchSolver
from ..heuristics.utils import random_permutation
from .metrics import build_metrics, save_metrics_to_csv


def measure_solver(
    solver: Solver,
    initial_permutation: Sequence[int],
    min_runs: int = 10,
    min_total_ns: int = 1_000_000_000,
) -> List[RunMetrics]:
    """
    Repeat `solver.solve` from the same start until both `min_runs` runs and
    `min_total_ns` nanoseconds of solving time have been spent.

    Args:
        solver: Solver to measure
        initial_permutation: Starting permutation (copied by the solver)
        min_runs: Minimum number of runs
        min_total_ns: Minimum total solve time in nanoseconds

    Returns:
        One RunMetrics record per run
    """
    instance = solver.instance
    initial_cost = instance.evaluate(np.asarray(initial_permutation))
    metrics = []
    total_elapsed = 0

    while total_elapsed < min_total_ns or len(metrics) < min_runs:
        start = time.perf_counter_ns()
        solution = solver.solve(initial_permutation)
        duration = time.perf_counter_ns() - start
        total_elapsed += duration
        metrics.append(
            build_metrics(instance, solution, duration, initial_cost, solver.get_time_limit())
        )

    return metrics


def make_solvers(
    instance: Instance,
    rng: np.random.Generator,
    time_limit: Optional[int] = None,
    max_iterations: int = 10_000,
    sa_params: Optional[Dict[str, Any]] = None,
    tabu_params: Optional[Dict[str, Any]] = None,
) -> List[Solver]:
    """
    Build one solver of every kind for an instance, sharing one generator.

    Args:
        instance: Problem instance
        rng: Random generator shared by the solvers
        time_limit: Time limit in nanoseconds for every solver (None: unbounded)
        max_iterations: Iteration cap of the random search / random walk baselines
        sa_params: Extra keyword arguments for SimulatedAnnealingSolver
        tabu_params: Extra keyword arguments for TabuSearchSolver
    """
    common = {'time_limit': time_limit, 'rng': rng}
    return [
        RandomSearchSolver(instance, max_iterations=max_iterations, **common),
        RandomWalkSolver(instance, max_iterations=max_iterations, **common),
        HeuristicSolver(instance, **common),
        GreedySolver(instance, **common),
        SteepestSolver(instance, **common),
        SimulatedAnnealingSolver(instance, **(sa_params or {}), **common),
        TabuSearchSolver(instance, **(tabu_params or {}), **common),
    ]


def run_all_algorithms(
    instances: Sequence[Instance],
    output_dir: str,
    seed: int = 42,
    time_limit: Optional[int] = None,
    max_iterations: int = 10_000,
    min_runs: int = 10,
    min_total_ns: int = 1_000_000_000,
    sa_params: Optional[Dict[str, Any]] = None,
    tabu_params: Optional[Dict[str, Any]] = None,
) -> pd.DataFrame:
    """
    Run every solver on every instance from a shared random start.

    Metrics are appended to ``<output_dir>/<solver name>.csv``. A solver that
    raises SolvingError is reported and skipped.

    Returns:
        DataFrame of all collected metrics with an ``algorithm`` column
    """
    output_path = Path(output_dir)
    output_path.mkdir(exist_ok=True, parents=True)
    rng = np.random.default_rng(seed)
    rows = []

    print(f"Running experiments on {len(instances)} instances...")

    for instance in instances:
        perm = random_permutation(instance.size, rng)
        print(f"\n{instance.name}:\tstarting perm: {perm.tolist()}")

        solvers = make_solvers(
            instance, rng,
            time_limit=time_limit,
            max_iterations=max_iterations,
            sa_params=sa_params,
            tabu_params=tabu_params,
        )
        for solver in solvers:
            print(f"  {solver.name}")
            try:
                metrics = measure_solver(solver, perm, min_runs=min_runs, min_total_ns=min_total_ns)
            except SolvingError as e:
                print(f"  Error running {solver.name}: {e}")
                continue

            save_metrics_to_csv(str(output_path / f"{solver.name}.csv"), metrics)
            rows.extend({'algorithm': solver.name, **vars(m)} for m in metrics)

    print(f"\nExperiments complete! Results saved to {output_dir}/")
    return pd.DataFrame(rows)


def run_with_time_limits(
    instances: Sequence[Instance],
    time_limits: Sequence[int],
    output_dir: str,
    seed: int = 42,
    runs: int = 10,
    max_iterations: int = 10_000,
) -> pd.DataFrame:
    """
    Sweep time limits: every solver runs `runs` times per instance and limit.

    Random search and random walk get an iteration cap of `max_iterations`
    so that the time limit is the binding constraint only when it is small.
    Metrics are appended to ``<output_dir>/<solver name>.csv``.

    Args:
        instances: Instances to solve
        time_limits: Time limits in nanoseconds
        output_dir: Directory for the CSV logs
        seed: Seed of the shared random generator
        runs: Runs per solver, instance and limit
        max_iterations: Iteration cap of the sampling baselines

    Returns:
        DataFrame of all collected metrics with an ``algorithm`` column
    """
    output_path = Path(output_dir)
    output_path.mkdir(exist_ok=True, parents=True)
    rng = np.random.default_rng(seed)
    rows = []

    for instance in instances:
        perm = random_permutation(instance.size, rng)
        solvers = make_solvers(instance, rng, max_iterations=max_iterations)

        for time_limit in time_limits:
            print(f"{instance.name}: time limit {time_limit / 1e6:.1f} ms")
            for solver in solvers:
                solver.set_time_limit(time_limit)
                try:
                    metrics = measure_solver(solver, perm, min_runs=runs, min_total_ns=0)
                except SolvingError as e:
                    print(f"  Error running {solver.name}: {e}")
                    continue

                save_metrics_to_csv(str(output_path / f"{solver.name}.csv"), metrics)
                rows.extend({'algorithm': solver.name, **vars(m)} for m in metrics)

    return pd.DataFrame(rows)
