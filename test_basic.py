"""Basic integration test to verify all components work together."""

import numpy as np
import pytest
from qap.model import Instance, generate_instance
from qap.baselines import RandomSearchSolver, RandomWalkSolver
from qap.heuristics import (
    GreedySolver, SteepestSolver, SimulatedAnnealingSolver, TabuSearchSolver,
    HeuristicSolver, is_permutation,
)


def small_instance() -> Instance:
    return Instance(
        matrix_a=[[1, 1, 0, 0], [0, 1, 1, 1], [1, 0, 1, 1], [0, 0, 1, 0]],
        matrix_b=[[0, 1, 0, 0], [1, 1, 1, 1], [0, 0, 1, 1], [0, 1, 0, 0]],
        name="small4",
    )


def test_small_instance():
    """Test with the 4x4 example instance."""
    print("Testing with small instance (n=4)...")

    instance = small_instance()
    instance.validate()
    assert instance.size == 4
    print("  Instance validated successfully")

    identity = np.arange(4)
    cost = instance.evaluate(identity)
    print(f"  Identity cost = {cost}")
    assert cost == int(np.sum(instance.matrix_a * instance.matrix_b))

    print("\nTesting heuristic constructor...")
    solution = HeuristicSolver(instance).solve(identity)
    assert solution.permutation.tolist() == [2, 0, 3, 1]
    assert instance.evaluate(solution.permutation) == 4
    assert solution.evaluations == 0 and solution.solution_changes == 0

    print("\nAll basic tests passed!")


def test_all_solvers_return_valid_permutations():
    """Every solver returns a valid permutation on a random instance."""
    instance = generate_instance(size=9, seed=7)
    rng = np.random.default_rng(0)
    start = rng.permutation(instance.size)
    start_cost = instance.evaluate(start)
    start_copy = start.copy()

    solvers = [
        RandomSearchSolver(instance, max_iterations=200, seed=1),
        RandomWalkSolver(instance, max_iterations=200, seed=1),
        HeuristicSolver(instance),
        GreedySolver(instance, seed=1),
        SteepestSolver(instance, seed=1),
        SimulatedAnnealingSolver(instance, max_no_improvement=2_000, seed=1),
        TabuSearchSolver(instance, seed=1),
    ]
    for solver in solvers:
        solution = solver.solve(start)
        cost = instance.evaluate(solution.permutation)
        print(f"  {solver.name}: cost = {cost}")
        assert is_permutation(solution.permutation, instance.size)
        if not isinstance(solver, (RandomSearchSolver, HeuristicSolver)):
            assert cost <= start_cost

    # Solvers never touch the caller's permutation
    assert np.array_equal(start, start_copy)


def test_instance_is_read_only():
    instance = small_instance()
    with pytest.raises(ValueError):
        instance.matrix_a[0, 0] = 5


if __name__ == '__main__':
    test_small_instance()
    test_all_solvers_return_valid_permutations()
