"""Tests for instance files, the metrics log and the experiment harness."""

import numpy as np
import pytest

from qap.model import (
    Instance, InstanceFormatError, RunMetrics, Solution,
    generate_instance, generate_instance_set, save_instance, load_instance,
    read_qaplib_instance, load_qaplib,
)
from qap.heuristics import HeuristicSolver, GreedySolver
from qap.experiments.metrics import (
    METRICS_COLUMNS, build_metrics, save_metrics_to_csv, load_metrics, summarize_metrics,
)
from qap.experiments.run_all import measure_solver, run_all_algorithms
from qap.experiments import run_experiment

DAT = """4

1 1 0 0
0 1 1 1
1 0 1 1
0 0 1 0

0 1 0 0 1 1 1 1
0 0 1 1
0 1 0 0
"""


@pytest.fixture
def qaplib_dir(tmp_path):
    (tmp_path / "tiny4.dat").write_text(DAT)
    (tmp_path / "tiny4.sln").write_text("4 3\n2,4,1,3\n")
    return tmp_path


def test_read_qaplib_instance(qaplib_dir):
    instance = read_qaplib_instance(str(qaplib_dir / "tiny4.dat"), str(qaplib_dir / "tiny4.sln"))
    assert instance.name == "tiny4"
    assert instance.size == 4
    assert instance.matrix_a[1].tolist() == [0, 1, 1, 1]
    assert instance.matrix_b[1].tolist() == [1, 1, 1, 1]
    assert instance.optimal_cost == 3
    assert instance.optimal_permutation.tolist() == [1, 3, 0, 2]
    assert instance.evaluate(instance.optimal_permutation) == instance.optimal_cost
    instance.validate()


def test_load_qaplib_without_solution(qaplib_dir):
    (qaplib_dir / "tiny4.sln").unlink()
    instance = load_qaplib(str(qaplib_dir), "tiny4")
    assert instance.optimal_cost is None
    assert instance.optimal_permutation is None


def test_sln_header_only(qaplib_dir):
    (qaplib_dir / "tiny4.sln").write_text("4 4\n")
    instance = load_qaplib(str(qaplib_dir), "tiny4")
    assert instance.optimal_cost == 4
    assert instance.optimal_permutation is None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_qaplib_instance(str(tmp_path / "nope.dat"))


@pytest.mark.parametrize("content", [
    "",
    "4\n1 1 0 0\n",
    "2\n1 x\n0 1\n0 1\n1 0\n",
    "2\n1 2 3 4 5 6 7 8 9\n",
    "2\n1 -2 3 4\n5 6 7 8\n",
])
def test_malformed_dat(tmp_path, content):
    path = tmp_path / "bad.dat"
    path.write_text(content)
    with pytest.raises(InstanceFormatError):
        read_qaplib_instance(str(path))


@pytest.mark.parametrize("content", ["4\n", "4 4\n1 2 3\n", "4 4\n1 1 2 3\n", "3 4\n1 2 3\n"])
def test_malformed_sln(qaplib_dir, content):
    (qaplib_dir / "tiny4.sln").write_text(content)
    with pytest.raises(InstanceFormatError):
        load_qaplib(str(qaplib_dir), "tiny4")


def test_json_round_trip(tmp_path):
    instance = generate_instance(size=7, seed=3)
    path = tmp_path / "rand7.json"
    save_instance(instance, str(path))
    loaded = load_instance(str(path))
    assert loaded.name == instance.name
    assert np.array_equal(loaded.matrix_a, instance.matrix_a)
    assert np.array_equal(loaded.matrix_b, instance.matrix_b)
    assert loaded.optimal_cost is None


def test_generate_instance_is_reproducible():
    a = generate_instance(size=8, seed=11)
    b = generate_instance(size=8, seed=11)
    assert np.array_equal(a.matrix_a, b.matrix_a)
    assert np.array_equal(a.matrix_b, b.matrix_b)
    assert np.all(np.diag(a.matrix_a) == 0)
    assert np.array_equal(a.matrix_b, a.matrix_b.T)


def test_generate_instance_set(tmp_path):
    generate_instance_set(str(tmp_path / "instances"), sizes=(5, 7), seed=20)

    files = sorted((tmp_path / "instances").glob("*.json"))
    assert [f.name for f in files] == ["rand5_20.json", "rand7_21.json"]
    assert [load_instance(str(f)).size for f in files] == [5, 7]


def test_build_metrics(qaplib_dir):
    instance = load_qaplib(str(qaplib_dir), "tiny4")
    solution = Solution(permutation=np.array([2, 0, 1, 3]), evaluations=7, solution_changes=2)
    metrics = build_metrics(instance, solution, duration=1_000, initial_cost=9, time_limit=5_000)
    assert metrics.cost == instance.evaluate(solution.permutation)
    assert metrics.solution_distance == 4
    assert metrics.optimal_cost == 3
    assert metrics.initial_cost == 9
    assert metrics.time_limit == 5_000


def test_metrics_csv_appends_with_single_header(tmp_path):
    path = tmp_path / "nested" / "GreedySolver.csv"
    record = RunMetrics(
        instance_name="tiny4", duration=10, cost=5, evaluations=3, solution_changes=1,
        optimal_cost=4, initial_cost=9,
    )
    save_metrics_to_csv(str(path), [record])
    save_metrics_to_csv(str(path), [record, record])

    df = load_metrics(str(path))
    assert list(df.columns) == METRICS_COLUMNS
    assert len(df) == 3
    assert path.read_text().count("instance_name") == 1


def test_measure_solver(qaplib_dir):
    instance = load_qaplib(str(qaplib_dir), "tiny4")
    metrics = measure_solver(HeuristicSolver(instance), np.arange(4), min_runs=3, min_total_ns=0)
    assert len(metrics) == 3
    assert all(m.cost == 4 for m in metrics)
    assert all(m.initial_cost == instance.evaluate(np.arange(4)) for m in metrics)


def test_run_all_algorithms(tmp_path, qaplib_dir):
    instance = load_qaplib(str(qaplib_dir), "tiny4")
    df = run_all_algorithms(
        [instance],
        str(tmp_path / "times"),
        max_iterations=50,
        min_runs=1,
        min_total_ns=0,
        sa_params={'max_no_improvement': 1_000},
    )
    assert set(df['algorithm']) == {
        'RandomSearchSolver', 'RandomWalkSolver', 'HeuristicSolver', 'GreedySolver',
        'SteepestSolver', 'SimulatedAnnealing', 'TabuSearch',
    }
    assert (df["cost"] >= 3).all()
    assert (tmp_path / "times" / "TabuSearch.csv").exists()

    summary = summarize_metrics(df)
    assert (summary['gap'] >= 0).all()


def test_solution_is_frozen():
    solution = GreedySolver(Instance(matrix_a=[[0, 1], [1, 0]], matrix_b=[[0, 2], [2, 0]])).solve([1, 0])
    with pytest.raises(AttributeError):
        solution.evaluations = 3


def test_solution_permutation_is_read_only():
    start = np.array([1, 0])
    solution = GreedySolver(Instance(matrix_a=[[0, 1], [1, 0]], matrix_b=[[0, 2], [2, 0]])).solve(start)
    with pytest.raises(ValueError):
        solution.permutation[0] = solution.permutation[1]

    # The record keeps its own copy of the array it was built from
    perm = np.array([2, 0, 1])
    record = Solution(permutation=perm, evaluations=0, solution_changes=0)
    perm[0] = 1
    assert record.permutation.tolist() == [2, 0, 1]


def test_cli_help_uses_placeholder_directory(monkeypatch, capsys):
    monkeypatch.setattr('sys.argv', ['run_experiment', '--help'])
    with pytest.raises(SystemExit):
        run_experiment.main()
    out = capsys.readouterr().out
    assert "<instances-dir>" in out
    assert "qap/instances" not in out
