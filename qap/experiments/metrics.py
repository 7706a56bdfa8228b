"""Per-run metrics records and the CSV metrics log."""

from dataclasses import asdict, fields
from pathlib import Path
from typing import Iterable, Optional
import pandas as pd

from ..model.instance import Instance
from ..model.result import RunMetrics, Solution
from ..heuristics.utils import hamming_distance

METRICS_COLUMNS = [f.name for f in fields(RunMetrics)]


def build_metrics(
    instance: Instance,
    solution: Solution,
    duration: int,
    initial_cost: int,
    time_limit: Optional[int] = None,
) -> RunMetrics:
    """
    Compare a solution against the instance's reference solution.

    Args:
        instance: Solved instance
        solution: Solution returned by a solver
        duration: Wall-clock duration of the solve call in nanoseconds
        initial_cost: Cost of the starting permutation
        time_limit: Solver time limit in nanoseconds, if any

    Returns:
        RunMetrics record
    """
    distance = None
    if instance.optimal_permutation is not None:
        distance = hamming_distance(solution.permutation, instance.optimal_permutation)

    return RunMetrics(
        instance_name=instance.name,
        duration=duration,
        cost=instance.evaluate(solution.permutation),
        evaluations=solution.evaluations,
        solution_changes=solution.solution_changes,
        optimal_cost=instance.optimal_cost,
        initial_cost=initial_cost,
        time_limit=time_limit,
        solution_distance=distance,
    )


def save_metrics_to_csv(filepath: str, metrics: Iterable[RunMetrics]) -> None:
    """
    Append metrics records to a CSV log.

    Parent directories are created as needed; the header is written only
    when the file is new or empty.

    Args:
        filepath: Path of the CSV log
        metrics: Records to append
    """
    path = Path(filepath)
    path.parent.mkdir(exist_ok=True, parents=True)

    df = pd.DataFrame([asdict(m) for m in metrics], columns=METRICS_COLUMNS)
    write_header = not path.exists() or path.stat().st_size == 0
    df.to_csv(path, mode='a', header=write_header, index=False)


def load_metrics(filepath: str) -> pd.DataFrame:
    """Read a metrics log written by `save_metrics_to_csv`."""
    return pd.read_csv(filepath)


def summarize_metrics(df: pd.DataFrame) -> pd.DataFrame:
    """
    Mean metrics per algorithm and instance.

    Expects the metrics columns plus an ``algorithm`` column. Adds the
    relative gap to the optimum (``gap``) where the optimal cost is known.
    """
    df = df.copy()
    for column in ('optimal_cost', 'solution_distance'):
        df[column] = pd.to_numeric(df[column], errors='coerce')
    df['gap'] = (df['cost'] - df['optimal_cost']) / df['optimal_cost']
    return (
        df.groupby(['algorithm', 'instance_name'])
        [['cost', 'gap', 'duration', 'evaluations', 'solution_changes', 'solution_distance']]
        .mean()
        .reset_index()
    )
