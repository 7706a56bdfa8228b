"""CLI experiment runner with organized directory structure."""

import argparse
import time
from pathlib import Path
from typing import List, Optional

from ..model.instance import Instance
from ..model.instance_generator import load_instance
from ..model.qaplib import load_qaplib
from .plots import create_all_plots
from .run_all import run_all_algorithms, run_with_time_limits

DEFAULT_INSTANCES = ["chr12a", "chr15a", "chr18a", "chr20a", "chr22a", "chr25a"]


def load_instances(instances_dir: str, names: Optional[List[str]] = None) -> List[Instance]:
    """
    Load instances from a directory.

    QAPLIB files are looked up as ``<name>.dat`` (plus ``<name>.sln`` if
    present), generated instances as ``<name>.json``. Without explicit names,
    every ``.dat`` and ``.json`` file of the directory is loaded.

    Args:
        instances_dir: Directory holding the instance files
        names: Instance names (file stems)

    Returns:
        Loaded instances, in the order requested
    """
    source_path = Path(instances_dir)
    if not source_path.is_dir():
        raise ValueError(f"Invalid instances directory: {instances_dir}")

    if not names:
        names = sorted({p.stem for p in source_path.iterdir() if p.suffix in ('.dat', '.json')})
    if not names:
        raise ValueError(f"No instance files found in: {instances_dir}")

    instances = []
    for name in names:
        if (source_path / f"{name}.dat").exists():
            instances.append(load_qaplib(str(source_path), name))
        else:
            instances.append(load_instance(str(source_path / f"{name}.json")))
    return instances


def main():
    """CLI entry point for running experiments."""
    parser = argparse.ArgumentParser(
        description='Run QAP solvers on instances',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run every solver on the default chr* instances
  python -m qap.experiments.run_experiment <instances-dir>

  # Run selected instances, 100 ms time limit per solve
  python -m qap.experiments.run_experiment <instances-dir> chr12a chr15a --time-limit 100

  # Sweep time limits (milliseconds)
  python -m qap.experiments.run_experiment <instances-dir> --sweep 1 10 100 1000
        """
    )

    parser.add_argument(
        'instances',
        type=str,
        help='Directory holding QAPLIB .dat/.sln files or generated .json instances'
    )

    parser.add_argument(
        'names',
        nargs='*',
        default=None,
        help=f'Instance names (default: {" ".join(DEFAULT_INSTANCES)} if present, else all files)'
    )

    parser.add_argument(
        '--output',
        type=str,
        default='output',
        help='Output directory (default: output)'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=42,
        help='Random seed (default: 42)'
    )

    parser.add_argument(
        '--time-limit',
        type=float,
        default=None,
        help='Time limit per solve in milliseconds (default: unbounded)'
    )

    parser.add_argument(
        '--sweep',
        type=float,
        nargs='+',
        default=None,
        help='Sweep these time limits (milliseconds) instead of a single run'
    )

    parser.add_argument(
        '--max-iterations',
        type=int,
        default=10_000,
        help='Iteration cap of random search / random walk (default: 10000)'
    )

    parser.add_argument(
        '--runs',
        type=int,
        default=10,
        help='Minimum runs per solver and instance (default: 10)'
    )

    # SA parameters
    parser.add_argument(
        '--sa-alpha',
        type=float,
        default=0.95,
        help='SA cooling rate (default: 0.95)'
    )

    parser.add_argument(
        '--sa-no-improve',
        type=int,
        default=200_000,
        help='SA non-improving moves before stopping (default: 200000)'
    )

    # Tabu parameters
    parser.add_argument(
        '--tabu-tenure',
        type=int,
        default=5,
        help='Tabu tenure (default: 5)'
    )

    parser.add_argument(
        '--tabu-candidates',
        type=int,
        default=10,
        help='Tabu candidate list size (default: 10)'
    )

    parser.add_argument(
        '--no-plots',
        action='store_true',
        help='Do not create plots'
    )

    args = parser.parse_args()

    names = args.names
    if not names and all((Path(args.instances) / f"{n}.dat").exists() for n in DEFAULT_INSTANCES):
        names = DEFAULT_INSTANCES

    print(f"\n{'='*70}")
    print(f"Loading instances from {args.instances}")
    print(f"{'='*70}")
    instances = load_instances(args.instances, names)
    for instance in instances:
        print(f"  {instance.name}: n={instance.size}, optimal_cost={instance.optimal_cost}")

    start_time = time.time()

    if args.sweep:
        output_dir = Path(args.output) / 'time_limits'
        results_df = run_with_time_limits(
            instances,
            [int(ms * 1e6) for ms in args.sweep],
            str(output_dir),
            seed=args.seed,
            runs=args.runs,
            max_iterations=args.max_iterations,
        )
    else:
        output_dir = Path(args.output) / 'times'
        results_df = run_all_algorithms(
            instances,
            str(output_dir),
            seed=args.seed,
            time_limit=int(args.time_limit * 1e6) if args.time_limit is not None else None,
            max_iterations=args.max_iterations,
            min_runs=args.runs,
            sa_params={'cooling_rate': args.sa_alpha, 'max_no_improvement': args.sa_no_improve},
            tabu_params={'tabu_tenure': args.tabu_tenure, 'candidate_list_size': args.tabu_candidates},
        )

    if not args.no_plots:
        print("\nCreating plots...")
        create_all_plots(results_df, str(output_dir))

    elapsed = time.time() - start_time

    print(f"\n{'='*70}")
    print(f"Experiment complete!")
    print(f"Total time: {elapsed:.1f} seconds ({elapsed/60:.1f} minutes)")
    print(f"Results saved to: {output_dir}")
    print(f"{'='*70}")


if __name__ == '__main__':
    main()
