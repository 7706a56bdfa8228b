"""Instance generator for creating synthetic QAP instances."""

import numpy as np
import json
from pathlib import Path
from typing import Tuple, Optional

from .instance import Instance


def generate_instance(
    size: int = 12,
    seed: int = 42,
    flow_range: Tuple[int, int] = (0, 10),
    distance_range: Tuple[int, int] = (1, 100),
    flow_density: float = 0.5,
    symmetric: bool = True,
    name: Optional[str] = None,
) -> Instance:
    """
    Generate a random QAP instance.

    Flows are sparse (a fraction `flow_density` of the off-diagonal entries is
    non-zero), distances are dense. Both diagonals are zero.

    Args:
        size: Number of facilities / locations (n)
        seed: Random seed for reproducibility
        flow_range: Inclusive range for non-zero flow entries
        distance_range: Inclusive range for distance entries
        flow_density: Probability of an off-diagonal flow being non-zero
        symmetric: If True, both matrices are symmetric
        name: Instance name (default: ``rand<size>_<seed>``)

    Returns:
        Generated Instance
    """
    rng = np.random.default_rng(seed)

    flows = rng.integers(flow_range[0], flow_range[1] + 1, size=(size, size))
    flows = flows * (rng.random((size, size)) < flow_density)
    distances = rng.integers(distance_range[0], distance_range[1] + 1, size=(size, size))

    if symmetric:
        flows = np.triu(flows, 1) + np.triu(flows, 1).T
        distances = np.triu(distances, 1) + np.triu(distances, 1).T

    np.fill_diagonal(flows, 0)
    np.fill_diagonal(distances, 0)

    instance = Instance(
        matrix_a=flows,
        matrix_b=distances,
        name=name if name is not None else f"rand{size}_{seed}",
    )
    instance.validate()
    return instance


def save_instance(instance: Instance, filepath: str) -> None:
    """
    Save instance to file as JSON (converting numpy arrays to lists).

    Args:
        instance: Instance to save
        filepath: Path to save file
    """
    data = {
        'name': instance.name,
        'size': instance.size,
        'matrix_a': instance.matrix_a.tolist(),
        'matrix_b': instance.matrix_b.tolist(),
        'optimal_cost': instance.optimal_cost,
        'optimal_permutation': (
            instance.optimal_permutation.tolist()
            if instance.optimal_permutation is not None else None
        ),
    }

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=2)


def load_instance(filepath: str) -> Instance:
    """
    Load instance from JSON file.

    Args:
        filepath: Path to instance file

    Returns:
        Loaded Instance
    """
    with open(filepath, 'r') as f:
        data = json.load(f)

    instance = Instance(
        matrix_a=np.array(data['matrix_a']),
        matrix_b=np.array(data['matrix_b']),
        name=data.get('name', Path(filepath).stem),
        optimal_cost=data.get('optimal_cost'),
        optimal_permutation=data.get('optimal_permutation'),
    )

    instance.validate()
    return instance


def generate_instance_set(
    output_dir: str = 'instances',
    sizes: Tuple[int, ...] = (12, 15, 18, 20, 22, 25),
    seed: int = 100,
) -> None:
    """
    Generate one random instance per size and save them as JSON.

    Args:
        output_dir: Directory to save instances
        sizes: Instance sizes to generate
        seed: Base random seed (instance k uses seed + k)
    """
    output_path = Path(output_dir)
    output_path.mkdir(exist_ok=True, parents=True)

    print(f"Generating {len(sizes)} instances...")
    for k, size in enumerate(sizes):
        instance = generate_instance(size=size, seed=seed + k)
        filepath = output_path / f'{instance.name}.json'
        save_instance(instance, str(filepath))
        print(f"  Saved {filepath}")

    print(f"\nGenerated {len(sizes)} instances in {output_dir}/")
