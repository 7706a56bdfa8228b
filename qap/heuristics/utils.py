"""Permutation helpers for heuristics."""

import numpy as np
from typing import Optional, Sequence


def copy_perm(permutation: Sequence[int]) -> np.ndarray:
    """
    Create an independent copy of a permutation.

    Args:
        permutation: Permutation, shape (n,)

    Returns:
        Copy as an int64 array
    """
    return np.array(permutation, dtype=np.int64, copy=True)


def random_permutation(size: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Draw a uniformly random permutation of 0..size-1.

    Args:
        size: Permutation length
        rng: Random generator (default: a fresh unseeded generator)

    Returns:
        Random permutation, shape (size,)
    """
    if rng is None:
        rng = np.random.default_rng()
    return rng.permutation(size).astype(np.int64)


def is_permutation(permutation: Sequence[int], size: Optional[int] = None) -> bool:
    """Check that `permutation` holds each of 0..n-1 exactly once."""
    p = np.asarray(permutation)
    n = len(p) if size is None else size
    return p.shape == (n,) and np.array_equal(np.sort(p), np.arange(n))


def argsort(values: Sequence[int], ascending: bool = True) -> np.ndarray:
    """
    Stable argsort; ties keep the lower index first in both directions.

    Args:
        values: Values to sort
        ascending: Sort order

    Returns:
        Indices that sort `values`
    """
    keys = np.asarray(values)
    if not ascending:
        keys = -keys
    return np.argsort(keys, kind='stable')


def hamming_distance(p1: Sequence[int], p2: Sequence[int]) -> int:
    """Number of positions at which two permutations differ."""
    return int(np.sum(np.asarray(p1) != np.asarray(p2)))

