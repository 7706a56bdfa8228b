"""
Swap neighborhood: move indexing, O(n) delta evaluation and move application.

A move swaps positions i < j of a permutation. The n(n-1)/2 moves are
numbered densely in lexicographic (i, j) order, so k = 0 is (0, 1),
k = 1 is (0, 2), ..., and k = n(n-1)/2 - 1 is (n-2, n-1). All functions
assume n >= 2.
"""

import math
import numpy as np
from typing import Tuple

from ..model.instance import Instance


def num_neighbours(n: int) -> int:
    """Number of swap moves of a permutation of length n."""
    return n * (n - 1) // 2


def swap_indices(n: int, neighbour_idx: int) -> Tuple[int, int]:
    """
    Decode a move index into the swapped positions (i, j), i < j.

    Closed-form inversion of the triangular numbering:
        numerator = -8k + 4n(n-1) - 7
        i = n - 2 - floor(sqrt(numerator) / 2 - 0.5)
        j = k + i + 1 - n(n-1)/2 + (n-i)(n-i-1)/2

    numerator is a positive odd integer for every valid k, and
    floor(sqrt(x) / 2 - 0.5) == (isqrt(x) - 1) // 2 for such x, so the
    integer square root keeps the decode exact for any n.

    Args:
        n: Permutation length
        neighbour_idx: Move index k in [0, n(n-1)/2)

    Returns:
        Tuple (i, j) with 0 <= i < j < n
    """
    k = neighbour_idx
    numerator = -8 * k + 4 * n * (n - 1) - 7
    i = n - 2 - (math.isqrt(numerator) - 1) // 2
    j = k + i + 1 - n * (n - 1) // 2 + (n - i) * (n - i - 1) // 2
    return i, j


def neighbour_index(n: int, i: int, j: int) -> int:
    """
    Encode positions (i, j), i < j, into their move index.

    Inverse of `swap_indices`: k = sum_{row < i} (n - 1 - row) + (j - i - 1).
    """
    return i * (2 * n - i - 1) // 2 + (j - i - 1)


def dot_product_permuted(row_a: np.ndarray, row_b: np.ndarray, perm: np.ndarray) -> int:
    """Permuted dot product: sum_k row_a[k] * row_b[perm[k]]."""
    return int(np.dot(row_a, row_b[perm]))


def dot_product_permuted_with_swap(
    row_a: np.ndarray,
    row_b: np.ndarray,
    perm: np.ndarray,
    swap_idx_0: int,
    swap_idx_1: int,
) -> int:
    """
    Permuted dot product as if positions swap_idx_0 and swap_idx_1 of `perm`
    were swapped. `perm` itself is not modified.
    """
    permuted = row_b[perm]
    permuted[swap_idx_0], permuted[swap_idx_1] = permuted[swap_idx_1], permuted[swap_idx_0]
    return int(np.dot(row_a, permuted))


def eval_diff(instance: Instance, perm: np.ndarray, neighbour_idx: int) -> int:
    """
    Cost change of swapping the positions encoded by `neighbour_idx`.

    Only rows i0, i1 and the columns i0, i1 of the remaining rows contribute
    to the change, so the swap is scored in O(n) without building the
    neighbour.

    Args:
        instance: Problem instance
        perm: Current permutation, shape (n,)
        neighbour_idx: Move index

    Returns:
        cost(perm) - cost(neighbour); positive means the swap improves
    """
    n = len(perm)
    i0, i1 = swap_indices(n, neighbour_idx)
    matrix_a = instance.matrix_a
    matrix_b = instance.matrix_b
    p0 = perm[i0]
    p1 = perm[i1]

    before = (
        dot_product_permuted(matrix_a[i0], matrix_b[p0], perm)
        + dot_product_permuted(matrix_a[i1], matrix_b[p1], perm)
    )
    after = (
        dot_product_permuted_with_swap(matrix_a[i0], matrix_b[p1], perm, i0, i1)
        + dot_product_permuted_with_swap(matrix_a[i1], matrix_b[p0], perm, i0, i1)
    )

    # Column terms of every row except i0 and i1
    col_a0 = matrix_a[:, i0]
    col_a1 = matrix_a[:, i1]
    col_b0 = matrix_b[perm, p0]
    col_b1 = matrix_b[perm, p1]
    terms_before = col_a0 * col_b0 + col_a1 * col_b1
    terms_after = col_a1 * col_b0 + col_a0 * col_b1

    before += int(terms_before.sum() - terms_before[i0] - terms_before[i1])
    after += int(terms_after.sum() - terms_after[i0] - terms_after[i1])

    return before - after


def move_to_neighbour(perm: np.ndarray, neighbour_idx: int, inplace: bool = False) -> np.ndarray:
    """
    Apply a move to a permutation.

    Args:
        perm: Permutation, shape (n,)
        neighbour_idx: Move index
        inplace: Swap inside `perm` (caller owns the buffer) instead of a copy

    Returns:
        Swapped permutation (`perm` itself when inplace=True)
    """
    new_perm = perm if inplace else perm.copy()
    i, j = swap_indices(len(new_perm), neighbour_idx)
    new_perm[i], new_perm[j] = new_perm[j], new_perm[i]
    return new_perm
