"""Reader for QAPLIB problem (.dat) and solution (.sln) files."""

from pathlib import Path
from typing import List, Optional, Tuple
import numpy as np

from .instance import Instance


class InstanceFormatError(ValueError):
    """Raised when a QAPLIB file is truncated or contains malformed tokens."""


def _read_tokens(filepath: Path) -> List[int]:
    """Read all whitespace (or comma) separated integers of a file."""
    with open(filepath, 'r') as f:
        text = f.read()

    tokens = text.replace(',', ' ').split()
    try:
        return [int(token) for token in tokens]
    except ValueError as e:
        raise InstanceFormatError(f"{filepath}: non-numeric token ({e})") from e


def read_dat(filepath: str) -> Tuple[np.ndarray, np.ndarray]:
    """
    Read a QAPLIB problem file.

    The file holds the size n followed by the n*n entries of matrix A and the
    n*n entries of matrix B. Line breaks and blank lines are not significant.

    Args:
        filepath: Path to the .dat file

    Returns:
        Tuple of (matrix_a, matrix_b), each shape (n, n)
    """
    path = Path(filepath)
    values = _read_tokens(path)
    if not values:
        raise InstanceFormatError(f"{path}: empty file")

    n = values[0]
    if n < 1:
        raise InstanceFormatError(f"{path}: invalid size {n}")

    expected = 1 + 2 * n * n
    if len(values) < expected:
        raise InstanceFormatError(
            f"{path}: expected {2 * n * n} matrix entries, found {len(values) - 1}"
        )
    if len(values) > expected:
        raise InstanceFormatError(
            f"{path}: {len(values) - expected} unexpected trailing tokens"
        )

    matrix_a = np.array(values[1:1 + n * n], dtype=np.int64).reshape(n, n)
    matrix_b = np.array(values[1 + n * n:], dtype=np.int64).reshape(n, n)
    if np.any(matrix_a < 0) or np.any(matrix_b < 0):
        raise InstanceFormatError(f"{path}: matrices must be non-negative")

    return matrix_a, matrix_b


def read_sln(filepath: str) -> Tuple[int, int, Optional[np.ndarray]]:
    """
    Read a QAPLIB solution file.

    The file holds the size n, the optimal cost and, optionally, the n entries
    of the optimal permutation (1-based).

    Args:
        filepath: Path to the .sln file

    Returns:
        Tuple of (size, optimal_cost, optimal_permutation)
        optimal_permutation is 0-based, or None if the file only has the header
    """
    path = Path(filepath)
    values = _read_tokens(path)
    if len(values) < 2:
        raise InstanceFormatError(f"{path}: missing size or optimal cost")

    n, optimal_cost = values[0], values[1]
    entries = values[2:]
    if not entries:
        return n, optimal_cost, None

    if len(entries) != n:
        raise InstanceFormatError(
            f"{path}: expected {n} permutation entries, found {len(entries)}"
        )

    permutation = np.array(entries, dtype=np.int64) - 1
    if not np.array_equal(np.sort(permutation), np.arange(n)):
        raise InstanceFormatError(f"{path}: solution is not a permutation of 1..{n}")

    return n, optimal_cost, permutation


def read_qaplib_instance(dat_path: str, sln_path: Optional[str] = None) -> Instance:
    """
    Read a QAPLIB instance and, optionally, its reference solution.

    Missing files raise FileNotFoundError, malformed ones InstanceFormatError.
    A partially read instance is never returned.

    Args:
        dat_path: Path to the .dat problem file
        sln_path: Optional path to the .sln solution file

    Returns:
        Loaded Instance
    """
    matrix_a, matrix_b = read_dat(dat_path)

    optimal_cost = None
    optimal_permutation = None
    if sln_path is not None:
        n, optimal_cost, optimal_permutation = read_sln(sln_path)
        if n != matrix_a.shape[0]:
            raise InstanceFormatError(
                f"{sln_path}: solution size {n} != instance size {matrix_a.shape[0]}"
            )

    return Instance(
        matrix_a=matrix_a,
        matrix_b=matrix_b,
        name=Path(dat_path).stem,
        optimal_cost=optimal_cost,
        optimal_permutation=optimal_permutation,
    )


def load_qaplib(directory: str, name: str) -> Instance:
    """
    Load ``<directory>/<name>.dat`` together with ``<name>.sln`` if it exists.

    Args:
        directory: Directory holding the QAPLIB files
        name: Instance name, e.g. ``chr12a``

    Returns:
        Loaded Instance
    """
    base = Path(directory)
    sln_path = base / f"{name}.sln"
    return read_qaplib_instance(
        str(base / f"{name}.dat"),
        str(sln_path) if sln_path.exists() else None,
    )
