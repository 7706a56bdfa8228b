"""Common contract shared by all QAP solvers."""

import time
from abc import ABC, abstractmethod
from typing import Optional, Sequence
import numpy as np

from ..model.instance import Instance
from ..model.result import Solution


class Solver(ABC):
    """
    Base class for search strategies.

    A solver is bound to one (read-only) instance and owns its working
    permutation for the duration of `solve`. Randomness comes from an explicit
    numpy Generator so a fixed seed reproduces a run.

    Args:
        instance: Problem instance
        time_limit: Wall-clock limit per solve call in nanoseconds
            (None means unbounded)
        seed: Seed for a new random generator (ignored if `rng` is given)
        rng: Random generator to use
        verbose: Print progress lines
    """

    name = "Solver"

    def __init__(
        self,
        instance: Instance,
        time_limit: Optional[int] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        verbose: bool = False,
    ):
        self._instance = instance
        self._time_limit = time_limit
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.verbose = verbose
        self._start_ns = 0

    @property
    def instance(self) -> Instance:
        return self._instance

    def set_time_limit(self, time_limit: Optional[int]) -> None:
        """Set the time limit in nanoseconds (None for unbounded)."""
        self._time_limit = time_limit

    def get_time_limit(self) -> Optional[int]:
        return self._time_limit

    @abstractmethod
    def solve(self, initial_permutation: Sequence[int]) -> Solution:
        """
        Search starting from `initial_permutation`.

        Returns the best solution found; exceeding the time limit ends the
        search normally. Raises SolvingError if the search cannot proceed.
        """

    def _start_clock(self) -> None:
        self._start_ns = time.perf_counter_ns()

    def _elapsed(self) -> int:
        return time.perf_counter_ns() - self._start_ns

    def _time_exceeded(self) -> bool:
        return self._time_limit is not None and self._elapsed() > self._time_limit

    def __repr__(self) -> str:
        return f"{type(self).__name__}(instance={self._instance.name!r}, time_limit={self._time_limit})"
