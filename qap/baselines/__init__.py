"""Baseline algorithms for comparison"""

from .random_search import RandomSearchSolver, random_search
from .random_walk import RandomWalkSolver, random_walk

__all__ = ['RandomSearchSolver', 'random_search', 'RandomWalkSolver', 'random_walk']
