"""Heuristic algorithms: local search, SA, Tabu Search, construction, and the swap neighborhood"""

from .base import Solver
from .neighborhoods import (
    num_neighbours, swap_indices, neighbour_index, eval_diff, move_to_neighbour,
    dot_product_permuted, dot_product_permuted_with_swap,
)
from .local_search import GreedySolver, SteepestSolver, greedy_local_search, steepest_local_search
from .sa import SimulatedAnnealingSolver, simulated_annealing
from .tabu import TabuSearchSolver, tabu_search
from .construction import HeuristicSolver, greedy_mapping, heuristic_permutation
from .utils import copy_perm, random_permutation, is_permutation, argsort, hamming_distance

__all__ = [
    'Solver',
    'num_neighbours', 'swap_indices', 'neighbour_index', 'eval_diff', 'move_to_neighbour',
    'dot_product_permuted', 'dot_product_permuted_with_swap',
    'GreedySolver', 'SteepestSolver', 'greedy_local_search', 'steepest_local_search',
    'SimulatedAnnealingSolver', 'simulated_annealing',
    'TabuSearchSolver', 'tabu_search',
    'HeuristicSolver', 'greedy_mapping', 'heuristic_permutation',
    'copy_perm', 'random_permutation', 'is_permutation', 'argsort', 'hamming_distance',
]
