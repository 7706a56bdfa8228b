"""Model components: instance data structures, results, instance generation and I/O"""

from .instance import Instance
from .result import Solution, RunMetrics, SolvingError
from .instance_generator import generate_instance, save_instance, load_instance, generate_instance_set
from .qaplib import InstanceFormatError, read_qaplib_instance, load_qaplib

__all__ = ['Instance', 'Solution', 'RunMetrics', 'SolvingError',
           'generate_instance', 'save_instance', 'load_instance', 'generate_instance_set',
           'InstanceFormatError', 'read_qaplib_instance', 'load_qaplib']
