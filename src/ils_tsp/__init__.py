"""Iterated Local Search for the Euclidean Travelling Salesman Problem."""

from .tsp import (DEFAULT_METHODS, ConfigurationError, Progress, RunResult, SearchConfig, Solution,
                  TSPInstance, parallel_run, run, solve, trace)

__version__ = '0.1.0'
