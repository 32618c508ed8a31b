from .config import DEFAULT_METHODS, ConfigurationError, SearchConfig
from .distance import distance_matrix, euclidean_distance_2d, matrix_tour_cost, tour_cost
from .ils import Progress, SearchTrace, Solution, TSPInstance, local_search, run, trace
from .moves import double_bridge_move, random_tour, stochastic_two_opt
from .parallel import parallel_run
from .strategies import RunResult, solve, trace_method
