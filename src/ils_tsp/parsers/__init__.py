from .instances import BERLIN52, KNOWN_OPTIMA, load_instance
from .tsplib import parse_tsp_file, write_tour_file
