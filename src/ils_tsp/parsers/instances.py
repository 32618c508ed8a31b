from __future__ import annotations

import os
from typing import Dict, List, Tuple

from ..tsp.ils import TSPInstance
from .tsplib import parse_tsp_file

# TSPLIB berlin52 (EUC_2D), 52 locations in Berlin
BERLIN52: List[Tuple[float, float]] = [
    (565, 575), (25, 185), (345, 750), (945, 685), (845, 655),
    (880, 660), (25, 230), (525, 1000), (580, 1175), (650, 1130), (1605, 620),
    (1220, 580), (1465, 200), (1530, 5), (845, 680), (725, 370), (145, 665),
    (415, 635), (510, 875), (560, 365), (300, 465), (520, 585), (480, 415),
    (835, 625), (975, 580), (1215, 245), (1320, 315), (1250, 400), (660, 180),
    (410, 250), (420, 555), (575, 665), (1150, 1160), (700, 580), (685, 595),
    (685, 610), (770, 610), (795, 645), (720, 635), (760, 650), (475, 960),
    (95, 260), (875, 920), (700, 500), (555, 815), (830, 485), (1170, 65),
    (830, 610), (605, 625), (595, 360), (1340, 725), (1740, 245),
]

KNOWN_OPTIMA: Dict[str, float] = {
    'berlin52': 7542.0,
}

BUILTIN_INSTANCES: Dict[str, List[Tuple[float, float]]] = {
    'berlin52': BERLIN52,
}


def load_instance(name_or_path: str) -> TSPInstance:
    """Load a built-in instance by name or a TSPLIB .tsp file by path."""
    key = name_or_path.lower()
    if key in BUILTIN_INSTANCES:
        return TSPInstance.from_points(BUILTIN_INSTANCES[key], name=key, optimum=KNOWN_OPTIMA.get(key))
    if not os.path.exists(name_or_path):
        raise FileNotFoundError(
            f"{name_or_path!r} is neither a built-in instance ({sorted(BUILTIN_INSTANCES)}) nor a file"
        )
    parsed = parse_tsp_file(name_or_path)
    return TSPInstance.from_points(parsed.coords, name=parsed.name, optimum=KNOWN_OPTIMA.get(parsed.name.lower()))
