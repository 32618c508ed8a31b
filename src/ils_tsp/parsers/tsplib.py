"""Read TSPLIB coordinate instances and write TSPLIB tour files."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

SUPPORTED_EDGE_WEIGHT_TYPES = ('EUC_2D',)


@dataclass
class TSPLIBFile:
    name: str
    dimension: int
    edge_weight_type: str
    coords: List[Tuple[float, float]]
    comment: Optional[str] = None


def parse_tsp_file(filename: str) -> TSPLIBFile:
    """
    Parse a TSPLIB .tsp file with a NODE_COORD_SECTION.
    Only EUC_2D instances are accepted: the search uses rounded Euclidean costs.
    """
    with open(filename, 'r') as f:
        lines = f.readlines()

    # Parse header information
    name = os.path.splitext(os.path.basename(filename))[0]
    comment = None
    dimension = None
    edge_weight_type = None

    for line in lines:
        line = line.strip()
        if line == 'NODE_COORD_SECTION':
            break
        key, _, value = line.partition(':')
        key = key.strip()
        value = value.strip()
        if key == 'NAME' and value:
            name = value
        elif key == 'COMMENT':
            comment = value
        elif key == 'DIMENSION':
            dimension = int(value)
        elif key == 'EDGE_WEIGHT_TYPE':
            edge_weight_type = value

    if dimension is None:
        raise ValueError(f"Could not find DIMENSION in {filename}")
    if edge_weight_type not in SUPPORTED_EDGE_WEIGHT_TYPES:
        raise ValueError(f"Unsupported EDGE_WEIGHT_TYPE: {edge_weight_type}")

    coords = parse_coordinates(lines)
    if len(coords) != dimension:
        raise ValueError(f"{filename}: DIMENSION is {dimension} but {len(coords)} coordinates were read")
    return TSPLIBFile(name=name, dimension=dimension, edge_weight_type=edge_weight_type,
                      coords=coords, comment=comment)


def parse_coordinates(lines: Sequence[str]) -> List[Tuple[float, float]]:
    """Parse NODE_COORD_SECTION and return coordinates in node-id order."""
    coords = []
    in_coord_section = False

    for line in lines:
        line = line.strip()
        if line == 'NODE_COORD_SECTION':
            in_coord_section = True
            continue
        elif line == 'EOF' or line.startswith('EDGE_WEIGHT_SECTION'):
            break
        elif in_coord_section and line:
            parts = line.split()
            if len(parts) < 3:
                raise ValueError(f"Malformed coordinate line: {line!r}")
            node_id = int(parts[0])
            coords.append((node_id, float(parts[1]), float(parts[2])))

    coords.sort(key=lambda c: c[0])
    return [(x, y) for _, x, y in coords]


def write_tour_file(path: str, name: str, tour: Sequence[int], cost: Optional[float] = None) -> None:
    """Write a tour in TSPLIB TOUR format (1-based node ids)."""
    with open(path, 'w') as f:
        f.write(f"NAME : {name}.tour\n")
        if cost is not None:
            f.write(f"COMMENT : Length = {cost:g}\n")
        f.write("TYPE : TOUR\n")
        f.write(f"DIMENSION : {len(tour)}\n")
        f.write("TOUR_SECTION\n")
        for node in tour:
            f.write(f"{node + 1}\n")
        f.write("-1\n")
        f.write("EOF\n")
