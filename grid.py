'''
Traffic Grid Topology:
* R x C grid of intersections represented as a directed graph with NetworkX
* Node ids are row-major:  id = row * C + col
* Each intersection connects to its North, South, East and West neighbors
* Edge weight is the unit grid distance (1)
* The graph is frozen once built - queue contents change, topology does not
'''


# Standard Library:
from enum import Enum

# Third-Party:
import networkx  # type: ignore

# Local:
from errors import InvalidConfiguration, InvalidDimension, NodeOutOfRange


class Direction(Enum):
    '''
    Compass direction of an intersection lane, evaluated in N, S, E, W order
    '''
    NORTH = 0
    SOUTH = 1
    EAST = 2
    WEST = 3

    def __repr__(self) -> str:
        return self.name

    @property
    def short(self) -> str:
        return self.name[0]


# (row delta, col delta) for each direction:
DIRECTION_OFFSETS = {
    Direction.NORTH: (-1, 0),
    Direction.SOUTH: (1, 0),
    Direction.EAST: (0, 1),
    Direction.WEST: (0, -1),
}


def node_id(row: int, col: int, cols: int) -> int:
    return row * cols + col


def node_position(grid: networkx.DiGraph, node: int) -> tuple[int, int]:
    '''
    Return (row, col) of a node
    '''
    check_node(grid, node)
    return grid.nodes[node]['row'], grid.nodes[node]['col']


def check_node(grid: networkx.DiGraph, node: int) -> None:
    '''
    Raise NodeOutOfRange unless node is a valid id for this grid
    '''
    # bool is an int subclass but never a valid node id
    if isinstance(node, bool) or not isinstance(node, int) or node not in grid:
        raise NodeOutOfRange(
            f'Node {node!r} outside of grid with {grid.number_of_nodes()} intersections'
        )


def build_grid(rows: int, cols: int) -> networkx.DiGraph:
    '''
    Build the traffic grid for simulation

    Args:
    * rows: Number of grid rows (R > 0)
    * cols: Number of grid columns (C > 0)

    Returns:
    * A frozen NetworkX DiGraph with R * C nodes and a unit-weight edge from
      every node to each in-bounds 4-neighbor
    '''
    for name, value in (('rows', rows), ('cols', cols)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidDimension(f'Expected positive integer for {name}, got: {value!r}')

    G = networkx.DiGraph(rows=rows, cols=cols)
    for r in range(rows):
        for c in range(cols):
            G.add_node(node_id(r, c, cols), row=r, col=c)

    for r in range(rows):
        for c in range(cols):
            u = node_id(r, c, cols)
            for dr, dc in DIRECTION_OFFSETS.values():
                nr, nc = r + dr, c + dc
                if 0 <= nr < rows and 0 <= nc < cols:
                    G.add_edge(u, node_id(nr, nc, cols), weight=1)

    return networkx.freeze(G)


def direction_between(grid: networkx.DiGraph, current_node: int, next_node: int) -> Direction:
    '''
    Compass direction of travel from current_node to an adjacent next_node
    '''
    row, col = node_position(grid, current_node)
    next_row, next_col = node_position(grid, next_node)
    delta = (next_row - row, next_col - col)
    for direction, offset in DIRECTION_OFFSETS.items():
        if offset == delta:
            return direction

    raise InvalidConfiguration(f'Invalid move between {current_node} and {next_node}. '
                               'Expected orthogonal movement to a neighbor.')
