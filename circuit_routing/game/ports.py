"""
Port model: which sides of a cell carry energy for a given type and rotation.
"""

from typing import List, Set

from .board import Cell, CellType, Direction

_STRAIGHT_PORTS = {
    0: [Direction.RIGHT, Direction.LEFT],
    1: [Direction.UP, Direction.DOWN],
}

_CORNER_PORTS = {
    0: [Direction.UP, Direction.RIGHT],
    1: [Direction.RIGHT, Direction.DOWN],
    2: [Direction.DOWN, Direction.LEFT],
    3: [Direction.LEFT, Direction.UP],
}


def get_connections(cell: Cell) -> List[Direction]:
    """Get the open ports of a cell.

    Endpoints expose the single port facing away from their boundary edge,
    so the flow enters the grid instead of leaving through the border.

    Args:
        cell: Cell to inspect

    Returns:
        List of directions, empty for gaps and obstacles
    """
    if cell.type.is_endpoint:
        if cell.edge is None or not 0 <= cell.edge <= 3:
            return []
        return [Direction(cell.edge).opposite()]

    if cell.type == CellType.STRAIGHT:
        return list(_STRAIGHT_PORTS[cell.rotation % 2])

    if cell.type == CellType.CORNER:
        return list(_CORNER_PORTS[cell.rotation % 4])

    return []


def ports(cell: Cell) -> Set[Direction]:
    return set(get_connections(cell))


def can_connect(cell: Cell, neighbor: Cell, direction: int) -> bool:
    """True when energy can cross from cell into neighbor lying at direction."""
    return direction in ports(cell) and (direction + 2) % 4 in ports(neighbor)


def edge_for_position(grid_size: int, x: int, y: int) -> int:
    # Corners resolve to the first matching side in top, right, bottom, left order
    if y == 0:
        return 0
    if x == grid_size - 1:
        return 1
    if y == grid_size - 1:
        return 2
    if x == 0:
        return 3
    return -1
