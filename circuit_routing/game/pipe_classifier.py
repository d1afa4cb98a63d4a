"""
Maps consecutive path positions to the pipe piece that joins them.
"""

from typing import List, Sequence, Tuple

from .board import CellType

Position = Tuple[int, int]


def classify_segment(
    prev: Position, curr: Position, nxt: Position
) -> Tuple[CellType, int]:
    """Pick the pipe type and solution rotation for the middle of three steps.

    Args:
        prev: Position before curr on the path
        curr: Position being classified
        nxt: Position after curr on the path

    Returns:
        (cell_type, rotation) tuple
    """
    dx1 = curr[0] - prev[0]
    dy1 = curr[1] - prev[1]
    dx2 = nxt[0] - curr[0]
    dy2 = nxt[1] - curr[1]

    if dx1 != 0 and dx2 != 0 and dy1 == 0 and dy2 == 0:
        return CellType.STRAIGHT, 0

    if dy1 != 0 and dy2 != 0 and dx1 == 0 and dx2 == 0:
        return CellType.STRAIGHT, 1

    # Fixed turn table, keyed on the signs of the incoming and outgoing moves
    if dx1 > 0 and dy2 > 0:
        return CellType.CORNER, 1
    if dx1 > 0 and dy2 < 0:
        return CellType.CORNER, 0
    if dy1 > 0 and dx2 > 0:
        return CellType.CORNER, 3
    if dy1 > 0 and dx2 < 0:
        return CellType.CORNER, 2
    if dx1 < 0 and dy2 > 0:
        return CellType.CORNER, 2
    if dx1 < 0 and dy2 < 0:
        return CellType.CORNER, 3
    if dy1 < 0 and dx2 > 0:
        return CellType.CORNER, 0
    if dy1 < 0 and dx2 < 0:
        return CellType.CORNER, 1

    return CellType.STRAIGHT, 0


def classify_path(path: Sequence[Position]) -> List[Tuple[Position, CellType, int]]:
    """Classify every interior position of a path.

    Endpoints are skipped; they become the source and destination cells.
    """
    pieces = []
    for i in range(1, len(path) - 1):
        cell_type, rotation = classify_segment(path[i - 1], path[i], path[i + 1])
        pieces.append((path[i], cell_type, rotation))
    return pieces
