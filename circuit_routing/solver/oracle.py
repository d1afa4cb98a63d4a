"""
Connectivity oracle for circuit routing puzzles.

Decides whether the source currently reaches the destination through
mutually matching ports.
"""

import time
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple

from ..game.board import Direction, Puzzle
from ..game.ports import get_connections

Position = Tuple[int, int]


@dataclass(frozen=True)
class FlowEdge:
    """A cell-to-cell edge that currently carries energy."""

    start: Position
    end: Position
    direction: Direction


@dataclass
class OracleResult:
    """Result of one connectivity check."""

    connected: bool
    cells_visited: int
    time_taken_ms: float


def _walk(puzzle: Puzzle, stop_at_destination: bool) -> Iterator[Tuple[Position, Optional[FlowEdge]]]:
    """Depth-first walk over the port graph starting at the source.

    Yields each position when it is first visited (with ``None``), and each
    traversable edge as it is discovered. Cells are marked visited by
    coordinate only, which is exact while no cell has more than two ports.
    """
    destination = puzzle.destination
    visited: Set[Position] = set()
    stack: List[Tuple[int, int, Optional[int]]] = [
        (puzzle.source_x, puzzle.source_y, None)
    ]

    while stack:
        x, y, entered_from = stack.pop()
        if (x, y) in visited:
            continue
        visited.add((x, y))
        yield (x, y), None

        if stop_at_destination and (x, y) == destination:
            return

        for direction in get_connections(puzzle.get_cell(x, y)):
            if entered_from is not None and direction == entered_from:
                continue

            nx, ny = x + direction.dx, y + direction.dy
            if not puzzle.is_valid_position(nx, ny):
                continue

            opposite = direction.opposite()
            if opposite in get_connections(puzzle.get_cell(nx, ny)):
                yield (x, y), FlowEdge((x, y), (nx, ny), direction)
                stack.append((nx, ny, opposite))


def apply_solution(puzzle: Puzzle) -> Puzzle:
    """Copy the puzzle with every path cell turned to its solution rotation."""
    test_puzzle = puzzle.copy()
    for _, cell in test_puzzle.cells():
        if cell.solution_rotation is not None:
            cell.rotation = cell.solution_rotation
    return test_puzzle


def is_solved(puzzle: Puzzle) -> bool:
    """Check whether the live grid connects source to destination."""
    destination = puzzle.destination
    for position, edge in _walk(puzzle, stop_at_destination=True):
        if edge is None and position == destination:
            return True
    return False


def is_solvable(puzzle: Puzzle) -> bool:
    """Check the grid with every path cell set to its solution rotation."""
    return is_solved(apply_solution(puzzle))


def trace_flow(puzzle: Puzzle) -> List[FlowEdge]:
    """List every edge energy currently flows through, starting at the source.

    Unlike ``is_solved`` the walk does not stop at the destination.
    """
    return [edge for _, edge in _walk(puzzle, stop_at_destination=False) if edge]


def energized_cells(puzzle: Puzzle) -> Set[Position]:
    walk = _walk(puzzle, stop_at_destination=False)
    return {position for position, edge in walk if edge is None}


class ConnectivityOracle:
    """Runs the reachability check and reports traversal statistics."""

    def check(self, puzzle: Puzzle) -> OracleResult:
        start_time = time.time()

        destination = puzzle.destination
        cells_visited = 0
        connected = False
        for position, edge in _walk(puzzle, stop_at_destination=True):
            if edge is not None:
                continue
            cells_visited += 1
            if position == destination:
                connected = True

        elapsed_ms = (time.time() - start_time) * 1000
        return OracleResult(
            connected=connected,
            cells_visited=cells_visited,
            time_taken_ms=elapsed_ms,
        )

    def check_solution(self, puzzle: Puzzle) -> OracleResult:
        return self.check(apply_solution(puzzle))
