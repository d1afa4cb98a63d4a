"""
PuzzleBuilder for generating circuit routing puzzles.

Carves a route, lays pipes along it, scrambles the grid and keeps retrying
until the result is solvable but not already solved.
"""

import random
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..solver.oracle import is_solvable, is_solved
from ..util.logger import get_logger
from .board import Cell, CellType, Puzzle, VisualSettings
from .path_generator import PathGenerator
from .pipe_classifier import classify_path
from .ports import edge_for_position
from .scrambler import Scrambler


@dataclass
class PuzzleConfig:
    """Configuration for puzzle generation."""

    grid_size: int = 7
    time_limit: int = 0  # seconds, 0 = unlimited
    empty_tile_chance: float = 20  # percent of off-path cells left as gaps
    max_attempts: int = 100
    max_path_fanout: int = 2
    default_visual: VisualSettings = field(default_factory=VisualSettings)


def is_acceptable(puzzle: Puzzle) -> bool:
    """A candidate is kept when it can be solved but is not solved yet."""
    return is_solvable(puzzle) and not is_solved(puzzle)


def position_on_side(
    grid_size: int, side: int, rng: random.Random
) -> Tuple[int, int]:
    pos = rng.randrange(grid_size)
    if side == 0:
        return (pos, 0)
    if side == 1:
        return (grid_size - 1, pos)
    if side == 2:
        return (pos, grid_size - 1)
    return (0, pos)


class PuzzleBuilder:
    """Generates circuit routing puzzles."""

    def __init__(self, config: Optional[PuzzleConfig] = None, seed: Optional[int] = None):
        """Initialize puzzle builder with configuration.

        Args:
            config: Puzzle generation configuration
            seed: Random seed for deterministic generation
        """
        self.config = config or PuzzleConfig()
        self.rng = random.Random(seed)
        self.path_generator = PathGenerator(self.rng, self.config.max_path_fanout)
        self.scrambler = Scrambler(self.config.empty_tile_chance, self.rng)
        self.last_attempts = 0
        self.logger = get_logger("builder")

    def generate_random_puzzle(
        self, grid_size: Optional[int] = None, time_limit: Optional[int] = None
    ) -> Puzzle:
        """Generate a puzzle between random points on opposite sides.

        Args:
            grid_size: Side length, defaults to the configured size
            time_limit: Seconds allowed, 0 for unlimited

        Returns:
            Puzzle: First acceptable candidate, or the last one generated
            when every attempt failed
        """
        if grid_size is None:
            grid_size = self.config.grid_size
        if time_limit is None:
            time_limit = self.config.time_limit

        puzzle = None
        for attempt in range(self.config.max_attempts):
            self.last_attempts = attempt + 1

            side1 = self.rng.randrange(4)
            side2 = (side1 + 2) % 4
            source = position_on_side(grid_size, side1, self.rng)
            destination = position_on_side(grid_size, side2, self.rng)

            puzzle = self.generate_puzzle_from_points(
                grid_size, time_limit, *source, *destination
            )

            if is_acceptable(puzzle):
                return puzzle

        self.logger.debug(
            f"No acceptable {grid_size}x{grid_size} puzzle after "
            f"{self.config.max_attempts} attempts, returning last candidate"
        )
        return puzzle

    def generate_puzzle_from_points(
        self,
        grid_size: int,
        time_limit: int,
        source_x: int,
        source_y: int,
        dest_x: int,
        dest_y: int,
        source_edge: Optional[int] = None,
        dest_edge: Optional[int] = None,
    ) -> Puzzle:
        """Generate one puzzle for explicit endpoints.

        Args:
            grid_size: Side length of the square grid
            time_limit: Seconds allowed, 0 for unlimited
            source_x, source_y: Source cell
            dest_x, dest_y: Destination cell
            source_edge: Boundary the source faces, derived from position if None
            dest_edge: Boundary the destination faces, derived from position if None

        Returns:
            Puzzle: Scrambled puzzle; solvability is not checked here
        """
        puzzle = Puzzle(grid_size, (source_x, source_y), (dest_x, dest_y), time_limit)

        if source_edge is None:
            source_edge = edge_for_position(grid_size, source_x, source_y)
        if dest_edge is None:
            dest_edge = edge_for_position(grid_size, dest_x, dest_y)

        puzzle.set_cell(source_x, source_y, Cell.endpoint(CellType.SOURCE, source_edge))
        puzzle.set_cell(dest_x, dest_y, Cell.endpoint(CellType.DESTINATION, dest_edge))

        path = self.path_generator.generate(
            grid_size, (source_x, source_y), (dest_x, dest_y)
        )

        for (x, y), cell_type, rotation in classify_path(path):
            if puzzle.get_cell(x, y).type.is_endpoint:
                continue
            puzzle.set_cell(
                x,
                y,
                Cell(
                    type=cell_type,
                    rotation=rotation,
                    fixed=False,
                    solution_rotation=rotation,
                ),
            )

        self.scrambler.fill_distractors(puzzle, set(path))
        self.scrambler.scramble_path(puzzle, path[1:-1])

        return puzzle


def generate_random_puzzle(
    grid_size: int, time_limit: int = 0, seed: Optional[int] = None
) -> Puzzle:
    return PuzzleBuilder(seed=seed).generate_random_puzzle(grid_size, time_limit)


def generate_puzzle_from_points(
    grid_size: int,
    time_limit: int,
    source_x: int,
    source_y: int,
    dest_x: int,
    dest_y: int,
    source_edge: Optional[int] = None,
    dest_edge: Optional[int] = None,
    seed: Optional[int] = None,
) -> Puzzle:
    return PuzzleBuilder(seed=seed).generate_puzzle_from_points(
        grid_size,
        time_limit,
        source_x,
        source_y,
        dest_x,
        dest_y,
        source_edge,
        dest_edge,
    )
