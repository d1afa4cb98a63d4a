"""
Fills the off-path cells with distractors and knocks path cells out of place.
"""

import random
from typing import Iterable, Optional, Set, Tuple

from .board import Cell, CellType, Puzzle

Position = Tuple[int, int]

DISTRACTOR_TYPES = [CellType.STRAIGHT, CellType.CORNER]


class Scrambler:
    def __init__(self, empty_tile_chance: float = 20, rng: Optional[random.Random] = None):
        """Initialize scrambler.

        Args:
            empty_tile_chance: Percentage (0-100) of off-path cells left as fixed gaps
            rng: Random source shared with the rest of the pipeline
        """
        self.empty_tile_chance = empty_tile_chance
        self.rng = rng or random.Random()

    def fill_distractors(self, puzzle: Puzzle, path_cells: Set[Position]) -> None:
        """Populate every cell that is neither on the path nor an endpoint."""
        for (x, y), cell in puzzle.cells():
            if (x, y) in path_cells or cell.type.is_endpoint:
                continue

            if self.rng.random() * 100 < self.empty_tile_chance:
                puzzle.set_cell(x, y, Cell.empty(fixed=True))
            else:
                puzzle.set_cell(
                    x,
                    y,
                    Cell(
                        type=self.rng.choice(DISTRACTOR_TYPES),
                        rotation=self.rng.randrange(4),
                        fixed=False,
                    ),
                )

    def scramble_path(self, puzzle: Puzzle, path: Iterable[Position]) -> None:
        """Move each path cell to one of the three rotations other than its solution.

        Straight pieces look the same at 0/2 and at 1/3, but all four values
        are treated as distinct here, so a scrambled straight can still line
        up with the route.
        """
        for x, y in path:
            cell = puzzle.get_cell(x, y)
            if cell.fixed or cell.solution_rotation is None:
                continue
            wrong_rotations = [r for r in range(4) if r != cell.solution_rotation]
            cell.rotation = self.rng.choice(wrong_rotations)
