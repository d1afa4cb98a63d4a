"""
Circuit routing puzzle engine.

Generates pipe-rotation puzzles that are solvable but start unsolved, and
checks whether a grid currently connects its source to its destination.
"""

from .game.board import Cell, CellType, Direction, Puzzle
from .game.board_builder import (PuzzleBuilder, PuzzleConfig, is_acceptable,
                                 generate_puzzle_from_points,
                                 generate_random_puzzle)
from .game.levels import PuzzleCatalog
from .game.ports import get_connections
from .solver.oracle import is_solvable, is_solved

__all__ = [
    "Cell",
    "CellType",
    "Direction",
    "Puzzle",
    "PuzzleBuilder",
    "PuzzleConfig",
    "PuzzleCatalog",
    "generate_random_puzzle",
    "generate_puzzle_from_points",
    "get_connections",
    "is_acceptable",
    "is_solved",
    "is_solvable",
]
