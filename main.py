#!/usr/bin/env python3
"""
Circuit Routing Puzzle Engine

Generates and inspects pipe-rotation routing puzzles from the command line.
"""

import argparse
import sys

from circuit_routing.game.board import Puzzle
from circuit_routing.game.board_builder import PuzzleBuilder, PuzzleConfig
from circuit_routing.game.levels import CatalogError, PuzzleCatalog
from circuit_routing.solver.oracle import apply_solution, is_solvable, is_solved
from circuit_routing.util.logger import configure


def print_puzzle(puzzle: Puzzle, show_solution: bool = False) -> None:
    title = puzzle.name or f"{puzzle.grid_size}x{puzzle.grid_size} puzzle"
    print(title)
    if puzzle.description:
        print(puzzle.description)
    print(puzzle)
    print(f"Source: {puzzle.source}  Destination: {puzzle.destination}")
    print(f"Time limit: {puzzle.time_limit or 'unlimited'}")
    print(f"Solvable: {is_solvable(puzzle)}  Solved: {is_solved(puzzle)}")
    if puzzle.lighting_effects:
        effects = ", ".join(
            f"{e.type}@({e.x},{e.y})" for e in puzzle.lighting_effects
        )
        print(f"Lighting: {effects}")

    if show_solution:
        print()
        print("Solution:")
        print(apply_solution(puzzle))


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Circuit Routing Puzzle Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --random --size 7 --seed 42
  python main.py --load tutorial_1 --catalog data/CircuitPuzzles.json
  python main.py --define tutorial 5 0 0 2 4 2
  python main.py --random --light 2 3 fire --light 4 4 ice
        """,
    )

    parser.add_argument(
        "--random", action="store_true", help="Generate a random puzzle"
    )
    parser.add_argument("--load", type=str, default=None, help="Puzzle id to load")
    parser.add_argument(
        "--catalog", type=str, default=None, help="JSON puzzle catalog file"
    )
    parser.add_argument(
        "--define",
        nargs=7,
        metavar=("NAME", "SIZE", "TIME", "SX", "SY", "EX", "EY"),
        default=None,
        help="Generate a puzzle between explicit endpoints",
    )
    parser.add_argument(
        "--light",
        nargs=3,
        action="append",
        metavar=("X", "Y", "TYPE"),
        default=[],
        help="Attach a lighting marker (repeatable)",
    )
    parser.add_argument("--size", type=int, default=7, help="Grid size")
    parser.add_argument(
        "--time-limit", type=int, default=0, help="Seconds allowed, 0 = unlimited"
    )
    parser.add_argument(
        "--empty-chance",
        type=float,
        default=20,
        help="Percent of off-path cells left empty",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for puzzle generation"
    )
    parser.add_argument(
        "--solution", action="store_true", help="Also print the solved grid"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Minimum level for console log lines",
    )

    args = parser.parse_args()
    configure(args.log_level)

    config = PuzzleConfig(
        grid_size=args.size,
        time_limit=args.time_limit,
        empty_tile_chance=args.empty_chance,
    )
    builder = PuzzleBuilder(config, seed=args.seed)

    try:
        if args.catalog:
            catalog = PuzzleCatalog.load_from_json(args.catalog, config, builder)
        else:
            catalog = PuzzleCatalog(config, builder)
    except (OSError, CatalogError) as e:
        print(f"Could not read catalog: {e}")
        sys.exit(1)

    for x, y, effect_type in args.light:
        catalog.add_lighting(int(x), int(y), effect_type)

    if args.load:
        puzzle = catalog.load_from_file(args.load)
        if puzzle is None:
            sys.exit(1)
    elif args.define:
        name = args.define[0]
        size, time_limit, sx, sy, ex, ey = (int(v) for v in args.define[1:])
        puzzle = catalog.define_preset(name, size, time_limit, sx, sy, ex, ey)
        puzzle.lighting_effects.extend(catalog.take_lighting())
    else:
        puzzle = catalog.generate_random(args.size, args.time_limit)

    print_puzzle(puzzle, show_solution=args.solution)


if __name__ == "__main__":
    main()
