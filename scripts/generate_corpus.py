#!/usr/bin/env python3
"""
Generate a corpus of seeded circuit puzzles and record how each one turned out.

Useful for measuring how often the retry budget runs out for a grid size
and empty-tile chance.
"""

import argparse
import csv
import random
import sys
import time
from pathlib import Path
from typing import Dict

import numpy as np
from tqdm import tqdm

# Add parent directory to path to import circuit_routing
sys.path.insert(0, str(Path(__file__).parent.parent))

from circuit_routing.game.board import CellType
from circuit_routing.game.board_builder import (PuzzleBuilder, PuzzleConfig,
                                                is_acceptable)


def generate_random_config(rng: random.Random) -> PuzzleConfig:
    """Pick a grid size and gap density for one corpus entry."""
    grid_size = rng.choices([4, 5, 6, 7, 8, 9], weights=[10, 25, 25, 20, 12, 8])[0]
    empty_tile_chance = rng.choice([0, 10, 20, 30])
    return PuzzleConfig(grid_size=grid_size, empty_tile_chance=empty_tile_chance)


def generate_puzzle_row(seed: int, config: PuzzleConfig) -> Dict:
    """Generate a single puzzle row."""
    builder = PuzzleBuilder(config, seed=seed)
    puzzle = builder.generate_random_puzzle()

    path_cells = [puzzle.get_cell(x, y) for x, y in puzzle.path_cells()]
    corners = sum(1 for cell in path_cells if cell.type == CellType.CORNER)

    return {
        "seed": seed,
        "grid_size": config.grid_size,
        "empty_tile_chance": config.empty_tile_chance,
        "source": f"{puzzle.source_x},{puzzle.source_y}",
        "destination": f"{puzzle.dest_x},{puzzle.dest_y}",
        "path_length": len(path_cells),
        "corners": corners,
        "attempts": builder.last_attempts,
        "acceptable": is_acceptable(puzzle),
    }


def main():
    parser = argparse.ArgumentParser(description="Generate a seeded puzzle corpus")
    parser.add_argument(
        "--output", type=str, default="circuit_corpus.csv", help="Output CSV file"
    )
    parser.add_argument(
        "--count", type=int, default=1000, help="Number of puzzles to generate"
    )
    parser.add_argument("--start-seed", type=int, default=1, help="Starting seed value")
    parser.add_argument(
        "--config-seed", type=int, default=None, help="Seed for config randomization"
    )
    parser.add_argument(
        "--grid-size",
        type=int,
        default=None,
        help="Use one grid size instead of a random mix",
    )

    args = parser.parse_args()

    config_rng = random.Random(args.config_seed)

    fieldnames = [
        "seed",
        "grid_size",
        "empty_tile_chance",
        "source",
        "destination",
        "path_length",
        "corners",
        "attempts",
        "acceptable",
    ]

    start_time = time.time()
    attempts = []
    acceptable_count = 0

    with open(args.output, "w", newline="") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
        writer.writeheader()

        with tqdm(total=args.count, desc="Generating", unit="puzzle", ncols=100) as pbar:
            for i in range(args.count):
                config = generate_random_config(config_rng)
                if args.grid_size is not None:
                    config.grid_size = args.grid_size

                row = generate_puzzle_row(args.start_seed + i, config)
                writer.writerow(row)

                attempts.append(row["attempts"])
                if row["acceptable"]:
                    acceptable_count += 1

                pbar.update(1)
                pbar.set_postfix(
                    accepted=f"{acceptable_count / (i + 1) * 100:.1f}%",
                    attempts=f"{np.mean(attempts):.1f}",
                )

    elapsed = time.time() - start_time
    attempts = np.array(attempts)

    print(f"\n=== Generation Complete ===")
    print(f"Generated: {args.count:,} puzzles in {elapsed:.1f}s")
    if args.count:
        print(f"Acceptable: {acceptable_count:,} ({acceptable_count / args.count * 100:.1f}%)")
        print(
            f"Attempts: mean {attempts.mean():.1f}, median {np.median(attempts):.0f}, "
            f"max {attempts.max()}"
        )
    print(f"Output: {args.output}")


if __name__ == "__main__":
    main()
