"""
Random-walk path carving between two grid positions.
"""

import random
from typing import List, Optional, Set, Tuple

Position = Tuple[int, int]

# All forward moves share one priority, so the pick is uniform among them
FORWARD_PRIORITY = 3


class PathGenerator:
    """Carves a source-to-destination route with a biased random walk."""

    def __init__(self, rng: Optional[random.Random] = None, max_fanout: int = 2):
        """Initialize path generator.

        Args:
            rng: Random source; a fresh unseeded one is used when omitted
            max_fanout: How many of the sorted candidate moves are eligible
        """
        self.rng = rng or random.Random()
        self.max_fanout = max_fanout
        self.last_steps = 0
        self.used_fallback = False

    def generate(self, grid_size: int, start: Position, end: Position) -> List[Position]:
        """Generate an ordered path from start to end inclusive.

        Only moves that shrink the distance to the target are candidates.
        Dead ends pop the path; if the walk runs out of its 2*N*N step
        budget, a straight x-then-y correction finishes the path.

        Args:
            grid_size: Side length of the square grid
            start: Starting (x, y)
            end: Target (x, y)

        Returns:
            List of (x, y) positions, first is start and last is end
        """
        path = [start]
        visited: Set[Position] = {start}
        current_x, current_y = start
        end_x, end_y = end

        max_steps = grid_size * grid_size * 2
        steps = 0

        while (current_x, current_y) != end and steps < max_steps:
            steps += 1

            moves = self._forward_moves(
                grid_size, current_x, current_y, end_x, end_y, visited
            )

            if not moves:
                if len(path) > 1:
                    path.pop()
                    current_x, current_y = path[-1]
                    continue
                break

            moves.sort(key=lambda move: move[2], reverse=True)
            move = moves[self.rng.randrange(min(self.max_fanout, len(moves)))]

            current_x, current_y = move[0], move[1]
            visited.add((current_x, current_y))
            path.append((current_x, current_y))

        self.last_steps = steps
        self.used_fallback = (current_x, current_y) != end

        if self.used_fallback:
            while current_x != end_x:
                current_x += 1 if end_x > current_x else -1
                path.append((current_x, current_y))
            while current_y != end_y:
                current_y += 1 if end_y > current_y else -1
                path.append((current_x, current_y))

        return path

    @staticmethod
    def _forward_moves(
        grid_size: int,
        x: int,
        y: int,
        end_x: int,
        end_y: int,
        visited: Set[Position],
    ) -> List[Tuple[int, int, int]]:
        dx = end_x - x
        dy = end_y - y
        candidates = []

        if dx > 0 and x < grid_size - 1:
            candidates.append((x + 1, y))
        if dx < 0 and x > 0:
            candidates.append((x - 1, y))
        if dy > 0 and y < grid_size - 1:
            candidates.append((x, y + 1))
        if dy < 0 and y > 0:
            candidates.append((x, y - 1))

        return [
            (nx, ny, FORWARD_PRIORITY)
            for nx, ny in candidates
            if (nx, ny) not in visited
        ]


def generate_path(
    grid_size: int,
    start: Position,
    end: Position,
    rng: Optional[random.Random] = None,
) -> List[Position]:
    return PathGenerator(rng).generate(grid_size, start, end)
