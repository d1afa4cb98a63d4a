import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from ..solver.oracle import FlowEdge, energized_cells, is_solved, trace_flow
from ..util.logger import get_logger
from .board import Puzzle


class SessionResult(Enum):
    ONGOING = "ongoing"
    SOLVED = "solved"
    TIMEOUT = "timeout"
    ABANDONED = "abandoned"


class SessionEvent:
    def __init__(self, event_type: str, data: Dict[str, Any], move: int, elapsed: float):
        self.event_type = event_type
        self.data = data
        self.move = move
        self.elapsed = elapsed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "data": self.data,
            "move": self.move,
            "elapsed": self.elapsed,
        }


@dataclass
class SessionOutcome:
    """What the host records once a session ends."""

    success: bool
    elapsed_seconds: int
    moves: int


class PlaySession:
    """One play-through of a puzzle.

    Elapsed time is fed in by the caller through ``tick`` so the session
    never reads a wall clock.
    """

    def __init__(self, puzzle: Puzzle, session_id: Optional[str] = None):
        self.puzzle = puzzle
        self.moves = 0
        self.elapsed = 0.0
        self.result = SessionResult.ONGOING
        self.events: List[SessionEvent] = []
        self.solved_callbacks: List[Callable[["PlaySession"], None]] = []
        self.logger = get_logger("session", id=session_id or puzzle.name or "")

    @property
    def time_limit(self) -> int:
        return self.puzzle.time_limit

    @property
    def time_remaining(self) -> Optional[int]:
        if self.time_limit <= 0:
            return None
        return max(0, self.time_limit - math.floor(self.elapsed))

    @property
    def is_over(self) -> bool:
        return self.result != SessionResult.ONGOING

    def add_solved_callback(self, callback: Callable[["PlaySession"], None]) -> None:
        self.solved_callbacks.append(callback)

    def _emit_event(self, event_type: str, data: Dict[str, Any]) -> None:
        self.events.append(SessionEvent(event_type, data, self.moves, self.elapsed))

    def can_rotate(self, x: int, y: int) -> bool:
        if self.is_over or not self.puzzle.is_valid_position(x, y):
            return False
        return not self.puzzle.get_cell(x, y).fixed

    def rotate(self, x: int, y: int) -> bool:
        """Turn a pipe a quarter clockwise.

        Returns:
            bool: False when the cell is fixed, off the grid, or the session is over
        """
        if not self.can_rotate(x, y):
            self._emit_event("rotate_rejected", {"x": x, "y": y})
            return False

        cell = self.puzzle.get_cell(x, y)
        cell.rotation = (cell.rotation + 1) % 4
        self.moves += 1
        self._emit_event("rotate", {"x": x, "y": y, "rotation": cell.rotation})

        self.check_solution()
        return True

    def check_solution(self) -> bool:
        if self.is_over:
            return self.result == SessionResult.SOLVED

        if is_solved(self.puzzle):
            self.result = SessionResult.SOLVED
            self._emit_event("solved", {"moves": self.moves})
            self.logger.info(
                f"Solved in {math.floor(self.elapsed)}s with {self.moves} moves"
            )
            for callback in self.solved_callbacks:
                callback(self)
            return True
        return False

    def tick(self, seconds: float) -> SessionResult:
        """Advance the session clock and apply the time limit."""
        if self.is_over:
            return self.result

        self.elapsed += seconds
        if self.time_limit > 0 and self.time_remaining == 0:
            self.result = SessionResult.TIMEOUT
            self._emit_event("timeout", {"elapsed": math.floor(self.elapsed)})
            self.logger.info(f"Timed out after {self.moves} moves")
        return self.result

    def abandon(self) -> None:
        if self.is_over:
            return
        self.result = SessionResult.ABANDONED
        self._emit_event("abandoned", {"elapsed": math.floor(self.elapsed)})

    def outcome(self) -> SessionOutcome:
        return SessionOutcome(
            success=self.result == SessionResult.SOLVED,
            elapsed_seconds=math.floor(self.elapsed),
            moves=self.moves,
        )

    def energized_edges(self) -> List[FlowEdge]:
        return trace_flow(self.puzzle)

    def energized_cells(self) -> Set[Tuple[int, int]]:
        return energized_cells(self.puzzle)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "result": self.result.value,
            "moves": self.moves,
            "elapsed": math.floor(self.elapsed),
            "time_remaining": self.time_remaining,
            "energized_cells": len(self.energized_cells()),
        }
