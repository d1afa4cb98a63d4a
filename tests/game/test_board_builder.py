"""
Tests for puzzle generation.
"""

import pytest

from circuit_routing.game import board_builder
from circuit_routing.game.board import CellType
from circuit_routing.game.board_builder import (PuzzleBuilder, PuzzleConfig,
                                                generate_puzzle_from_points,
                                                generate_random_puzzle,
                                                is_acceptable)
from circuit_routing.solver.oracle import is_solvable, is_solved


class TestGeneratePuzzleFromPoints:
    """Test the single-candidate factory."""

    def test_straight_route(self):
        """Aligned endpoints give a row of straights with solution rotation 0."""
        builder = PuzzleBuilder(seed=3)
        puzzle = builder.generate_puzzle_from_points(5, 0, 0, 2, 4, 2)

        assert puzzle.get_cell(0, 2).type == CellType.SOURCE
        assert puzzle.get_cell(0, 2).edge == 3
        assert puzzle.get_cell(4, 2).type == CellType.DESTINATION
        assert puzzle.get_cell(4, 2).edge == 1

        for x in (1, 2, 3):
            cell = puzzle.get_cell(x, 2)
            assert cell.type == CellType.STRAIGHT
            assert cell.solution_rotation == 0
            assert cell.rotation != 0
            assert not cell.fixed

        assert is_solvable(puzzle)

    def test_edge_override(self):
        puzzle = generate_puzzle_from_points(5, 0, 0, 2, 4, 2, source_edge=0, dest_edge=2, seed=1)

        assert puzzle.get_cell(0, 2).edge == 0
        assert puzzle.get_cell(4, 2).edge == 2

    def test_exactly_one_source_and_destination(self):
        puzzle = PuzzleBuilder(seed=11).generate_puzzle_from_points(6, 0, 0, 1, 5, 4)

        assert puzzle.find_cells_by_type(CellType.SOURCE) == [(0, 1)]
        assert puzzle.find_cells_by_type(CellType.DESTINATION) == [(5, 4)]

    def test_every_cell_filled_when_no_gaps(self):
        config = PuzzleConfig(empty_tile_chance=0)
        puzzle = PuzzleBuilder(config, seed=2).generate_puzzle_from_points(5, 0, 0, 2, 4, 2)

        assert not puzzle.find_cells_by_type(CellType.EMPTY)
        for (x, y), cell in puzzle.cells():
            if y != 2:
                assert cell.type.is_pipe
                assert cell.solution_rotation is None

    def test_only_gaps_off_route_when_always_empty(self):
        config = PuzzleConfig(empty_tile_chance=100)
        puzzle = PuzzleBuilder(config, seed=2).generate_puzzle_from_points(5, 0, 0, 2, 4, 2)

        for (x, y), cell in puzzle.cells():
            if y != 2:
                assert cell.type == CellType.EMPTY
                assert cell.fixed

    def test_time_limit_carried(self):
        puzzle = PuzzleBuilder(seed=0).generate_puzzle_from_points(5, 45, 0, 2, 4, 2)
        assert puzzle.time_limit == 45


class TestGenerateRandomPuzzle:
    """Test the retrying generator."""

    @pytest.mark.parametrize("seed", range(5))
    def test_returns_acceptable_puzzle(self, seed):
        builder = PuzzleBuilder(seed=seed)
        puzzle = builder.generate_random_puzzle(5)

        assert is_solvable(puzzle)
        assert not is_solved(puzzle)
        assert 1 <= builder.last_attempts <= 100

    @pytest.mark.parametrize("seed", range(5))
    def test_endpoints_on_opposite_sides(self, seed):
        puzzle = PuzzleBuilder(seed=seed).generate_random_puzzle(6)
        (sx, sy), (dx, dy) = puzzle.source, puzzle.destination

        assert {sx, dx} == {0, 5} or {sy, dy} == {0, 5}
        assert puzzle.source != puzzle.destination

    def test_deterministic_with_seed(self):
        first = generate_random_puzzle(6, seed=42)
        second = generate_random_puzzle(6, seed=42)

        assert str(first) == str(second)
        assert first.to_dict() == second.to_dict()

    def test_defaults_from_config(self):
        config = PuzzleConfig(grid_size=5, time_limit=30)
        puzzle = PuzzleBuilder(config, seed=4).generate_random_puzzle()

        assert puzzle.grid_size == 5
        assert puzzle.time_limit == 30

    def test_returns_last_candidate_when_exhausted(self, monkeypatch):
        candidates = []

        def reject(puzzle):
            candidates.append(puzzle)
            return False

        monkeypatch.setattr(board_builder, "is_acceptable", reject)
        builder = PuzzleBuilder(PuzzleConfig(max_attempts=5), seed=0)
        puzzle = builder.generate_random_puzzle(5)

        assert len(candidates) == 5
        assert builder.last_attempts == 5
        assert puzzle is candidates[-1]

    def test_stops_at_first_acceptable(self, monkeypatch):
        calls = []

        def accept_third(puzzle):
            calls.append(puzzle)
            return len(calls) == 3

        monkeypatch.setattr(board_builder, "is_acceptable", accept_third)
        builder = PuzzleBuilder(seed=0)
        puzzle = builder.generate_random_puzzle(5)

        assert builder.last_attempts == 3
        assert puzzle is calls[-1]


class TestIsAcceptable:
    def test_scrambled_corridor(self, broken_corridor_puzzle):
        assert is_acceptable(broken_corridor_puzzle)

    def test_already_solved_is_rejected(self, corridor_puzzle):
        assert not is_acceptable(corridor_puzzle)

    def test_unsolvable_is_rejected(self, corridor_puzzle):
        corridor_puzzle.get_cell(2, 2).solution_rotation = 1
        corridor_puzzle.get_cell(2, 2).rotation = 3
        assert not is_acceptable(corridor_puzzle)
