import random

import pytest

from circuit_routing.game.board import Cell, CellType, Puzzle
from circuit_routing.game.ports import ports
from circuit_routing.game.scrambler import Scrambler

PATH = [(0, 2), (1, 2), (2, 2), (3, 2), (4, 2)]


def make_unfilled_puzzle():
    puzzle = Puzzle(5, (0, 2), (4, 2))
    puzzle.set_cell(0, 2, Cell.endpoint(CellType.SOURCE, 3))
    puzzle.set_cell(4, 2, Cell.endpoint(CellType.DESTINATION, 1))
    for x, y in PATH[1:-1]:
        puzzle.set_cell(x, y, Cell(CellType.STRAIGHT, rotation=0, solution_rotation=0))
    return puzzle


class TestFillDistractors:
    def test_full_empty_chance_leaves_fixed_gaps(self):
        puzzle = make_unfilled_puzzle()
        Scrambler(100, random.Random(0)).fill_distractors(puzzle, set(PATH))

        for (x, y), cell in puzzle.cells():
            if (x, y) in PATH:
                continue
            assert cell.type == CellType.EMPTY
            assert cell.fixed is True

    def test_zero_empty_chance_places_rotatable_pipes(self):
        puzzle = make_unfilled_puzzle()
        Scrambler(0, random.Random(0)).fill_distractors(puzzle, set(PATH))

        for (x, y), cell in puzzle.cells():
            if (x, y) in PATH:
                continue
            assert cell.type in (CellType.STRAIGHT, CellType.CORNER)
            assert cell.fixed is False
            assert cell.solution_rotation is None
            assert 0 <= cell.rotation <= 3

    def test_path_and_endpoints_untouched(self):
        puzzle = make_unfilled_puzzle()
        Scrambler(50, random.Random(3)).fill_distractors(puzzle, set(PATH))

        assert puzzle.get_cell(0, 2).type == CellType.SOURCE
        assert puzzle.get_cell(4, 2).type == CellType.DESTINATION
        for x, y in PATH[1:-1]:
            assert puzzle.get_cell(x, y).solution_rotation == 0

    def test_endpoint_off_path_is_kept(self):
        puzzle = make_unfilled_puzzle()
        Scrambler(100, random.Random(0)).fill_distractors(puzzle, set(PATH[1:-1]))

        assert puzzle.get_cell(0, 2).type == CellType.SOURCE
        assert puzzle.get_cell(4, 2).type == CellType.DESTINATION


class TestScramblePath:
    @pytest.mark.parametrize("seed", range(20))
    def test_path_cells_leave_solution_rotation(self, seed):
        puzzle = make_unfilled_puzzle()
        Scrambler(20, random.Random(seed)).scramble_path(puzzle, PATH[1:-1])

        for x, y in PATH[1:-1]:
            cell = puzzle.get_cell(x, y)
            assert cell.rotation != cell.solution_rotation
            assert cell.rotation in (1, 2, 3)

    def test_fixed_and_unmarked_cells_are_skipped(self):
        puzzle = make_unfilled_puzzle()
        puzzle.set_cell(1, 2, Cell(CellType.STRAIGHT, rotation=0, fixed=True, solution_rotation=0))
        puzzle.set_cell(2, 2, Cell(CellType.CORNER, rotation=2))

        Scrambler(20, random.Random(0)).scramble_path(puzzle, PATH[1:-1])

        assert puzzle.get_cell(1, 2).rotation == 0
        assert puzzle.get_cell(2, 2).rotation == 2

    def test_scrambled_straight_can_still_line_up(self):
        # Rotation 2 is a "wrong" draw for a straight solved at 0, yet it
        # exposes the same ports, so the cell is functionally in place.
        rotations = []
        for seed in range(50):
            cell = Cell(CellType.STRAIGHT, rotation=0, solution_rotation=0)
            puzzle = Puzzle(3, (0, 1), (2, 1))
            puzzle.set_cell(1, 1, cell)
            Scrambler(0, random.Random(seed)).scramble_path(puzzle, [(1, 1)])
            rotations.append(cell.rotation)

        assert 2 in rotations
        solved = Cell(CellType.STRAIGHT, rotation=0)
        scrambled = Cell(CellType.STRAIGHT, rotation=2)
        assert ports(scrambled) == ports(solved)
