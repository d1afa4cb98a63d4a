import pytest

from circuit_routing.game.board import Cell, CellType, Direction
from circuit_routing.game.pipe_classifier import classify_path, classify_segment
from circuit_routing.game.ports import ports


class TestClassifySegment:
    def test_horizontal_run_is_straight(self):
        assert classify_segment((0, 0), (1, 0), (2, 0)) == (CellType.STRAIGHT, 0)
        assert classify_segment((2, 0), (1, 0), (0, 0)) == (CellType.STRAIGHT, 0)

    def test_vertical_run_is_straight(self):
        assert classify_segment((0, 0), (0, 1), (0, 2)) == (CellType.STRAIGHT, 1)
        assert classify_segment((0, 2), (0, 1), (0, 0)) == (CellType.STRAIGHT, 1)

    @pytest.mark.parametrize(
        "prev,curr,nxt,rotation",
        [
            ((0, 0), (1, 0), (1, 1), 1),  # right then down
            ((0, 1), (1, 1), (1, 0), 0),  # right then up
            ((0, 0), (0, 1), (1, 1), 3),  # down then right
            ((1, 0), (1, 1), (0, 1), 2),  # down then left
            ((1, 0), (0, 0), (0, 1), 2),  # left then down
            ((1, 1), (0, 1), (0, 0), 3),  # left then up
            ((0, 1), (0, 0), (1, 0), 0),  # up then right
            ((1, 1), (1, 0), (0, 0), 1),  # up then left
        ],
    )
    def test_turn_table(self, prev, curr, nxt, rotation):
        assert classify_segment(prev, curr, nxt) == (CellType.CORNER, rotation)

    def test_degenerate_input_falls_back_to_straight(self):
        assert classify_segment((1, 1), (1, 1), (1, 1)) == (CellType.STRAIGHT, 0)

    def test_turn_table_does_not_open_the_entry_side(self):
        # Travelling right then down enters from the left, but the table's
        # rotation opens right and down. The generator keeps this mapping;
        # the factory's retry loop filters out candidates it leaves unsolvable.
        cell_type, rotation = classify_segment((0, 0), (1, 0), (1, 1))
        opened = ports(Cell(cell_type, rotation=rotation))

        assert opened == {Direction.RIGHT, Direction.DOWN}
        assert Direction.LEFT not in opened


class TestClassifyPath:
    def test_skips_endpoints(self):
        path = [(0, 0), (1, 0), (1, 1), (1, 2)]
        pieces = classify_path(path)

        assert [position for position, _, _ in pieces] == [(1, 0), (1, 1)]
        assert pieces[0][1:] == (CellType.CORNER, 1)
        assert pieces[1][1:] == (CellType.STRAIGHT, 1)

    def test_two_cell_path_has_no_pieces(self):
        assert classify_path([(0, 0), (1, 0)]) == []
