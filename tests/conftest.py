import pytest

from circuit_routing.game.board import Cell, CellType, Puzzle


def make_corridor_puzzle(rotations=(0, 0, 0), time_limit=0):
    """5x5 grid with source (0,2) facing left and destination (4,2) facing right.

    The three cells between them are straights with the given rotations and
    carry solution rotation 0; every other cell is a fixed gap.
    """
    grid = [[Cell.empty(fixed=True) for _ in range(5)] for _ in range(5)]
    grid[2][0] = Cell.endpoint(CellType.SOURCE, 3)
    grid[2][4] = Cell.endpoint(CellType.DESTINATION, 1)
    for x, rotation in zip((1, 2, 3), rotations):
        grid[2][x] = Cell(
            type=CellType.STRAIGHT, rotation=rotation, fixed=False, solution_rotation=0
        )
    return Puzzle(5, (0, 2), (4, 2), time_limit, grid)


@pytest.fixture
def corridor_puzzle():
    return make_corridor_puzzle()


@pytest.fixture
def broken_corridor_puzzle():
    return make_corridor_puzzle((0, 1, 0))
