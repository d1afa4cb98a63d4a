from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


class CellType(Enum):
    EMPTY = "empty"
    OBSTACLE = "obstacle"
    SOURCE = "source"
    DESTINATION = "destination"
    STRAIGHT = "straight"
    CORNER = "corner"

    @property
    def index(self) -> int:
        return list(CellType).index(self)

    @property
    def is_endpoint(self) -> bool:
        return self in (CellType.SOURCE, CellType.DESTINATION)

    @property
    def is_pipe(self) -> bool:
        return self in (CellType.STRAIGHT, CellType.CORNER)


class Direction(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def dx(self) -> int:
        return _DELTAS[self][0]

    @property
    def dy(self) -> int:
        return _DELTAS[self][1]

    def opposite(self) -> "Direction":
        return Direction((self + 2) % 4)

    def turn_right(self) -> "Direction":
        return Direction((self + 1) % 4)

    def turn_left(self) -> "Direction":
        return Direction((self + 3) % 4)


# y grows downward, so UP decrements the row index
_DELTAS = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


@dataclass
class Cell:
    type: CellType = CellType.EMPTY
    rotation: int = 0
    fixed: bool = False
    edge: Optional[int] = None
    solution_rotation: Optional[int] = None

    @property
    def on_path(self) -> bool:
        return self.solution_rotation is not None

    def copy(self) -> "Cell":
        return Cell(
            type=self.type,
            rotation=self.rotation,
            fixed=self.fixed,
            edge=self.edge,
            solution_rotation=self.solution_rotation,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type.value,
            "rotation": self.rotation,
            "fixed": self.fixed,
        }
        if self.edge is not None:
            data["edge"] = self.edge
        if self.solution_rotation is not None:
            data["solutionRotation"] = self.solution_rotation
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cell":
        return cls(
            type=CellType(data.get("type", "empty")),
            rotation=data.get("rotation", 0),
            fixed=data.get("fixed", False),
            edge=data.get("edge"),
            solution_rotation=data.get("solutionRotation"),
        )

    @classmethod
    def empty(cls, fixed: bool = False) -> "Cell":
        return cls(type=CellType.EMPTY, rotation=0, fixed=fixed)

    @classmethod
    def endpoint(cls, cell_type: CellType, edge: int) -> "Cell":
        return cls(type=cell_type, rotation=0, fixed=True, edge=edge)


@dataclass
class LightingEffect:
    """Decorative marker attached to a cell; the engine never reads it."""

    x: int
    y: int
    type: str = "fire"

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "type": self.type}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LightingEffect":
        return cls(x=data["x"], y=data["y"], type=data.get("type", "fire"))


@dataclass
class VisualSettings:
    """Style overrides handed through to the presentation layer."""

    energy_color: str = "#ff8800"
    pipe_color: str = "#8B7355"
    bg_color: str = "#1a1a2e"
    grid_line_color: str = "#8B7355"
    flow_speed: float = 3
    particle_count: int = 10
    ambient_particle_count: int = 30
    show_gears: bool = True
    show_steam: bool = True
    particles: List[Any] = field(default_factory=list)

    _KEYS = {
        "energy_color": "energyColor",
        "pipe_color": "pipeColor",
        "bg_color": "bgColor",
        "grid_line_color": "gridLineColor",
        "flow_speed": "flowSpeed",
        "particle_count": "particleCount",
        "ambient_particle_count": "ambientParticleCount",
        "show_gears": "showGears",
        "show_steam": "showSteam",
        "particles": "particles",
    }

    def override(self, data: Dict[str, Any]) -> "VisualSettings":
        """Return a copy with every field present in ``data`` replaced.

        Args:
            data: A ``visual`` block from a puzzle file (camelCase keys)

        Returns:
            VisualSettings: New settings; self is left untouched
        """
        values = {}
        for attr, key in self._KEYS.items():
            if data.get(key) is not None:
                values[attr] = data[key]
            else:
                values[attr] = getattr(self, attr)
        values["particles"] = list(values["particles"])
        return VisualSettings(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in self._KEYS.items()}


class Puzzle:
    def __init__(
        self,
        grid_size: int,
        source: Tuple[int, int],
        destination: Tuple[int, int],
        time_limit: int = 0,
        grid: Optional[List[List[Cell]]] = None,
    ):
        self.grid_size = grid_size
        self.time_limit = time_limit or 0
        self.source_x, self.source_y = source
        self.dest_x, self.dest_y = destination
        if grid is None:
            grid = [[Cell.empty() for _ in range(grid_size)] for _ in range(grid_size)]
        self.grid = grid
        self.lighting_effects: List[LightingEffect] = []
        self.name: Optional[str] = None
        self.description: str = ""
        self.visual: Optional[VisualSettings] = None

    @property
    def source(self) -> Tuple[int, int]:
        return (self.source_x, self.source_y)

    @property
    def destination(self) -> Tuple[int, int]:
        return (self.dest_x, self.dest_y)

    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    def get_cell(self, x: int, y: int) -> Cell:
        return self.grid[y][x]

    def set_cell(self, x: int, y: int, cell: Cell) -> None:
        self.grid[y][x] = cell

    def cells(self):
        for y, row in enumerate(self.grid):
            for x, cell in enumerate(row):
                yield (x, y), cell

    def find_cells_by_type(self, cell_type: CellType) -> List[Tuple[int, int]]:
        return [pos for pos, cell in self.cells() if cell.type == cell_type]

    def path_cells(self) -> List[Tuple[int, int]]:
        return [pos for pos, cell in self.cells() if cell.on_path]

    def copy(self) -> "Puzzle":
        new_puzzle = Puzzle(
            self.grid_size,
            self.source,
            self.destination,
            self.time_limit,
            [[cell.copy() for cell in row] for row in self.grid],
        )
        new_puzzle.lighting_effects = list(self.lighting_effects)
        new_puzzle.name = self.name
        new_puzzle.description = self.description
        new_puzzle.visual = self.visual
        return new_puzzle

    def to_array(self) -> np.ndarray:
        """Stack cell type indices and rotations into an (N, N, 2) array."""
        array = np.zeros((self.grid_size, self.grid_size, 2), dtype=int)
        for (x, y), cell in self.cells():
            array[y, x, 0] = cell.type.index
            array[y, x, 1] = cell.rotation
        return array

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "gridSize": self.grid_size,
            "timeLimit": self.time_limit,
            "sourceX": self.source_x,
            "sourceY": self.source_y,
            "destX": self.dest_x,
            "destY": self.dest_y,
            "grid": [[cell.to_dict() for cell in row] for row in self.grid],
            "lightingEffects": [effect.to_dict() for effect in self.lighting_effects],
            "name": self.name,
            "description": self.description,
        }
        if self.visual is not None:
            data["visual"] = self.visual.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Puzzle":
        puzzle = cls(
            data["gridSize"],
            (data["sourceX"], data["sourceY"]),
            (data["destX"], data["destY"]),
            data.get("timeLimit", 0),
            [[Cell.from_dict(cell) for cell in row] for row in data["grid"]],
        )
        puzzle.lighting_effects = [
            LightingEffect.from_dict(effect)
            for effect in data.get("lightingEffects", [])
        ]
        puzzle.name = data.get("name")
        puzzle.description = data.get("description", "")
        if "visual" in data:
            puzzle.visual = VisualSettings().override(data["visual"])
        return puzzle

    def __str__(self) -> str:
        result = []
        for row in self.grid:
            result.append("".join(_glyph(cell) for cell in row))
        return "\n".join(result)


_STRAIGHT_GLYPHS = {0: "─", 1: "│"}
_CORNER_GLYPHS = {0: "└", 1: "┌", 2: "┐", 3: "┘"}
_ENDPOINT_GLYPHS = {CellType.SOURCE: "S", CellType.DESTINATION: "D"}


def _glyph(cell: Cell) -> str:
    if cell.type == CellType.STRAIGHT:
        return _STRAIGHT_GLYPHS[cell.rotation % 2]
    if cell.type == CellType.CORNER:
        return _CORNER_GLYPHS[cell.rotation % 4]
    if cell.type.is_endpoint:
        return _ENDPOINT_GLYPHS[cell.type]
    if cell.type == CellType.OBSTACLE:
        return "#"
    return "."
