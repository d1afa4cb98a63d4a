import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from ..util.logger import get_logger
from .board import Cell, CellType, LightingEffect, Puzzle
from .board_builder import PuzzleBuilder, PuzzleConfig


class CatalogError(ValueError):
    """Raised when a puzzle definition record cannot be parsed."""


@dataclass
class Endpoint:
    x: int
    y: int
    edge: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Endpoint":
        try:
            edge = data.get("edge")
            return cls(
                x=int(data["x"]),
                y=int(data["y"]),
                edge=None if edge is None else int(edge),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Invalid endpoint {data!r}") from e

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"x": self.x, "y": self.y}
        if self.edge is not None:
            data["edge"] = self.edge
        return data


@dataclass
class PuzzleDefinition:
    puzzle_id: str
    name: str
    description: str
    grid_size: int
    time_limit: int
    source: Endpoint
    destination: Endpoint
    lighting: List[LightingEffect] = field(default_factory=list)
    visual: Optional[Dict[str, Any]] = None
    grid: Optional[List[List[Cell]]] = None

    @property
    def is_manual(self) -> bool:
        return self.grid is not None

    def validate(self) -> List[str]:
        errors = []

        if self.grid_size <= 0:
            errors.append("Grid size must be positive")

        for label, endpoint in (("Source", self.source), ("Destination", self.destination)):
            if not (0 <= endpoint.x < self.grid_size and 0 <= endpoint.y < self.grid_size):
                errors.append(f"{label} ({endpoint.x}, {endpoint.y}) is outside the grid")
            if endpoint.edge is not None and endpoint.edge not in (0, 1, 2, 3):
                errors.append(f"{label} edge {endpoint.edge} must be 0-3")

        if (self.source.x, self.source.y) == (self.destination.x, self.destination.y):
            errors.append("Source and destination share a cell")

        for effect in self.lighting:
            if not (0 <= effect.x < self.grid_size and 0 <= effect.y < self.grid_size):
                errors.append(f"Lighting at ({effect.x}, {effect.y}) is outside the grid")

        return errors

    @classmethod
    def from_dict(cls, puzzle_id: str, data: Dict[str, Any]) -> "PuzzleDefinition":
        for key in ("gridSize", "source", "destination"):
            if key not in data:
                raise CatalogError(f"Puzzle '{puzzle_id}' is missing '{key}'")

        grid = None
        if isinstance(data.get("grid"), list):
            # A row that is not a list stays all gaps so later rows keep their index
            grid = [
                [parse_cell(cell_data) for cell_data in row] if isinstance(row, list) else []
                for row in data["grid"]
            ]

        grid_size = int(data["gridSize"])
        source = Endpoint.from_dict(data["source"])
        destination = Endpoint.from_dict(data["destination"])
        for endpoint in (source, destination):
            if not (0 <= endpoint.x < grid_size and 0 <= endpoint.y < grid_size):
                raise CatalogError(
                    f"Puzzle '{puzzle_id}' endpoint ({endpoint.x}, {endpoint.y}) "
                    f"is outside a {grid_size}x{grid_size} grid"
                )

        return cls(
            puzzle_id=puzzle_id,
            name=data.get("name") or puzzle_id,
            description=data.get("description", ""),
            grid_size=grid_size,
            time_limit=data.get("timeLimit") or 0,
            source=source,
            destination=destination,
            lighting=[
                LightingEffect.from_dict(effect) for effect in data.get("lighting", [])
            ],
            visual=data.get("visual"),
            grid=grid,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "gridSize": self.grid_size,
            "timeLimit": self.time_limit,
            "source": self.source.to_dict(),
            "destination": self.destination.to_dict(),
            "lighting": [effect.to_dict() for effect in self.lighting],
        }
        if self.visual is not None:
            data["visual"] = self.visual
        if self.grid is not None:
            data["grid"] = [
                [{"type": c.type.value, "rotation": c.rotation, "fixed": c.fixed} for c in row]
                for row in self.grid
            ]
        return data


def parse_cell(cell_data: Union[str, Dict[str, Any], None]) -> Cell:
    """Normalise the file shorthand for a cell.

    A bare string names the type; an object carries type, rotation and
    fixed. Gaps and obstacles are fixed unless the object says otherwise.
    Endpoints cannot appear in a grid; they come only from the declared
    source and destination.
    """
    if isinstance(cell_data, str):
        cell_type = _parse_type(cell_data)
        return Cell(
            type=cell_type,
            rotation=0,
            fixed=cell_type in (CellType.EMPTY, CellType.OBSTACLE),
        )

    if isinstance(cell_data, dict):
        cell_type = _parse_type(cell_data.get("type") or "empty")
        fixed = cell_data.get("fixed")
        if fixed is None:
            fixed = cell_type in (CellType.EMPTY, CellType.OBSTACLE)
        return Cell(
            type=cell_type,
            rotation=_parse_rotation(cell_data.get("rotation")),
            fixed=bool(fixed),
        )

    return Cell.empty(fixed=True)


def _parse_type(name: str) -> CellType:
    try:
        cell_type = CellType(str(name).lower())
    except ValueError as e:
        raise CatalogError(f"Unknown cell type '{name}'") from e
    if cell_type.is_endpoint:
        raise CatalogError(f"Grid cell cannot be a {cell_type.value}")
    return cell_type


def _parse_rotation(value: Any) -> int:
    if value is None:
        return 0
    try:
        rotation = int(value)
    except (TypeError, ValueError) as e:
        raise CatalogError(f"Invalid rotation {value!r}") from e
    if not 0 <= rotation <= 3:
        raise CatalogError(f"Rotation {rotation} must be 0-3")
    return rotation


class PuzzleCatalog:
    """Puzzle definitions keyed by identifier, plus runtime presets.

    Built once at startup and handed to whatever needs to look puzzles up.
    """

    def __init__(
        self,
        config: Optional[PuzzleConfig] = None,
        builder: Optional[PuzzleBuilder] = None,
    ):
        self.config = config or PuzzleConfig()
        self.builder = builder or PuzzleBuilder(self.config)
        self.definitions: Dict[str, PuzzleDefinition] = {}
        self.presets: Dict[str, Puzzle] = {}
        self.pending_lighting: List[LightingEffect] = []
        self.logger = get_logger("catalog")

    def add_definition(self, definition: PuzzleDefinition) -> None:
        self.definitions[definition.puzzle_id] = definition

    def remove_definition(self, puzzle_id: str) -> bool:
        if puzzle_id in self.definitions:
            del self.definitions[puzzle_id]
            return True
        return False

    def get_definition(self, puzzle_id: str) -> Optional[PuzzleDefinition]:
        return self.definitions.get(puzzle_id)

    def ids(self) -> List[str]:
        return list(self.definitions)

    def validate_all(self) -> Dict[str, List[str]]:
        validation_results = {}
        for puzzle_id, definition in self.definitions.items():
            errors = definition.validate()
            if errors:
                validation_results[puzzle_id] = errors
        return validation_results

    def add_lighting(self, x: int, y: int, effect_type: str = "fire") -> None:
        """Queue a lighting marker for the next puzzle handed out."""
        self.pending_lighting.append(LightingEffect(x, y, effect_type))

    def take_lighting(self) -> List[LightingEffect]:
        effects = self.pending_lighting
        self.pending_lighting = []
        return effects

    def load_from_file(self, puzzle_id: str) -> Optional[Puzzle]:
        """Build a playable puzzle from a catalog entry.

        Args:
            puzzle_id: Catalog key

        Returns:
            Puzzle, or None when the id is not in the catalog
        """
        definition = self.definitions.get(puzzle_id)
        if definition is None:
            self.logger.error(f"Puzzle '{puzzle_id}' not found in catalog")
            return None

        self.logger.info(f"Loading puzzle: {definition.name}")

        if definition.is_manual:
            puzzle = self.load_manual_puzzle(definition)
        else:
            puzzle = self.builder.generate_puzzle_from_points(
                definition.grid_size,
                definition.time_limit,
                definition.source.x,
                definition.source.y,
                definition.destination.x,
                definition.destination.y,
                definition.source.edge,
                definition.destination.edge,
            )
            puzzle.lighting_effects = list(definition.lighting)
            puzzle.name = definition.name
            puzzle.description = definition.description
            puzzle.visual = self.config.default_visual.override(definition.visual or {})

        puzzle.lighting_effects.extend(self.take_lighting())
        return puzzle

    def load_manual_puzzle(self, definition: PuzzleDefinition) -> Puzzle:
        """Lay out a hand-authored grid.

        Cells the definition leaves out stay as fixed gaps. The endpoints
        always overwrite whatever the grid put at their positions.
        """
        size = definition.grid_size
        grid = [[Cell.empty(fixed=True) for _ in range(size)] for _ in range(size)]

        rows = definition.grid or []
        for y, row in enumerate(rows[:size]):
            for x, cell in enumerate(row[:size]):
                grid[y][x] = cell.copy()

        source, destination = definition.source, definition.destination
        grid[source.y][source.x] = Cell.endpoint(
            CellType.SOURCE, source.edge if source.edge is not None else 0
        )
        grid[destination.y][destination.x] = Cell.endpoint(
            CellType.DESTINATION, destination.edge if destination.edge is not None else 0
        )

        puzzle = Puzzle(
            size,
            (source.x, source.y),
            (destination.x, destination.y),
            definition.time_limit,
            grid,
        )
        puzzle.lighting_effects = list(definition.lighting)
        puzzle.name = definition.name or "Manual Puzzle"
        puzzle.description = definition.description
        puzzle.visual = self.config.default_visual.override(definition.visual or {})
        return puzzle

    def define_preset(
        self,
        name: str,
        grid_size: int,
        time_limit: int,
        source_x: int,
        source_y: int,
        dest_x: int,
        dest_y: int,
    ) -> Puzzle:
        puzzle = self.builder.generate_puzzle_from_points(
            grid_size, time_limit, source_x, source_y, dest_x, dest_y
        )
        puzzle.name = name
        self.presets[name] = puzzle
        return puzzle

    def get_preset(self, name: str) -> Optional[Puzzle]:
        return self.presets.get(name)

    def generate_random(self, grid_size: Optional[int] = None, time_limit: int = 0) -> Puzzle:
        puzzle = self.builder.generate_random_puzzle(grid_size, time_limit)
        puzzle.lighting_effects = self.take_lighting()
        return puzzle

    def to_dict(self) -> Dict[str, Any]:
        return {
            puzzle_id: definition.to_dict()
            for puzzle_id, definition in self.definitions.items()
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        config: Optional[PuzzleConfig] = None,
        builder: Optional[PuzzleBuilder] = None,
    ) -> "PuzzleCatalog":
        catalog = cls(config, builder)
        for puzzle_id, record in data.items():
            catalog.add_definition(PuzzleDefinition.from_dict(puzzle_id, record))
        return catalog

    def load_json(self, filename: str) -> int:
        """Merge the records of a JSON file into this catalog.

        The file holds either an object of records keyed by id, or a single
        record whose id is the file name without extension.
        """
        with open(filename, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise CatalogError(f"{filename} does not hold an object of puzzles")

        if "gridSize" in data:
            puzzle_id = os.path.splitext(os.path.basename(filename))[0]
            data = {puzzle_id: data}

        for puzzle_id, record in data.items():
            if not isinstance(record, dict):
                raise CatalogError(f"Puzzle '{puzzle_id}' is not an object")
            self.add_definition(PuzzleDefinition.from_dict(puzzle_id, record))
        return len(data)

    @classmethod
    def load_from_json(
        cls,
        filename: str,
        config: Optional[PuzzleConfig] = None,
        builder: Optional[PuzzleBuilder] = None,
    ) -> "PuzzleCatalog":
        catalog = cls(config, builder)
        count = catalog.load_json(filename)
        catalog.logger.info(f"Circuit puzzles loaded: {count} puzzles")
        return catalog

    @classmethod
    def load_from_directory(
        cls,
        directory: str,
        config: Optional[PuzzleConfig] = None,
        builder: Optional[PuzzleBuilder] = None,
    ) -> "PuzzleCatalog":
        catalog = cls(config, builder)

        for filename in sorted(os.listdir(directory)):
            if filename.endswith(".json"):
                filepath = os.path.join(directory, filename)
                try:
                    catalog.load_json(filepath)
                except (OSError, ValueError) as e:
                    catalog.logger.warning(
                        f"Could not load puzzles from {filename}: {e}"
                    )

        catalog.logger.info(f"Circuit puzzles loaded: {len(catalog)} puzzles")
        return catalog

    def save_to_file(self, filename: str) -> None:
        with open(filename, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def __contains__(self, puzzle_id: str) -> bool:
        return puzzle_id in self.definitions

    def __len__(self) -> int:
        return len(self.definitions)

    def __iter__(self) -> Iterator[PuzzleDefinition]:
        return iter(self.definitions.values())

    def __getitem__(self, puzzle_id: str) -> PuzzleDefinition:
        return self.definitions[puzzle_id]
