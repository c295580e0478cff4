"""Core domain models used by game logic."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

BOARD_SIZE = 10


class CellStatus(StrEnum):
    """Status of a single grid cell."""

    EMPTY = "empty"
    SHIP = "ship"
    HIT = "hit"
    MISS = "miss"
    SUNK = "sunk"


OPEN_STATUSES: frozenset[CellStatus] = frozenset({CellStatus.EMPTY, CellStatus.SHIP})
FIRED_STATUSES: frozenset[CellStatus] = frozenset(
    {CellStatus.HIT, CellStatus.MISS, CellStatus.SUNK}
)


class Orientation(StrEnum):
    """Ship orientation."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Difficulty(StrEnum):
    """Computer opponent difficulty tier."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Phase(StrEnum):
    """Match lifecycle phase."""

    SETUP = "setup"
    PLAYING = "playing"
    GAMEOVER = "gameover"


class Side(StrEnum):
    """Match participant."""

    HUMAN = "human"
    AI = "ai"

    @property
    def opponent(self) -> Side:
        return Side.AI if self is Side.HUMAN else Side.HUMAN


@dataclass(frozen=True, slots=True)
class Coord:
    """Board coordinate."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class ShipConfig:
    """Ship template from the shared catalog."""

    id: str
    name: str
    size: int


SHIPS: tuple[ShipConfig, ...] = (
    ShipConfig("carrier", "Carrier", 5),
    ShipConfig("battleship", "Battleship", 4),
    ShipConfig("cruiser", "Cruiser", 3),
    ShipConfig("submarine", "Submarine", 3),
    ShipConfig("destroyer", "Destroyer", 2),
)


@dataclass(frozen=True, slots=True)
class PlacedShip:
    """Deployed ship with its origin, orientation and damage counter."""

    id: str
    name: str
    size: int
    x: int
    y: int
    orientation: Orientation
    hits: int = 0

    @classmethod
    def from_config(
        cls, config: ShipConfig, x: int, y: int, orientation: Orientation
    ) -> PlacedShip:
        return cls(
            id=config.id,
            name=config.name,
            size=config.size,
            x=x,
            y=y,
            orientation=orientation,
        )

    @property
    def sunk(self) -> bool:
        return self.hits == self.size

    def coordinates(self) -> list[Coord]:
        """Cells occupied by this ship."""
        return get_ship_coordinates(self, self.x, self.y, self.orientation)

    def with_hit(self) -> PlacedShip:
        """Return a copy with one more hit recorded."""
        return replace(self, hits=self.hits + 1)


def get_ship_coordinates(
    ship: ShipConfig | PlacedShip, x: int, y: int, orientation: Orientation
) -> list[Coord]:
    """Compute the cells a ship of this size covers from origin (x, y)."""
    result: list[Coord] = []
    for i in range(ship.size):
        if orientation is Orientation.HORIZONTAL:
            result.append(Coord(x + i, y))
        else:
            result.append(Coord(x, y + i))
    return result


def in_bounds(coord: Coord, size: int = BOARD_SIZE) -> bool:
    """Return whether the coordinate is in board bounds."""
    return 0 <= coord.x < size and 0 <= coord.y < size


def coord_label(coord: Coord) -> str:
    """Human-readable cell name: column letter plus 1-based row, e.g. ``A1``."""
    return f"{chr(ord('A') + coord.x)}{coord.y + 1}"


def parse_coord_label(text: str, size: int = BOARD_SIZE) -> Coord:
    """Parse a cell name such as ``b7`` back into a coordinate."""
    cleaned = text.strip().upper()
    if len(cleaned) < 2 or not cleaned[0].isalpha() or not cleaned[1:].isdigit():
        raise ValueError(f"Malformed cell name: {text!r}.")
    coord = Coord(ord(cleaned[0]) - ord("A"), int(cleaned[1:]) - 1)
    if not in_bounds(coord, size):
        raise ValueError(f"Cell {cleaned} is off the board.")
    return coord
