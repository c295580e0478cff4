"""Grid state representation and wire conversion helpers."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from seabattle.core.models import BOARD_SIZE, CellStatus, Coord, in_bounds

STATUS_ORDER: tuple[CellStatus, ...] = (
    CellStatus.EMPTY,
    CellStatus.SHIP,
    CellStatus.HIT,
    CellStatus.MISS,
    CellStatus.SUNK,
)
STATUS_CODES: dict[CellStatus, int] = {status: code for code, status in enumerate(STATUS_ORDER)}


class InvalidGridError(ValueError):
    """Raised when a grid payload does not have the expected shape."""


@dataclass(slots=True, eq=False)
class Grid:
    """Numpy-backed cell matrix indexed ``[y, x]``."""

    size: int = BOARD_SIZE
    status: np.ndarray = field(
        default_factory=lambda: np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    )
    ship_ids: np.ndarray = field(
        default_factory=lambda: np.full((BOARD_SIZE, BOARD_SIZE), None, dtype=object)
    )

    def __post_init__(self) -> None:
        if self.status.shape != (self.size, self.size):
            self.status = np.zeros((self.size, self.size), dtype=np.int8)
        if self.ship_ids.shape != (self.size, self.size):
            self.ship_ids = np.full((self.size, self.size), None, dtype=object)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self.size == other.size
            and np.array_equal(self.status, other.status)
            and bool(np.all(self.ship_ids == other.ship_ids))
        )

    def in_bounds(self, coord: Coord) -> bool:
        return in_bounds(coord, self.size)

    def status_at(self, coord: Coord) -> CellStatus:
        return STATUS_ORDER[int(self.status[coord.y, coord.x])]

    def ship_id_at(self, coord: Coord) -> str | None:
        return self.ship_ids[coord.y, coord.x]

    def set_status(self, coord: Coord, status: CellStatus) -> None:
        self.status[coord.y, coord.x] = STATUS_CODES[status]

    def set_ship_id(self, coord: Coord, ship_id: str | None) -> None:
        self.ship_ids[coord.y, coord.x] = ship_id

    def mask(self, *statuses: CellStatus) -> np.ndarray:
        """Boolean matrix of cells whose status is one of ``statuses``."""
        codes = [STATUS_CODES[status] for status in statuses]
        return np.isin(self.status, codes)

    def coords_with(self, *statuses: CellStatus) -> list[Coord]:
        """Coordinates (row-major) of cells whose status is one of ``statuses``."""
        return [Coord(int(x), int(y)) for y, x in np.argwhere(self.mask(*statuses))]

    def count(self, status: CellStatus) -> int:
        return int(np.count_nonzero(self.status == STATUS_CODES[status]))

    def copy(self) -> Grid:
        return Grid(size=self.size, status=self.status.copy(), ship_ids=self.ship_ids.copy())


def create_empty_grid(size: int = BOARD_SIZE) -> Grid:
    """Create a fresh grid with every cell empty and no ship references."""
    return Grid(
        size=size,
        status=np.zeros((size, size), dtype=np.int8),
        ship_ids=np.full((size, size), None, dtype=object),
    )


def fogged_view(grid: Grid) -> Grid:
    """Project a grid for the opposing player: unrevealed ship cells look empty."""
    view = grid.copy()
    hidden = view.mask(CellStatus.SHIP)
    view.status[hidden] = STATUS_CODES[CellStatus.EMPTY]
    view.ship_ids[hidden] = None
    view.status.flags.writeable = False
    view.ship_ids.flags.writeable = False
    return view


def grid_to_payload(grid: Grid) -> list[list[dict[str, object]]]:
    """Convert a grid into rows of JSON-serializable cell objects."""
    rows: list[list[dict[str, object]]] = []
    for y in range(grid.size):
        row: list[dict[str, object]] = []
        for x in range(grid.size):
            coord = Coord(x, y)
            cell: dict[str, object] = {"x": x, "y": y, "status": grid.status_at(coord).value}
            ship_id = grid.ship_id_at(coord)
            if ship_id is not None:
                cell["shipId"] = ship_id
            row.append(cell)
        rows.append(row)
    return rows


def grid_from_payload(payload: object, size: int = BOARD_SIZE) -> Grid:
    """Rebuild a grid from its row payload, rejecting malformed shapes."""
    if not isinstance(payload, list) or len(payload) != size:
        raise InvalidGridError(f"Grid must be a list of {size} rows.")
    grid = create_empty_grid(size)
    for y, row in enumerate(payload):
        if not isinstance(row, list) or len(row) != size:
            raise InvalidGridError(f"Grid row {y} must be a list of {size} cells.")
        for x, cell in enumerate(row):
            if not isinstance(cell, dict):
                raise InvalidGridError(f"Grid cell ({x}, {y}) must be an object.")
            if cell.get("x") != x or cell.get("y") != y:
                raise InvalidGridError(f"Grid cell ({x}, {y}) has mismatched coordinates.")
            try:
                status = CellStatus(str(cell["status"]))
            except (KeyError, ValueError) as exc:
                raise InvalidGridError(f"Grid cell ({x}, {y}) has an invalid status.") from exc
            ship_id = cell.get("shipId")
            if ship_id is not None and not isinstance(ship_id, str):
                raise InvalidGridError(f"Grid cell ({x}, {y}) has an invalid ship id.")
            coord = Coord(x, y)
            grid.set_status(coord, status)
            grid.set_ship_id(coord, ship_id)
    return grid
