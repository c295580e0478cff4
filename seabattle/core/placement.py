"""Fleet placement validation and construction."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from seabattle.core.grid import Grid, create_empty_grid
from seabattle.core.models import (
    BOARD_SIZE,
    SHIPS,
    CellStatus,
    Orientation,
    PlacedShip,
    ShipConfig,
    get_ship_coordinates,
    in_bounds,
)

logger = logging.getLogger(__name__)

SHIP_ATTEMPT_BUDGET = 200
GLOBAL_ATTEMPT_BUDGET = 2000


class PlacementError(ValueError):
    """Raised when a fleet deployment is requested before it is complete."""


@dataclass(slots=True)
class Deployment:
    """A grid together with the fleet that was placed on it."""

    grid: Grid
    ships: list[PlacedShip]


def is_valid_placement(
    ship: ShipConfig | PlacedShip,
    x: int,
    y: int,
    orientation: Orientation,
    existing_ships: Sequence[PlacedShip],
    size: int = BOARD_SIZE,
) -> bool:
    """Return whether a placement stays on the board and clears existing ships."""
    cells = get_ship_coordinates(ship, x, y, orientation)
    if not all(in_bounds(cell, size) for cell in cells):
        return False
    occupied = {cell for placed in existing_ships for cell in placed.coordinates()}
    return not any(cell in occupied for cell in cells)


def place_ship(grid: Grid, ship: PlacedShip) -> Grid:
    """Return a copy of ``grid`` with the ship's cells marked and tagged.

    The placement is not re-validated; callers check it with
    :func:`is_valid_placement` first.
    """
    placed = grid.copy()
    for cell in ship.coordinates():
        placed.set_status(cell, CellStatus.SHIP)
        placed.set_ship_id(cell, ship.id)
    return placed


def random_placement(
    rng: random.Random,
    ships: Sequence[ShipConfig] = SHIPS,
    size: int = BOARD_SIZE,
) -> Deployment:
    """Deploy a full fleet at uniformly random positions.

    Each ship gets a bounded number of draws and the whole fleet shares a
    global budget. Running out of either restarts deployment from scratch.
    """
    restarts = 0
    while True:
        deployment = _try_random_placement(rng, ships, size)
        if deployment is not None:
            if restarts:
                logger.debug("random_placement restarts=%d", restarts)
            return deployment
        restarts += 1


def _try_random_placement(
    rng: random.Random, ships: Sequence[ShipConfig], size: int
) -> Deployment | None:
    grid = create_empty_grid(size)
    placed: list[PlacedShip] = []
    attempts = 0

    for template in ships:
        ship_attempts = 0
        done = False
        while not done and attempts < GLOBAL_ATTEMPT_BUDGET and ship_attempts < SHIP_ATTEMPT_BUDGET:
            attempts += 1
            ship_attempts += 1
            orientation = rng.choice((Orientation.HORIZONTAL, Orientation.VERTICAL))
            x = rng.randrange(size)
            y = rng.randrange(size)
            if is_valid_placement(template, x, y, orientation, placed, size):
                ship = PlacedShip.from_config(template, x, y, orientation)
                placed.append(ship)
                grid = place_ship(grid, ship)
                done = True
        if not done:
            return None

    return Deployment(grid=grid, ships=placed)


def validate_fleet(
    ships: Sequence[PlacedShip],
    catalog: Sequence[ShipConfig] = SHIPS,
    size: int = BOARD_SIZE,
) -> tuple[bool, str]:
    """Validate a fleet against the catalog, board bounds and overlap rules."""
    templates = {config.id: config for config in catalog}
    seen: list[PlacedShip] = []

    if len(ships) != len(catalog):
        return False, f"Fleet must contain exactly {len(catalog)} ships."

    for ship in ships:
        template = templates.get(ship.id)
        if template is None:
            return False, f"Unknown ship: {ship.id}."
        if any(existing.id == ship.id for existing in seen):
            return False, f"Duplicate ship: {ship.id}."
        if ship.size != template.size:
            return False, f"Wrong size for {ship.id}."
        if not 0 <= ship.hits <= ship.size:
            return False, f"Hit counter out of range for {ship.id}."
        if not is_valid_placement(ship, ship.x, ship.y, ship.orientation, seen, size):
            return False, f"Invalid placement for {ship.id}."
        seen.append(ship)
    return True, ""


@dataclass(slots=True)
class FleetBuilder:
    """Manual deployment of the catalog, one ship at a time in catalog order."""

    catalog: tuple[ShipConfig, ...] = SHIPS
    size: int = BOARD_SIZE
    orientation: Orientation = Orientation.HORIZONTAL
    ships: list[PlacedShip] = field(default_factory=list)
    grid: Grid = field(default_factory=create_empty_grid)

    def __post_init__(self) -> None:
        if self.grid.size != self.size:
            self.grid = create_empty_grid(self.size)

    @property
    def complete(self) -> bool:
        return len(self.ships) >= len(self.catalog)

    @property
    def current(self) -> ShipConfig | None:
        """Next template to deploy, or ``None`` once the fleet is complete."""
        if self.complete:
            return None
        return self.catalog[len(self.ships)]

    def rotate(self) -> Orientation:
        if self.orientation is Orientation.HORIZONTAL:
            self.orientation = Orientation.VERTICAL
        else:
            self.orientation = Orientation.HORIZONTAL
        return self.orientation

    def place(self, x: int, y: int) -> bool:
        """Deploy the current ship at (x, y); rejected placements change nothing."""
        template = self.current
        if template is None:
            return False
        if not is_valid_placement(template, x, y, self.orientation, self.ships, self.size):
            return False
        ship = PlacedShip.from_config(template, x, y, self.orientation)
        self.ships.append(ship)
        self.grid = place_ship(self.grid, ship)
        return True

    def randomize(self, rng: random.Random) -> None:
        deployment = random_placement(rng, self.catalog, self.size)
        self.ships = deployment.ships
        self.grid = deployment.grid

    def reset(self) -> None:
        self.ships = []
        self.grid = create_empty_grid(self.size)
        self.orientation = Orientation.HORIZONTAL

    def deployment(self) -> Deployment:
        if not self.complete:
            remaining = ", ".join(config.name for config in self.catalog[len(self.ships) :])
            raise PlacementError(f"Fleet is not fully deployed. Remaining: {remaining}.")
        return Deployment(grid=self.grid.copy(), ships=list(self.ships))
