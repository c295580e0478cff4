"""Shot outcome evaluation (miss/hit/sunk/fleet destroyed)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from seabattle.core.grid import Grid
from seabattle.core.models import FIRED_STATUSES, CellStatus, Coord, PlacedShip


class ShotOutcome(StrEnum):
    """Result of a single resolved shot."""

    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"
    FLEET_DESTROYED = "fleet_destroyed"


class ShotRejectedError(ValueError):
    """Raised for shots off the board or at cells that were already resolved."""


@dataclass(frozen=True, slots=True)
class ShotResolution:
    """New grid and fleet values produced by one shot."""

    grid: Grid
    fleet: list[PlacedShip]
    outcome: ShotOutcome
    target: Coord
    ship_name: str | None = None

    @property
    def is_hit(self) -> bool:
        return self.outcome is not ShotOutcome.MISS


def fleet_destroyed(fleet: Sequence[PlacedShip]) -> bool:
    """Return whether every ship in a non-empty fleet is sunk."""
    return bool(fleet) and all(ship.sunk for ship in fleet)


def resolve_shot(grid: Grid, fleet: Sequence[PlacedShip], target: Coord) -> ShotResolution:
    """Apply a shot and return the resulting grid, fleet and outcome.

    Inputs are left untouched. A cell may be fired upon only once; repeat
    shots and off-board targets raise :class:`ShotRejectedError`.
    """
    if not grid.in_bounds(target):
        raise ShotRejectedError(f"Target ({target.x}, {target.y}) is off the board.")
    current = grid.status_at(target)
    if current in FIRED_STATUSES:
        raise ShotRejectedError(f"Target ({target.x}, {target.y}) was already fired upon.")

    next_grid = grid.copy()
    next_fleet = list(fleet)

    if current is CellStatus.EMPTY:
        next_grid.set_status(target, CellStatus.MISS)
        return ShotResolution(grid=next_grid, fleet=next_fleet, outcome=ShotOutcome.MISS, target=target)

    next_grid.set_status(target, CellStatus.HIT)
    ship_id = grid.ship_id_at(target)
    index = next((i for i, ship in enumerate(next_fleet) if ship.id == ship_id), None)
    if index is None:
        # Untagged ship cell: damage is recorded on the grid only.
        return ShotResolution(grid=next_grid, fleet=next_fleet, outcome=ShotOutcome.HIT, target=target)

    ship = next_fleet[index].with_hit()
    next_fleet[index] = ship
    if not ship.sunk:
        return ShotResolution(
            grid=next_grid,
            fleet=next_fleet,
            outcome=ShotOutcome.HIT,
            target=target,
            ship_name=ship.name,
        )

    for cell in ship.coordinates():
        next_grid.set_status(cell, CellStatus.SUNK)
    outcome = ShotOutcome.FLEET_DESTROYED if fleet_destroyed(next_fleet) else ShotOutcome.SUNK
    return ShotResolution(
        grid=next_grid,
        fleet=next_fleet,
        outcome=outcome,
        target=target,
        ship_name=ship.name,
    )
