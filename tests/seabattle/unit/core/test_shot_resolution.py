import pytest

from seabattle.core.grid import create_empty_grid
from seabattle.core.models import SHIPS, CellStatus, Coord, Orientation, PlacedShip
from seabattle.core.placement import place_ship, random_placement
from seabattle.core.shot_resolution import (
    ShotOutcome,
    ShotRejectedError,
    fleet_destroyed,
    resolve_shot,
)

DESTROYER = SHIPS[4]


def _destroyer_board():
    ship = PlacedShip.from_config(DESTROYER, 0, 0, Orientation.HORIZONTAL)
    return place_ship(create_empty_grid(), ship), [ship]


def test_miss_on_empty_grid_leaves_fleet_alone() -> None:
    grid = create_empty_grid()
    resolution = resolve_shot(grid, [], Coord(3, 3))
    assert resolution.outcome is ShotOutcome.MISS
    assert not resolution.is_hit
    assert resolution.grid.status_at(Coord(3, 3)) is CellStatus.MISS
    assert resolution.fleet == []
    assert grid.status_at(Coord(3, 3)) is CellStatus.EMPTY


def test_destroyer_hit_then_sunk() -> None:
    grid, fleet = _destroyer_board()

    first = resolve_shot(grid, fleet, Coord(0, 0))
    assert first.outcome is ShotOutcome.HIT
    assert first.grid.status_at(Coord(0, 0)) is CellStatus.HIT
    assert first.fleet[0].hits == 1
    assert fleet[0].hits == 0

    second = resolve_shot(first.grid, first.fleet, Coord(1, 0))
    assert second.fleet[0].hits == 2 == second.fleet[0].size
    assert second.grid.status_at(Coord(0, 0)) is CellStatus.SUNK
    assert second.grid.status_at(Coord(1, 0)) is CellStatus.SUNK
    assert second.ship_name == "Destroyer"


def test_sinking_one_ship_of_two_is_not_fleet_destroyed() -> None:
    grid, fleet = _destroyer_board()
    cruiser = PlacedShip.from_config(SHIPS[2], 0, 5, Orientation.HORIZONTAL)
    grid = place_ship(grid, cruiser)
    fleet = [*fleet, cruiser]

    step = resolve_shot(grid, fleet, Coord(0, 0))
    step = resolve_shot(step.grid, step.fleet, Coord(1, 0))
    assert step.outcome is ShotOutcome.SUNK
    assert not fleet_destroyed(step.fleet)
    # The cruiser is untouched: no sunk/hit cells leak onto it.
    assert all(step.grid.status_at(c) is CellStatus.SHIP for c in cruiser.coordinates())


def test_last_ship_sunk_signals_fleet_destroyed() -> None:
    grid, fleet = _destroyer_board()
    step = resolve_shot(grid, fleet, Coord(1, 0))
    step = resolve_shot(step.grid, step.fleet, Coord(0, 0))
    assert step.outcome is ShotOutcome.FLEET_DESTROYED
    assert fleet_destroyed(step.fleet)


def test_fleet_destroyed_iff_every_ship_sunk() -> None:
    sunk = PlacedShip("destroyer", "Destroyer", 2, 0, 0, Orientation.HORIZONTAL, hits=2)
    fresh = PlacedShip("cruiser", "Cruiser", 3, 0, 2, Orientation.HORIZONTAL)
    assert fleet_destroyed([sunk])
    assert not fleet_destroyed([fresh])
    assert not fleet_destroyed([sunk, fresh])
    assert not fleet_destroyed([])


@pytest.mark.parametrize("first", [Coord(0, 0), Coord(5, 5)])
def test_second_shot_at_same_cell_is_rejected_without_mutation(first: Coord) -> None:
    grid, fleet = _destroyer_board()
    step = resolve_shot(grid, fleet, first)
    snapshot = step.grid.copy()

    with pytest.raises(ShotRejectedError):
        resolve_shot(step.grid, step.fleet, first)
    assert step.grid == snapshot
    assert step.fleet[0].hits == (1 if first == Coord(0, 0) else 0)


def test_shot_at_sunk_cell_is_rejected() -> None:
    grid, fleet = _destroyer_board()
    step = resolve_shot(grid, fleet, Coord(0, 0))
    step = resolve_shot(step.grid, step.fleet, Coord(1, 0))
    with pytest.raises(ShotRejectedError):
        resolve_shot(step.grid, step.fleet, Coord(1, 0))


@pytest.mark.parametrize("target", [Coord(-1, 0), Coord(0, 10), Coord(10, 10)])
def test_out_of_bounds_shot_is_rejected(target: Coord) -> None:
    grid, fleet = _destroyer_board()
    with pytest.raises(ShotRejectedError):
        resolve_shot(grid, fleet, target)


def test_sunk_ship_never_mixes_hit_and_sunk(seeded_rng) -> None:
    deployment = random_placement(seeded_rng)
    grid, fleet = deployment.grid, deployment.ships
    for y in range(10):
        for x in range(10):
            step = resolve_shot(grid, fleet, Coord(x, y))
            grid, fleet = step.grid, step.fleet
            for ship in fleet:
                statuses = {grid.status_at(c) for c in ship.coordinates()}
                if ship.sunk:
                    assert statuses == {CellStatus.SUNK}
                else:
                    assert CellStatus.SUNK not in statuses
    assert fleet_destroyed(fleet)
