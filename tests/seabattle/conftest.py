from __future__ import annotations

import random

import pytest

from seabattle.core.grid import create_empty_grid
from seabattle.core.models import SHIPS, Orientation, PlacedShip
from seabattle.core.placement import Deployment, place_ship
from seabattle.persistence.repository import SaveRepository
from seabattle.persistence.service import SaveService


def make_row_fleet() -> list[PlacedShip]:
    """Canonical fleet laid out horizontally on rows 0, 2, 4, 6 and 8."""
    return [
        PlacedShip.from_config(config, 0, row, Orientation.HORIZONTAL)
        for config, row in zip(SHIPS, (0, 2, 4, 6, 8))
    ]


def make_deployment(ships: list[PlacedShip]) -> Deployment:
    grid = create_empty_grid()
    for ship in ships:
        grid = place_ship(grid, ship)
    return Deployment(grid=grid, ships=ships)


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def row_fleet() -> list[PlacedShip]:
    return make_row_fleet()


@pytest.fixture
def row_deployment() -> Deployment:
    return make_deployment(make_row_fleet())


@pytest.fixture
def save_service(tmp_path) -> SaveService:
    return SaveService(SaveRepository(tmp_path / "saves"))
