"""Read-only presentation projection of match state."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from seabattle.core.grid import Grid, fogged_view
from seabattle.core.match import MatchState
from seabattle.core.models import CellStatus, Coord, Phase, PlacedShip, Side

CELL_GLYPHS: dict[CellStatus, str] = {
    CellStatus.EMPTY: ".",
    CellStatus.SHIP: "#",
    CellStatus.HIT: "X",
    CellStatus.MISS: "o",
    CellStatus.SUNK: "*",
}


@dataclass(frozen=True, slots=True)
class ShipStatusRow:
    name: str
    size: int
    hits: int
    sunk: bool


@dataclass(frozen=True, slots=True)
class MatchView:
    """What a presentation layer may show to the human player."""

    phase: Phase
    turn: Side
    winner: Side | None
    own_grid: Grid
    enemy_grid: Grid
    own_fleet: tuple[ShipStatusRow, ...]
    enemy_fleet: tuple[ShipStatusRow, ...]
    log: tuple[str, ...]


def public_view(state: MatchState) -> MatchView:
    """Project match state for the human: enemy ships stay hidden until hit.

    Once the match is over the enemy grid is revealed.
    """
    enemy_grid = state.ai_grid.copy() if state.phase is Phase.GAMEOVER else fogged_view(state.ai_grid)
    return MatchView(
        phase=state.phase,
        turn=state.turn,
        winner=state.winner,
        own_grid=state.human_grid.copy(),
        enemy_grid=enemy_grid,
        own_fleet=fleet_status(state.human_ships),
        enemy_fleet=fleet_status(state.ai_ships),
        log=tuple(state.log),
    )


def fleet_status(ships: Sequence[PlacedShip]) -> tuple[ShipStatusRow, ...]:
    return tuple(
        ShipStatusRow(name=ship.name, size=ship.size, hits=ship.hits, sunk=ship.sunk)
        for ship in ships
    )


def render_grid(grid: Grid) -> list[str]:
    """Text rows for a grid with column letters and 1-based row numbers."""
    header = "    " + " ".join(chr(ord("A") + x) for x in range(grid.size))
    lines = [header]
    for y in range(grid.size):
        glyphs = " ".join(CELL_GLYPHS[grid.status_at(Coord(x, y))] for x in range(grid.size))
        lines.append(f"{y + 1:>3} {glyphs}")
    return lines
