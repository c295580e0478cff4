"""Saved match data schema and validation helpers."""

from __future__ import annotations

from seabattle.core.grid import Grid, InvalidGridError, grid_from_payload, grid_to_payload
from seabattle.core.match import MatchState
from seabattle.core.models import (
    BOARD_SIZE,
    OPEN_STATUSES,
    CellStatus,
    Orientation,
    Phase,
    PlacedShip,
    Side,
)
from seabattle.core.placement import validate_fleet

SAVE_VERSION = 1


class SaveFormatError(ValueError):
    """Raised when a saved match payload cannot be restored."""


def match_to_payload(state: MatchState) -> dict[str, object]:
    """Convert match state to a JSON-serializable payload."""
    return {
        "version": SAVE_VERSION,
        "gameState": {
            "phase": state.phase.value,
            "turn": state.turn.value,
            "winner": state.winner.value if state.winner is not None else None,
            "humanShips": [_ship_to_payload(ship) for ship in state.human_ships],
            "aiShips": [_ship_to_payload(ship) for ship in state.ai_ships],
            "humanGrid": grid_to_payload(state.human_grid),
            "aiGrid": grid_to_payload(state.ai_grid),
            "log": list(state.log),
        },
    }


def payload_to_match(payload: object) -> MatchState:
    """Restore match state from a saved payload."""
    if not isinstance(payload, dict):
        raise SaveFormatError("Save payload must be an object.")
    raw_version = payload.get("version", -1)
    if not isinstance(raw_version, (int, str)):
        raise SaveFormatError("Save version must be int-compatible.")
    try:
        version = int(raw_version)
    except ValueError as exc:
        raise SaveFormatError("Save version must be int-compatible.") from exc
    if version != SAVE_VERSION:
        raise SaveFormatError("Unsupported save version.")

    game = payload.get("gameState")
    if not isinstance(game, dict):
        raise SaveFormatError("Save is missing its game state.")

    try:
        phase = Phase(str(game["phase"]))
        turn = Side(str(game["turn"]))
        raw_winner = game.get("winner")
        winner = Side(str(raw_winner)) if raw_winner is not None else None
    except (KeyError, ValueError) as exc:
        raise SaveFormatError("Save has an invalid phase, turn or winner.") from exc
    if phase is Phase.SETUP:
        raise SaveFormatError("Setup-phase matches are never saved.")
    if (phase is Phase.GAMEOVER) != (winner is not None):
        raise SaveFormatError("Winner must be set exactly when the match is over.")

    try:
        human_grid = grid_from_payload(game.get("humanGrid"), BOARD_SIZE)
        ai_grid = grid_from_payload(game.get("aiGrid"), BOARD_SIZE)
    except InvalidGridError as exc:
        raise SaveFormatError(f"Save has a malformed grid: {exc}") from exc

    human_ships = _ships_from_payload(game.get("humanShips"))
    ai_ships = _ships_from_payload(game.get("aiShips"))
    for ships in (human_ships, ai_ships):
        valid, reason = validate_fleet(ships)
        if not valid:
            raise SaveFormatError(f"Save has an invalid fleet: {reason}")
    for grid, ships in ((human_grid, human_ships), (ai_grid, ai_ships)):
        _check_grid_matches_fleet(grid, ships)
        if phase is Phase.PLAYING and not grid.mask(*OPEN_STATUSES).any():
            raise SaveFormatError("A match in play must have unfired cells on both grids.")

    raw_log = game.get("log", [])
    if not isinstance(raw_log, list) or not all(isinstance(line, str) for line in raw_log):
        raise SaveFormatError("Save log must be a list of strings.")

    return MatchState(
        phase=phase,
        turn=turn,
        winner=winner,
        human_grid=human_grid,
        ai_grid=ai_grid,
        human_ships=human_ships,
        ai_ships=ai_ships,
        log=list(raw_log),
    )


def _ship_to_payload(ship: PlacedShip) -> dict[str, object]:
    return {
        "id": ship.id,
        "name": ship.name,
        "size": ship.size,
        "x": ship.x,
        "y": ship.y,
        "orientation": ship.orientation.value,
        "hits": ship.hits,
    }


def _ships_from_payload(raw: object) -> list[PlacedShip]:
    if not isinstance(raw, list):
        raise SaveFormatError("Save ships must be a list.")
    ships: list[PlacedShip] = []
    for item in raw:
        if not isinstance(item, dict):
            raise SaveFormatError("Each saved ship must be an object.")
        try:
            ships.append(
                PlacedShip(
                    id=str(item["id"]),
                    name=str(item["name"]),
                    size=int(item["size"]),
                    x=int(item["x"]),
                    y=int(item["y"]),
                    orientation=Orientation(str(item["orientation"])),
                    hits=int(item.get("hits", 0)),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise SaveFormatError("Malformed ship entry in save payload.") from exc
    return ships


def _check_grid_matches_fleet(grid: Grid, ships: list[PlacedShip]) -> None:
    """Every ship cell must carry its id and a status consistent with the hit counter."""
    for ship in ships:
        cells = ship.coordinates()
        if any(grid.ship_id_at(cell) != ship.id for cell in cells):
            raise SaveFormatError(f"Grid cells do not carry ship id {ship.id}.")
        statuses = [grid.status_at(cell) for cell in cells]
        if ship.sunk:
            consistent = all(status is CellStatus.SUNK for status in statuses)
        else:
            consistent = (
                statuses.count(CellStatus.HIT) == ship.hits
                and statuses.count(CellStatus.HIT) + statuses.count(CellStatus.SHIP) == ship.size
            )
        if not consistent:
            raise SaveFormatError(f"Cell statuses disagree with hit counter for {ship.id}.")
