import copy
import json

import pytest

from seabattle.core.match import fire, new_match, start_match
from seabattle.core.models import CellStatus, Phase, Side
from seabattle.persistence.schema import SaveFormatError, match_to_payload, payload_to_match


def _sink_whole_human_grid(payload) -> None:
    game = payload["gameState"]
    for row in game["humanGrid"]:
        for cell in row:
            cell["status"] = "sunk" if cell["shipId"] else "miss"
    for ship in game["humanShips"]:
        ship["hits"] = ship["size"]


def _mark_every_human_cell_missed(payload) -> None:
    for row in payload["gameState"]["humanGrid"]:
        for cell in row:
            cell["status"] = "miss"


def _clear_ai_hit_counters(payload) -> None:
    for ship in payload["gameState"]["aiShips"]:
        ship["hits"] = 0


@pytest.fixture
def playing(row_deployment, seeded_rng):
    state = start_match(new_match(), row_deployment, seeded_rng)
    fire(state, Side.HUMAN, state.ai_grid.coords_with(CellStatus.SHIP)[0])
    return state


def test_payload_is_json_serializable_and_restores(playing) -> None:
    payload = json.loads(json.dumps(match_to_payload(playing)))
    restored = payload_to_match(payload)

    assert restored.phase is Phase.PLAYING
    assert restored.turn is playing.turn
    assert restored.winner is None
    assert restored.human_grid == playing.human_grid
    assert restored.ai_grid == playing.ai_grid
    assert restored.ai_ships == playing.ai_ships
    assert restored.human_ships == playing.human_ships
    assert restored.log == playing.log


def test_payload_layout(playing) -> None:
    payload = match_to_payload(playing)
    game = payload["gameState"]
    assert payload["version"] == 1
    assert game["phase"] == "playing"
    assert game["turn"] == "human"
    assert game["humanShips"][0]["orientation"] == "horizontal"
    assert game["humanGrid"][0][0] == {"x": 0, "y": 0, "status": "ship", "shipId": "carrier"}


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.__setitem__("version", 2),
        lambda p: p.__setitem__("version", "one"),
        lambda p: p.pop("gameState"),
        lambda p: p["gameState"].__setitem__("phase", "setup"),
        lambda p: p["gameState"].__setitem__("phase", "paused"),
        lambda p: p["gameState"].__setitem__("turn", "spectator"),
        lambda p: p["gameState"].__setitem__("winner", "human"),
        lambda p: p["gameState"].__setitem__("humanGrid", []),
        lambda p: p["gameState"].pop("aiGrid"),
        lambda p: p["gameState"]["aiGrid"][3].pop(),
        lambda p: p["gameState"].__setitem__("aiShips", "none"),
        lambda p: p["gameState"]["aiShips"][0].pop("x"),
        lambda p: p["gameState"]["humanShips"].pop(),
        lambda p: p["gameState"].__setitem__("log", [1, 2]),
        lambda p: p["gameState"]["humanGrid"][0][0].__setitem__("shipId", "battleship"),
        lambda p: p["gameState"]["humanGrid"][0][4].__setitem__("shipId", None),
        lambda p: p["gameState"]["humanGrid"][0][0].__setitem__("status", "hit"),
        lambda p: p["gameState"]["humanGrid"][0][0].__setitem__("status", "sunk"),
        lambda p: p["gameState"]["humanGrid"][0][0].__setitem__("status", "miss"),
        lambda p: p["gameState"]["humanShips"][0].__setitem__("hits", 1),
        lambda p: p["gameState"]["humanShips"][0].__setitem__("hits", 5),
        _clear_ai_hit_counters,
        _mark_every_human_cell_missed,
        _sink_whole_human_grid,
    ],
)
def test_payload_to_match_rejects_corruption(playing, mutate) -> None:
    payload = copy.deepcopy(match_to_payload(playing))
    mutate(payload)
    with pytest.raises(SaveFormatError):
        payload_to_match(payload)


def test_payload_to_match_rejects_non_object() -> None:
    with pytest.raises(SaveFormatError):
        payload_to_match(["not", "a", "save"])


def test_payload_to_match_accepts_finished_match_with_sunk_fleet(playing) -> None:
    payload = copy.deepcopy(match_to_payload(playing))
    _sink_whole_human_grid(payload)
    payload["gameState"]["phase"] = "gameover"
    payload["gameState"]["winner"] = "ai"

    restored = payload_to_match(payload)

    assert restored.winner is Side.AI
    assert all(ship.sunk for ship in restored.human_ships)
