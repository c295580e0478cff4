"""Match state and turn resolution rules."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from seabattle.core.grid import Grid, create_empty_grid
from seabattle.core.models import Coord, Phase, PlacedShip, Side, coord_label
from seabattle.core.placement import Deployment, random_placement, validate_fleet
from seabattle.core.shot_resolution import (
    ShotOutcome,
    ShotRejectedError,
    ShotResolution,
    resolve_shot,
)

logger = logging.getLogger(__name__)

DEPLOY_MESSAGE = "Welcome, Admiral. Deploy your ships."
BATTLE_START_MESSAGE = "Battle engaged! Awaiting orders."
VICTORY_MESSAGE = "Victory Achieved!"
DEFEAT_MESSAGE = "Fleet Destroyed. Defeat."

_ACTOR_LABELS: dict[Side, str] = {Side.HUMAN: "Player 1", Side.AI: "AI"}


@dataclass(slots=True)
class MatchState:
    """Runtime match state for both sides."""

    phase: Phase = Phase.SETUP
    turn: Side = Side.HUMAN
    winner: Side | None = None
    human_grid: Grid = field(default_factory=create_empty_grid)
    ai_grid: Grid = field(default_factory=create_empty_grid)
    human_ships: list[PlacedShip] = field(default_factory=list)
    ai_ships: list[PlacedShip] = field(default_factory=list)
    log: list[str] = field(default_factory=lambda: [DEPLOY_MESSAGE])

    @property
    def last_log(self) -> str:
        return self.log[0] if self.log else ""

    def grid_of(self, side: Side) -> Grid:
        return self.human_grid if side is Side.HUMAN else self.ai_grid

    def ships_of(self, side: Side) -> list[PlacedShip]:
        return self.human_ships if side is Side.HUMAN else self.ai_ships

    def record(self, message: str) -> None:
        """Prepend a log line; the log reads most-recent-first."""
        self.log.insert(0, message)


@dataclass(frozen=True, slots=True)
class FireResult:
    """Outcome of a fire attempt from the match's point of view."""

    accepted: bool
    outcome: ShotOutcome | None = None
    target: Coord | None = None
    message: str = ""


def new_match() -> MatchState:
    """Create a match in the setup phase."""
    return MatchState()


def start_match(state: MatchState, deployment: Deployment, rng: random.Random) -> MatchState:
    """Move a setup-phase match into play with the human fleet and a random AI fleet."""
    if state.phase is not Phase.SETUP:
        raise ValueError(f"Cannot start a match in phase {state.phase.value}.")
    valid, reason = validate_fleet(deployment.ships)
    if not valid:
        raise ValueError(reason)
    ai = random_placement(rng)
    state.phase = Phase.PLAYING
    state.turn = Side.HUMAN
    state.winner = None
    state.human_grid = deployment.grid.copy()
    state.human_ships = list(deployment.ships)
    state.ai_grid = ai.grid
    state.ai_ships = ai.ships
    state.record(BATTLE_START_MESSAGE)
    logger.info("match_started human_ships=%d ai_ships=%d", len(state.human_ships), len(state.ai_ships))
    return state


def fire(state: MatchState, side: Side, target: Coord) -> FireResult:
    """Resolve ``side`` firing at its opponent's grid.

    A hit keeps the turn with the shooter; a miss passes it. Shots out of
    phase, out of turn, off the board or at resolved cells are rejected
    without touching the state.
    """
    if state.phase is not Phase.PLAYING or state.winner is not None:
        return FireResult(accepted=False, target=target, message="The match is not in play.")
    if state.turn is not side:
        return FireResult(accepted=False, target=target, message="It is not your turn.")

    defender = side.opponent
    try:
        resolution = resolve_shot(state.grid_of(defender), state.ships_of(defender), target)
    except ShotRejectedError as exc:
        logger.debug("shot_rejected side=%s reason=%s", side.value, exc)
        return FireResult(accepted=False, target=target, message=str(exc))

    _apply_resolution(state, defender, resolution)
    message = f"{_ACTOR_LABELS[side]} - cell {coord_label(target)} - {_describe(resolution)}"
    logger.info(
        "shot side=%s cell=%s outcome=%s", side.value, coord_label(target), resolution.outcome.value
    )

    if resolution.outcome is ShotOutcome.FLEET_DESTROYED:
        state.phase = Phase.GAMEOVER
        state.winner = side
        state.turn = side
        state.record(VICTORY_MESSAGE if side is Side.HUMAN else DEFEAT_MESSAGE)
        logger.info("match_over winner=%s", side.value)
    else:
        state.turn = side if resolution.is_hit else defender
        state.record(message)

    return FireResult(accepted=True, outcome=resolution.outcome, target=target, message=message)


def _apply_resolution(state: MatchState, defender: Side, resolution: ShotResolution) -> None:
    if defender is Side.HUMAN:
        state.human_grid = resolution.grid
        state.human_ships = resolution.fleet
    else:
        state.ai_grid = resolution.grid
        state.ai_ships = resolution.fleet


def _describe(resolution: ShotResolution) -> str:
    if resolution.outcome is ShotOutcome.MISS:
        return "Shot missed"
    if resolution.outcome is ShotOutcome.HIT:
        return "Hit"
    return f"Sunk {resolution.ship_name}"
