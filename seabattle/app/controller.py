"""Match controller: setup, turn sequencing, AI pacing and autosave."""

from __future__ import annotations

import logging
import random

from seabattle.ai.remote import RemoteDecisionClient, choose_ai_target
from seabattle.app.scheduler import Scheduler
from seabattle.core.match import FireResult, MatchState, fire, new_match, start_match
from seabattle.core.models import Coord, Difficulty, Orientation, Phase, Side
from seabattle.core.placement import FleetBuilder, PlacementError
from seabattle.persistence.service import SaveService

logger = logging.getLogger(__name__)


class MatchController:
    """Single writer for one match; the computer's turn runs on a delayed timer."""

    def __init__(
        self,
        *,
        rng: random.Random,
        difficulty: Difficulty = Difficulty.MEDIUM,
        ai_delay_seconds: float = 1.0,
        remote_client: RemoteDecisionClient | None = None,
        save_service: SaveService | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._rng = rng
        self._difficulty = difficulty
        self._ai_delay_seconds = ai_delay_seconds
        self._remote_client = remote_client
        self._save_service = save_service
        self._scheduler = scheduler or Scheduler()
        self._state = new_match()
        self._builder = FleetBuilder()
        self._ai_task_id: int | None = None

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def builder(self) -> FleetBuilder:
        return self._builder

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, value: Difficulty) -> None:
        self._difficulty = value

    @property
    def ai_turn_pending(self) -> bool:
        return self._ai_task_id is not None and self._scheduler.is_pending(self._ai_task_id)

    def resume(self) -> MatchState:
        """Restore the saved match if any; otherwise keep a fresh setup."""
        if self._save_service is not None:
            self._state = self._save_service.load()
        self._schedule_ai_turn_if_due()
        return self._state

    def rotate(self) -> Orientation:
        return self._builder.rotate()

    def place(self, x: int, y: int) -> bool:
        if self._state.phase is not Phase.SETUP:
            return False
        return self._builder.place(x, y)

    def randomize_fleet(self) -> None:
        if self._state.phase is Phase.SETUP:
            self._builder.randomize(self._rng)

    def start(self) -> bool:
        """Begin play once the human fleet is fully deployed."""
        if self._state.phase is not Phase.SETUP:
            return False
        try:
            deployment = self._builder.deployment()
        except PlacementError as exc:
            logger.info("start_rejected reason=%s", exc)
            return False
        start_match(self._state, deployment, self._rng)
        self._persist()
        return True

    def human_fire(self, target: Coord) -> FireResult:
        result = fire(self._state, Side.HUMAN, target)
        if result.accepted:
            self._persist()
            self._schedule_ai_turn_if_due()
        return result

    def tick(self, delta_seconds: float) -> int:
        """Advance the pacing clock, running the computer's turn when it is due."""
        return self._scheduler.advance(delta_seconds)

    def run_ai_turn(self) -> FireResult:
        """Decide, then resolve, then hand the turn on; nothing else runs in between."""
        self._ai_task_id = None
        state = self._state
        if state.phase is not Phase.PLAYING or state.turn is not Side.AI:
            return FireResult(accepted=False, message="It is not the computer's turn.")
        target = choose_ai_target(
            state.human_grid, state.human_ships, self._difficulty, self._rng, self._remote_client
        )
        result = fire(state, Side.AI, target)
        if result.accepted:
            self._persist()
            self._schedule_ai_turn_if_due()
        else:
            logger.warning("ai_shot_rejected target=%s reason=%s", target, result.message)
        return result

    def reset(self) -> MatchState:
        """Abandon the match: cancel the pending AI timer, drop the save, start setup over."""
        if self._ai_task_id is not None:
            self._scheduler.cancel(self._ai_task_id)
            self._ai_task_id = None
        if self._save_service is not None:
            self._save_service.clear()
        self._state = new_match()
        self._builder.reset()
        logger.info("match_reset")
        return self._state

    def _schedule_ai_turn_if_due(self) -> None:
        state = self._state
        if state.phase is not Phase.PLAYING or state.turn is not Side.AI or state.winner is not None:
            return
        if self.ai_turn_pending:
            return
        self._ai_task_id = self._scheduler.call_later(self._ai_delay_seconds, self._on_ai_timer)

    def _on_ai_timer(self) -> None:
        self.run_ai_turn()

    def _persist(self) -> None:
        if self._save_service is not None:
            self._save_service.save(self._state)
