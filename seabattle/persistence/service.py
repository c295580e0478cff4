"""Save/restore use cases for in-progress matches."""

from __future__ import annotations

import json
import logging

from seabattle.core.match import MatchState, new_match
from seabattle.core.models import Phase
from seabattle.persistence.repository import SaveRepository
from seabattle.persistence.schema import SaveFormatError, match_to_payload, payload_to_match

logger = logging.getLogger(__name__)

PERSISTED_PHASES = frozenset({Phase.PLAYING, Phase.GAMEOVER})


class SaveService:
    """High-level save operations with schema validation and safe fallback."""

    def __init__(self, repository: SaveRepository) -> None:
        self._repository = repository

    def save(self, state: MatchState) -> bool:
        """Persist the match when it is in play or over; setup is never saved."""
        if state.phase not in PERSISTED_PHASES:
            return False
        self._repository.save_payload(match_to_payload(state))
        return True

    def load(self) -> MatchState:
        """Restore the saved match, or start a fresh setup if there is none or it is corrupt."""
        try:
            payload = self._repository.load_payload()
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("save_unreadable path=%s error=%s", self._repository.path, exc)
            return new_match()
        if payload is None:
            return new_match()
        try:
            state = payload_to_match(payload)
        except SaveFormatError as exc:
            logger.warning("save_discarded path=%s reason=%s", self._repository.path, exc)
            return new_match()
        logger.info("save_restored phase=%s turn=%s", state.phase.value, state.turn.value)
        return state

    def clear(self) -> None:
        self._repository.clear()
