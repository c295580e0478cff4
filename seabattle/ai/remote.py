"""Optional delegation of AI targeting to a remote decision service."""

from __future__ import annotations

import json
import logging
import random
from collections.abc import Callable, Sequence
from http.client import HTTPException
from typing import Any
from urllib.error import URLError
from urllib.request import Request, urlopen

from seabattle.ai.targeting import calculate_ai_move
from seabattle.core.grid import Grid, grid_to_payload
from seabattle.core.models import OPEN_STATUSES, Coord, Difficulty, PlacedShip

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0

Opener = Callable[..., Any]


def build_request_payload(
    grid: Grid, fleet: Sequence[PlacedShip], difficulty: Difficulty
) -> dict[str, object]:
    """Request body: the opponent grid, a per-ship sunk summary and difficulty."""
    return {
        "grid": grid_to_payload(grid),
        "ships": [{"id": ship.id, "size": ship.size, "sunk": ship.sunk} for ship in fleet],
        "difficulty": difficulty.value,
    }


class RemoteDecisionClient:
    """POSTs the board state to an HTTP endpoint and reads back ``{x, y}``."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        opener: Opener = urlopen,
    ) -> None:
        self._endpoint = endpoint.strip()
        self._timeout_seconds = timeout_seconds
        self._opener = opener

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def request_move(
        self, grid: Grid, fleet: Sequence[PlacedShip], difficulty: Difficulty
    ) -> Coord | None:
        """Return the service's target, or ``None`` if the exchange failed."""
        body = json.dumps(build_request_payload(grid, fleet, difficulty)).encode("utf-8")
        try:
            request = Request(
                self._endpoint,
                data=body,
                headers={"Content-Type": "application/json"},
                method="POST",
            )
            with self._opener(request, timeout=self._timeout_seconds) as response:
                status = int(getattr(response, "status", 200))
                raw = response.read()
        except (URLError, HTTPException, TimeoutError, OSError, ValueError) as exc:
            logger.warning("remote_ai_request_failed endpoint=%s error=%s", self._endpoint, exc)
            return None

        if not 200 <= status < 300:
            logger.warning("remote_ai_bad_status endpoint=%s status=%d", self._endpoint, status)
            return None
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("remote_ai_malformed_body endpoint=%s error=%s", self._endpoint, exc)
            return None

        coord = _coord_from_response(data)
        if coord is None:
            logger.warning("remote_ai_malformed_coordinates payload=%r", data)
            return None
        if not grid.in_bounds(coord) or grid.status_at(coord) not in OPEN_STATUSES:
            logger.warning("remote_ai_unusable_target x=%d y=%d", coord.x, coord.y)
            return None
        return coord


def choose_ai_target(
    grid: Grid,
    fleet: Sequence[PlacedShip],
    difficulty: Difficulty,
    rng: random.Random,
    client: RemoteDecisionClient | None = None,
) -> Coord:
    """Ask the remote service when configured, falling back to local targeting."""
    if client is not None:
        coord = client.request_move(grid, fleet, difficulty)
        if coord is not None:
            logger.debug("remote_ai_target x=%d y=%d", coord.x, coord.y)
            return coord
        logger.info("remote_ai_fallback difficulty=%s", difficulty.value)
    return calculate_ai_move(grid, difficulty, rng)


def _coord_from_response(data: object) -> Coord | None:
    if not isinstance(data, dict):
        return None
    x = data.get("x")
    y = data.get("y")
    if not _is_plain_int(x) or not _is_plain_int(y):
        return None
    return Coord(x, y)


def _is_plain_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
