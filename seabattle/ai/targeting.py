"""Hunt/target shot selection for the computer opponent."""

from __future__ import annotations

import random

import numpy as np

from seabattle.core.grid import Grid
from seabattle.core.models import OPEN_STATUSES, CellStatus, Coord, Difficulty

# Up, down, left, right.
_NEIGHBOUR_STEPS: tuple[tuple[int, int], ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


class NoTargetError(RuntimeError):
    """Raised when every cell of the grid has already been fired upon."""


def calculate_ai_move(grid: Grid, difficulty: Difficulty, rng: random.Random) -> Coord:
    """Choose the next cell to fire at.

    The scan reads the true grid, so ``empty`` and ``ship`` cells are both
    treated as unfired without telling them apart. Decisions are recomputed
    from the grid each call; nothing is remembered between turns.
    """
    if difficulty is Difficulty.EASY:
        return _pick(hunt_candidates(grid, parity=False), rng)

    if grid.count(CellStatus.HIT):
        targets = line_end_candidates(grid)
        if targets:
            return rng.choice(targets)
        targets = neighbour_candidates(grid)
        if targets:
            return rng.choice(targets)

    pool = hunt_candidates(grid, parity=difficulty is Difficulty.HARD)
    if not pool:
        pool = hunt_candidates(grid, parity=False)
    return _pick(pool, rng)


def hunt_candidates(grid: Grid, *, parity: bool) -> list[Coord]:
    """Unfired cells, optionally restricted to the even checkerboard."""
    mask = grid.mask(*OPEN_STATUSES)
    if parity:
        ys, xs = np.indices(mask.shape)
        mask &= (xs + ys) % 2 == 0
    return [Coord(int(x), int(y)) for y, x in np.argwhere(mask)]


def line_end_candidates(grid: Grid) -> list[Coord]:
    """Unfired cells just past both ends of the first line of damaged cells.

    Damaged cells are visited row-major. The first one with an orthogonal
    damaged neighbour fixes the axis; the run is followed outward past
    contiguous hits in both directions. Lines whose ends are blocked are
    skipped in favour of the next damaged cell.
    """
    for cell in grid.coords_with(CellStatus.HIT):
        for dx, dy in _NEIGHBOUR_STEPS:
            neighbour = Coord(cell.x + dx, cell.y + dy)
            if grid.in_bounds(neighbour) and grid.status_at(neighbour) is CellStatus.HIT:
                break
        else:
            continue

        step_x, step_y = abs(dx), abs(dy)
        start = Coord(min(cell.x, neighbour.x), min(cell.y, neighbour.y))
        end = Coord(max(cell.x, neighbour.x), max(cell.y, neighbour.y))
        targets: list[Coord] = []
        for origin, sign in ((start, -1), (end, 1)):
            probe = _walk_past_hits(grid, origin, step_x * sign, step_y * sign)
            if probe is not None:
                targets.append(probe)
        if targets:
            return targets
    return []


def neighbour_candidates(grid: Grid) -> list[Coord]:
    """Unfired orthogonal neighbours of the first damaged cell that has any."""
    for cell in grid.coords_with(CellStatus.HIT):
        neighbours = [
            Coord(cell.x + dx, cell.y + dy)
            for dx, dy in _NEIGHBOUR_STEPS
            if _is_open(grid, Coord(cell.x + dx, cell.y + dy))
        ]
        if neighbours:
            return neighbours
    return []


def _walk_past_hits(grid: Grid, origin: Coord, dx: int, dy: int) -> Coord | None:
    probe = Coord(origin.x + dx, origin.y + dy)
    while grid.in_bounds(probe) and grid.status_at(probe) is CellStatus.HIT:
        probe = Coord(probe.x + dx, probe.y + dy)
    if _is_open(grid, probe):
        return probe
    return None


def _is_open(grid: Grid, coord: Coord) -> bool:
    return grid.in_bounds(coord) and grid.status_at(coord) in OPEN_STATUSES


def _pick(pool: list[Coord], rng: random.Random) -> Coord:
    if not pool:
        raise NoTargetError("No unfired cells left to target.")
    return rng.choice(pool)
