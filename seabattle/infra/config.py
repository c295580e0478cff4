"""Application configuration and env loading."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from seabattle.core.models import Difficulty

logger = logging.getLogger(__name__)

DEFAULT_AI_TIMEOUT_SECONDS = 5.0
DEFAULT_AI_DELAY_SECONDS = 1.0


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable runtime settings sourced from environment."""

    difficulty: Difficulty = Difficulty.MEDIUM
    ai_endpoint: str = ""
    ai_timeout_seconds: float = DEFAULT_AI_TIMEOUT_SECONDS
    ai_delay_seconds: float = DEFAULT_AI_DELAY_SECONDS
    seed: int | None = None


def load_settings() -> Settings:
    """Build settings from ``SEABATTLE_*`` environment variables."""
    raw_seed = os.getenv("SEABATTLE_SEED", "").strip()
    seed: int | None = None
    if raw_seed:
        try:
            seed = int(raw_seed)
        except ValueError:
            logger.warning("invalid SEABATTLE_SEED=%r ignored", raw_seed)
    return Settings(
        difficulty=_difficulty("SEABATTLE_DIFFICULTY", Difficulty.MEDIUM),
        ai_endpoint=os.getenv("SEABATTLE_AI_ENDPOINT", "").strip(),
        ai_timeout_seconds=_positive_float("SEABATTLE_AI_TIMEOUT_SECONDS", DEFAULT_AI_TIMEOUT_SECONDS),
        ai_delay_seconds=_non_negative_float("SEABATTLE_AI_DELAY_SECONDS", DEFAULT_AI_DELAY_SECONDS),
        seed=seed,
    )


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Load KEY=VALUE pairs from an env file into process environment.

    By default, values from the env file overwrite existing environment variables.
    """
    env_path = _resolve_env_path(path)
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue

        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]

        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files left to right; later files win.

    Default order:
    1) appdata/config/.env
    2) appdata/config/.env.local
    3) .env
    4) .env.local
    """
    to_load = (
        tuple(paths)
        if paths is not None
        else ("appdata/config/.env", "appdata/config/.env.local", ".env", ".env.local")
    )
    for path in to_load:
        load_env_file(path, override_existing=override_existing)


def _difficulty(name: str, default: Difficulty) -> Difficulty:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    try:
        return Difficulty(raw)
    except ValueError:
        logger.warning("invalid %s=%r, using %s", name, raw, default.value)
        return default


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("invalid %s=%r, using %s", name, raw, default)
        return default


def _positive_float(name: str, default: float) -> float:
    value = _float(name, default)
    return value if value > 0.0 else default


def _non_negative_float(name: str, default: float) -> float:
    value = _float(name, default)
    return value if value >= 0.0 else default


def _resolve_env_path(path: str) -> Path:
    """Resolve env path from cwd, frozen exe dir, then project root."""
    candidate = Path(path)
    if candidate.exists():
        return candidate

    if getattr(sys, "frozen", False):
        executable = getattr(sys, "executable", "")
        if executable:
            frozen_dir_candidate = Path(executable).resolve().parent / path
            if frozen_dir_candidate.exists():
                return frozen_dir_candidate

    # Fallback for IDE run configs with different working directory.
    project_root = Path(__file__).resolve().parents[2]
    return project_root / path
