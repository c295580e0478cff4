"""Application entry point: a terminal front end over the match controller."""

from __future__ import annotations

import argparse
import logging
import random
import time
from collections.abc import Callable, Sequence

from seabattle.ai.remote import RemoteDecisionClient
from seabattle.app.controller import MatchController
from seabattle.app.projection import public_view, render_grid
from seabattle.core.models import Difficulty, Phase, Side, parse_coord_label
from seabattle.infra.app_data import ensure_app_data_dirs
from seabattle.infra.config import Settings, load_default_env_files, load_settings
from seabattle.infra.logging import setup_logging, shutdown_logging
from seabattle.persistence.repository import SaveRepository
from seabattle.persistence.service import SaveService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seabattle", description="Naval combat against the computer.")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty], default=None)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible matches.")
    parser.add_argument("--endpoint", default=None, help="Remote AI decision service URL.")
    parser.add_argument("--no-resume", action="store_true", help="Ignore any saved match.")
    return parser


def build_controller(settings: Settings, args: argparse.Namespace) -> MatchController:
    paths = ensure_app_data_dirs()
    seed = args.seed if args.seed is not None else settings.seed
    endpoint = args.endpoint if args.endpoint is not None else settings.ai_endpoint
    difficulty = Difficulty(args.difficulty) if args.difficulty else settings.difficulty
    client = (
        RemoteDecisionClient(endpoint, timeout_seconds=settings.ai_timeout_seconds)
        if endpoint
        else None
    )
    logger.info(
        "controller_config difficulty=%s remote=%s seed=%s saves=%s",
        difficulty.value,
        bool(client),
        seed,
        paths["saves"],
    )
    return MatchController(
        rng=random.Random(seed),
        difficulty=difficulty,
        ai_delay_seconds=settings.ai_delay_seconds,
        remote_client=client,
        save_service=SaveService(SaveRepository(paths["saves"])),
    )


def run_terminal(
    controller: MatchController,
    *,
    resume: bool = True,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Play until the match ends or the player quits."""
    if resume:
        controller.resume()
    else:
        controller.reset()

    if controller.state.phase is Phase.SETUP:
        controller.randomize_fleet()
        controller.start()

    while True:
        _show(controller, write)
        if controller.state.phase is Phase.GAMEOVER:
            write(controller.state.last_log)
            return
        if controller.state.turn is Side.AI:
            _wait_for_ai(controller, sleep)
            continue

        command = read("Target (e.g. B7), 'reset' or 'quit': ").strip().lower()
        if command in {"quit", "q", "exit"}:
            return
        if command == "reset":
            controller.reset()
            controller.randomize_fleet()
            controller.start()
            continue
        try:
            target = parse_coord_label(command)
        except ValueError as exc:
            write(str(exc))
            continue
        result = controller.human_fire(target)
        if not result.accepted:
            write(result.message)


def _wait_for_ai(controller: MatchController, sleep: Callable[[float], None]) -> None:
    step = 0.1
    while controller.ai_turn_pending:
        sleep(step)
        controller.tick(step)
    if controller.state.turn is Side.AI and controller.state.phase is Phase.PLAYING:
        controller.run_ai_turn()


def _show(controller: MatchController, write: Callable[[str], None]) -> None:
    view = public_view(controller.state)
    write("")
    write("Enemy waters")
    for line in render_grid(view.enemy_grid):
        write(line)
    write("Your fleet")
    for line in render_grid(view.own_grid):
        write(line)
    for entry in view.log[:3]:
        write(f"  {entry}")


def main(argv: Sequence[str] | None = None) -> None:
    """Run the SeaBattle terminal application."""
    args = build_parser().parse_args(argv)
    load_default_env_files()
    setup_logging()
    settings = load_settings()
    controller = build_controller(settings, args)
    try:
        run_terminal(controller, resume=not args.no_resume)
    except (KeyboardInterrupt, EOFError):
        logger.info("terminal_session_interrupted")
    finally:
        shutdown_logging()


if __name__ == "__main__":
    main()
