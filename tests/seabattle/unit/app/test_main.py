import random

from seabattle.app.controller import MatchController
from seabattle.core.models import Difficulty, Phase
from seabattle.main import build_parser, run_terminal


def test_parser_accepts_flags() -> None:
    args = build_parser().parse_args(["--difficulty", "hard", "--seed", "3", "--no-resume"])
    assert args.difficulty == "hard"
    assert args.seed == 3
    assert args.no_resume
    assert args.endpoint is None


def test_run_terminal_plays_until_quit(save_service) -> None:
    controller = MatchController(
        rng=random.Random(8), difficulty=Difficulty.EASY, ai_delay_seconds=0.0, save_service=save_service
    )
    commands = iter(["z9", "A1", "A1", "quit"])
    output: list[str] = []

    run_terminal(
        controller,
        resume=False,
        read=lambda prompt: next(commands),
        write=output.append,
        sleep=lambda seconds: None,
    )

    assert controller.state.phase is not Phase.SETUP
    assert any("Malformed" in line or "off the board" in line for line in output)
    assert any(line.strip().startswith("Player 1 - cell A1") for line in output)
