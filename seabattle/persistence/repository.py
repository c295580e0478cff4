"""Persistence layer for the saved match file."""

from __future__ import annotations

import json
from pathlib import Path

SAVE_FILENAME = "battleship_save_v1.json"


class SaveRepository:
    """JSON file repository holding the single in-progress match."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._root / SAVE_FILENAME

    def exists(self) -> bool:
        return self.path.exists()

    def load_payload(self) -> object | None:
        """Load the saved payload, or ``None`` when nothing is saved.

        Unreadable JSON propagates as :class:`json.JSONDecodeError`.
        """
        if not self.path.exists():
            return None
        with self.path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def save_payload(self, payload: dict[str, object]) -> None:
        """Write the payload through a temp file so a crash never leaves half a save."""
        tmp_path = self.path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        tmp_path.replace(self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
