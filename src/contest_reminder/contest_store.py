from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from contest_reminder.models import Contest, InvalidContestError, contest_from_dict, contest_to_dict, dedupe_by_key


class StateLoadError(RuntimeError):
    pass


class StateSaveError(RuntimeError):
    pass


def load_contests(path: Path) -> list[Contest]:
    if not path.exists():
        return []

    try:
        with path.open("r", encoding="utf-8") as file_obj:
            data = json.load(file_obj)
    except OSError as exc:
        raise StateLoadError(f"Failed to read local contests file {path}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise StateLoadError(f"Failed to parse contests JSON {path}: {exc}") from exc

    if not isinstance(data, list):
        raise StateLoadError(f"Failed to parse contests JSON {path}: expected an array")

    try:
        contests = [contest_from_dict(row) for row in data]
    except InvalidContestError as exc:
        raise StateLoadError(f"Failed to parse contests JSON {path}: {exc}") from exc

    return dedupe_by_key(contests)


def save_contests_atomic(path: Path, contests: Iterable[Contest]) -> None:
    payload = [contest_to_dict(contest) for contest in contests]

    temp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            delete=False,
        ) as temp_file:
            temp_name = temp_file.name
            json.dump(payload, temp_file, indent=2)
            temp_file.write("\n")
            temp_file.flush()
            os.fsync(temp_file.fileno())

        os.replace(temp_name, path)
    except OSError as exc:
        if temp_name is not None:
            _discard(Path(temp_name))
        raise StateSaveError(f"Failed to save local contests atomically: {exc}") from exc


def ensure_state_file(path: Path) -> None:
    if path.exists():
        return
    save_contests_atomic(path, [])


def _discard(temp_path: Path) -> None:
    try:
        temp_path.unlink(missing_ok=True)
    except OSError:
        pass
