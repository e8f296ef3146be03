import json
from pathlib import Path

import pytest

from contest_reminder import contest_store
from contest_reminder.contest_store import (
    StateLoadError,
    StateSaveError,
    ensure_state_file,
    load_contests,
    save_contests_atomic,
)
from contest_reminder.models import Contest, Phase


def _contests() -> list[Contest]:
    return [
        Contest(
            id=2100,
            name="Codeforces Round (Div. 2)",
            phase=Phase.BEFORE,
            start_time_seconds=1_760_000_000,
            description="Rated for Div. 2",
        ),
        Contest(id=2101, name="Educational Round", phase=Phase.BEFORE),
    ]


def test_roundtrip_preserves_all_fields(tmp_path: Path) -> None:
    path = tmp_path / "contests.json"

    save_contests_atomic(path, _contests())
    loaded = load_contests(path)

    assert loaded == _contests()


def test_saved_file_uses_camel_case_json_array(tmp_path: Path) -> None:
    path = tmp_path / "contests.json"

    save_contests_atomic(path, _contests())
    data = json.loads(path.read_text(encoding="utf-8"))

    assert data[0]["startTimeSeconds"] == 1_760_000_000
    assert data[0]["phase"] == "BEFORE"
    assert "startTimeSeconds" not in data[1]


def test_missing_file_is_empty_state(tmp_path: Path) -> None:
    assert load_contests(tmp_path / "contests.json") == []


def test_corrupt_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "contests.json"
    path.write_text("[{\"id\": 1,", encoding="utf-8")

    with pytest.raises(StateLoadError):
        load_contests(path)


def test_non_array_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "contests.json"
    path.write_text("{}", encoding="utf-8")

    with pytest.raises(StateLoadError):
        load_contests(path)


def test_malformed_entry_raises(tmp_path: Path) -> None:
    path = tmp_path / "contests.json"
    path.write_text('[{"id": 1, "name": "A"}]', encoding="utf-8")

    with pytest.raises(StateLoadError):
        load_contests(path)


def test_failed_rename_leaves_previous_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "contests.json"
    save_contests_atomic(path, _contests()[:1])
    before = path.read_bytes()

    def broken_replace(src, dst) -> None:
        raise OSError("disk went away")

    monkeypatch.setattr(contest_store.os, "replace", broken_replace)

    with pytest.raises(StateSaveError):
        save_contests_atomic(path, _contests())

    assert path.read_bytes() == before
    assert [p.name for p in tmp_path.iterdir()] == ["contests.json"]


def test_ensure_state_file_creates_empty_array(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "contests.json"

    ensure_state_file(path)

    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_ensure_state_file_keeps_existing(tmp_path: Path) -> None:
    path = tmp_path / "contests.json"
    save_contests_atomic(path, _contests())

    ensure_state_file(path)

    assert load_contests(path) == _contests()


def test_non_utf8_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "contests.json"
    path.write_bytes(b'[{"id": 1, "name": "\xff\xfe", "phase": "BEFORE"}]')

    with pytest.raises(StateLoadError):
        load_contests(path)
