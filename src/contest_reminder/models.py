from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Phase(str, Enum):
    BEFORE = "BEFORE"
    CODING = "CODING"
    PENDING_SYSTEM_TEST = "PENDING_SYSTEM_TEST"
    SYSTEM_TEST = "SYSTEM_TEST"
    FINISHED = "FINISHED"


class InvalidContestError(ValueError):
    pass


@dataclass(frozen=True)
class Contest:
    id: int
    name: str
    phase: Phase
    start_time_seconds: int | None = None
    description: str | None = None


def contest_key(contest: Contest) -> int:
    return contest.id


def contest_from_dict(data: Any) -> Contest:
    if not isinstance(data, dict):
        raise InvalidContestError(f"Contest entry must be an object, got {type(data).__name__}")

    contest_id = data.get("id")
    if not isinstance(contest_id, int) or isinstance(contest_id, bool):
        raise InvalidContestError(f"Contest id must be an integer: {contest_id!r}")

    name = data.get("name")
    if not isinstance(name, str):
        raise InvalidContestError(f"Contest {contest_id} has no name")

    try:
        phase = Phase(data.get("phase"))
    except ValueError as exc:
        raise InvalidContestError(f"Contest {contest_id} has unknown phase: {data.get('phase')!r}") from exc

    start = data.get("startTimeSeconds")
    if start is not None and (not isinstance(start, int) or isinstance(start, bool)):
        raise InvalidContestError(f"Contest {contest_id} has invalid startTimeSeconds: {start!r}")

    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise InvalidContestError(f"Contest {contest_id} has invalid description")

    return Contest(
        id=contest_id,
        name=name,
        phase=phase,
        start_time_seconds=start,
        description=description,
    )


def contest_to_dict(contest: Contest) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": contest.id,
        "name": contest.name,
        "phase": contest.phase.value,
    }
    if contest.start_time_seconds is not None:
        payload["startTimeSeconds"] = contest.start_time_seconds
    if contest.description is not None:
        payload["description"] = contest.description
    return payload


def dedupe_by_key(contests) -> list[Contest]:
    seen: set[int] = set()
    unique: list[Contest] = []
    for contest in contests:
        key = contest_key(contest)
        if key in seen:
            continue
        seen.add(key)
        unique.append(contest)
    return unique
