from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, replace

from contest_reminder.models import Contest, contest_key

DEFAULT_LEAD_SECONDS = 30 * 60


@dataclass(frozen=True)
class Reconciliation:
    new: list[Contest]
    kept: list[Contest]
    expired: list[Contest]


def reconcile(
    local: Iterable[Contest],
    remote: Iterable[Contest],
    *,
    key: Callable[[Contest], Hashable] = contest_key,
) -> Reconciliation:
    local_by_key: dict[Hashable, Contest] = {}
    for contest in local:
        local_by_key.setdefault(key(contest), contest)

    remote_keys: set[Hashable] = set()
    new: list[Contest] = []
    for contest in remote:
        contest_id = key(contest)
        if contest_id in remote_keys:
            continue
        remote_keys.add(contest_id)
        if contest_id not in local_by_key:
            new.append(contest)

    kept: list[Contest] = []
    expired: list[Contest] = []
    for contest_id, contest in local_by_key.items():
        if contest_id in remote_keys:
            kept.append(contest)
        else:
            expired.append(contest)

    return Reconciliation(new=new, kept=kept, expired=expired)


def apply_lead_time(contest: Contest, lead_seconds: int = DEFAULT_LEAD_SECONDS) -> Contest:
    if contest.start_time_seconds is None:
        return contest
    return replace(contest, start_time_seconds=contest.start_time_seconds - lead_seconds)


def next_state(kept: Iterable[Contest], adjusted_new: Iterable[Contest]) -> list[Contest]:
    return [*kept, *adjusted_new]
