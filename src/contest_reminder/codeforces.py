from __future__ import annotations

import logging

import httpx

from contest_reminder.models import Contest, InvalidContestError, Phase, contest_from_dict, dedupe_by_key

LOGGER = logging.getLogger(__name__)

DEFAULT_API_URL = "https://codeforces.com/api"
USER_AGENT = "codeforces-reminder/1.0"


class FetchError(RuntimeError):
    pass


def build_client(timeout_seconds: float = 20.0) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT},
        timeout=timeout_seconds,
        follow_redirects=True,
    )


async def fetch_upcoming_contests(client: httpx.AsyncClient, api_url: str = DEFAULT_API_URL) -> list[Contest]:
    url = f"{api_url}/contest.list"
    try:
        response = await client.get(url, params={"gym": "false"})
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise FetchError(f"Could not retrieve online contest list. {exc}") from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise FetchError(f"Could not parse online contest JSON. {exc}") from exc

    return parse_contest_list(payload)


def parse_contest_list(payload) -> list[Contest]:
    if not isinstance(payload, dict):
        raise FetchError("Could not parse online contest JSON. Expected an object")

    status = payload.get("status")
    if status != "OK":
        comment = payload.get("comment") or "No comment."
        raise FetchError(f"Codeforces response status {status}. Comment: {comment}")

    rows = payload.get("result")
    if not isinstance(rows, list):
        raise FetchError("Could not parse online contest JSON. Missing result list")

    try:
        contests = [contest_from_dict(row) for row in rows]
    except InvalidContestError as exc:
        raise FetchError(f"Could not parse online contest JSON. {exc}") from exc

    upcoming = dedupe_by_key(contest for contest in contests if contest.phase is Phase.BEFORE)
    LOGGER.info("Fetched %s contests, %s upcoming", len(contests), len(upcoming))
    return upcoming
