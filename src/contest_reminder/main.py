from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from functools import partial
from pathlib import Path
from typing import Protocol

from telegram import Bot
from telegram.error import TelegramError

from contest_reminder.codeforces import FetchError, build_client, fetch_upcoming_contests
from contest_reminder.contest_store import (
    StateLoadError,
    StateSaveError,
    ensure_state_file,
    load_contests,
    save_contests_atomic,
)
from contest_reminder.error_log import ErrorLog
from contest_reminder.models import Contest
from contest_reminder.notifier import ReminderNotifier
from contest_reminder.reconcile import apply_lead_time, next_state, reconcile
from contest_reminder.settings import Settings, error_log_path, load_settings

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


class Notifier(Protocol):
    async def notify(self, contest: Contest) -> bool: ...


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def run_cycle(
    *,
    state_path: Path,
    fetch: Callable[[], Awaitable[list[Contest]]],
    notifier: Notifier,
    error_log: ErrorLog,
    lead_seconds: int,
) -> int:
    try:
        local = load_contests(state_path)
    except StateLoadError as exc:
        error_log.log(str(exc))
        return EXIT_FATAL

    try:
        remote = await fetch()
    except FetchError as exc:
        error_log.log(str(exc))
        return EXIT_FATAL

    result = reconcile(local, remote)
    if result.expired:
        LOGGER.info("Dropping %s expired contests", len(result.expired))

    adjusted_new: list[Contest] = []
    for contest in result.new:
        adjusted = apply_lead_time(contest, lead_seconds)
        await notifier.notify(adjusted)
        adjusted_new.append(adjusted)

    try:
        save_contests_atomic(state_path, next_state(result.kept, adjusted_new))
    except StateSaveError as exc:
        error_log.log(str(exc))
        return EXIT_FATAL

    LOGGER.info("Cycle complete: %s new, %s kept", len(result.new), len(result.kept))
    return EXIT_OK


async def _run(settings: Settings, error_log: ErrorLog) -> int:
    try:
        ensure_state_file(settings.contest_state_path)
    except StateSaveError as exc:
        error_log.log(f"Failed to create and write initial contests file: {exc}")

    try:
        async with build_client(settings.http_timeout_seconds) as client, Bot(settings.telegram_bot_token) as bot:
            notifier = ReminderNotifier(bot=bot, chat_id=settings.telegram_chat_id, error_log=error_log)
            return await run_cycle(
                state_path=settings.contest_state_path,
                fetch=partial(fetch_upcoming_contests, client, settings.codeforces_api_url),
                notifier=notifier,
                error_log=error_log,
                lead_seconds=settings.reminder_lead_minutes * 60,
            )
    except TelegramError as exc:
        # notify() handles send failures; anything reaching here is bot setup or teardown
        error_log.log(f"Telegram bot unavailable: {exc}")
        return EXIT_FATAL


def main() -> None:
    configure_logging()

    try:
        settings = load_settings()
    except ValueError as exc:
        with ErrorLog(error_log_path()) as error_log:
            error_log.log(f"Invalid configuration: {exc}")
        sys.exit(EXIT_FATAL)

    with ErrorLog(settings.error_log_path, max_lines=settings.error_log_max_lines) as error_log:
        code = asyncio.run(_run(settings, error_log))
    sys.exit(code)


if __name__ == "__main__":
    main()
