from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo

from telegram import Bot
from telegram.error import TelegramError

from contest_reminder.error_log import ErrorLog
from contest_reminder.models import Contest

LOGGER = logging.getLogger(__name__)

REMINDER_TIME_FORMAT = "%d/%m/%Y %H:%M %Z"


def format_reminder_time(start_time_seconds: int, tz: tzinfo | None = None) -> str:
    moment = datetime.fromtimestamp(start_time_seconds, tz=timezone.utc)
    local = moment.astimezone(tz) if tz is not None else moment.astimezone()
    return local.strftime(REMINDER_TIME_FORMAT)


def format_reminder_message(contest: Contest, tz: tzinfo | None = None) -> str:
    # start_time_seconds is already shifted by the lead time here
    if contest.start_time_seconds is None:
        raise ValueError(f"Contest {contest.id} has no start time")
    lines = [
        f"⏰ {contest.name}, id: {contest.id}",
        f"Reminder: {format_reminder_time(contest.start_time_seconds, tz)}",
    ]
    if contest.description:
        lines.append(contest.description)
    return "\n".join(lines)


class ReminderNotifier:
    def __init__(self, *, bot: Bot, chat_id: int, error_log: ErrorLog, tz: tzinfo | None = None) -> None:
        self._bot = bot
        self._chat_id = chat_id
        self._error_log = error_log
        self._tz = tz

    async def notify(self, contest: Contest) -> bool:
        if contest.start_time_seconds is None:
            self._error_log.log(f"Contest without start time: {contest.id}, {contest.name}")
            return False

        try:
            message = format_reminder_message(contest, self._tz)
        except (ValueError, OverflowError, OSError) as exc:
            self._error_log.log(
                f"Invalid start time for contest {contest.name}, id: {contest.id}. Error: {exc}"
            )
            return False

        try:
            await self._bot.send_message(chat_id=self._chat_id, text=message)
        except TelegramError as exc:
            self._error_log.log(
                f"Failed to add reminder for contest {contest.name}, id: {contest.id}. Error: {exc}"
            )
            return False

        LOGGER.info("Sent reminder for contest %s (%s)", contest.id, contest.name)
        return True
