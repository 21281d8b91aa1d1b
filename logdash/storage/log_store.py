import asyncio
import logging
from datetime import date
from typing import Optional

from pydantic import ValidationError

from logdash.core.dates import day_path, iter_days, parse_log_datetime
from logdash.core.tree_store import get_tree_store, join_path
from logdash.models.chat_log import ChatLog
from logdash.models.search_log import SearchLog

logger = logging.getLogger(__name__)

SEARCH_LOGS_ROOT = "searchLogs"
CHAT_LOGS_ROOT = "aiChatLogs"


def _as_text(value) -> Optional[str]:
    return value if isinstance(value, str) else None


class LogStore:
    def __init__(self):
        self.tree = get_tree_store()

    async def _fetch_day(self, root: str, day: date) -> list[tuple[str, dict]]:
        data = await self.tree.get(day_path(root, day))
        if not isinstance(data, dict):
            return []
        return [
            (log_id, entry) for log_id, entry in data.items() if isinstance(entry, dict)
        ]

    async def _fetch_range(
        self, root: str, start: date, end: date
    ) -> list[tuple[date, str, dict]]:
        days = list(iter_days(start, end))
        results = await asyncio.gather(
            *(self._fetch_day(root, day) for day in days), return_exceptions=True
        )

        entries = []
        for day, result in zip(days, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(f"Error fetching {day_path(root, day)}: {result}")
                continue
            entries.extend((day, log_id, entry) for log_id, entry in result)

        return entries

    def _to_search_log(self, day: date, log_id: str, entry: dict) -> Optional[SearchLog]:
        record = {
            **entry,
            "id": log_id,
            "date": parse_log_datetime(day, clock=_as_text(entry.get("time"))),
        }
        try:
            return SearchLog.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Skipping malformed search log {log_id}: {e}")
            return None

    def _to_chat_log(self, day: date, log_id: str, entry: dict) -> Optional[ChatLog]:
        record = {
            **entry,
            "id": log_id,
            "date": parse_log_datetime(day, value=_as_text(entry.get("date"))),
        }
        try:
            return ChatLog.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Skipping malformed chat log {log_id}: {e}")
            return None

    async def fetch_search_logs(self, start: date, end: date) -> list[SearchLog]:
        logs = []
        for day, log_id, entry in await self._fetch_range(SEARCH_LOGS_ROOT, start, end):
            log = self._to_search_log(day, log_id, entry)
            if log:
                logs.append(log)

        return sorted(logs, key=lambda log: log.date, reverse=True)

    async def fetch_chat_logs(self, start: date, end: date) -> list[ChatLog]:
        logs = []
        for day, log_id, entry in await self._fetch_range(CHAT_LOGS_ROOT, start, end):
            log = self._to_chat_log(day, log_id, entry)
            if log:
                logs.append(log)

        return sorted(logs, key=lambda log: log.date, reverse=True)

    async def get_chat_log(self, day: date, log_id: str) -> Optional[ChatLog]:
        entry = await self.tree.get(join_path(day_path(CHAT_LOGS_ROOT, day), log_id))
        if not isinstance(entry, dict):
            return None
        return self._to_chat_log(day, log_id, entry)


_store = LogStore()


def get_log_store() -> LogStore:
    return _store
