import csv
import io
from datetime import date
from typing import Optional

from logdash.config.settings import get_settings
from logdash.core.dates import log_timezone, resolve_range, window_cutoff
from logdash.core.paging import paginate, sort_items
from logdash.models.chat_log import ChatLog, ChatLogFilter, ChatLogPage, ChatLogSortKey
from logdash.storage.device_store import get_device_store
from logdash.storage.log_store import get_log_store

CSV_HEADERS = [
    "Date",
    "Device ID",
    "User Message",
    "AI Model",
    "Confidence",
    "Processing Time (ms)",
    "Tokens Used",
    "Sources Count",
]

SORT_KEYS = {
    ChatLogSortKey.DATE: lambda log: log.date,
    ChatLogSortKey.DEVICE_ID: lambda log: log.device_name.casefold(),
    ChatLogSortKey.USER_MESSAGE: lambda log: log.user_message.casefold(),
    ChatLogSortKey.CONFIDENCE: lambda log: log.confidence,
    ChatLogSortKey.PROCESSING_TIME: lambda log: log.processing_time,
}


def filter_chat_logs(logs: list[ChatLog], filters: ChatLogFilter) -> list[ChatLog]:
    filtered = logs

    if filters.device:
        needle = filters.device.casefold()
        filtered = [log for log in filtered if needle in log.device_name.casefold()]

    if filters.message:
        needle = filters.message.casefold()
        filtered = [log for log in filtered if needle in log.user_message.casefold()]

    if filters.ai_model:
        filtered = [log for log in filtered if log.ai_model == filters.ai_model]

    bounds = [
        ("confidence", filters.min_confidence, filters.max_confidence),
        ("processing_time", filters.min_processing_time, filters.max_processing_time),
        ("tokens_used", filters.min_tokens, filters.max_tokens),
    ]
    for field, low, high in bounds:
        if low is not None:
            filtered = [log for log in filtered if getattr(log, field) >= low]
        if high is not None:
            filtered = [log for log in filtered if getattr(log, field) <= high]

    if filters.time_range:
        cutoff = window_cutoff(filters.time_range)
        filtered = [log for log in filtered if log.date >= cutoff]

    return filtered


def format_csv_date(log: ChatLog) -> str:
    return log.date.astimezone(log_timezone()).strftime("%m/%d/%Y %H:%M:%S")


class ChatLogService:
    def __init__(self):
        self.log_store = get_log_store()
        self.device_store = get_device_store()
        self.settings = get_settings()

    async def load_logs(
        self, from_date: Optional[date], to_date: Optional[date]
    ) -> list[ChatLog]:
        start, end = resolve_range(from_date, to_date)
        logs = await self.log_store.fetch_chat_logs(start, end)
        names = await self.device_store.get_display_names()

        for log in logs:
            log.device_name = names.get(log.device_id, log.device_id)

        return logs

    async def _filtered(self, filters: ChatLogFilter) -> tuple[list[ChatLog], list[ChatLog]]:
        logs = await self.load_logs(filters.from_date, filters.to_date)
        filtered = filter_chat_logs(logs, filters)
        return logs, sort_items(filtered, SORT_KEYS[filters.sort_by], filters.order)

    async def list_logs(self, filters: ChatLogFilter) -> ChatLogPage:
        logs, filtered = await self._filtered(filters)

        page_size = filters.page_size or self.settings.default_page_size
        return ChatLogPage(
            **paginate(filtered, filters.page, page_size),
            ai_models=sorted({log.ai_model for log in logs if log.ai_model}),
        )

    async def get_log(self, day: date, log_id: str) -> ChatLog:
        log = await self.log_store.get_chat_log(day, log_id)
        if not log:
            raise KeyError(f"Chat log {log_id} not found on {day}")

        names = await self.device_store.get_display_names()
        log.device_name = names.get(log.device_id, log.device_id)
        return log

    async def export_csv(
        self, filters: ChatLogFilter, ids: Optional[list[str]] = None
    ) -> str:
        _, logs = await self._filtered(filters)
        if ids:
            selected = set(ids)
            logs = [log for log in logs if log.id in selected]

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for log in logs:
            writer.writerow(
                [
                    format_csv_date(log),
                    log.device_name or log.device_id,
                    log.user_message,
                    log.ai_model,
                    log.confidence,
                    log.processing_time,
                    log.tokens_used,
                    log.sources_count,
                ]
            )

        return buffer.getvalue()


_service = ChatLogService()


def get_chat_log_service() -> ChatLogService:
    return _service
