from collections import Counter
from datetime import date
from typing import Iterable, Optional

from logdash.config.settings import get_settings
from logdash.core.dates import local_day, local_hour
from logdash.core.paging import round_half_up
from logdash.models.analytics import (
    ChatAnalytics,
    DeviceChatAnalytics,
    QueryCount,
    SearchAnalytics,
)
from logdash.models.chat_log import ChatLog
from logdash.models.search_log import SearchLog, SearchLogFilter
from logdash.services.chat_log_service import get_chat_log_service
from logdash.services.search_log_service import get_search_log_service


def confidence_band(confidence: float) -> str:
    if confidence >= 0.7:
        return "High (0.7-1.0)"
    if confidence >= 0.4:
        return "Medium (0.4-0.7)"
    return "Low (0-0.4)"


def processing_time_band(milliseconds: float) -> str:
    if milliseconds < 1000:
        return "<1s"
    if milliseconds < 2000:
        return "1-2s"
    if milliseconds < 3000:
        return "2-3s"
    if milliseconds < 5000:
        return "3-5s"
    return ">5s"


def token_band(tokens: int) -> str:
    if tokens < 200:
        return "<200"
    if tokens < 500:
        return "200-500"
    if tokens < 1000:
        return "500-1000"
    if tokens < 2000:
        return "1000-2000"
    return ">2000"


def top_queries(queries: Iterable[str], limit: int) -> list[QueryCount]:
    # most_common keeps first-seen order among equal counts
    counts = Counter(query.lower().strip() for query in queries)
    return [QueryCount(query=query, count=count) for query, count in counts.most_common(limit)]


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _daily(moments) -> dict[str, int]:
    return dict(sorted(Counter(local_day(moment) for moment in moments).items()))


def _hourly(moments) -> dict[int, int]:
    return dict(sorted(Counter(local_hour(moment) for moment in moments).items()))


def summarize_search_logs(logs: list[SearchLog], top_limit: int) -> SearchAnalytics:
    avg_results = _mean([len(log.results) for log in logs])

    return SearchAnalytics(
        total_searches=len(logs),
        search_type_counts=dict(Counter(log.search_type for log in logs)),
        device_counts=dict(Counter(log.device_name or log.device_id for log in logs)),
        daily_trends=_daily(log.date for log in logs),
        hourly_distribution=_hourly(log.date for log in logs),
        top_queries=top_queries((log.query for log in logs), top_limit),
        avg_results=round_half_up(avg_results, 1),
    )


def summarize_device_chats(
    device_id: str, device_name: str, logs: list[ChatLog], top_limit: int
) -> DeviceChatAnalytics:
    return DeviceChatAnalytics(
        device_id=device_id,
        device_name=device_name,
        total_chats=len(logs),
        ai_model_counts=dict(Counter(log.ai_model for log in logs)),
        daily_trends=_daily(log.date for log in logs),
        hourly_distribution=_hourly(log.date for log in logs),
        top_queries=top_queries((log.user_message for log in logs), top_limit),
        avg_confidence=round_half_up(_mean([log.confidence for log in logs]), 2),
        avg_processing_time=int(round_half_up(_mean([log.processing_time for log in logs]))),
        avg_tokens=int(round_half_up(_mean([log.tokens_used for log in logs]))),
        first_chat=min((log.date for log in logs), default=None),
        last_chat=max((log.date for log in logs), default=None),
    )


def summarize_chat_logs(
    logs: list[ChatLog], top_limit: int, device_top_limit: int
) -> ChatAnalytics:
    by_device: dict[str, list[ChatLog]] = {}
    for log in logs:
        by_device.setdefault(log.device_id, []).append(log)

    per_device = [
        summarize_device_chats(
            device_id,
            device_logs[0].device_name or device_id,
            device_logs,
            device_top_limit,
        )
        for device_id, device_logs in by_device.items()
    ]
    per_device.sort(key=lambda device: device.total_chats, reverse=True)

    return ChatAnalytics(
        total_chats=len(logs),
        ai_model_counts=dict(Counter(log.ai_model for log in logs)),
        device_counts=dict(Counter(log.device_name or log.device_id for log in logs)),
        daily_trends=_daily(log.date for log in logs),
        hourly_distribution=_hourly(log.date for log in logs),
        top_queries=top_queries((log.user_message for log in logs), top_limit),
        avg_confidence=round_half_up(_mean([log.confidence for log in logs]), 2),
        avg_processing_time=int(round_half_up(_mean([log.processing_time for log in logs]))),
        avg_tokens_used=int(round_half_up(_mean([log.tokens_used for log in logs]))),
        confidence_distribution=dict(Counter(confidence_band(log.confidence) for log in logs)),
        processing_time_ranges=dict(
            Counter(processing_time_band(log.processing_time) for log in logs)
        ),
        token_ranges=dict(Counter(token_band(log.tokens_used) for log in logs)),
        per_device=per_device,
    )


class AnalyticsService:
    def __init__(self):
        self.search_log_service = get_search_log_service()
        self.chat_log_service = get_chat_log_service()
        self.settings = get_settings()

    async def get_search_analytics(
        self, from_date: Optional[date] = None, to_date: Optional[date] = None
    ) -> SearchAnalytics:
        logs = await self.search_log_service.load_logs(
            SearchLogFilter(from_date=from_date, to_date=to_date)
        )
        return summarize_search_logs(logs, self.settings.top_queries_limit)

    async def get_chat_analytics(
        self, from_date: Optional[date] = None, to_date: Optional[date] = None
    ) -> ChatAnalytics:
        logs = await self.chat_log_service.load_logs(from_date, to_date)
        return summarize_chat_logs(
            logs,
            self.settings.top_queries_limit,
            self.settings.device_top_queries_limit,
        )

    async def get_device_chat_analytics(
        self,
        device_id: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> DeviceChatAnalytics:
        logs = await self.chat_log_service.load_logs(from_date, to_date)
        device_logs = [log for log in logs if log.device_id == device_id]
        if not device_logs:
            raise KeyError(f"No chats for device {device_id} in range")

        return summarize_device_chats(
            device_id,
            device_logs[0].device_name or device_id,
            device_logs,
            self.settings.device_top_queries_limit,
        )


_service = AnalyticsService()


def get_analytics_service() -> AnalyticsService:
    return _service
