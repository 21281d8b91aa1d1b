from logdash.config.settings import get_settings
from logdash.core.dates import resolve_range
from logdash.core.paging import paginate, sort_items
from logdash.models.search_log import (
    SearchLog,
    SearchLogFilter,
    SearchLogPage,
    SearchLogSortKey,
)
from logdash.storage.device_store import get_device_store
from logdash.storage.log_store import get_log_store

SORT_KEYS = {
    SearchLogSortKey.DATE: lambda log: log.date,
    SearchLogSortKey.DEVICE_ID: lambda log: log.device_name.casefold(),
    SearchLogSortKey.QUERY: lambda log: log.query.casefold(),
}


def filter_search_logs(
    logs: list[SearchLog], filters: SearchLogFilter
) -> list[SearchLog]:
    filtered = logs

    if filters.device:
        needle = filters.device.casefold()
        filtered = [log for log in filtered if needle in log.device_name.casefold()]

    if filters.query:
        needle = filters.query.casefold()
        filtered = [log for log in filtered if needle in log.query.casefold()]

    if filters.search_type:
        filtered = [log for log in filtered if log.search_type == filters.search_type]

    return filtered


class SearchLogService:
    def __init__(self):
        self.log_store = get_log_store()
        self.device_store = get_device_store()
        self.settings = get_settings()

    async def load_logs(self, filters: SearchLogFilter) -> list[SearchLog]:
        start, end = resolve_range(filters.from_date, filters.to_date)
        logs = await self.log_store.fetch_search_logs(start, end)
        names = await self.device_store.get_display_names()

        for log in logs:
            log.device_name = names.get(log.device_id, log.device_id)

        return logs

    async def list_logs(self, filters: SearchLogFilter) -> SearchLogPage:
        logs = filter_search_logs(await self.load_logs(filters), filters)
        logs = sort_items(logs, SORT_KEYS[filters.sort_by], filters.order)

        page_size = filters.page_size or self.settings.default_page_size
        return SearchLogPage(**paginate(logs, filters.page, page_size))


_service = SearchLogService()


def get_search_log_service() -> SearchLogService:
    return _service
