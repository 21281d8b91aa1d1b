from datetime import date
from typing import Optional

from fastapi import APIRouter

from logdash.models.page import SortOrder
from logdash.models.search_log import SearchLogFilter, SearchLogPage, SearchLogSortKey
from logdash.services.search_log_service import get_search_log_service

router = APIRouter()


@router.get("", response_model=SearchLogPage)
async def list_search_logs(
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    device: Optional[str] = None,
    query: Optional[str] = None,
    search_type: Optional[str] = None,
    sort_by: SearchLogSortKey = SearchLogSortKey.DATE,
    order: SortOrder = SortOrder.DESC,
    page: int = 1,
    page_size: Optional[int] = None,
):
    service = get_search_log_service()
    filters = SearchLogFilter(
        from_date=from_date,
        to_date=to_date,
        device=device,
        query=query,
        search_type=search_type,
        sort_by=sort_by,
        order=order,
        page=page,
        page_size=page_size,
    )
    return await service.list_logs(filters)
