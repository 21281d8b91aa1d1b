from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from logdash.core.dates import today
from logdash.models.chat_log import ChatLog, ChatLogFilter, ChatLogPage, ChatLogSortKey
from logdash.models.page import SortOrder
from logdash.services.chat_log_service import get_chat_log_service

router = APIRouter()


def _filters(
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    device: Optional[str] = None,
    message: Optional[str] = None,
    ai_model: Optional[str] = None,
    min_confidence: Optional[float] = None,
    max_confidence: Optional[float] = None,
    min_processing_time: Optional[int] = None,
    max_processing_time: Optional[int] = None,
    min_tokens: Optional[int] = None,
    max_tokens: Optional[int] = None,
    time_range: Optional[str] = None,
    sort_by: ChatLogSortKey = ChatLogSortKey.DATE,
    order: SortOrder = SortOrder.DESC,
    page: int = 1,
    page_size: Optional[int] = None,
) -> ChatLogFilter:
    return ChatLogFilter(
        from_date=from_date,
        to_date=to_date,
        device=device,
        message=message,
        ai_model=ai_model,
        min_confidence=min_confidence,
        max_confidence=max_confidence,
        min_processing_time=min_processing_time,
        max_processing_time=max_processing_time,
        min_tokens=min_tokens,
        max_tokens=max_tokens,
        time_range=time_range,
        sort_by=sort_by,
        order=order,
        page=page,
        page_size=page_size,
    )


@router.get("", response_model=ChatLogPage)
async def list_chat_logs(filters: ChatLogFilter = Depends(_filters)):
    service = get_chat_log_service()
    return await service.list_logs(filters)


@router.get("/export")
async def export_chat_logs(
    filters: ChatLogFilter = Depends(_filters),
    ids: Optional[list[str]] = Query(None),
):
    service = get_chat_log_service()
    content = await service.export_csv(filters, ids)
    filename = f"ai_chat_logs_{today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{day}/{log_id}", response_model=ChatLog)
async def get_chat_log(day: date, log_id: str):
    service = get_chat_log_service()
    return await service.get_log(day, log_id)
