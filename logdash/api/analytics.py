from datetime import date
from typing import Optional

from fastapi import APIRouter

from logdash.models.analytics import ChatAnalytics, DeviceChatAnalytics, SearchAnalytics
from logdash.services.analytics_service import get_analytics_service

router = APIRouter()


@router.get("/search", response_model=SearchAnalytics)
async def get_search_analytics(
    from_date: Optional[date] = None, to_date: Optional[date] = None
):
    service = get_analytics_service()
    return await service.get_search_analytics(from_date, to_date)


@router.get("/chat", response_model=ChatAnalytics)
async def get_chat_analytics(
    from_date: Optional[date] = None, to_date: Optional[date] = None
):
    service = get_analytics_service()
    return await service.get_chat_analytics(from_date, to_date)


@router.get("/chat/devices/{device_id}", response_model=DeviceChatAnalytics)
async def get_device_chat_analytics(
    device_id: str, from_date: Optional[date] = None, to_date: Optional[date] = None
):
    service = get_analytics_service()
    return await service.get_device_chat_analytics(device_id, from_date, to_date)
