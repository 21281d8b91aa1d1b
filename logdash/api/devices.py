from typing import Optional

from fastapi import APIRouter

from logdash.models.device import (
    BulkNameResult,
    Device,
    DeviceList,
    DeviceSortKey,
    DeviceUpdate,
)
from logdash.models.page import SortOrder
from logdash.services.device_service import get_device_service

router = APIRouter()


@router.get("", response_model=DeviceList)
async def list_devices(
    search: Optional[str] = None,
    sort_by: DeviceSortKey = DeviceSortKey.LAST_SEEN,
    order: SortOrder = SortOrder.DESC,
):
    service = get_device_service()
    return await service.list_devices(search, sort_by, order)


@router.post("/bulk-name", response_model=BulkNameResult)
async def name_unnamed_devices(update: DeviceUpdate):
    service = get_device_service()
    return await service.name_unnamed_devices(update)


@router.get("/{device_id}", response_model=Device)
async def get_device(device_id: str):
    service = get_device_service()
    return await service.get_device(device_id)


@router.put("/{device_id}", response_model=Device)
async def update_device(device_id: str, update: DeviceUpdate):
    service = get_device_service()
    return await service.update_device(device_id, update)


@router.post("/{device_id}/toggle-search-blocking", response_model=Device)
async def toggle_search_blocking(device_id: str):
    service = get_device_service()
    return await service.toggle_search_blocking(device_id)


@router.delete("/{device_id}", status_code=204)
async def delete_device(device_id: str):
    service = get_device_service()
    await service.delete_device(device_id)
