import asyncio
import logging
from typing import Optional

from logdash.core.dates import to_epoch
from logdash.core.paging import sort_items
from logdash.models.device import (
    BulkNameResult,
    Device,
    DeviceList,
    DeviceSortKey,
    DeviceSummary,
    DeviceUpdate,
)
from logdash.models.page import SortOrder
from logdash.storage.device_store import get_device_store

logger = logging.getLogger(__name__)

SORT_KEYS = {
    DeviceSortKey.DEVICE_NAME: lambda device: device.device_name.casefold(),
    DeviceSortKey.LAST_SEEN: lambda device: to_epoch(device.last_seen),
    DeviceSortKey.FIRST_VISIT: lambda device: to_epoch(device.first_visit),
}


def summarize_devices(devices: list[Device]) -> DeviceSummary:
    named = sum(1 for d in devices if d.is_named)
    return DeviceSummary(
        total=len(devices),
        named=named,
        unnamed=len(devices) - named,
        search_blocked=sum(1 for d in devices if d.search_blocked),
    )


def _matches(device: Device, term: str) -> bool:
    return any(
        term in (value or "").casefold()
        for value in (device.device_name, device.device_id, device.user_agent)
    )


def _validated_name(update: DeviceUpdate) -> str:
    name = update.device_name.strip()
    if not name:
        raise ValueError("Device name cannot be empty")
    return name


class DeviceService:
    def __init__(self):
        self.store = get_device_store()

    async def list_devices(
        self,
        search: Optional[str] = None,
        sort_by: DeviceSortKey = DeviceSortKey.LAST_SEEN,
        order: SortOrder = SortOrder.DESC,
    ) -> DeviceList:
        devices = await self.store.list_devices()
        summary = summarize_devices(devices)

        if search:
            term = search.casefold()
            devices = [d for d in devices if _matches(d, term)]

        return DeviceList(
            devices=sort_items(devices, SORT_KEYS[sort_by], order),
            summary=summary,
        )

    async def get_device(self, device_id: str) -> Device:
        device = await self.store.get_device(device_id)
        if not device:
            raise KeyError(f"Device {device_id} not found")
        return device

    async def update_device(self, device_id: str, update: DeviceUpdate) -> Device:
        name = _validated_name(update)
        await self.get_device(device_id)

        await self.store.update_fields(
            device_id,
            {
                "deviceName": name,
                "isNamed": update.is_named,
                "searchBlocked": update.search_blocked,
            },
        )
        logger.info(f"Device {device_id} renamed to {name!r}")
        return await self.get_device(device_id)

    async def toggle_search_blocking(self, device_id: str) -> Device:
        device = await self.get_device(device_id)
        await self.store.update_fields(
            device_id, {"searchBlocked": not device.search_blocked}
        )
        return await self.get_device(device_id)

    async def name_unnamed_devices(self, update: DeviceUpdate) -> BulkNameResult:
        name = _validated_name(update)
        unnamed = [d for d in await self.store.list_devices() if not d.is_named]

        fields = {
            "deviceName": name,
            "isNamed": update.is_named,
            "searchBlocked": update.search_blocked,
        }
        await asyncio.gather(
            *(self.store.update_fields(d.device_id, fields) for d in unnamed)
        )

        logger.info(f"Named {len(unnamed)} unnamed devices {name!r}")
        return BulkNameResult(updated=len(unnamed))

    async def delete_device(self, device_id: str) -> None:
        await self.get_device(device_id)
        await self.store.delete_device(device_id)
        logger.info(f"Device {device_id} deleted")


_service = DeviceService()


def get_device_service() -> DeviceService:
    return _service
