import logging
from typing import Optional

from pydantic import ValidationError

from logdash.core.tree_store import get_tree_store, join_path
from logdash.models.device import Device

logger = logging.getLogger(__name__)

DEVICE_REGISTRY_ROOT = "deviceRegistry"


class DeviceStore:
    def __init__(self):
        self.tree = get_tree_store()

    def _to_device(self, device_id: str, entry: dict) -> Optional[Device]:
        try:
            return Device.model_validate({**entry, "deviceId": device_id})
        except ValidationError as e:
            logger.warning(f"Skipping malformed device {device_id}: {e}")
            return None

    async def list_devices(self) -> list[Device]:
        registry = await self.tree.get(DEVICE_REGISTRY_ROOT)
        if not isinstance(registry, dict):
            return []

        devices = []
        for device_id, entry in registry.items():
            if not isinstance(entry, dict):
                continue
            device = self._to_device(device_id, entry)
            if device:
                devices.append(device)

        return devices

    async def get_device(self, device_id: str) -> Optional[Device]:
        entry = await self.tree.get(join_path(DEVICE_REGISTRY_ROOT, device_id))
        if not isinstance(entry, dict):
            return None
        return self._to_device(device_id, entry)

    async def update_fields(self, device_id: str, fields: dict) -> None:
        await self.tree.update(join_path(DEVICE_REGISTRY_ROOT, device_id), fields)

    async def delete_device(self, device_id: str) -> None:
        await self.tree.remove(join_path(DEVICE_REGISTRY_ROOT, device_id))

    async def get_display_names(self) -> dict[str, str]:
        return {device.device_id: device.display_name for device in await self.list_devices()}


_store = DeviceStore()


def get_device_store() -> DeviceStore:
    return _store
