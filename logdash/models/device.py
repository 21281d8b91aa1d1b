from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DeviceSortKey(str, Enum):
    DEVICE_NAME = "deviceName"
    LAST_SEEN = "lastSeen"
    FIRST_VISIT = "firstVisit"


class Device(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device_id: str = Field(alias="deviceId")
    device_name: str = Field("", alias="deviceName")
    first_visit: Optional[str] = Field(None, alias="firstVisit")
    last_seen: Optional[str] = Field(None, alias="lastSeen")
    hardware_concurrency: Optional[int] = Field(None, alias="hardwareConcurrency")
    is_named: bool = Field(False, alias="isNamed")
    screen_resolution: Optional[str] = Field(None, alias="screenResolution")
    user_agent: str = Field("", alias="userAgent")
    search_blocked: bool = Field(False, alias="searchBlocked")

    @property
    def display_name(self) -> str:
        return self.device_name or self.device_id


class DeviceUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device_name: str = Field(alias="deviceName")
    is_named: bool = Field(False, alias="isNamed")
    search_blocked: bool = Field(False, alias="searchBlocked")


class DeviceSummary(BaseModel):
    total: int
    named: int
    unnamed: int
    search_blocked: int


class DeviceList(BaseModel):
    devices: list[Device]
    summary: DeviceSummary


class BulkNameResult(BaseModel):
    updated: int
