from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceState(str, Enum):
    ON = "on"
    OFF = "off"
    UNKNOWN = "unknown"


class WorkerAction(str, Enum):
    WORKER_ENABLED = "worker_enabled"
    WORKER_DISABLED = "worker_disabled"
    AI_ENABLED = "ai_enabled"
    AI_DISABLED = "ai_disabled"
    BULK_ENABLE = "bulk_enable"
    BULK_DISABLE = "bulk_disable"


class WorkerStatus(BaseModel):
    worker_status: ServiceState = ServiceState.UNKNOWN
    ai_status: ServiceState = ServiceState.UNKNOWN
    timestamp: Optional[int] = None
    version: Optional[str] = None


class WorkerUpdateRequest(BaseModel):
    worker_status: Optional[ServiceState] = None
    ai_status: Optional[ServiceState] = None
    reason: Optional[str] = None


class WorkerUpdateResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


class ToggleRequest(BaseModel):
    action: WorkerAction
    reason: str = "Manual toggle from control panel"


class ActivityLogEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    timestamp: int
    user_id: str = Field("unknown", alias="userId")
    user_email: str = Field("unknown", alias="userEmail")
    action: WorkerAction
    old_value: Optional[str] = Field(None, alias="oldValue")
    new_value: Optional[str] = Field(None, alias="newValue")
    reason: Optional[str] = None
    ip_address: Optional[str] = Field(None, alias="ipAddress")


class ToggleResult(BaseModel):
    action: WorkerAction
    status: WorkerStatus
    activity: ActivityLogEntry


class ProbeResult(BaseModel):
    ok: bool
    response_time_ms: int
    error: Optional[str] = None


class HealthReport(BaseModel):
    worker_url: str
    health: ProbeResult
    search: ProbeResult
    ai_chat: ProbeResult
