from typing import Optional

from fastapi import APIRouter, Header

from logdash.models.worker import (
    ActivityLogEntry,
    HealthReport,
    ToggleRequest,
    ToggleResult,
    WorkerStatus,
)
from logdash.services.worker_service import get_worker_service

router = APIRouter()


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


@router.get("/status", response_model=WorkerStatus)
async def get_worker_status():
    service = get_worker_service()
    return await service.get_status()


@router.post("/toggle", response_model=ToggleResult)
async def toggle_worker(
    request: ToggleRequest,
    authorization: Optional[str] = Header(None),
    user_id: Optional[str] = Header(None, alias="x-user-id"),
    user_email: Optional[str] = Header(None, alias="x-user-email"),
):
    service = get_worker_service()
    return await service.toggle(
        request, _bearer_token(authorization), user_id, user_email
    )


@router.get("/health", response_model=HealthReport)
async def run_health_checks():
    service = get_worker_service()
    return await service.run_health_checks()


@router.get("/activity", response_model=list[ActivityLogEntry])
async def list_activity():
    service = get_worker_service()
    return await service.list_activity()


@router.get("/url")
async def get_worker_url():
    service = get_worker_service()
    return {"worker_url": service.worker_url()}
