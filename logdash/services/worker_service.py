import asyncio
import logging
import time
from typing import Optional

from logdash.config.settings import get_settings
from logdash.core.worker_client import WorkerAPIError, get_worker_client
from logdash.models.worker import (
    ActivityLogEntry,
    HealthReport,
    ServiceState,
    ToggleRequest,
    ToggleResult,
    WorkerAction,
    WorkerStatus,
    WorkerUpdateRequest,
)
from logdash.storage.activity_store import get_activity_store

logger = logging.getLogger(__name__)

ACTION_UPDATES = {
    WorkerAction.WORKER_ENABLED: {"worker_status": ServiceState.ON},
    WorkerAction.WORKER_DISABLED: {"worker_status": ServiceState.OFF},
    WorkerAction.AI_ENABLED: {"ai_status": ServiceState.ON},
    WorkerAction.AI_DISABLED: {"ai_status": ServiceState.OFF},
    WorkerAction.BULK_ENABLE: {
        "worker_status": ServiceState.ON,
        "ai_status": ServiceState.ON,
    },
    WorkerAction.BULK_DISABLE: {
        "worker_status": ServiceState.OFF,
        "ai_status": ServiceState.OFF,
    },
}


class WorkerService:
    def __init__(self):
        self.client = get_worker_client()
        self.activity_store = get_activity_store()
        self.settings = get_settings()

    def worker_url(self) -> str:
        return self.client.base_url

    async def get_status(self) -> WorkerStatus:
        return await self.client.get_status()

    async def _previous_status(self) -> WorkerStatus:
        try:
            return await self.client.get_status()
        except WorkerAPIError as e:
            logger.warning(f"Could not read worker status before toggle: {e}")
            return WorkerStatus()

    async def toggle(
        self,
        request: ToggleRequest,
        auth_token: Optional[str] = None,
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
    ) -> ToggleResult:
        token = auth_token or self.settings.worker_admin_token
        if not token:
            raise PermissionError("No worker admin token available")

        updates = ACTION_UPDATES[request.action]
        updates_worker = "worker_status" in updates
        previous = await self._previous_status()

        response = await self.client.update_status(
            token, WorkerUpdateRequest(**updates, reason=request.reason)
        )
        if not response.success:
            logger.error(f"Worker rejected {request.action.value}: {response.error}")
            raise WorkerAPIError(response.error or "Failed to update worker status")

        old_value = previous.worker_status if updates_worker else previous.ai_status
        new_value = updates.get("worker_status") or updates.get("ai_status")

        activity = await self.activity_store.append(
            {
                "timestamp": int(time.time() * 1000),
                "userId": user_id or "unknown",
                "userEmail": user_email or "unknown",
                "action": request.action.value,
                "oldValue": old_value.value,
                "newValue": new_value.value,
                "reason": request.reason,
            }
        )
        logger.info(
            f"{activity.user_email} applied {request.action.value} "
            f"({old_value.value} -> {new_value.value})"
        )

        try:
            status = await self.client.get_status()
        except WorkerAPIError as e:
            # the update is already applied and logged
            logger.warning(f"Could not refresh worker status after toggle: {e}")
            status = previous.model_copy(update=updates)

        return ToggleResult(action=request.action, status=status, activity=activity)

    async def run_health_checks(self) -> HealthReport:
        health, search, ai_chat = await asyncio.gather(
            self.client.probe_health(),
            self.client.probe_search(),
            self.client.probe_ai_chat(),
        )
        return HealthReport(
            worker_url=self.worker_url(),
            health=health,
            search=search,
            ai_chat=ai_chat,
        )

    async def list_activity(self) -> list[ActivityLogEntry]:
        return await self.activity_store.list_entries(self.settings.activity_log_limit)


_service = WorkerService()


def get_worker_service() -> WorkerService:
    return _service
