import logging

from pydantic import ValidationError

from logdash.core.tree_store import get_tree_store
from logdash.models.worker import ActivityLogEntry

logger = logging.getLogger(__name__)

ACTIVITY_LOG_ROOT = "workerActivityLogs"


class ActivityStore:
    def __init__(self):
        self.tree = get_tree_store()

    async def append(self, entry: dict) -> ActivityLogEntry:
        entry_id = await self.tree.push(ACTIVITY_LOG_ROOT, entry)
        return ActivityLogEntry.model_validate({**entry, "id": entry_id})

    async def list_entries(self, limit: int) -> list[ActivityLogEntry]:
        data = await self.tree.get(ACTIVITY_LOG_ROOT)
        if not isinstance(data, dict):
            return []

        entries = []
        for entry_id, entry in data.items():
            if not isinstance(entry, dict):
                continue
            try:
                entries.append(ActivityLogEntry.model_validate({**entry, "id": entry_id}))
            except ValidationError as e:
                logger.warning(f"Skipping malformed activity entry {entry_id}: {e}")

        entries.sort(key=lambda e: e.timestamp, reverse=True)
        return entries[:limit]


_store = ActivityStore()


def get_activity_store() -> ActivityStore:
    return _store
