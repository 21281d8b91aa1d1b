import logging
from typing import Optional

from logdash.config.settings import get_settings
from logdash.models.search_settings import (
    SearchSettings,
    SettingsCategory,
    SettingsItemResult,
)
from logdash.storage.search_settings_store import get_search_settings_store

logger = logging.getLogger(__name__)


def lowest_free_index(indexes) -> int:
    taken = set(indexes)
    index = 0
    while index in taken:
        index += 1
    return index


class SearchSettingsService:
    def __init__(self):
        self.store = get_search_settings_store()
        self.settings = get_settings()

    async def get_all(self) -> SearchSettings:
        return SearchSettings(
            **{
                category.value: list((await self.store.get_category(category)).values())
                for category in SettingsCategory
            }
        )

    async def search(self, category: SettingsCategory, term: str = "") -> list[str]:
        items = (await self.store.get_category(category)).values()
        needle = term.casefold()
        return [item for item in items if needle in item.casefold()]

    async def add_item(self, category: SettingsCategory, value: str) -> SettingsItemResult:
        value = value.strip()
        if not value:
            raise ValueError("Item cannot be empty")

        items = await self.store.get_category(category)
        if any(existing.casefold() == value.casefold() for existing in items.values()):
            raise ValueError(f"{value!r} is already in {category.value}")

        index = lowest_free_index(items)
        await self.store.set_item(category, index, value)
        logger.info(f"Added {value!r} to {category.value} at {index}")

        return SettingsItemResult(category=category, index=index, value=value)

    async def delete_item(
        self, category: SettingsCategory, value: str, user_email: Optional[str]
    ) -> None:
        allowed = self.settings.config_admin_emails
        if allowed and user_email not in allowed:
            raise PermissionError("You do not have permission to delete this item")

        items = await self.store.get_category(category)
        index = next((i for i, item in items.items() if item == value), None)
        if index is None:
            raise KeyError(f"{value!r} not found in {category.value}")

        await self.store.remove_item(category, index)
        logger.info(f"{user_email or 'unknown'} removed {value!r} from {category.value}")


_service = SearchSettingsService()


def get_search_settings_service() -> SearchSettingsService:
    return _service
