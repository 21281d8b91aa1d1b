from logdash.core.tree_store import get_tree_store, join_path
from logdash.models.search_settings import SettingsCategory

SEARCH_SETTINGS_ROOT = "config/searchSettings"


def _as_items(data) -> dict[int, str]:
    if isinstance(data, list):
        items = dict(enumerate(data))
    elif isinstance(data, dict):
        items = {int(key): value for key, value in data.items() if key.isdigit()}
    else:
        items = {}

    return {
        index: items[index] for index in sorted(items) if isinstance(items[index], str)
    }


class SearchSettingsStore:
    def __init__(self):
        self.tree = get_tree_store()

    def _path(self, category: SettingsCategory, *parts) -> str:
        return join_path(SEARCH_SETTINGS_ROOT, category.value, *parts)

    async def _load(self, category: SettingsCategory):
        data = await self.tree.get(self._path(category))
        if isinstance(data, list):
            # a category written as one JSON array has no per-index children yet
            items = _as_items(data)
            await self.tree.set(
                self._path(category), {str(i): v for i, v in items.items()}
            )
        return data

    async def get_category(self, category: SettingsCategory) -> dict[int, str]:
        """Items of a category keyed by their integer index, in index order."""
        return _as_items(await self.tree.get(self._path(category)))

    async def set_item(self, category: SettingsCategory, index: int, value: str) -> None:
        await self._load(category)
        await self.tree.set(self._path(category, index), value)

    async def remove_item(self, category: SettingsCategory, index: int) -> None:
        await self._load(category)
        await self.tree.remove(self._path(category, index))


_store = SearchSettingsStore()


def get_search_settings_store() -> SearchSettingsStore:
    return _store
