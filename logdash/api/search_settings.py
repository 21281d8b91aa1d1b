from typing import Optional

from fastapi import APIRouter, Header

from logdash.models.search_settings import (
    SearchSettings,
    SettingsCategory,
    SettingsItem,
    SettingsItemResult,
)
from logdash.services.search_settings_service import get_search_settings_service

router = APIRouter()


@router.get("", response_model=SearchSettings)
async def get_search_settings():
    service = get_search_settings_service()
    return await service.get_all()


@router.get("/{category}", response_model=list[str])
async def search_category(category: SettingsCategory, q: str = ""):
    service = get_search_settings_service()
    return await service.search(category, q)


@router.post("/{category}", response_model=SettingsItemResult, status_code=201)
async def add_item(category: SettingsCategory, item: SettingsItem):
    service = get_search_settings_service()
    return await service.add_item(category, item.value)


@router.delete("/{category}", status_code=204)
async def delete_item(
    category: SettingsCategory,
    value: str,
    user_email: Optional[str] = Header(None, alias="x-user-email"),
):
    service = get_search_settings_service()
    await service.delete_item(category, value, user_email)
