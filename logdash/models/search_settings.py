from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SettingsCategory(str, Enum):
    EXCLUDED_DOMAINS = "excludedDomains"
    EXCLUDED_URLS = "excludedUrls"
    INAPPROPRIATE_KEYWORDS = "inappropriateKeywords"


class SearchSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    excluded_domains: list[str] = Field(default_factory=list, alias="excludedDomains")
    excluded_urls: list[str] = Field(default_factory=list, alias="excludedUrls")
    inappropriate_keywords: list[str] = Field(
        default_factory=list, alias="inappropriateKeywords"
    )


class SettingsItem(BaseModel):
    value: str


class SettingsItemResult(BaseModel):
    category: SettingsCategory
    index: int
    value: str
