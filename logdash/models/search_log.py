from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from logdash.models.page import Page, SortOrder


class SearchLogSortKey(str, Enum):
    DATE = "date"
    DEVICE_ID = "deviceId"
    QUERY = "query"


class SearchResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content_url: str = Field("", alias="contentUrl")
    display_url: str = Field("", alias="displayUrl")
    favicon_url: str = Field("", alias="faviconUrl")
    name: str = ""
    snippet: str = ""
    thumbnail_url: str = Field("", alias="thumbnailUrl")
    url: str = ""


class SearchLog(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: datetime
    device_id: str = Field("", alias="deviceId")
    device_name: str = Field("", alias="deviceName")
    query: str = ""
    results: list[SearchResult] = Field(default_factory=list)
    timestamp: Optional[int] = None
    user_agent: str = Field("", alias="userAgent")
    search_type: str = Field("", alias="searchType")


class SearchLogFilter(BaseModel):
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    device: Optional[str] = None
    query: Optional[str] = None
    search_type: Optional[str] = None
    sort_by: SearchLogSortKey = SearchLogSortKey.DATE
    order: SortOrder = SortOrder.DESC
    page: int = 1
    page_size: Optional[int] = None


class SearchLogPage(Page[SearchLog]):
    pass
