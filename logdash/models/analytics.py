from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class QueryCount(BaseModel):
    query: str
    count: int


class SearchAnalytics(BaseModel):
    total_searches: int
    search_type_counts: dict[str, int]
    device_counts: dict[str, int]
    daily_trends: dict[str, int]
    hourly_distribution: dict[int, int]
    top_queries: list[QueryCount]
    avg_results: float


class DeviceChatAnalytics(BaseModel):
    device_id: str
    device_name: str
    total_chats: int
    ai_model_counts: dict[str, int]
    daily_trends: dict[str, int]
    hourly_distribution: dict[int, int]
    top_queries: list[QueryCount]
    avg_confidence: float
    avg_processing_time: int
    avg_tokens: int
    first_chat: Optional[datetime]
    last_chat: Optional[datetime]


class ChatAnalytics(BaseModel):
    total_chats: int
    ai_model_counts: dict[str, int]
    device_counts: dict[str, int]
    daily_trends: dict[str, int]
    hourly_distribution: dict[int, int]
    top_queries: list[QueryCount]
    avg_confidence: float
    avg_processing_time: int
    avg_tokens_used: int
    confidence_distribution: dict[str, int]
    processing_time_ranges: dict[str, int]
    token_ranges: dict[str, int]
    per_device: list[DeviceChatAnalytics]
