from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from logdash.models.page import Page, SortOrder


class ChatLogSortKey(str, Enum):
    DATE = "date"
    DEVICE_ID = "deviceId"
    USER_MESSAGE = "userMessage"
    CONFIDENCE = "confidence"
    PROCESSING_TIME = "processingTime"


class ConfidenceBand(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def of(cls, confidence: float) -> "ConfidenceBand":
        if confidence >= 0.7:
            return cls.HIGH
        if confidence >= 0.4:
            return cls.MEDIUM
        return cls.LOW


class ChatSource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    citation_number: Optional[int] = Field(None, alias="citationNumber")
    title: str = ""
    url: str = ""
    snippet: str = ""
    domain: str = ""


class ChatLog(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: datetime
    device_id: str = Field("", alias="deviceId")
    device_name: str = Field("", alias="deviceName")
    user_message: str = Field("", alias="userMessage")
    ai_response: str = Field("", alias="aiResponse")
    ai_model: str = Field("", alias="aiModel")
    confidence: float = 0.0
    processing_time: float = Field(0, alias="processingTime")
    tokens_used: int = Field(0, alias="tokensUsed")
    sources_count: int = Field(0, alias="sourcesCount")
    sources: list[ChatSource] = Field(default_factory=list)
    related_questions: list[str] = Field(default_factory=list, alias="relatedQuestions")
    conversation_id: Optional[str] = Field(None, alias="conversationId")
    message_number: Optional[int] = Field(None, alias="messageNumber")
    conversation_length: Optional[int] = Field(None, alias="conversationLength")
    timestamp: Optional[int] = None
    was_regenerated: Optional[bool] = Field(None, alias="wasRegenerated")
    user_agent: str = Field("", alias="userAgent")

    @computed_field(alias="confidenceBand")
    @property
    def confidence_band(self) -> ConfidenceBand:
        return ConfidenceBand.of(self.confidence)


class ChatLogFilter(BaseModel):
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    device: Optional[str] = None
    message: Optional[str] = None
    ai_model: Optional[str] = None
    min_confidence: Optional[float] = None
    max_confidence: Optional[float] = None
    min_processing_time: Optional[int] = None
    max_processing_time: Optional[int] = None
    min_tokens: Optional[int] = None
    max_tokens: Optional[int] = None
    time_range: Optional[str] = None
    sort_by: ChatLogSortKey = ChatLogSortKey.DATE
    order: SortOrder = SortOrder.DESC
    page: int = 1
    page_size: Optional[int] = None


class ChatLogPage(Page[ChatLog]):
    ai_models: list[str] = Field(default_factory=list)
