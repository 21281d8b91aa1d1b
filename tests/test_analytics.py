"""Tests for search and chat analytics."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from logdash.models.chat_log import ChatLog
from logdash.models.search_log import SearchLog
from logdash.services.analytics_service import (
    confidence_band,
    processing_time_band,
    summarize_chat_logs,
    summarize_search_logs,
    token_band,
    top_queries,
)

TOKYO = ZoneInfo("Asia/Tokyo")
RANGE = {"from_date": "2024-05-01", "to_date": "2024-05-02"}


def _chat(log_id, device_id, message, model, confidence, ms, tokens, day, hour):
    return ChatLog(
        id=log_id,
        date=datetime(2024, 5, day, hour, tzinfo=TOKYO),
        device_id=device_id,
        device_name=device_id.upper(),
        user_message=message,
        ai_model=model,
        confidence=confidence,
        processing_time=ms,
        tokens_used=tokens,
    )


def _search(log_id, device_id, query, search_type, results, day, hour):
    return SearchLog(
        id=log_id,
        date=datetime(2024, 5, day, hour, tzinfo=TOKYO),
        device_id=device_id,
        device_name=device_id,
        query=query,
        search_type=search_type,
        results=[{"name": f"r{i}"} for i in range(results)],
    )


def test_bands():
    """Band edges belong to the upper band."""
    assert confidence_band(0.7) == "High (0.7-1.0)"
    assert confidence_band(0.4) == "Medium (0.4-0.7)"
    assert confidence_band(0.39) == "Low (0-0.4)"

    assert processing_time_band(999) == "<1s"
    assert processing_time_band(1000) == "1-2s"
    assert processing_time_band(2999) == "2-3s"
    assert processing_time_band(3000) == "3-5s"
    assert processing_time_band(5000) == ">5s"

    assert token_band(199) == "<200"
    assert token_band(200) == "200-500"
    assert token_band(999) == "500-1000"
    assert token_band(1000) == "1000-2000"
    assert token_band(2000) == ">2000"


def test_top_queries_normalizes_and_keeps_first_seen_ties():
    """Queries are lower-cased and trimmed; equal counts keep first-seen order."""
    result = top_queries(["B", "a", " b ", "c", "A", "d"], limit=3)

    assert [(q.query, q.count) for q in result] == [("b", 2), ("a", 2), ("c", 1)]


def test_summarize_search_logs():
    """Search totals, breakdowns and the one-decimal results average."""
    logs = [
        _search("a", "dev-1", "Cats", "web", 1, 1, 9),
        _search("b", "dev-1", "cats", "images", 1, 1, 9),
        _search("c", "dev-2", "dogs", "web", 2, 2, 23),
    ]

    summary = summarize_search_logs(logs, top_limit=10)

    assert summary.total_searches == 3
    assert summary.search_type_counts == {"web": 2, "images": 1}
    assert summary.device_counts == {"dev-1": 2, "dev-2": 1}
    assert summary.daily_trends == {"2024-05-01": 2, "2024-05-02": 1}
    assert summary.hourly_distribution == {9: 2, 23: 1}
    assert summary.top_queries[0].query == "cats"
    assert summary.top_queries[0].count == 2
    assert summary.avg_results == 1.3


def test_summarize_empty_logs():
    """No logs gives zeroed summaries."""
    search = summarize_search_logs([], top_limit=10)
    chat = summarize_chat_logs([], top_limit=10, device_top_limit=5)

    assert search.total_searches == 0
    assert search.avg_results == 0
    assert chat.total_chats == 0
    assert chat.avg_confidence == 0
    assert chat.per_device == []


def test_summarize_chat_logs():
    """Chat totals, averages and band distributions."""
    logs = [
        _chat("c1", "dev-1", "What is AI?", "gpt-4o", 0.9, 800, 150, 1, 10),
        _chat("c2", "dev-2", "Hello", "claude", 0.5, 2500, 600, 1, 11),
        _chat("c3", "dev-1", "what is ai?", "gpt-4o", 0.2, 6000, 2500, 2, 10),
    ]

    summary = summarize_chat_logs(logs, top_limit=10, device_top_limit=5)

    assert summary.total_chats == 3
    assert summary.ai_model_counts == {"gpt-4o": 2, "claude": 1}
    assert summary.device_counts == {"DEV-1": 2, "DEV-2": 1}
    assert summary.daily_trends == {"2024-05-01": 2, "2024-05-02": 1}
    assert summary.hourly_distribution == {10: 2, 11: 1}
    assert summary.avg_confidence == 0.53
    assert summary.avg_processing_time == 3100
    assert summary.avg_tokens_used == 1083
    assert summary.confidence_distribution == {
        "High (0.7-1.0)": 1,
        "Medium (0.4-0.7)": 1,
        "Low (0-0.4)": 1,
    }
    assert summary.processing_time_ranges == {"<1s": 1, "2-3s": 1, ">5s": 1}
    assert summary.token_ranges == {"<200": 1, "500-1000": 1, ">2000": 1}
    assert summary.top_queries[0].query == "what is ai?"
    assert summary.top_queries[0].count == 2


def test_per_device_breakdown():
    """Devices are ordered by chat count with their own averages."""
    logs = [
        _chat("c1", "dev-2", "Hello", "claude", 0.5, 2500, 600, 1, 11),
        _chat("c2", "dev-1", "What is AI?", "gpt-4o", 0.9, 800, 150, 1, 10),
        _chat("c3", "dev-1", "what is ai?", "gpt-4o", 0.2, 6000, 2500, 2, 10),
    ]

    per_device = summarize_chat_logs(logs, top_limit=10, device_top_limit=5).per_device

    assert [d.device_id for d in per_device] == ["dev-1", "dev-2"]
    first = per_device[0]
    assert first.device_name == "DEV-1"
    assert first.total_chats == 2
    assert first.avg_confidence == 0.55
    assert first.avg_processing_time == 3400
    assert first.avg_tokens == 1325
    assert first.first_chat == datetime(2024, 5, 1, 10, tzinfo=TOKYO)
    assert first.last_chat == datetime(2024, 5, 2, 10, tzinfo=TOKYO)


@pytest.fixture
def logs(seed):
    seed("deviceRegistry/dev-1", {"deviceName": "Library iPad", "isNamed": True})
    seed(
        "searchLogs/2024/05/01",
        {
            "s1": {"deviceId": "dev-1", "query": "Cats", "searchType": "web", "time": "09:15:00"},
            "s2": {"deviceId": "dev-2", "query": "cats", "searchType": "web", "time": "14:00:00"},
        },
    )
    seed(
        "aiChatLogs/2024/05/02",
        {
            "c1": {
                "deviceId": "dev-1",
                "userMessage": "What is AI?",
                "aiModel": "gpt-4o",
                "confidence": 0.8,
                "processingTime": 1200,
                "tokensUsed": 300,
                "date": "2024-05-02T08:30:00+09:00",
            },
            "c2": {
                "deviceId": "dev-2",
                "userMessage": "Hello",
                "aiModel": "claude",
                "confidence": 0.6,
                "processingTime": 900,
                "tokensUsed": 100,
                "date": "2024-05-02T09:30:00+09:00",
            },
        },
    )


def test_search_analytics_endpoint(client, logs):
    """Search analytics use device display names."""
    response = client.get("/analytics/search", params=RANGE)

    assert response.status_code == 200
    data = response.json()
    assert data["total_searches"] == 2
    assert data["device_counts"] == {"Library iPad": 1, "dev-2": 1}
    assert data["hourly_distribution"] == {"9": 1, "14": 1}
    assert data["top_queries"] == [{"query": "cats", "count": 2}]


def test_chat_analytics_endpoint(client, logs):
    """Chat analytics cover every chat in the range."""
    response = client.get("/analytics/chat", params=RANGE)

    assert response.status_code == 200
    data = response.json()
    assert data["total_chats"] == 2
    assert data["avg_confidence"] == 0.7
    assert data["avg_processing_time"] == 1050
    assert data["daily_trends"] == {"2024-05-02": 2}
    assert {d["device_id"] for d in data["per_device"]} == {"dev-1", "dev-2"}


def test_device_chat_analytics_endpoint(client, logs):
    """A single device's breakdown is addressable by id."""
    response = client.get("/analytics/chat/devices/dev-1", params=RANGE)

    assert response.status_code == 200
    data = response.json()
    assert data["device_name"] == "Library iPad"
    assert data["total_chats"] == 1
    assert data["ai_model_counts"] == {"gpt-4o": 1}


def test_device_chat_analytics_unknown_device(client, logs):
    """A device without chats in range is a 404."""
    response = client.get("/analytics/chat/devices/dev-404", params=RANGE)

    assert response.status_code == 404


def test_analytics_empty_range(client):
    """An empty range gives a zeroed summary."""
    response = client.get(
        "/analytics/chat", params={"from_date": "2023-01-01", "to_date": "2023-01-02"}
    )

    assert response.status_code == 200
    assert response.json()["total_chats"] == 0
