"""Tests for AI chat log browsing and CSV export."""

import pytest

from logdash.services.chat_log_service import CSV_HEADERS

RANGE = {"from_date": "2024-05-01", "to_date": "2024-05-01"}


@pytest.fixture
def chat_logs(seed):
    seed("deviceRegistry/dev-1", {"deviceName": "Library iPad", "isNamed": True})
    seed(
        "aiChatLogs/2024/05/01",
        {
            "c1": {
                "deviceId": "dev-1",
                "userMessage": "What is AI?",
                "aiResponse": "Artificial intelligence is...",
                "aiModel": "gpt-4o",
                "confidence": 0.9,
                "processingTime": 800,
                "tokensUsed": 150,
                "sourcesCount": 2,
                "sources": [
                    {"citationNumber": 1, "title": "AI", "url": "https://example.com/ai"}
                ],
                "date": "2024-05-01T10:00:00+09:00",
            },
            "c2": {
                "deviceId": "dev-2",
                "userMessage": "Hello",
                "aiModel": "claude",
                "confidence": 0.5,
                "processingTime": 2500,
                "tokensUsed": 600,
                "date": "2024-05-01T11:00:00+09:00",
            },
            "c3": {
                "deviceId": "dev-1",
                "userMessage": "what is ai?",
                "aiModel": "gpt-4o",
                "confidence": 0.2,
                "processingTime": 6000,
                "tokensUsed": 2500,
            },
        },
    )


def _ids(response):
    return [item["id"] for item in response.json()["items"]]


def test_list_chat_logs(client, chat_logs):
    """Chats come back newest first with device names and models."""
    response = client.get("/chat-logs", params=RANGE)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert _ids(response) == ["c2", "c1", "c3"]
    assert data["ai_models"] == ["claude", "gpt-4o"]

    by_id = {item["id"]: item for item in data["items"]}
    assert by_id["c1"]["deviceName"] == "Library iPad"
    assert by_id["c2"]["deviceName"] == "dev-2"
    assert by_id["c1"]["sources"][0]["citationNumber"] == 1


def test_confidence_band(client, chat_logs):
    """Each chat carries its confidence band."""
    response = client.get("/chat-logs", params=RANGE)

    bands = {item["id"]: item["confidenceBand"] for item in response.json()["items"]}
    assert bands == {"c1": "High", "c2": "Medium", "c3": "Low"}


def test_filter_chat_logs(client, chat_logs):
    """Range and text filters narrow the listing."""
    cases = [
        ({"min_confidence": 0.4}, ["c2", "c1"]),
        ({"max_confidence": 0.5}, ["c2", "c3"]),
        ({"max_tokens": 600}, ["c2", "c1"]),
        ({"min_processing_time": 1000, "max_processing_time": 3000}, ["c2"]),
        ({"ai_model": "claude"}, ["c2"]),
        ({"message": "WHAT"}, ["c1", "c3"]),
        ({"device": "ipad"}, ["c1", "c3"]),
    ]

    for params, expected in cases:
        response = client.get("/chat-logs", params={**RANGE, **params})
        assert _ids(response) == expected, params


def test_ai_models_ignore_filters(client, chat_logs):
    """The model list covers the whole range, not only the filtered page."""
    response = client.get("/chat-logs", params={**RANGE, "ai_model": "claude"})

    assert response.json()["ai_models"] == ["claude", "gpt-4o"]


def test_time_range_filter(client, chat_logs):
    """Old logs fall outside a relative window."""
    response = client.get("/chat-logs", params={**RANGE, "time_range": "24h"})
    assert response.json()["total"] == 0

    response = client.get("/chat-logs", params={**RANGE, "time_range": "2w"})
    assert response.status_code == 400


def test_sort_chat_logs(client, chat_logs):
    """Chats sort by confidence or processing time."""
    asc = client.get(
        "/chat-logs", params={**RANGE, "sort_by": "confidence", "order": "asc"}
    )
    assert _ids(asc) == ["c3", "c2", "c1"]

    slowest = client.get("/chat-logs", params={**RANGE, "sort_by": "processingTime"})
    assert _ids(slowest) == ["c3", "c2", "c1"]


def test_get_chat_log(client, chat_logs):
    """A single chat is found by day and id."""
    response = client.get("/chat-logs/2024-05-01/c1")

    assert response.status_code == 200
    data = response.json()
    assert data["userMessage"] == "What is AI?"
    assert data["aiResponse"] == "Artificial intelligence is..."
    assert data["deviceName"] == "Library iPad"


def test_get_missing_chat_log(client, chat_logs):
    """An unknown chat id is a 404."""
    response = client.get("/chat-logs/2024-05-01/nope")

    assert response.status_code == 404
    assert "error" in response.json()


def test_export_csv(client, chat_logs):
    """Export writes the header and one row per log."""
    response = client.get("/chat-logs/export", params=RANGE)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]

    lines = response.text.strip().split("\n")
    assert lines[0] == ",".join(CSV_HEADERS)
    assert len(lines) == 4


def test_export_selected_ids(client, chat_logs):
    """Only the requested logs are exported."""
    response = client.get("/chat-logs/export", params={**RANGE, "ids": ["c1"]})

    lines = response.text.strip().split("\n")
    assert len(lines) == 2
    assert lines[1].startswith("05/01/2024 10:00:00,Library iPad,What is AI?,gpt-4o,0.9,")
    assert lines[1].endswith(",150,2")


def test_export_quotes_commas(client, seed):
    """Fields containing commas are quoted."""
    seed(
        "aiChatLogs/2024/05/01/c9",
        {"deviceId": "dev-9", "userMessage": "cats, dogs", "aiModel": "gpt-4o"},
    )

    response = client.get("/chat-logs/export", params=RANGE)

    assert '"cats, dogs"' in response.text
