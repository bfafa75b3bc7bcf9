"""API integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from doccy.api.agent_pipeline import FALLBACK_RESPONSE
from doccy.api.app import create_app
from doccy.api.prompts import DEFAULT_PERSONA, load_system_prompt

from conftest import ExplodingChatModel, RecordingChatModel


@pytest.fixture
def client(make_pipeline, dao) -> TestClient:
    pipeline = make_pipeline(
        classifier=RecordingChatModel(responses=["conversation"]),
        conversation=RecordingChatModel(responses=["*shuffles* hi"]),
        dao=dao,
    )
    with TestClient(create_app(pipeline=pipeline, chat_history_dao=dao)) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_request_runs_pipeline(client: TestClient) -> None:
    resp = client.post("/request", json={"message": "hey doccy"})
    assert resp.status_code == 200
    assert resp.json() == {"intent": "conversation", "response": "*shuffles* hi"}


def test_request_rejects_blank_message(client: TestClient) -> None:
    assert client.post("/request", json={"message": "   "}).status_code == 422


def test_messages_roundtrip(client: TestClient) -> None:
    created = client.post("/messages", json={"user_name": "sam", "message_content": "first"})
    assert created.status_code == 200
    assert created.json()["role"] == "user"
    client.post("/messages", json={"role": "bot", "message_content": "second"})

    resp = client.get("/messages", params={"limit": 1})

    assert resp.status_code == 200
    assert [m["message_content"] for m in resp.json()] == ["second"]


def test_request_failure_returns_fallback(make_pipeline, dao) -> None:
    pipeline = make_pipeline(classifier=ExplodingChatModel())
    with TestClient(create_app(pipeline=pipeline, chat_history_dao=dao)) as client:
        resp = client.post("/request", json={"message": "hi"})
    assert resp.json() == {"intent": "conversation", "response": FALLBACK_RESPONSE}


def test_load_system_prompt_falls_back(tmp_path: Path, caplog) -> None:
    with caplog.at_level("WARNING"):
        assert load_system_prompt(str(tmp_path / "nope.md")) == DEFAULT_PERSONA
    assert "using default prompt" in caplog.text
