"""Test fixtures for Doccy."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from llama_index.core.embeddings import MockEmbedding
from pydantic import Field

from doccy.api.agent_pipeline import DoccyPipeline
from doccy.database.core.connection import Database
from doccy.database.daos.chat_message_dao import ChatMessageDao
from doccy.retrieval.web_search import WebSearch


class RecordingChatModel(FakeListChatModel):
    """Fake chat model that remembers every message list it was called with."""

    calls: List[Any] = Field(default_factory=list)
    disable_streaming: bool = True

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        self.calls.append(list(messages))
        return super()._call(messages, stop=stop, run_manager=run_manager, **kwargs)


class ExplodingChatModel(RecordingChatModel):
    responses: List[str] = Field(default_factory=lambda: [""])

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        raise RuntimeError("completion endpoint unavailable")


class FakeSearchTool:
    def __init__(self, payload: Any = None, error: Optional[Exception] = None):
        self.payload = payload
        self.error = error
        self.queries: List[str] = []

    def invoke(self, args: dict) -> Any:
        self.queries.append(args["query"])
        if self.error is not None:
            raise self.error
        return self.payload


class StaticRetriever:
    def __init__(self, results=None):
        self.results = results or []
        self.queries: List[str] = []

    def retrieve(self, query: str):
        self.queries.append(query)
        return self.results


@pytest.fixture
def database(tmp_path: Path) -> Database:
    db = Database(f"sqlite:///{tmp_path / 'doccy.db'}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def dao(database: Database) -> ChatMessageDao:
    return ChatMessageDao(database)


@pytest.fixture
def embed_model() -> MockEmbedding:
    return MockEmbedding(embed_dim=8)


@pytest.fixture
def make_pipeline(tmp_path: Path):
    """Build a pipeline from fake collaborators; unspecified models answer ``"ok"``."""

    def _make(
        classifier: Optional[FakeListChatModel] = None,
        information: Optional[FakeListChatModel] = None,
        web: Optional[FakeListChatModel] = None,
        conversation: Optional[FakeListChatModel] = None,
        retriever: Any = None,
        search_tool: Any = None,
        dao: Optional[ChatMessageDao] = None,
    ) -> DoccyPipeline:
        return DoccyPipeline(
            chat_history_dao=dao,
            retriever=retriever,
            web_search=WebSearch(tool=search_tool or FakeSearchTool(payload={"results": []})),
            classifier_model=classifier or RecordingChatModel(responses=["conversation"]),
            information_model=information or RecordingChatModel(responses=["ok"]),
            web_search_model=web or RecordingChatModel(responses=["ok"]),
            conversation_model=conversation or RecordingChatModel(responses=["ok"]),
            system_prompt_path=str(tmp_path / "missing_system_prompt.md"),
        )

    return _make
