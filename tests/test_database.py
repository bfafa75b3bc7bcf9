"""Tests for the chat log."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from doccy.api.models import ChatMessage
from doccy.database.daos.chat_message_dao import ChatMessageDao


def _msg(text: str, role: str = "user") -> ChatMessage:
    return ChatMessage(role=role, user_id="42", user_name="sam", display_name="Sammy", message_content=text)


def test_create_message_stamps_current_time(dao: ChatMessageDao) -> None:
    old = datetime(2001, 1, 1, tzinfo=timezone.utc)
    before = datetime.now(timezone.utc)

    stored = dao.create_message(_msg("hello").model_copy(update={"created_at": old}))

    assert stored.message_content == "hello"
    assert stored.created_at >= before


def test_history_is_chronological(dao: ChatMessageDao) -> None:
    for text in ["one", "two", "three"]:
        dao.create_message(_msg(text))

    history = dao.get_chat_history()

    assert [m.message_content for m in history] == ["one", "two", "three"]
    assert all(m.user_name == "sam" and m.display_name == "Sammy" for m in history)


def test_history_keeps_most_recent(dao: ChatMessageDao) -> None:
    for i in range(5):
        dao.create_message(_msg(f"m{i}", role="bot" if i % 2 else "user"))

    history = dao.get_chat_history(limit=2)

    assert [m.message_content for m in history] == ["m3", "m4"]
    assert [m.role for m in history] == ["bot", "user"]


def test_empty_history(dao: ChatMessageDao) -> None:
    assert dao.get_chat_history() == []


def test_stored_messages_are_immutable(dao: ChatMessageDao) -> None:
    stored = dao.create_message(_msg("hello"))

    assert isinstance(stored, ChatMessage)
    with pytest.raises(ValidationError):
        stored.message_content = "edited"
