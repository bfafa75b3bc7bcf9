"""Tests for the intent-routed agent pipeline."""

from __future__ import annotations

from pathlib import Path

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from llama_index.core.schema import NodeWithScore, TextNode

from doccy.api.agent_pipeline import FALLBACK_RESPONSE, to_langchain_messages
from doccy.api.models import ChatMessage, UserIntent
from doccy.api.prompts import CONVERSATION_PERSONA, DEFAULT_PERSONA, SEARCH_FAILED_RESPONSE, WEB_SEARCH_PERSONA

from conftest import ExplodingChatModel, FakeSearchTool, RecordingChatModel, StaticRetriever


def test_conversation_passes_prompt_through(make_pipeline) -> None:
    conversation = RecordingChatModel(responses=["  *hums while processing* hello  "])
    pipeline = make_pipeline(classifier=RecordingChatModel(responses=["conversation"]), conversation=conversation)

    result = pipeline.run_agent("Sam hey doccy, how are you?")

    assert result.intent is UserIntent.CONVERSATION
    assert result.response == "*hums while processing* hello"
    messages = conversation.calls[0]
    assert isinstance(messages[0], SystemMessage)
    assert messages[0].content == CONVERSATION_PERSONA
    assert messages[-1] == HumanMessage("Sam hey doccy, how are you?")


def test_classifier_receives_instruction_and_prompt(make_pipeline) -> None:
    classifier = RecordingChatModel(responses=["banter"])
    pipeline = make_pipeline(classifier=classifier)

    pipeline.run_agent("sup")

    system, human = classifier.calls[0]
    assert "intent classifier" in system.content
    assert human.content == "sup"


def test_information_uses_retrieved_context_and_default_persona(make_pipeline) -> None:
    information = RecordingChatModel(responses=["Per my records...\n\n[Source 1: handbook]"])
    retriever = StaticRetriever([
        NodeWithScore(node=TextNode(text="Vacation is 25 days.", metadata={"source_name": "handbook"}), score=1.0)
    ])
    pipeline = make_pipeline(
        classifier=RecordingChatModel(responses=["get_information"]),
        information=information,
        retriever=retriever,
    )

    result = pipeline.run_agent("how many vacation days?")

    assert result.intent is UserIntent.GET_INFORMATION
    assert result.response.endswith("[Source 1: handbook]")
    assert retriever.queries == ["how many vacation days?"]
    messages = information.calls[0]
    assert messages[0].content == DEFAULT_PERSONA
    final = messages[-1].content
    assert "[Source 1: handbook]\nVacation is 25 days." in final
    assert "User Question: how many vacation days?" in final
    assert "[Source X: source_name]" in final


def test_information_with_empty_store_sends_sentinel(make_pipeline) -> None:
    information = RecordingChatModel(responses=["nothing in the drawers"])
    pipeline = make_pipeline(
        classifier=RecordingChatModel(responses=["information"]),
        information=information,
        retriever=StaticRetriever([]),
    )

    pipeline.run_agent("find the Q3 report")

    assert "no_results" in information.calls[0][-1].content


def test_information_reads_persona_file(make_pipeline, tmp_path: Path) -> None:
    persona = tmp_path / "persona.md"
    persona.write_text("You are a very tidy cabinet.", encoding="utf-8")
    information = RecordingChatModel(responses=["ok"])
    pipeline = make_pipeline(classifier=RecordingChatModel(responses=["get_information"]), information=information)
    pipeline.system_prompt_path = str(persona)

    pipeline.run_agent("docs?")

    assert information.calls[0][0].content == "You are a very tidy cabinet."


def test_web_search_formats_results(make_pipeline) -> None:
    tool = FakeSearchTool(payload={"results": [{"title": "News", "url": "https://n.example", "content": "fresh"}]})
    web = RecordingChatModel(responses=["gossip incoming"])
    pipeline = make_pipeline(classifier=RecordingChatModel(responses=["web_search"]), web=web, search_tool=tool)

    result = pipeline.run_agent("what happened today?")

    assert result.intent is UserIntent.WEB_SEARCH
    assert result.response == "gossip incoming"
    assert tool.queries == ["what happened today?"]
    messages = web.calls[0]
    assert messages[0].content == WEB_SEARCH_PERSONA
    assert "1) News\nurl: https://n.example\nfresh" in messages[-1].content


def test_web_search_failure_returns_apology(make_pipeline) -> None:
    tool = FakeSearchTool(error=ConnectionError("no internet"))
    web = RecordingChatModel(responses=["the web ghosted me, sorry friend"])
    pipeline = make_pipeline(classifier=RecordingChatModel(responses=["search"]), web=web, search_tool=tool)

    result = pipeline.run_agent("latest news")

    assert result.intent is UserIntent.WEB_SEARCH
    assert result.response == "the web ghosted me, sorry friend"
    assert len(tool.queries) == 1
    assert "search failed" in web.calls[0][-1].content


def test_web_search_failure_with_blank_apology_is_never_empty(make_pipeline) -> None:
    pipeline = make_pipeline(
        classifier=RecordingChatModel(responses=["web"]),
        web=RecordingChatModel(responses=["   "]),
        search_tool=FakeSearchTool(payload={"results": []}),
    )

    result = pipeline.run_agent("latest news")

    assert result.response == SEARCH_FAILED_RESPONSE


def test_any_error_returns_fallback_pair(make_pipeline) -> None:
    pipeline = make_pipeline(
        classifier=RecordingChatModel(responses=["web_search"]),
        web=ExplodingChatModel(),
        search_tool=FakeSearchTool(payload={"results": [{"title": "t", "url": "u", "content": "c"}]}),
    )

    result = pipeline.run_agent("anything")

    assert result.intent is UserIntent.CONVERSATION
    assert result.response == FALLBACK_RESPONSE


def test_classifier_error_returns_fallback_pair(make_pipeline) -> None:
    result = make_pipeline(classifier=ExplodingChatModel()).run_agent("hi")
    assert (result.intent, result.response) == (UserIntent.CONVERSATION, FALLBACK_RESPONSE)


def test_history_is_loaded_and_tagged(make_pipeline, dao) -> None:
    dao.create_message(ChatMessage(role="user", user_id="1", user_name="sam", display_name="Sammy", message_content="hi doccy"))
    dao.create_message(ChatMessage(role="bot", user_name="doccy", message_content="hello sam"))
    conversation = RecordingChatModel(responses=["ok"])
    pipeline = make_pipeline(conversation=conversation, dao=dao)

    pipeline.run_agent("Sammy remember me?")

    messages = conversation.calls[0]
    assert messages[1] == HumanMessage("sam, also known as Sammy: hi doccy")
    assert messages[2] == AIMessage("hello sam")
    assert messages[3] == HumanMessage("Sammy remember me?")


def test_to_langchain_messages_fills_missing_names() -> None:
    messages = to_langchain_messages([ChatMessage(role="user", message_content="hey")])
    assert messages == [HumanMessage("User, also known as User: hey")]


def test_handle_prompt_returns_text(make_pipeline) -> None:
    pipeline = make_pipeline(conversation=RecordingChatModel(responses=["hi there"]))
    assert pipeline.handle_prompt("hello") == "hi there"
