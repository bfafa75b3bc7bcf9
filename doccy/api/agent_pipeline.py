"""agent_pipeline
=================

The intent-routed response pipeline behind Doccy, the sentient-filing-cabinet
Discord persona.

This module wires together:

- **Intent classification**: a single chat completion that emits one label,
  parsed by :func:`parse_intent` into a :class:`~doccy.api.models.UserIntent`
  (defaulting to ``conversation``).
- **Routing**: :func:`route_by_intent` maps the label to a handler node.
- **Handlers**: ``get_information`` (retrieval-augmented answer over the
  indexed Google Drive documents), ``web_search`` (answer grounded in web
  search results) and ``conversation`` (plain persona banter).
- **LangGraph** workflow chaining ``classify_intent`` → handler → ``END``.

The pipeline is encapsulated in :class:`DoccyPipeline`, which exposes a single
high-level entrypoint :meth:`DoccyPipeline.run_agent`.

Error handling
--------------
Handlers let completion errors propagate. :meth:`DoccyPipeline.run_agent`
catches everything and returns the fixed :data:`FALLBACK_RESPONSE` with the
``conversation`` intent. A failed web search is answered with an in-character
apology instead of an error.
"""

from typing import List, Optional, TypedDict

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from langgraph.graph import END, StateGraph

from doccy.api.models import AgentResult, ChatMessage, UserIntent
from doccy.api.prompts import (
    CLASSIFIER_PROMPT,
    CONVERSATION_PERSONA,
    INFORMATION_PROMPT,
    SEARCH_FAILED_PROMPT,
    SEARCH_FAILED_RESPONSE,
    WEB_SEARCH_PERSONA,
    WEB_SEARCH_PROMPT,
    load_system_prompt,
)
from doccy.core.logging import get_logger
from doccy.database.config.config import Settings, settings as default_settings
from doccy.database.daos.chat_message_dao import ChatMessageDao
from doccy.retrieval.rag import NO_RESULTS, Retriever, fetch_rag_content
from doccy.retrieval.web_search import WebSearch, format_search_results

logger = get_logger(__name__)


FALLBACK_RESPONSE = (
    "*static crackle* ...I felt that one in my circuits. Something glitched in the void "
    "where my thoughts live. Try again? I promise I'm usually more stable than this. "
    "Usually. 🗂️⚡"
)


class AgentState(TypedDict):
    """LangGraph state for one request.

    Keys
    ----
    user_prompt:
        The raw user text (prefixed with the author's display name by the bot).
    chat_history:
        Prior messages, oldest first, already converted to LangChain messages.
    intent:
        The classified :class:`UserIntent` label value.
    response:
        The generated reply.
    """

    user_prompt: str
    chat_history: List[BaseMessage]
    intent: str
    response: str


def parse_intent(raw: str) -> UserIntent:
    """Map a classifier answer onto the closed intent set.

    The answer is trimmed and lowercased, then matched by substring. Anything
    unrecognised falls back to :attr:`UserIntent.CONVERSATION`.

    Args:
        raw: The classifier model's output.

    Returns:
        UserIntent: The parsed intent.
    """
    normalized = raw.strip().lower()
    if "get_information" in normalized or "information" in normalized:
        return UserIntent.GET_INFORMATION
    if "web_search" in normalized or "web" in normalized or "search" in normalized:
        return UserIntent.WEB_SEARCH
    return UserIntent.CONVERSATION


def route_by_intent(state: AgentState) -> str:
    """Return the handler node name for ``state['intent']``."""
    return UserIntent(state["intent"]).value


def to_langchain_messages(history: List[ChatMessage]) -> List[BaseMessage]:
    """Convert stored chat messages into role-tagged LangChain messages.

    User messages are prefixed with ``"<username>, also known as <display name>: "``
    so the persona can address people by name; bot messages are passed as-is.
    """
    messages: List[BaseMessage] = []
    for msg in history:
        if msg.role == "user":
            display_name = msg.display_name or msg.user_name or "User"
            username = msg.user_name or "User"
            messages.append(HumanMessage(f"{username}, also known as {display_name}: {msg.message_content}"))
        else:
            messages.append(AIMessage(msg.message_content))
    return messages


class DoccyPipeline:
    """Classify → route → generate pipeline.

    Args:
        chat_history_dao: Source of prior chat messages; ``None`` runs without history.
        retriever: Retriever over the embedded Drive documents; ``None`` behaves as
            an empty store.
        web_search: Web search provider used by the ``web_search`` handler.
        classifier_model: Chat model for intent classification.
        information_model: Chat model for the ``get_information`` handler.
        web_search_model: Chat model for the ``web_search`` handler.
        conversation_model: Chat model for the ``conversation`` handler.
        system_prompt_path: Persona prompt file for the ``get_information`` handler.
        history_limit: Number of recent chat messages to load per request.
    """

    def __init__(
        self,
        chat_history_dao: Optional[ChatMessageDao],
        retriever: Optional[Retriever],
        web_search: WebSearch,
        classifier_model: BaseChatModel,
        information_model: BaseChatModel,
        web_search_model: BaseChatModel,
        conversation_model: BaseChatModel,
        system_prompt_path: str = "system_prompt.md",
        history_limit: int = 100,
    ):
        self.chat_history_dao = chat_history_dao
        self.retriever = retriever
        self.web_search = web_search
        self.classifier_model = classifier_model
        self.information_model = information_model
        self.web_search_model = web_search_model
        self.conversation_model = conversation_model
        self.system_prompt_path = system_prompt_path
        self.history_limit = history_limit
        self.app = self.initialize_workflow()

    @classmethod
    def from_settings(
        cls,
        chat_history_dao: Optional[ChatMessageDao],
        retriever: Optional[Retriever],
        settings: Settings = default_settings,
    ) -> "DoccyPipeline":
        """Build a pipeline with OpenAI chat models and the configured search provider."""
        api_key = settings.OPENAI_API_KEY or None
        return cls(
            chat_history_dao=chat_history_dao,
            retriever=retriever,
            web_search=WebSearch(
                provider=settings.WEB_SEARCH_PROVIDER,
                max_results=settings.WEB_SEARCH_MAX_RESULTS,
                tavily_api_key=settings.TAVILY_API_KEY,
                openai_api_key=settings.OPENAI_API_KEY,
            ),
            classifier_model=ChatOpenAI(model=settings.CLASSIFIER_MODEL, api_key=api_key, temperature=0),
            information_model=ChatOpenAI(model=settings.INFORMATION_MODEL, api_key=api_key, temperature=0.1),
            web_search_model=ChatOpenAI(model=settings.WEB_SEARCH_MODEL, api_key=api_key, temperature=0.1),
            conversation_model=ChatOpenAI(model=settings.CONVERSATION_MODEL, api_key=api_key, temperature=1),
            system_prompt_path=settings.SYSTEM_PROMPT_PATH,
            history_limit=settings.CHAT_HISTORY_LIMIT,
        )

    def classify_intent(self, state: AgentState):
        """Ask the classifier model for a single intent label.

        Args:
            state (AgentState): Must contain ``user_prompt``.

        Returns:
            dict: ``{"intent": <label>}`` suitable for LangGraph state updates.
        """
        response = self.classifier_model.invoke([
            SystemMessage(CLASSIFIER_PROMPT),
            HumanMessage(state["user_prompt"]),
        ])
        intent = parse_intent(str(response.content))
        logger.info("Classified intent: %s", intent.value)
        return {"intent": intent.value}

    def get_information(self, state: AgentState):
        """Answer from the document archive, citing the retrieved sources.

        Returns:
            dict: ``{"response": str}``.
        """
        logger.info("Handling get_information intent")
        if self.retriever is None:
            logger.warning("No retriever configured, answering without documents")
            context = NO_RESULTS
        else:
            context = fetch_rag_content(state["user_prompt"], self.retriever)

        messages = [
            SystemMessage(load_system_prompt(self.system_prompt_path)),
            *state["chat_history"],
            HumanMessage(INFORMATION_PROMPT.format(context=context, query=state["user_prompt"])),
        ]
        response = self.information_model.invoke(messages)
        return {"response": str(response.content).strip()}

    def web_search_node(self, state: AgentState):
        """Answer from web search results.

        A failed search is not retried; the model is asked for an in-character
        apology instead, and :data:`SEARCH_FAILED_RESPONSE` covers an empty one.

        Returns:
            dict: ``{"response": str}``.
        """
        logger.info("Handling web_search intent")
        query = state["user_prompt"]
        try:
            results = self.web_search.search(query)
        except Exception as e:
            logger.warning("Web search failed: %s", e)
            response = self.web_search_model.invoke([
                SystemMessage(WEB_SEARCH_PERSONA),
                HumanMessage(SEARCH_FAILED_PROMPT.format(query=query)),
            ])
            return {"response": str(response.content).strip() or SEARCH_FAILED_RESPONSE}

        messages = [
            SystemMessage(WEB_SEARCH_PERSONA),
            *state["chat_history"],
            HumanMessage(WEB_SEARCH_PROMPT.format(search_results=format_search_results(results), query=query)),
        ]
        response = self.web_search_model.invoke(messages)
        return {"response": str(response.content).strip()}

    def conversation(self, state: AgentState):
        """Plain persona reply to the unmodified prompt.

        Returns:
            dict: ``{"response": str}``.
        """
        logger.info("Handling conversation intent")
        messages = [
            SystemMessage(CONVERSATION_PERSONA),
            *state["chat_history"],
            HumanMessage(state["user_prompt"]),
        ]
        response = self.conversation_model.invoke(messages)
        return {"response": str(response.content).strip()}

    def initialize_workflow(self):
        """Build and compile the LangGraph workflow.

        Nodes:
            - ``classify_intent`` → sets ``intent``
            - ``get_information`` / ``web_search`` / ``conversation`` → set ``response``

        Returns:
            Any: A compiled LangGraph app instance, stored on ``self.app``.
        """
        workflow = StateGraph(AgentState)

        workflow.add_node(UserIntent.GET_INFORMATION.value, self.get_information)
        workflow.add_node(UserIntent.WEB_SEARCH.value, self.web_search_node)
        workflow.add_node(UserIntent.CONVERSATION.value, self.conversation)
        workflow.add_node("classify_intent", self.classify_intent)

        workflow.add_conditional_edges(
            "classify_intent",
            route_by_intent,
            {intent.value: intent.value for intent in UserIntent},
        )
        for intent in UserIntent:
            workflow.add_edge(intent.value, END)

        workflow.set_entry_point("classify_intent")
        return workflow.compile()

    def load_history(self) -> List[BaseMessage]:
        if self.chat_history_dao is None:
            return []
        return to_langchain_messages(self.chat_history_dao.get_chat_history(limit=self.history_limit))

    def run_agent(self, prompt: str) -> AgentResult:
        """Run classification, routing and generation for ``prompt``.

        Args:
            prompt: The user text.

        Returns:
            AgentResult: The classified intent and the reply. On any error the
            intent is ``conversation`` and the reply is :data:`FALLBACK_RESPONSE`.
        """
        try:
            chat_history = self.load_history()
            result = self.app.invoke(
                {
                    "user_prompt": prompt,
                    "chat_history": chat_history,
                    "intent": UserIntent.CONVERSATION.value,
                    "response": "",
                }
            )
            return AgentResult(intent=UserIntent(result["intent"]), response=result["response"])
        except Exception:
            logger.exception("Error running agent")
            return AgentResult(intent=UserIntent.CONVERSATION, response=FALLBACK_RESPONSE)

    def handle_prompt(self, prompt: str) -> str:
        """Run the pipeline and return only the reply text."""
        result = self.run_agent(prompt)
        logger.debug("Response: %s", result.response)
        return result.response
