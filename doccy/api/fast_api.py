"""
FastAPI Router: Chat and Chat History API

This module defines the HTTP API endpoints exposed by the backend. It handles:
- Running a prompt through the Doccy agent pipeline
- Reading and appending the shared chat history
- Liveness checks

Each endpoint validates input via Pydantic models and returns structured responses.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Request

from doccy.api.models import AgentResult, ChatMessage, NewChatMessage, PromptRequest
from doccy.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()
"""Creates the FastAPI router in which we define its routes"""


@router.get("/health")
def health():
    """Simple liveness check."""
    return {"ok": True}


@router.post("/request", response_model=AgentResult)
def chat_endpoint(request_data: PromptRequest, request: Request):
    """
    Main chat endpoint integrating with the agent pipeline.

    Request Body
    ------------
    PromptRequest {message: str}

    Returns
    -------
    AgentResult
        {'intent': str, 'response': str}. Pipeline errors are already folded
        into the fallback response, so this endpoint does not fail on them.
    """
    if not request_data.message.strip():
        raise HTTPException(status_code=422, detail="Message must not be empty")
    pipeline = request.app.state.pipeline
    return pipeline.run_agent(request_data.message)


@router.get("/messages", response_model=List[ChatMessage])
def get_messages(request: Request, limit: int = 100):
    """
    Fetch the most recent chat messages.

    Query Parameters
    ----------------
    limit : int
        Maximum number of messages (newest kept), returned oldest first.

    Returns
    -------
    list[ChatMessage]
    """
    if limit <= 0:
        raise HTTPException(status_code=422, detail="limit must be positive")
    dao = request.app.state.chat_history_dao
    return dao.get_chat_history(limit=limit)


@router.post("/messages", response_model=ChatMessage)
def new_message(data: NewChatMessage, request: Request):
    """
    Append a message to the chat history.

    Request Body
    ------------
    NewChatMessage {role: str, user_id: str|None, user_name: str|None,
    display_name: str|None, message_content: str}

    Returns
    -------
    ChatMessage
        The stored message including its timestamp.
    """
    dao = request.app.state.chat_history_dao
    return dao.create_message(ChatMessage(**data.model_dump()))
