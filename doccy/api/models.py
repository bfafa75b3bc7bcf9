"""
Pydantic schemas shared by the pipeline, the persistence layer and the HTTP API.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


GOOGLE_DOC = "application/vnd.google-apps.document"
GOOGLE_SHEET = "application/vnd.google-apps.spreadsheet"
GOOGLE_SLIDES = "application/vnd.google-apps.presentation"
GOOGLE_FOLDER = "application/vnd.google-apps.folder"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserIntent(str, Enum):
    """What kind of help the user wants."""

    GET_INFORMATION = "get_information"
    CONVERSATION = "conversation"
    WEB_SEARCH = "web_search"


class ChatMessage(BaseModel):
    """One entry of the channel's chat log."""

    role: Literal["user", "bot"]
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    display_name: Optional[str] = None
    message_content: str
    created_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(from_attributes=True, frozen=True)


class DriveItem(BaseModel):
    """A file listed from Google Drive, with its extracted text."""

    id: Optional[str] = None
    name: Optional[str] = None
    mime_type: Optional[str] = None
    content: Optional[str] = None


class VectorEntry(BaseModel):
    """An embedded chunk of a Drive document."""

    content: str
    source_name: str
    source_id: str
    chunk_index: Optional[int] = None
    mime_type: Literal[
        "application/vnd.google-apps.document",
        "application/vnd.google-apps.spreadsheet",
        "application/vnd.google-apps.presentation",
        "others",
    ] = "others"
    embedding: List[float]
    created_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True)


class SearchResult(BaseModel):
    """One ranked web search hit."""

    title: str = ""
    url: str = ""
    snippet: str = ""


class AgentResult(BaseModel):
    """Outcome of a single pipeline run."""

    intent: UserIntent
    response: str


class PromptRequest(BaseModel):
    """Body of ``POST /request``."""

    message: str


class NewChatMessage(BaseModel):
    """Body of ``POST /messages``."""

    role: Literal["user", "bot"] = "user"
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    display_name: Optional[str] = None
    message_content: str
