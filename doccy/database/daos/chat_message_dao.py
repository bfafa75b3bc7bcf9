from typing import List

from sqlalchemy import select

from doccy.api.models import ChatMessage, utcnow
from doccy.database.core.connection import Database
from doccy.database.entities.chat_message import ChatMessageEntity


class ChatMessageDao:
    """Append-only access to the chat log.

    Args:
        database: The shared :class:`Database` handle created on startup.
    """

    def __init__(self, database: Database):
        self.database = database

    def create_message(self, message: ChatMessage) -> ChatMessage:
        """Insert ``message``, stamping it with the current time.

        Returns:
            ChatMessage: The stored message, carrying the stamped ``created_at``.
        """
        entity = ChatMessageEntity(
            role=message.role,
            user_id=message.user_id,
            user_name=message.user_name,
            display_name=message.display_name,
            message_content=message.message_content,
            created_at=utcnow(),
        )
        with self.database.session() as session:
            session.add(entity)
            session.flush()
            stored = ChatMessage.model_validate(entity)
        return stored

    def get_chat_history(self, limit: int = 100) -> List[ChatMessage]:
        """Fetch the ``limit`` most recent messages in chronological order."""
        stmt = (
            select(ChatMessageEntity)
            .order_by(ChatMessageEntity.created_at.desc(), ChatMessageEntity.id.desc())
            .limit(limit)
        )
        with self.database.session() as session:
            rows = session.scalars(stmt).all()
            messages = [ChatMessage.model_validate(row) for row in rows]
        messages.reverse()
        return messages
