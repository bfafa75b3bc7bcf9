"""
The `daos` package provides the Data Access Layer for the application.

It is responsible for all interactions with the database entities,
encapsulating the append-only operations the bot needs. Each DAO
operates on a specific entity and abstracts away the direct SQLAlchemy
queries, offering a cleaner API to the service layer.

Contents
--------
- ChatMessageDao
    Manages the chat log:
    * Appends messages with a server-side timestamp
    * Fetches the most recent messages in chronological order
"""

from doccy.database.daos.chat_message_dao import ChatMessageDao

__all__ = ["ChatMessageDao"]
