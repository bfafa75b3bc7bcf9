"""
The `entities` package defines the ORM models of the application,
representing the database tables as Python classes via SQLAlchemy.

These entity classes are the foundation of the persistence layer,
used by DAOs (`daos` package) to perform CRUD operations.

Contents
--------
- ChatMessageEntity
    Represents a single message of the channel chat log.
    * Stores role (user/bot), author id, username and display name
    * Stores the message text
    * Records the creation timestamp used to order the history
"""

from doccy.database.entities.chat_message import Base, ChatMessageEntity

__all__ = ["Base", "ChatMessageEntity"]
