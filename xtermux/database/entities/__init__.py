"""
The `entities` package defines the ORM models of the application,
representing the database tables as Python classes via SQLAlchemy.

These entity classes are the foundation of the persistence layer,
used by DAOs (`daos` package) to perform CRUD operations.

Contents
--------
- User
    Represents a registered user and their profile.
    * Stores credentials (with hashed password)
    * Holds username, avatar and role (`user`, `admin`, `blocked`)
    * Tracks creation and last profile update timestamps

- ChatSession
    Represents a chat session belonging to a user.
    * Stores session ID, title and owner (user_id)
    * Tracks creation timestamp

- ChatMessage
    Represents a single message within a chat session.
    * Stores message content, role (user/assistant/model/system)
    * Holds an optional image attachment
    * Records creation timestamp

- GuideProgress
    Represents one completed step of a setup guide for a user.
"""
from xtermux.database.entities.base import Base
from xtermux.database.entities.user import User
from xtermux.database.entities.chat_session import ChatSession
from xtermux.database.entities.chat_message import ChatMessage
from xtermux.database.entities.guide_progress import GuideProgress

__all__ = ["Base", "User", "ChatSession", "ChatMessage", "GuideProgress"]
