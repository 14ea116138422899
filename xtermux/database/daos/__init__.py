"""
The `daos` package provides the Data Access Layer for the application.

It is responsible for all interactions with the database entities,
encapsulating CRUD operations that support the core functionality
of the system. Each DAO operates on a specific entity and abstracts
away the direct SQLAlchemy queries, offering a cleaner API to the
service layer.

Contents
--------
- UserDao
    Handles user persistence:
    * Creates users with password hashing
    * Fetches users by id, username or email
    * Updates profile fields and roles
    * Lists and deletes users for the admin screens

- ChatSessionDao
    Manages chat session records:
    * Creates new sessions
    * Fetches sessions by user (newest first)
    * Updates session titles and deletes sessions

- ChatMessageDao
    Manages chat message records:
    * Creates messages within a session
    * Fetches messages by session (chronological order)
    * Clears all messages of a session

- GuideProgressDao
    Manages completed guide steps:
    * Fetches, toggles and replaces a user's completed steps
    * Resets the progress of selected guides
"""
from xtermux.database.daos.user_dao import UserDao
from xtermux.database.daos.chat_session_dao import ChatSessionDao
from xtermux.database.daos.chat_message_dao import ChatMessageDao
from xtermux.database.daos.guide_progress_dao import GuideProgressDao

__all__ = ["UserDao", "ChatSessionDao", "ChatMessageDao", "GuideProgressDao"]
