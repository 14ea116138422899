from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from xtermux.database.entities import ChatSession
from xtermux.database.entities.chat_session import DEFAULT_SESSION_TITLE


class ChatSessionDao:
    """Data access for :class:`ChatSession` rows."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, title: Optional[str] = None) -> ChatSession:
        session = ChatSession(user_id=user_id, title=title or DEFAULT_SESSION_TITLE)
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_for_user(self, session_id: int, user_id: str) -> Optional[ChatSession]:
        return self.db.scalar(
            select(ChatSession).where(ChatSession.id == session_id, ChatSession.user_id == user_id)
        )

    def list_for_user(self, user_id: str) -> List[ChatSession]:
        stmt = (
            select(ChatSession)
            .where(ChatSession.user_id == user_id)
            .options(selectinload(ChatSession.messages))
            .order_by(ChatSession.created_at.desc(), ChatSession.id.desc())
        )
        return list(self.db.scalars(stmt))

    def update_title(self, session: ChatSession, title: str) -> None:
        session.title = title
        self.db.commit()

    def delete(self, session: ChatSession) -> None:
        self.db.delete(session)
        self.db.commit()
