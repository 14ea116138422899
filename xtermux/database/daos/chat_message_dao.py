from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from xtermux.database.entities import ChatMessage


class ChatMessageDao:
    """Data access for :class:`ChatMessage` rows."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, session_id: int, role: str, content: str, image: Optional[str] = None) -> ChatMessage:
        message = ChatMessage(session_id=session_id, role=role, content=content, image=image)
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def list_for_session(self, session_id: int) -> List[ChatMessage]:
        stmt = select(ChatMessage).where(ChatMessage.session_id == session_id).order_by(ChatMessage.id)
        return list(self.db.scalars(stmt))

    def clear_session(self, session_id: int) -> None:
        self.db.execute(delete(ChatMessage).where(ChatMessage.session_id == session_id))
        self.db.commit()
