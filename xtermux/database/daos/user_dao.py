from typing import List, Optional

import bcrypt
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from xtermux.database.entities import User
from xtermux.database.entities.base import utcnow
from xtermux.database.entities.user import ROLE_USER


class UserDao:
    """Data access for :class:`User` rows."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def check_password(password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False

    def create(self, username: str, email: str, password: str, role: str = ROLE_USER) -> User:
        user = User(
            username=username,
            email=email.lower(),
            password_hash=self.hash_password(password),
            role=role,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.scalar(select(User).where(func.lower(User.email) == email.lower()))

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.scalar(select(User).where(User.username == username))

    def list(self, search: str = "") -> List[User]:
        stmt = select(User)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(or_(func.lower(User.username).like(pattern), func.lower(User.email).like(pattern)))
        return list(self.db.scalars(stmt))

    def update_profile(self, user: User, username: Optional[str] = None, avatar_url: Optional[str] = None) -> User:
        if username is not None:
            user.username = username
        if avatar_url is not None:
            user.avatar_url = avatar_url
        user.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_role(self, user: User, role: str) -> User:
        user.role = role
        user.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()
