"""
Service functions used by the API routers.

Each function takes an open SQLAlchemy session and delegates the queries to
the DAOs. Lookups that must succeed raise ``HTTPException`` directly, so the
routers only have to translate database failures.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from xtermux.catalog.guides import get_guide, load_guides, parse_step_key, progress_percent, step_key
from xtermux.database.daos import ChatMessageDao, ChatSessionDao, GuideProgressDao, UserDao
from xtermux.database.entities import ChatMessage, ChatSession, User
from xtermux.database.entities.user import ROLE_ADMIN, ROLE_BLOCKED, ROLE_USER

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "X-User"


# ---------------------------------------------------------------------------
# Users and profiles
# ---------------------------------------------------------------------------

def check_create_user_instance(db: Session, username: str, email: str, password: str, role: str = ROLE_USER) -> User:
    """
    Create a user after checking that username and email are free.

    Raises
    ------
    HTTPException 409
        If the username or the email is already registered.
    """
    dao = UserDao(db)
    if dao.get_by_username(username) is not None:
        raise HTTPException(status_code=409, detail="Username already exists")
    if dao.get_by_email(email) is not None:
        raise HTTPException(status_code=409, detail="Email already registered")
    try:
        user = dao.create(username=username, email=email, password=password, role=role)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Username or email already exists")
    logger.info("Created user %s with role %s", user.id, role)
    return user


def login_user(db: Session, email: str, password: str, admin_emails: Iterable[str] = ()) -> dict:
    """
    Check credentials.

    Returns
    -------
    dict
        ``{'authenticated': True, 'user': User}`` on success, otherwise
        ``{'authenticated': False, 'status': int, 'detail': str}``.
    """
    dao = UserDao(db)
    user = dao.get_by_email(email)
    if user is None or not dao.check_password(password, user.password_hash):
        return {"authenticated": False, "status": 401, "detail": "Invalid email or password"}
    if effective_role(user, admin_emails) == ROLE_BLOCKED:
        return {"authenticated": False, "status": 403, "detail": "Account is blocked"}
    return {"authenticated": True, "user": user}


def get_user(db: Session, user_id: str) -> User:
    user = UserDao(db).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def effective_role(user: User, admin_emails: Iterable[str] = ()) -> str:
    """Listed admin emails win over whatever role is stored on the row."""
    if user.email.lower() in {e.lower() for e in admin_emails}:
        return ROLE_ADMIN
    return user.role or ROLE_USER


def display_username(user: User) -> str:
    return user.username or DEFAULT_USERNAME


def update_profile(db: Session, user: User, username: Optional[str] = None, avatar_url: Optional[str] = None) -> User:
    if username is not None and username != user.username:
        other = UserDao(db).get_by_username(username)
        if other is not None and other.id != user.id:
            raise HTTPException(status_code=409, detail="Username already exists")
    return UserDao(db).update_profile(user, username=username, avatar_url=avatar_url)


def list_users(db: Session, search: str = "") -> List[User]:
    """All users, most recently updated first; rows without a timestamp go last."""
    epoch = datetime.min.replace(tzinfo=timezone.utc)

    def updated(user: User) -> datetime:
        value = user.updated_at
        if value is None:
            return epoch
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    return sorted(UserDao(db).list(search=search), key=updated, reverse=True)


def create_user(db: Session, email: str, password: str, username: Optional[str] = None, role: str = ROLE_USER) -> User:
    return check_create_user_instance(
        db,
        username=username or email.split("@")[0],
        email=email,
        password=password,
        role=role,
    )


def set_role(db: Session, user_id: str, role: str) -> User:
    user = get_user(db, user_id)
    logger.info("Changing role of %s from %s to %s", user_id, user.role, role)
    return UserDao(db).update_role(user, role)


def set_blocked(db: Session, user_id: str, blocked: bool) -> User:
    return set_role(db, user_id, ROLE_BLOCKED if blocked else ROLE_USER)


def delete_user(db: Session, user_id: str) -> None:
    user = get_user(db, user_id)
    UserDao(db).delete(user)
    logger.info("Deleted user %s", user_id)


# ---------------------------------------------------------------------------
# Chat sessions and messages
# ---------------------------------------------------------------------------

def get_sessions(db: Session, user_id: str) -> List[ChatSession]:
    return ChatSessionDao(db).list_for_user(user_id)


def get_owned_session(db: Session, session_id: int, user_id: str) -> ChatSession:
    session = ChatSessionDao(db).get_for_user(session_id, user_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def create_session(db: Session, user_id: str, title: Optional[str] = None) -> ChatSession:
    return ChatSessionDao(db).create(user_id=user_id, title=title)


def update_session_title(db: Session, session_id: int, user_id: str, title: str) -> None:
    session = get_owned_session(db, session_id, user_id)
    ChatSessionDao(db).update_title(session, title)


def delete_session(db: Session, session_id: int, user_id: str) -> None:
    session = get_owned_session(db, session_id, user_id)
    ChatSessionDao(db).delete(session)


def get_session_messages(db: Session, session_id: int, user_id: str) -> List[ChatMessage]:
    get_owned_session(db, session_id, user_id)
    return ChatMessageDao(db).list_for_session(session_id)


def create_message(db: Session, user_id: str, session_id: int, role: str, content: str, image: Optional[str] = None) -> ChatMessage:
    get_owned_session(db, session_id, user_id)
    return ChatMessageDao(db).create(session_id=session_id, role=role, content=content, image=image)


def clear_session_messages(db: Session, session_id: int, user_id: str) -> None:
    get_owned_session(db, session_id, user_id)
    ChatMessageDao(db).clear_session(session_id)


# ---------------------------------------------------------------------------
# Guide progress
# ---------------------------------------------------------------------------

def get_progress_map(db: Session, user_id: str) -> Dict[str, bool]:
    """Completed steps in the ``{"<guideId>-<i>": true}`` shape the UI stores."""
    return {row.key: True for row in GuideProgressDao(db).completed_steps(user_id)}


def guides_with_progress(db: Session, user_id: str) -> List[dict]:
    keys = get_progress_map(db, user_id).keys()
    result = []
    for guide in load_guides():
        percent = progress_percent(guide, keys)
        result.append({**guide.model_dump(), "progress": percent, "completed": percent == 100})
    return result


def toggle_step(db: Session, user_id: str, guide_id: str, step_index: int) -> dict:
    guide = get_guide(guide_id)
    if guide is None:
        raise HTTPException(status_code=404, detail="Guide not found")
    if not 0 <= step_index < len(guide.steps):
        raise HTTPException(status_code=404, detail="Step not found")
    completed = GuideProgressDao(db).toggle(user_id, guide_id, step_index)
    return {
        "key": step_key(guide_id, step_index),
        "completed": completed,
        "progress": progress_percent(guide, get_progress_map(db, user_id).keys()),
    }


def import_progress(db: Session, user_id: str, blob: Dict[str, bool]) -> Dict[str, bool]:
    """
    Replace the stored progress with a browser local-storage map.

    False entries, malformed keys, unknown guides and out of range steps are
    dropped.
    """
    steps = []
    for key, done in blob.items():
        if not done:
            continue
        parsed = parse_step_key(key)
        if parsed is None:
            logger.debug("Skipping malformed progress key %r", key)
            continue
        guide = get_guide(parsed[0])
        if guide is None or parsed[1] >= len(guide.steps):
            continue
        steps.append(parsed)
    GuideProgressDao(db).replace(user_id, steps)
    return get_progress_map(db, user_id)


def reset_candidates(db: Session, user_id: str) -> List[str]:
    keys = get_progress_map(db, user_id).keys()
    return [g.id for g in load_guides() if progress_percent(g, keys) > 0]


def reset_progress(db: Session, user_id: str, guide_ids: List[str]) -> int:
    """
    Forget every completed step of the selected guides.

    Unknown guide ids and guides without progress are ignored; the return
    value counts only the guides that actually lost steps.

    Raises
    ------
    HTTPException 400
        If nothing is selected or the user has no progress at all.
    """
    if not guide_ids:
        raise HTTPException(status_code=400, detail="No guides selected")
    dao = GuideProgressDao(db)
    rows = dao.completed_steps(user_id)
    if not rows:
        raise HTTPException(status_code=400, detail="No progress to reset yet.")
    with_progress = {row.guide_id for row in rows}
    selected = [g for g in dict.fromkeys(guide_ids) if g in with_progress and get_guide(g) is not None]
    if selected:
        dao.reset_guides(user_id, selected)
    return len(selected)
