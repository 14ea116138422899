"""
FastAPI Router: Authentication, Profiles, Chat Sessions and Messages

This module defines the core HTTP API endpoints exposed by the backend. It handles:
- User registration, login, logout and the current-user lookup
- Profile retrieval and update (username, avatar)
- Chat session creation, renaming, listing and deletion
- Messaging (new messages, fetch messages, clear a session)

Each endpoint validates input via Pydantic models and returns structured responses.
Database failures are logged and reported as a generic 500.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from xtermux.api.deps import get_current_user, get_db, get_settings
from xtermux.api.models import (
    AuthResponse,
    Message,
    NewMessage,
    Profile,
    ProfileUpdate,
    SessionCreationDetails,
    SessionWithMessages,
    UpdateSessionDetails,
    UserCredentials,
    UserData,
)
from xtermux.api.utils import create_access_token
from xtermux.database.config.config import Settings
from xtermux.database.core.funcs import (
    check_create_user_instance,
    clear_session_messages,
    create_message,
    create_session,
    delete_session,
    display_username,
    effective_role,
    get_session_messages,
    get_sessions,
    login_user,
    update_profile,
    update_session_title,
)
from xtermux.database.entities import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
"""Creates the FastAPI router in which we define its routes"""


def to_profile(user: User, settings: Settings) -> Profile:
    return Profile(
        id=user.id,
        username=display_username(user),
        email=user.email,
        avatar_url=user.avatar_url,
        role=effective_role(user, settings.ADMIN_EMAILS),
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def set_token_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key="token",
        value=token,
        httponly=True,
        secure=settings.INIT_MODE == "prod",
        samesite="none" if settings.INIT_MODE == "prod" else "lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

@router.post("/auth/register", response_model=Profile, status_code=201)
def register(data: UserData, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """
    Register a new user account.

    Request Body
    ------------
    UserData {username: str, email: str, password: str}

    Returns
    -------
    Profile
        The created profile.

    Raises
    ------
    HTTPException 409
        If username or email already exists.
    """
    try:
        user = check_create_user_instance(db, username=data.username, email=data.email, password=data.password)
    except SQLAlchemyError:
        logger.exception("Error registering user")
        raise HTTPException(status_code=500, detail="Failed to register user")
    return to_profile(user, settings)


@router.post("/auth/login", response_model=AuthResponse)
def login(
    data: UserCredentials,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Authenticate a user and set the JWT as an HTTP-only cookie.

    Request Body
    ------------
    UserCredentials {email: str, password: str}

    Returns
    -------
    AuthResponse
        {'access_token': str, 'token_type': 'bearer', 'user': Profile}

    Raises
    ------
    HTTPException 401
        If authentication fails.
    HTTPException 403
        If the account is blocked.
    """
    try:
        auth = login_user(db, email=data.email, password=data.password, admin_emails=settings.ADMIN_EMAILS)
    except SQLAlchemyError:
        logger.exception("Error during login")
        raise HTTPException(status_code=500, detail="Failed to log in")
    if not auth["authenticated"]:
        raise HTTPException(status_code=auth["status"], detail=auth["detail"])
    user = auth["user"]
    access_token = create_access_token({"sub": user.id}, settings)
    set_token_cookie(response, access_token, settings)
    return AuthResponse(access_token=access_token, user=to_profile(user, settings))


@router.post("/auth/logout")
def logout(response: Response):
    """
    Logout user by clearing the JWT cookie.

    Returns
    -------
    bool
        True if logout successful.
    """
    response.delete_cookie(key="token")
    return True


@router.get("/auth/me", response_model=Profile)
def me(user: User = Depends(get_current_user), settings: Settings = Depends(get_settings)):
    """Return the profile of the authenticated caller."""
    return to_profile(user, settings)


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@router.get("/profile", response_model=Profile)
def get_profile(user: User = Depends(get_current_user), settings: Settings = Depends(get_settings)):
    """
    Fetch the caller's profile.

    The username falls back to ``X-User`` and the role resolves to ``admin``
    for emails listed in ``ADMIN_EMAILS``.
    """
    return to_profile(user, settings)


@router.patch("/profile", response_model=Profile)
def patch_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Update the caller's username and/or avatar.

    Request Body
    ------------
    ProfileUpdate {username: str|None, avatar_url: str|None}

    Returns
    -------
    Profile
        The updated profile.
    """
    try:
        updated = update_profile(db, user, username=data.username, avatar_url=data.avatar_url)
    except SQLAlchemyError:
        logger.exception("Profile update error")
        raise HTTPException(status_code=500, detail="Failed to update profile")
    return to_profile(updated, settings)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@router.get("/sessions", response_model=List[SessionWithMessages])
def list_sessions(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Fetch the caller's sessions, newest first, each with its messages in
    chronological order.
    """
    try:
        return get_sessions(db, user.id)
    except SQLAlchemyError:
        logger.exception("Error fetching sessions")
        raise HTTPException(status_code=500, detail="Failed to fetch sessions")


@router.post("/sessions", response_model=SessionWithMessages)
def new_session(
    data: SessionCreationDetails,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a new chat session.

    Request Body
    ------------
    SessionCreationDetails {title: str|None}
    """
    try:
        return create_session(db, user.id, title=data.title)
    except SQLAlchemyError:
        logger.exception("Error creating session")
        raise HTTPException(status_code=500, detail="Failed to create session")


@router.patch("/sessions/{session_id}", status_code=204)
def rename_session(
    session_id: int,
    data: UpdateSessionDetails,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Rename a session."""
    try:
        update_session_title(db, session_id, user.id, data.title)
    except SQLAlchemyError:
        logger.exception("Error updating session")
        raise HTTPException(status_code=500, detail="Failed to update session")
    return Response(status_code=204)


@router.delete("/sessions/{session_id}", status_code=204)
def remove_session(session_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete a session together with its messages."""
    try:
        delete_session(db, session_id, user.id)
    except SQLAlchemyError:
        logger.exception("Error deleting session")
        raise HTTPException(status_code=500, detail="Failed to delete session")
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

@router.get("/messages/{session_id}", response_model=List[Message])
def get_messages(session_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Fetch messages for a given session.

    Returns
    -------
    list[Message]
        Messages in insertion order.
    """
    try:
        return get_session_messages(db, session_id, user.id)
    except SQLAlchemyError:
        logger.exception("Error fetching messages")
        raise HTTPException(status_code=500, detail="Failed to fetch messages")


@router.post("/messages", response_model=Message)
def new_message(data: NewMessage, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Create a new message in a session.

    Request Body
    ------------
    NewMessage {session_id: int, role: str, content: str, image: str|None}
    """
    try:
        return create_message(
            db, user.id, session_id=data.session_id, role=data.role, content=data.content, image=data.image
        )
    except SQLAlchemyError:
        logger.exception("Error adding message")
        raise HTTPException(status_code=500, detail="Failed to add message")


@router.delete("/messages/{session_id}", status_code=204)
def clear_messages(session_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Remove every message of a session, keeping the session itself."""
    try:
        clear_session_messages(db, session_id, user.id)
    except SQLAlchemyError:
        logger.exception("Error clearing session")
        raise HTTPException(status_code=500, detail="Failed to clear session")
    return Response(status_code=204)
