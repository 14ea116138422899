"""
FastAPI Router: Admin user management.

Every route requires the effective ``admin`` role (stored role, or an email
listed in ``ADMIN_EMAILS``).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from xtermux.api.deps import get_db, get_settings, require_admin
from xtermux.api.fast_api import to_profile
from xtermux.api.models import BlockUpdate, NewUser, Profile, RoleUpdate
from xtermux.database.config.config import Settings
from xtermux.database.core.funcs import create_user, delete_user, list_users, set_blocked, set_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


@router.get("/users", response_model=List[Profile])
def get_users(search: str = "", db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """
    List users, most recently updated first.

    Query Parameters
    ----------------
    search : str
        Case-insensitive substring matched against username and email.
    """
    try:
        return [to_profile(u, settings) for u in list_users(db, search=search)]
    except SQLAlchemyError:
        logger.exception("Error fetching users")
        raise HTTPException(status_code=500, detail="Failed to fetch users")


@router.post("/users", response_model=Profile, status_code=201)
def add_user(data: NewUser, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """
    Create a user on someone's behalf.

    Request Body
    ------------
    NewUser {email: str, password: str, username: str|None, role: str}
        The username defaults to the local part of the email.
    """
    try:
        user = create_user(db, email=data.email, password=data.password, username=data.username, role=data.role)
    except SQLAlchemyError:
        logger.exception("Error creating user")
        raise HTTPException(status_code=500, detail="Failed to create user")
    return to_profile(user, settings)


@router.patch("/users/{user_id}/role", response_model=Profile)
def update_role(user_id: str, data: RoleUpdate, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    try:
        user = set_role(db, user_id, data.role)
    except SQLAlchemyError:
        logger.exception("Error updating role")
        raise HTTPException(status_code=500, detail="Error updating role")
    return to_profile(user, settings)


@router.post("/users/{user_id}/block", response_model=Profile)
def block_user(user_id: str, data: BlockUpdate, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """Block (role ``blocked``) or unblock (role ``user``) an account."""
    try:
        user = set_blocked(db, user_id, data.blocked)
    except SQLAlchemyError:
        logger.exception("Error blocking user")
        raise HTTPException(status_code=500, detail="Failed to update user")
    return to_profile(user, settings)


@router.delete("/users/{user_id}", status_code=204)
def remove_user(user_id: str, db: Session = Depends(get_db)):
    """Permanently delete a user with their sessions, messages and progress."""
    try:
        delete_user(db, user_id)
    except SQLAlchemyError:
        logger.exception("Error deleting user")
        raise HTTPException(status_code=500, detail="Failed to delete user")
    return Response(status_code=204)
