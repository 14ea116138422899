"""FastAPI dependencies shared by the routers."""

from typing import Iterator, Optional

from fastapi import Cookie, Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from xtermux.api.ai_proxy import AIProxy
from xtermux.api.utils import verify_token
from xtermux.database.config.config import Settings
from xtermux.database.core.funcs import effective_role
from xtermux.database.daos import UserDao
from xtermux.database.entities import User
from xtermux.database.entities.user import ROLE_ADMIN, ROLE_BLOCKED


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    yield from request.app.state.db.session()


def get_ai_proxy(request: Request) -> AIProxy:
    return request.app.state.ai_proxy


def get_current_user(
    token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Resolve the caller from a Bearer header or the ``token`` cookie.

    The header wins when both are present.

    Raises
    ------
    HTTPException 401
        If the token is missing, invalid, expired, or names an unknown user.
    HTTPException 403
        If the account is blocked.
    """
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing Token")
    user_id = verify_token(token, settings)
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    user = UserDao(db).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if effective_role(user, settings.ADMIN_EMAILS) == ROLE_BLOCKED:
        raise HTTPException(status_code=403, detail="Account is blocked")
    return user


def require_admin(
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> User:
    if effective_role(user, settings.ADMIN_EMAILS) != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Access Denied")
    return user
