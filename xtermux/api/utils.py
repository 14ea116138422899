"""JWT utilities: issue and verify signed access tokens."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from xtermux.database.config.config import Settings


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed JWT carrying ``data`` plus an ``exp`` claim.

    Parameters
    ----------
    data : dict
        Claims to embed; ``sub`` holds the user id.
    settings : Settings
        Provides ``SECRET_KEY``, ``ALGORITHM`` and the default lifetime.
    expires_delta : timedelta, optional
        Overrides ``ACCESS_TOKEN_EXPIRE_MINUTES``.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str, settings: Settings) -> Optional[str]:
    """
    Validate a JWT and return its subject.

    Returns
    -------
    str or None
        The user id, or None if the token is invalid or expired.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None
    return payload.get("sub")
