"""Reusable FastAPI dependencies for sessions and access guards."""
from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .auth import decode_session_token
from .config import get_settings
from .database import get_db
from .schemas import SessionUser
from .sessions import SessionStore

settings = get_settings()


class LoginRequired(Exception):
    """Raised by ``require_auth``; the app turns it into a redirect to the login page."""


def get_session_store(db: Session = Depends(get_db)) -> SessionStore:
    return SessionStore(db, max_age=timedelta(minutes=settings.session_max_age_minutes))


def get_session_id(request: Request) -> Optional[str]:
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    return decode_session_token(token)


def get_session_user(
    request: Request,
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> Optional[SessionUser]:
    user = store.get(session_id) if session_id else None
    request.state.user = user
    return user


def require_auth(user: Optional[SessionUser] = Depends(get_session_user)) -> SessionUser:
    if user is None:
        raise LoginRequired()
    return user


def require_admin(user: Optional[SessionUser] = Depends(get_session_user)) -> SessionUser:
    if user is None or not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return user
