"""Password hashing and session cookie signing helpers."""
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import get_settings
from .models import User
from .repository import UserRepository

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_session_token(session_id: str, expires_at: Optional[datetime] = None) -> str:
    """Sign a session id for the cookie; the token carries the same absolute expiry as the record."""

    expire = expires_at or datetime.utcnow() + timedelta(minutes=settings.session_max_age_minutes)
    to_encode = {"sid": session_id, "exp": expire}
    return jwt.encode(to_encode, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except JWTError:
        return None
    session_id = payload.get("sid")
    if not isinstance(session_id, str):
        return None
    return session_id


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = UserRepository(db).get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user
