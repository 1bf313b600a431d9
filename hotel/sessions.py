"""Server-side login sessions stored in the ``sessions`` table.

A session holds a snapshot of the user's public identity taken at login or
registration. Sessions expire a fixed time after creation; lookups never extend
them. The snapshot is not refreshed when the underlying user row changes, so a
promotion to admin only shows up after the next login.
"""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from .models import SessionRecord, User
from .schemas import SessionUser


class SessionStore:
    """Key-value access to login sessions with absolute expiry."""

    def __init__(self, db: Session, max_age: timedelta) -> None:
        self.db = db
        self.max_age = max_age

    def create(self, user: User) -> SessionRecord:
        snapshot = SessionUser.model_validate(user)
        now = datetime.utcnow()
        record = SessionRecord(
            id=secrets.token_urlsafe(32),
            data=snapshot.model_dump(),
            created_at=now,
            expires_at=now + self.max_age,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def get(self, session_id: str) -> Optional[SessionUser]:
        record = self.db.get(SessionRecord, session_id)
        if record is None:
            return None
        if record.expires_at <= datetime.utcnow():
            self.db.delete(record)
            self.db.commit()
            return None
        return SessionUser.model_validate(record.data)

    def destroy(self, session_id: str) -> None:
        record = self.db.get(SessionRecord, session_id)
        if record is not None:
            self.db.delete(record)
            self.db.commit()

    def purge_expired(self) -> int:
        removed = (
            self.db.query(SessionRecord)
            .filter(SessionRecord.expires_at <= datetime.utcnow())
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return removed
