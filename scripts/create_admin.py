#!/usr/bin/env python3
"""Script to grant administrator rights, since no web page can create admins."""
import argparse
import sys
from datetime import timedelta
from typing import List, Optional

from hotel.auth import get_password_hash
from hotel.config import get_settings
from hotel.database import SessionLocal, init_db
from hotel.repository import UserRepository
from hotel.sessions import SessionStore


def create_admin(email: str, username: Optional[str] = None, password: Optional[str] = None) -> int:
    init_db()
    db = SessionLocal()
    try:
        users = UserRepository(db)
        user = users.get_by_email(email)
        if user is None:
            if not username or not password:
                print(f"No user with email {email}; pass --username and --password to create one.")
                return 1
            user = users.create(
                email=email,
                username=username,
                password_hash=get_password_hash(password),
                is_admin=True,
            )
            print(f"Created admin {user.email} (id={user.id}).")
        elif user.is_admin:
            print(f"{user.email} is already an admin.")
        else:
            user.is_admin = True
            db.commit()
            # Existing sessions keep their old snapshot until the next login.
            print(f"Promoted {user.email} to admin; they must log in again.")

        max_age = timedelta(minutes=get_settings().session_max_age_minutes)
        removed = SessionStore(db, max_age=max_age).purge_expired()
        print(f"Purged {removed} expired session(s).")
        return 0
    finally:
        db.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--username")
    parser.add_argument("--password")
    args = parser.parse_args(argv)
    return create_admin(args.email, args.username, args.password)


if __name__ == "__main__":
    sys.exit(main())
