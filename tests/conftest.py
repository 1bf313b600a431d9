import os
from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///./test_hotel.db")
os.environ.setdefault("RATE_LIMITING_ENABLED", "false")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

from hotel.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from hotel.app import app  # noqa: E402
from hotel.database import Base, SessionLocal, engine  # noqa: E402
from hotel.models import Room, RoomType, User  # noqa: E402

PASSWORD = "Passw0rd!"


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def other_client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, email: str, username: str = "guest", password: str = PASSWORD, confirm: str | None = None):
    return client.post(
        "/register",
        data={
            "email": email,
            "username": username,
            "password": password,
            "confirmPassword": password if confirm is None else confirm,
        },
        follow_redirects=False,
    )


def login(client: TestClient, email: str, password: str = PASSWORD):
    return client.post("/login", data={"email": email, "password": password}, follow_redirects=False)


def broken_db():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT 1", {}, Exception("database is down"))
    db.get.side_effect = OperationalError("SELECT 1", {}, Exception("database is down"))
    return db


def promote(db_session, email: str) -> None:
    db_session.query(User).filter(User.email == email).update({"is_admin": True})
    db_session.commit()


def add_room(db_session, name: str, room_type: RoomType = RoomType.DOUBLE, price: float = 100.0, **kwargs) -> Room:
    room = Room(
        name=name,
        type=room_type,
        price_per_night=price,
        capacity=kwargs.pop("capacity", 2),
        amenities=kwargs.pop("amenities", []),
        **kwargs,
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture()
def guest_client(client: TestClient) -> TestClient:
    assert register(client, "guest@example.com").status_code == 303
    return client


@pytest.fixture()
def admin_client(other_client: TestClient, db_session) -> TestClient:
    assert register(other_client, "admin@example.com", username="admin").status_code == 303
    promote(db_session, "admin@example.com")
    assert login(other_client, "admin@example.com").status_code == 303
    return other_client
