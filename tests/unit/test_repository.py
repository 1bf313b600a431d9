"""Unit tests for the typed collections."""
from datetime import date

from conftest import add_room

from hotel.models import Reservation, RoomType, User
from hotel.repository import ReservationRepository, RoomRepository, UserRepository
from hotel.schemas import ReservationForm, RoomSearch

STAY = ReservationForm(checkIn=date(2025, 7, 1), checkOut=date(2025, 7, 2), guests=1)


def test_user_lookup_by_email(db_session):
    users = UserRepository(db_session)
    user = users.create(email="jane@example.com", username="jane", password_hash="x")

    assert users.get_by_email("jane@example.com").id == user.id
    assert users.get_by_email("JANE@example.com") is None
    assert users.count() == 1


def test_featured_rooms_respects_limit_and_activity(db_session):
    for index in range(4):
        add_room(db_session, f"Room {index}")
    add_room(db_session, "Hidden", is_active=False)

    rooms = RoomRepository(db_session).list_featured(3)

    assert [room.name for room in rooms] == ["Room 0", "Room 1", "Room 2"]


def test_search_bounds_are_inclusive(db_session):
    add_room(db_session, "Low", price=50)
    add_room(db_session, "High", price=150)
    add_room(db_session, "Out", price=150.01)

    rooms = RoomRepository(db_session).search(RoomSearch(type="double", min_price=50, max_price=150))

    assert [room.name for room in rooms] == ["Low", "High"]


def test_search_unknown_type(db_session):
    add_room(db_session, "Low", price=50)

    assert RoomRepository(db_session).search(RoomSearch(type="attic")) == []


def test_get_active(db_session):
    rooms = RoomRepository(db_session)
    hidden = add_room(db_session, "Hidden", RoomType.SUITE, is_active=False)

    assert rooms.get(hidden.id) is not None
    assert rooms.get_active(hidden.id) is None
    assert rooms.get_active(12345) is None


def test_ids_beyond_integer_column_are_absent(db_session):
    rooms = RoomRepository(db_session)

    assert rooms.get(10**20) is None
    assert rooms.get(-(10**20)) is None
    assert rooms.toggle_active(10**20) is None
    assert rooms.delete(10**20) is False


def test_reservations_ordering_and_expansion(db_session):
    user = UserRepository(db_session).create(email="jane@example.com", username="jane", password_hash="x")
    room = add_room(db_session, "Room 101")
    reservations = ReservationRepository(db_session)

    older = reservations.create(user_id=user.id, room_id=room.id, form=STAY)
    newer = reservations.create(user_id=user.id, room_id=room.id, form=STAY)
    reservations.create(user_id=user.id + 1, room_id=room.id, form=STAY)

    mine = reservations.list_for_user(user.id)
    assert [reservation.id for reservation in mine] == [newer.id, older.id]
    assert mine[0].room.name == "Room 101"

    everything = reservations.list_all()
    assert len(everything) == 3
    assert isinstance(everything[-1].user, User)
    assert everything[0].user is None


def test_delete_room_keeps_reservations(db_session):
    user = UserRepository(db_session).create(email="jane@example.com", username="jane", password_hash="x")
    room = add_room(db_session, "Room 101")
    reservations = ReservationRepository(db_session)
    reservation = reservations.create(user_id=user.id, room_id=room.id, form=STAY)

    assert RoomRepository(db_session).delete(room.id) is True
    assert RoomRepository(db_session).delete(room.id) is False

    db_session.expire_all()
    kept = db_session.get(Reservation, reservation.id)
    assert kept.room_id == room.id
    assert kept.room is None
