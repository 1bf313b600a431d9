from datetime import date

from conftest import add_room, login, register

from hotel.models import Reservation, User

STAY = {"checkIn": "2025-07-01", "checkOut": "2025-07-04", "guests": "2"}


def test_reserve_requires_login(client, db_session):
    room = add_room(db_session, "Room 101")

    response = client.post(f"/rooms/{room.id}/reserve", data=STAY, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert db_session.query(Reservation).count() == 0


def test_reserve_creates_single_reservation(guest_client, db_session):
    room = add_room(db_session, "Room 101")

    response = guest_client.post(f"/rooms/{room.id}/reserve", data=STAY, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/my-reservations"

    reservation = db_session.query(Reservation).one()
    guest = db_session.query(User).filter(User.email == "guest@example.com").one()
    assert reservation.guests == 2
    assert isinstance(reservation.guests, int)
    assert reservation.user_id == guest.id
    assert reservation.room_id == room.id
    assert reservation.check_in == date(2025, 7, 1)
    assert reservation.check_out == date(2025, 7, 4)
    assert reservation.created_at is not None


def test_reserve_missing_field_rerenders_room(guest_client, db_session):
    room = add_room(db_session, "Room 101")

    response = guest_client.post(f"/rooms/{room.id}/reserve", data={"checkIn": "2025-07-01", "guests": "2"})
    assert response.status_code == 200
    assert "Please fill in all reservation details." in response.text
    assert "Room 101" in response.text
    assert db_session.query(Reservation).count() == 0


def test_reserve_uncoercible_input_rerenders_room(guest_client, db_session):
    room = add_room(db_session, "Room 101")

    response = guest_client.post(
        f"/rooms/{room.id}/reserve", data={"checkIn": "tomorrow", "checkOut": "2025-07-04", "guests": "two"}
    )
    assert response.status_code == 200
    assert "Invalid reservation details." in response.text
    assert db_session.query(Reservation).count() == 0


def test_reserve_inactive_room_is_not_found(guest_client, db_session):
    room = add_room(db_session, "Closed", is_active=False)

    response = guest_client.post(f"/rooms/{room.id}/reserve", data=STAY)
    assert response.status_code == 404
    assert guest_client.post("/rooms/9999/reserve", data=STAY).status_code == 404
    assert db_session.query(Reservation).count() == 0


def test_overlapping_and_oversized_stays_are_accepted(guest_client, db_session):
    room = add_room(db_session, "Room 101", capacity=1)

    guest_client.post(f"/rooms/{room.id}/reserve", data=STAY)
    guest_client.post(f"/rooms/{room.id}/reserve", data={**STAY, "guests": "5", "checkOut": "2025-06-01"})
    assert db_session.query(Reservation).count() == 2


def test_my_reservations_lists_only_own_newest_first(guest_client, other_client, db_session):
    first = add_room(db_session, "First Room")
    second = add_room(db_session, "Second Room")
    register(other_client, "other@example.com", username="other")
    other_client.post(f"/rooms/{first.id}/reserve", data=STAY)

    guest_client.post(f"/rooms/{first.id}/reserve", data=STAY)
    guest_client.post(f"/rooms/{second.id}/reserve", data=STAY)

    response = guest_client.get("/my-reservations")
    assert response.status_code == 200
    assert response.text.count('class="reservation"') == 2
    assert response.text.index("Second Room") < response.text.index("First Room")

    guest = db_session.query(User).filter(User.email == "guest@example.com").one()
    own = db_session.query(Reservation).filter(Reservation.user_id == guest.id).count()
    assert own == 2


def test_my_reservations_requires_login(client):
    response = client.get("/my-reservations", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_reservation_survives_session_relogin(guest_client, db_session):
    room = add_room(db_session, "Room 101")
    guest_client.post(f"/rooms/{room.id}/reserve", data=STAY)
    guest_client.get("/logout")
    login(guest_client, "guest@example.com")

    assert guest_client.get("/my-reservations").text.count('class="reservation"') == 1


def test_reserve_guest_count_beyond_integer_range(guest_client, db_session):
    room = add_room(db_session, "Room 101")

    response = guest_client.post(f"/rooms/{room.id}/reserve", data={**STAY, "guests": "99999999999999999999"})
    assert response.status_code == 200
    assert "Invalid reservation details." in response.text
    assert guest_client.post("/rooms/99999999999999999999/reserve", data=STAY).status_code == 404
    assert db_session.query(Reservation).count() == 0
