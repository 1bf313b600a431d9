"""Typed collections over the database: users, rooms and reservations."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from .models import INTEGER_MAX, Reservation, Room, RoomType, User
from .schemas import ReservationForm, RoomForm, RoomSearch


def _storable_id(value: int) -> bool:
    return -INTEGER_MAX <= value <= INTEGER_MAX


class UserRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, *, email: str, username: str, password_hash: str, is_admin: bool = False) -> User:
        user = User(email=email, username=username, password_hash=password_hash, is_admin=is_admin)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def count(self) -> int:
        return self.db.query(User).count()


class RoomRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, room_id: int) -> Optional[Room]:
        # Ids outside the column range cannot exist.
        if not _storable_id(room_id):
            return None
        return self.db.get(Room, room_id)

    def get_active(self, room_id: int) -> Optional[Room]:
        room = self.get(room_id)
        if room is None or not room.is_active:
            return None
        return room

    def list_featured(self, limit: int) -> List[Room]:
        return self.db.query(Room).filter(Room.is_active.is_(True)).order_by(Room.id).limit(limit).all()

    def search(self, criteria: RoomSearch) -> List[Room]:
        query = self.db.query(Room).filter(Room.is_active.is_(True))
        if criteria.type is not None:
            try:
                room_type = RoomType(criteria.type)
            except ValueError:
                return []
            query = query.filter(Room.type == room_type)
        if criteria.min_price is not None:
            query = query.filter(Room.price_per_night >= criteria.min_price)
        if criteria.max_price is not None:
            query = query.filter(Room.price_per_night <= criteria.max_price)
        return query.order_by(Room.price_per_night.asc(), Room.id.asc()).all()

    def list_all(self) -> List[Room]:
        return self.db.query(Room).order_by(Room.name.asc(), Room.id.asc()).all()

    def create(self, form: RoomForm) -> Room:
        room = Room(**form.model_dump(), is_active=True)
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        return room

    def toggle_active(self, room_id: int) -> Optional[Room]:
        room = self.get(room_id)
        if room is None:
            return None
        room.is_active = not room.is_active
        self.db.commit()
        self.db.refresh(room)
        return room

    def delete(self, room_id: int) -> bool:
        room = self.get(room_id)
        if room is None:
            return False
        self.db.delete(room)
        self.db.commit()
        return True

    def count(self, *, active_only: bool = False) -> int:
        query = self.db.query(Room)
        if active_only:
            query = query.filter(Room.is_active.is_(True))
        return query.count()


class ReservationRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, *, user_id: int, room_id: int, form: ReservationForm) -> Reservation:
        # Overlapping stays for the same room are accepted as-is.
        reservation = Reservation(
            user_id=user_id,
            room_id=room_id,
            check_in=form.check_in,
            check_out=form.check_out,
            guests=form.guests,
        )
        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)
        return reservation

    def list_for_user(self, user_id: int) -> List[Reservation]:
        return (
            self.db.query(Reservation)
            .options(joinedload(Reservation.room))
            .filter(Reservation.user_id == user_id)
            .order_by(Reservation.created_at.desc(), Reservation.id.desc())
            .all()
        )

    def list_all(self) -> List[Reservation]:
        return (
            self.db.query(Reservation)
            .options(joinedload(Reservation.user), joinedload(Reservation.room))
            .order_by(Reservation.created_at.desc(), Reservation.id.desc())
            .all()
        )

    def count(self) -> int:
        return self.db.query(Reservation).count()
