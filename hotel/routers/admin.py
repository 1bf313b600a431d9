import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_admin
from ..models import RoomType
from ..repository import ReservationRepository, RoomRepository, UserRepository
from ..schemas import INVALID_ROOM, RoomForm, validate_form
from ..templating import templates

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


def _rooms_page(request: Request, db: Session, error: Optional[str] = None) -> Response:
    rooms = RoomRepository(db).list_all()
    return templates.TemplateResponse(
        request,
        "admin_rooms.html",
        {"rooms": rooms, "error": error, "room_types": [room_type.value for room_type in RoomType]},
    )


def _back_to_rooms() -> RedirectResponse:
    return RedirectResponse("/admin/rooms", status_code=status.HTTP_303_SEE_OTHER)


@router.get("")
def dashboard(request: Request, db: Session = Depends(get_db)) -> Response:
    rooms = RoomRepository(db)
    stats = {
        "rooms": rooms.count(),
        "active_rooms": rooms.count(active_only=True),
        "reservations": ReservationRepository(db).count(),
        "users": UserRepository(db).count(),
    }
    return templates.TemplateResponse(request, "admin_index.html", {"stats": stats})


@router.get("/rooms")
def list_rooms(request: Request, db: Session = Depends(get_db)) -> Response:
    return _rooms_page(request, db)


@router.post("/rooms")
def create_room(
    request: Request,
    name: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    price_per_night: Optional[str] = Form(None, alias="pricePerNight"),
    capacity: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    amenities: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
    db: Session = Depends(get_db),
) -> Response:
    form, error = validate_form(
        RoomForm,
        {
            "name": name,
            "type": type,
            "pricePerNight": price_per_night,
            "capacity": capacity,
            "description": description,
            "amenities": amenities,
            "imageUrl": image_url,
        },
        missing_message=INVALID_ROOM,
        invalid_message=INVALID_ROOM,
    )
    if form is None:
        return _rooms_page(request, db, error)

    room = RoomRepository(db).create(form)
    logger.info("Created room %s (%s)", room.id, room.name)
    return _back_to_rooms()


@router.post("/rooms/{room_id}/toggle")
def toggle_room(room_id: int, db: Session = Depends(get_db)) -> Response:
    room = RoomRepository(db).toggle_active(room_id)
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    logger.info("Room %s is_active=%s", room.id, room.is_active)
    return _back_to_rooms()


@router.post("/rooms/{room_id}/delete")
def delete_room(room_id: int, db: Session = Depends(get_db)) -> Response:
    # Reservations pointing at the room are left in place.
    if RoomRepository(db).delete(room_id):
        logger.info("Deleted room %s", room_id)
    return _back_to_rooms()


@router.get("/reservations")
def list_reservations(request: Request, db: Session = Depends(get_db)) -> Response:
    reservations = ReservationRepository(db).list_all()
    return templates.TemplateResponse(request, "admin_reservations.html", {"reservations": reservations})
