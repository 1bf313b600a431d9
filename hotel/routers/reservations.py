from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_auth
from ..repository import ReservationRepository, RoomRepository
from ..schemas import FILL_RESERVATION, INVALID_RESERVATION, ReservationForm, SessionUser, validate_form
from ..templating import templates

router = APIRouter(tags=["reservations"])


def _room_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")


@router.post("/rooms/{room_id}/reserve")
def reserve_room(
    request: Request,
    room_id: int,
    check_in: Optional[str] = Form(None, alias="checkIn"),
    check_out: Optional[str] = Form(None, alias="checkOut"),
    guests: Optional[str] = Form(None),
    current_user: SessionUser = Depends(require_auth),
    db: Session = Depends(get_db),
) -> Response:
    rooms = RoomRepository(db)
    form, error = validate_form(
        ReservationForm,
        {"checkIn": check_in, "checkOut": check_out, "guests": guests},
        missing_message=FILL_RESERVATION,
        invalid_message=INVALID_RESERVATION,
    )
    room = rooms.get_active(room_id)
    if not room:
        raise _room_not_found()
    if form is None:
        return templates.TemplateResponse(request, "room_detail.html", {"room": room, "error": error})

    ReservationRepository(db).create(user_id=current_user.id, room_id=room.id, form=form)
    return RedirectResponse("/my-reservations", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/my-reservations")
def my_reservations(
    request: Request,
    current_user: SessionUser = Depends(require_auth),
    db: Session = Depends(get_db),
) -> Response:
    reservations = ReservationRepository(db).list_for_user(current_user.id)
    return templates.TemplateResponse(request, "my_reservations.html", {"reservations": reservations})
