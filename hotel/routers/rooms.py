from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..models import RoomType
from ..repository import RoomRepository
from ..schemas import RoomSearch
from ..templating import templates

router = APIRouter(tags=["rooms"])
settings = get_settings()


@router.get("/")
def home(request: Request, db: Session = Depends(get_db)) -> Response:
    rooms = RoomRepository(db).list_featured(settings.home_room_limit)
    return templates.TemplateResponse(request, "index.html", {"rooms": rooms})


@router.get("/rooms")
def search_rooms(
    request: Request,
    type: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    db: Session = Depends(get_db),
) -> Response:
    criteria = RoomSearch(type=type, min_price=min_price, max_price=max_price)
    rooms = RoomRepository(db).search(criteria)
    filters = {"type": type or "all", "minPrice": min_price or "", "maxPrice": max_price or ""}
    return templates.TemplateResponse(
        request,
        "rooms.html",
        {"rooms": rooms, "filters": filters, "room_types": [room_type.value for room_type in RoomType]},
    )


@router.get("/rooms/{room_id}")
def room_detail(request: Request, room_id: int, db: Session = Depends(get_db)) -> Response:
    room = RoomRepository(db).get_active(room_id)
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return templates.TemplateResponse(request, "room_detail.html", {"room": room, "error": None})
