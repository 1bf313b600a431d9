import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..auth import authenticate_user, create_session_token, get_password_hash
from ..config import get_settings
from ..database import get_db
from ..dependencies import get_session_id, get_session_store
from ..models import SessionRecord
from ..rate_limit import AUTH_FORM_LIMIT, limiter
from ..repository import UserRepository
from ..schemas import (
    ACCOUNT_EXISTS,
    BAD_CREDENTIALS,
    FILL_ALL_FIELDS,
    SERVER_ERROR,
    LoginForm,
    RegistrationForm,
    validate_form,
)
from ..sessions import SessionStore
from ..templating import templates

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)
settings = get_settings()


def _render(request: Request, template: str, error: Optional[str], values: Dict[str, Any]) -> Response:
    return templates.TemplateResponse(request, template, {"error": error, "values": values})


def _start_session(response: Response, record: SessionRecord) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        create_session_token(record.id, record.expires_at),
        max_age=settings.session_max_age_minutes * 60,
        httponly=True,
        samesite="lax",
    )


@router.get("/register")
def register_page(request: Request) -> Response:
    return _render(request, "register.html", None, {})


@router.post("/register")
@limiter.limit(AUTH_FORM_LIMIT)
def register(
    request: Request,
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    confirm_password: Optional[str] = Form(None, alias="confirmPassword"),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    values = {"email": email or "", "username": username or ""}
    form, error = validate_form(
        RegistrationForm,
        {"email": email, "username": username, "password": password, "confirmPassword": confirm_password},
        missing_message=FILL_ALL_FIELDS,
        invalid_message=FILL_ALL_FIELDS,
    )
    if form is None:
        return _render(request, "register.html", error, values)

    users = UserRepository(db)
    try:
        if users.get_by_email(form.email):
            return _render(request, "register.html", ACCOUNT_EXISTS, values)
        user = users.create(
            email=form.email,
            username=form.username,
            password_hash=get_password_hash(form.password),
        )
        record = store.create(user)
    except IntegrityError:
        db.rollback()
        return _render(request, "register.html", ACCOUNT_EXISTS, values)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration failed for %s", form.email)
        return _render(request, "register.html", SERVER_ERROR, values)

    logger.info("Registered user %s", user.id)
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    _start_session(response, record)
    return response


@router.get("/login")
def login_page(request: Request) -> Response:
    return _render(request, "login.html", None, {})


@router.post("/login")
@limiter.limit(AUTH_FORM_LIMIT)
def login(
    request: Request,
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    current_session_id: Optional[str] = Depends(get_session_id),
) -> Response:
    values = {"email": email or ""}
    form, _ = validate_form(
        LoginForm,
        {"email": email, "password": password},
        missing_message=BAD_CREDENTIALS,
        invalid_message=BAD_CREDENTIALS,
    )
    if form is None:
        return _render(request, "login.html", BAD_CREDENTIALS, values)

    try:
        user = authenticate_user(db, form.email, form.password)
        if user is None:
            return _render(request, "login.html", BAD_CREDENTIALS, values)
        if current_session_id:
            store.destroy(current_session_id)
        record = store.create(user)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Login failed for %s", form.email)
        return _render(request, "login.html", SERVER_ERROR, values)

    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    _start_session(response, record)
    return response


@router.get("/logout")
def logout(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> Response:
    if session_id:
        store.destroy(session_id)
    response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.session_cookie_name)
    return response
