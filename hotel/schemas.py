"""Pydantic structures for session snapshots and form input validation."""
from __future__ import annotations

from datetime import date
from typing import Any, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .models import INTEGER_MAX, RoomType

FILL_ALL_FIELDS = "Please fill in all fields."
PASSWORDS_DO_NOT_MATCH = "Passwords do not match."
ACCOUNT_EXISTS = "An account already exists with this email."
BAD_CREDENTIALS = "Incorrect email or password."
SERVER_ERROR = "Server error."
FILL_RESERVATION = "Please fill in all reservation details."
INVALID_RESERVATION = "Invalid reservation details."
INVALID_ROOM = "Invalid room details."

_MISSING_ERRORS = {"missing", "string_too_short"}

FormT = TypeVar("FormT", bound=BaseModel)


class SessionUser(BaseModel):
    """Identity snapshot stored in a login session."""

    id: int
    email: str
    username: str
    is_admin: bool = False

    model_config = ConfigDict(from_attributes=True)


class _Form(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_empty(cls, data: Any) -> Any:
        # Browsers submit empty inputs as "", which counts as absent.
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value not in (None, "")}
        return data


class RegistrationForm(_Form):
    email: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1, alias="confirmPassword")

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegistrationForm":
        if self.password != self.confirm_password:
            raise ValueError(PASSWORDS_DO_NOT_MATCH)
        return self


class LoginForm(_Form):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ReservationForm(_Form):
    check_in: date = Field(..., alias="checkIn")
    check_out: date = Field(..., alias="checkOut")
    guests: int = Field(..., ge=-INTEGER_MAX, le=INTEGER_MAX)


class RoomForm(_Form):
    name: str = Field(..., min_length=1)
    type: RoomType
    price_per_night: float = Field(..., alias="pricePerNight")
    capacity: int = Field(..., ge=-INTEGER_MAX, le=INTEGER_MAX)
    description: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @field_validator("amenities", mode="before")
    @classmethod
    def _split_amenities(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class RoomSearch(BaseModel):
    """Optional filters for the public room search."""

    type: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    @field_validator("type", mode="before")
    @classmethod
    def _ignore_all(cls, value: Any) -> Any:
        if value in (None, "", "all"):
            return None
        return value

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> Any:
        if value in (None, ""):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None


def validate_form(
    form_cls: Type[FormT], data: Mapping[str, Any], *, missing_message: str, invalid_message: str
) -> Tuple[Optional[FormT], Optional[str]]:
    """Validate raw form fields, returning either the parsed form or a user-facing message."""

    try:
        return form_cls.model_validate(dict(data)), None
    except ValidationError as exc:
        errors = exc.errors()
        if any(error["type"] in _MISSING_ERRORS for error in errors):
            return None, missing_message
        for error in errors:
            if error["type"] == "value_error":
                return None, str(error["ctx"]["error"])
        return None, invalid_message
