"""
application.inputs - Validated inputs of the application services.

Services validate whatever they are handed (a dict from the CLI or a
test, or a REST body) through one of these pydantic models. The REST
request bodies subclass them, so every bound is declared here once.

parse() turns pydantic's error list into the domain ValidationError, one
"field: message" entry per failed constraint.
"""

from __future__ import annotations

from typing import Annotated, Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator
from pydantic import ValidationError as PydanticValidationError

from messhub.domain.exceptions import ValidationError
from messhub.domain.models import MealType, OrderStatus, PaymentMethod, PaymentStatus, Role

PHONE_PATTERN = r"^[6-9]\d{9}$"


def _text(min_length: int, max_length: int):
    """A str trimmed of surrounding whitespace before its length is checked."""
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length),
    ]


Phone = Annotated[str, StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN)]
PersonName = _text(3, 50)
Title = _text(3, 100)
Address = _text(10, 300)
Description = _text(10, 500)
Comment = _text(0, 500)
ContactName = _text(1, 100)
ContactText = _text(1, 2000)


class _Input(BaseModel):
    # Enum fields hold their raw values, which is what the repositories store
    model_config = ConfigDict(extra="forbid", use_enum_values=True)


# --- Accounts and profiles ---

class RegisterRequest(_Input):
    name: PersonName
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=6, max_length=72)
    role: Role

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class ProfileInput(_Input):
    phone: Phone
    address: Address


class ProfileUpdate(_Input):
    phone: Optional[Phone] = None
    address: Optional[Address] = None


# --- Catalog ---

class MessInput(_Input):
    name: Title
    area: Title
    phone: Phone
    address: Address
    description: Description
    is_active: bool = True


class MessUpdate(_Input):
    name: Optional[Title] = None
    area: Optional[Title] = None
    phone: Optional[Phone] = None
    address: Optional[Address] = None
    description: Optional[Description] = None
    is_active: Optional[bool] = None


class MealInput(_Input):
    name: Title
    meal_type: MealType
    is_veg: bool
    description: Description
    price: float = Field(..., ge=1, allow_inf_nan=False)
    is_available: bool = True


class MealUpdate(_Input):
    name: Optional[Title] = None
    meal_type: Optional[MealType] = None
    is_veg: Optional[bool] = None
    description: Optional[Description] = None
    price: Optional[float] = Field(None, ge=1, allow_inf_nan=False)
    is_available: Optional[bool] = None


# --- Orders ---

class OrderLine(_Input):
    """One requested line of a new order. price is the client's unit price."""
    # clients echo display fields such as the meal name alongside each line
    model_config = ConfigDict(extra="ignore")

    meal_id: int
    quantity: int = Field(..., ge=1, strict=True)
    price: float = Field(..., ge=0, allow_inf_nan=False)


class PlaceOrderRequest(_Input):
    items: list[OrderLine] = Field(..., min_length=1)
    delivery_address: Address
    delivery_phone: Phone
    payment_method: PaymentMethod
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    payment_id: Optional[str] = Field(None, min_length=1, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)
    delivery_time: Optional[str] = Field(None, min_length=1, max_length=50)


# --- Reviews and contact messages ---

class ReviewInput(_Input):
    rating: int = Field(..., ge=1, le=5, strict=True)
    comment: Optional[Comment] = None


class ReviewUpdate(_Input):
    rating: Optional[int] = Field(None, ge=1, le=5, strict=True)
    comment: Optional[Comment] = None


class ContactInput(_Input):
    name: ContactName
    email: EmailStr
    message: ContactText

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


# --- Validation entry point ---

M = TypeVar("M", bound=BaseModel)


def error_messages(exc: PydanticValidationError) -> list[str]:
    return [f"{'.'.join(str(p) for p in e['loc']) or 'input'}: {e['msg']}" for e in exc.errors()]


def parse(model: type[M], data: Any) -> M:
    """Validate *data* into *model*. An instance of *model* is returned as is.

    Raises:
        ValidationError: one entry per failed constraint.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(error_messages(exc)) from exc
