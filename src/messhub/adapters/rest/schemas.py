"""Pydantic models for REST API request/response validation.

Request bodies reuse the service input models from application.inputs, so
field bounds are declared once. Bodies ignore unknown keys; the services
themselves reject them.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from messhub.application.inputs import (
    MealInput,
    MealUpdate,
    MessInput,
    MessUpdate,
    PlaceOrderRequest,
    ProfileInput,
    ProfileUpdate,
    RegisterRequest,
)
from messhub.domain.models import OrderStatus, Role


def envelope(**payload) -> dict:
    """Success envelope: {"success": true, ...payload}."""
    return {"success": True, **payload}


class _Out(BaseModel):
    model_config = ConfigDict(from_attributes=True)


_BODY = ConfigDict(extra="ignore")


# --- Auth ---

class RegisterBody(RegisterRequest):
    model_config = _BODY

    # ADMIN accounts are created from the CLI only
    role: Literal["CUSTOMER", "OWNER"]


class LoginBody(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Optional[Role] = None


class AccountOut(_Out):
    """Account summary. Never carries the password hash."""
    id: int
    name: str
    email: str
    role: str
    created_at: str


# --- Profiles ---

class ProfileBody(ProfileInput):
    model_config = _BODY


class ProfileUpdateBody(ProfileUpdate):
    model_config = _BODY


class ProfileOut(_Out):
    id: int
    account_id: int
    phone: str
    address: str
    is_completed: bool
    created_at: str
    updated_at: str


class ProfileSummaryOut(_Out):
    profile: ProfileOut
    account: Optional[AccountOut] = None


# --- Messes ---

class MessBody(MessInput):
    model_config = _BODY


class MessUpdateBody(MessUpdate):
    model_config = _BODY


class MessOut(_Out):
    id: int
    owner_id: int
    name: str
    area: str
    phone: str
    address: str
    description: str
    is_active: bool
    created_at: str
    updated_at: str


# --- Meals ---

class MealBody(MealInput):
    model_config = _BODY

    mess_id: int


class MealUpdateBody(MealUpdate):
    model_config = _BODY


class MealOut(_Out):
    id: int
    mess_id: int
    name: str
    meal_type: str
    is_veg: bool
    description: str
    price: float
    is_available: bool
    created_at: str
    updated_at: str


# --- Orders ---

class OrderBody(PlaceOrderRequest):
    model_config = _BODY


class OrderStatusBody(BaseModel):
    status: OrderStatus


class OrderItemOut(_Out):
    meal_id: int
    quantity: int
    unit_price: float


class OrderOut(_Out):
    id: int
    customer_id: int
    items: list[OrderItemOut]
    total_amount: float
    delivery_address: str
    delivery_phone: str
    status: str
    payment_method: str
    payment_status: str
    payment_id: Optional[str] = None
    notes: Optional[str] = None
    delivery_time: Optional[str] = None
    created_at: str
    updated_at: str


class MealSalesOut(_Out):
    meal_id: int
    meal_name: Optional[str] = None
    total_quantity: int
    total_revenue: float


class MonthlySalesOut(BaseModel):
    month: str
    monthly_sales: float
    order_count: int


# --- Reviews ---

class ReviewBody(BaseModel):
    # ReviewService checks rating and comment so a bad rating is InvalidRatingError
    mess_id: int
    rating: int
    comment: Optional[str] = None


class ReviewUpdateBody(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewOut(_Out):
    id: int
    customer_id: int
    mess_id: int
    rating: int
    comment: Optional[str] = None
    created_at: str
    updated_at: str


class RatingSummaryOut(_Out):
    average_rating: float
    total_reviews: int


# --- Contacts ---

class ContactBody(BaseModel):
    # Presence is checked by ContactService so the caller gets one message
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class ContactOut(_Out):
    id: int
    author_account_id: int
    name: str
    email: str
    message: str
    created_at: str


class ContactGroupOut(_Out):
    author_account_id: int
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    message_count: int
    messages: list[ContactOut]


# --- Owner dashboard ---

class OwnerDashboardOut(_Out):
    total_sales: float
    total_orders: int
    total_messes: int
    active_messes: int
    total_meals: int
    monthly_revenue: float
    recent_orders: list[OrderOut]


class MessSummaryOut(_Out):
    mess: MessOut
    meal_count: int
    order_count: int
    revenue: float


class MessStatsOut(_Out):
    mess_id: int
    meal_count: int
    total_orders: int
    total_revenue: float
    status_counts: dict[str, int]
    average_rating: float
    total_reviews: int
