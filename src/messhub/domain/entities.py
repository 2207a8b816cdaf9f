"""
domain.entities - Persistence-aware types (have IDs, timestamps).

Plain dataclasses with no behaviour: password hashing and token issuing
live in application services, never on the records themselves.

Timestamps are ISO-8601 UTC strings set by the repository implementations,
not by the entities themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Account:
    """A registered identity. password_hash is a bcrypt digest."""
    id: Optional[int] = None
    role: str = ""
    name: str = ""
    email: str = ""
    password_hash: str = ""
    created_at: str = ""


@dataclass
class Profile:
    """Contact details of a customer or an owner (one per account and kind)."""
    id: Optional[int] = None
    account_id: Optional[int] = None
    phone: str = ""
    address: str = ""
    is_completed: bool = False
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Mess:
    """A catering business owned by an OWNER account."""
    id: Optional[int] = None
    owner_id: Optional[int] = None
    name: str = ""
    area: str = ""
    phone: str = ""
    address: str = ""
    description: str = ""
    is_active: bool = True
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Meal:
    """A sellable item of one mess."""
    id: Optional[int] = None
    mess_id: Optional[int] = None
    name: str = ""
    meal_type: str = ""
    is_veg: bool = False
    description: str = ""
    price: float = 0.0
    is_available: bool = True
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class OrderItem:
    """Value snapshot of one order line. Never a live reference to the meal."""
    meal_id: int
    quantity: int
    unit_price: float

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


@dataclass
class Order:
    """A customer's purchase. total_amount is always computed server-side."""
    id: Optional[int] = None
    customer_id: Optional[int] = None
    items: list[OrderItem] = field(default_factory=list)
    total_amount: float = 0.0
    delivery_address: str = ""
    delivery_phone: str = ""
    status: str = "PLACED"
    payment_method: str = ""
    payment_status: str = "PENDING"
    payment_id: Optional[str] = None
    notes: Optional[str] = None
    delivery_time: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Review:
    """A customer's rating of a mess."""
    id: Optional[int] = None
    customer_id: Optional[int] = None
    mess_id: Optional[int] = None
    rating: int = 0
    comment: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class ContactMessage:
    """A message sent to the administrators."""
    id: Optional[int] = None
    author_account_id: Optional[int] = None
    name: str = ""
    email: str = ""
    message: str = ""
    created_at: str = ""


def order_total(items: list[OrderItem]) -> float:
    """Sum of quantity x unit_price over all lines."""
    return sum(item.line_total for item in items)
