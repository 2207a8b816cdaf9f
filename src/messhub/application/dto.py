"""
application.dto - Data Transfer Objects for service input/output.

These are the structured values that services return to callers (REST
routers, the CLI, tests). Validated service inputs live in application.inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from messhub.domain.entities import Account, Mess, Order, Profile


@dataclass(frozen=True)
class LoginRequest:
    """Input for login. role, when given, must match the stored role."""
    email: str
    password: str
    role: Optional[str] = None


@dataclass(frozen=True)
class AuthResult:
    """Account summary plus a freshly issued bearer token."""
    account: Account
    token: str


@dataclass(frozen=True)
class TokenClaims:
    """Identity fields embedded in a bearer token."""
    account_id: int
    name: str
    role: str


@dataclass(frozen=True)
class MealSales:
    """Aggregated sales of one meal across all orders."""
    meal_id: int
    total_quantity: int
    total_revenue: float
    meal_name: Optional[str] = None


@dataclass(frozen=True)
class RatingSummary:
    average_rating: float
    total_reviews: int


@dataclass(frozen=True)
class ContactGroup:
    """All contact messages of one author."""
    author_account_id: int
    author_name: Optional[str]
    author_email: Optional[str]
    messages: list = field(default_factory=list)

    @property
    def message_count(self) -> int:
        return len(self.messages)


@dataclass(frozen=True)
class OwnerDashboard:
    """Aggregates over every mess an owner runs."""
    total_sales: float
    total_orders: int
    total_messes: int
    active_messes: int
    total_meals: int
    monthly_revenue: float
    recent_orders: list[Order] = field(default_factory=list)


@dataclass(frozen=True)
class ProfileSummary:
    """A profile together with the account it belongs to."""
    profile: Profile
    account: Optional[Account]


@dataclass(frozen=True)
class MessSummary:
    mess: Mess
    meal_count: int
    order_count: int
    revenue: float


@dataclass(frozen=True)
class MessStats:
    """Per-mess figures for the owner dashboard."""
    mess_id: int
    meal_count: int
    total_orders: int
    total_revenue: float
    status_counts: dict[str, int]
    average_rating: float
    total_reviews: int
