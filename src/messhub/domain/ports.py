"""
domain.ports - Abstract interfaces (Protocols) for all system boundaries.

These define WHAT the services need from storage without specifying HOW.
Infrastructure modules provide concrete implementations. Application
services depend only on these protocols, never on concrete classes.

Structural typing: any class that implements the methods satisfies the
port without explicit inheritance.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from messhub.domain.entities import (
    Account,
    ContactMessage,
    Meal,
    Mess,
    Order,
    Profile,
    Review,
)


@runtime_checkable
class AccountRepository(Protocol):
    """Credential store."""

    async def save(self, account: Account) -> int: ...
    async def get_by_id(self, account_id: int) -> Account | None: ...
    async def get_by_email(self, email: str) -> Account | None: ...
    async def list_all(self) -> list[Account]: ...


@runtime_checkable
class ProfileRepository(Protocol):
    """One profile per account for a given kind (customer or owner)."""

    async def save(self, profile: Profile) -> int: ...
    async def get_by_account(self, account_id: int) -> Profile | None: ...
    async def update(self, account_id: int, fields: dict[str, Any]) -> bool: ...
    async def list_all(self) -> list[Profile]: ...


@runtime_checkable
class MessRepository(Protocol):

    async def save(self, mess: Mess) -> int: ...
    async def get_by_id(self, mess_id: int) -> Mess | None: ...
    async def search(
        self,
        area: Optional[str] = None,
        text: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> list[Mess]: ...
    async def list_by_owner(self, owner_id: int) -> list[Mess]: ...
    async def update(self, mess_id: int, fields: dict[str, Any]) -> bool: ...
    async def delete(self, mess_id: int) -> bool: ...


@runtime_checkable
class MealRepository(Protocol):

    async def save(self, meal: Meal) -> int: ...
    async def get_by_id(self, meal_id: int) -> Meal | None: ...
    async def search(
        self,
        mess_id: Optional[int] = None,
        meal_type: Optional[str] = None,
        is_veg: Optional[bool] = None,
        is_available: Optional[bool] = None,
    ) -> list[Meal]: ...
    async def update(self, meal_id: int, fields: dict[str, Any]) -> bool: ...
    async def delete(self, meal_id: int) -> bool: ...


@runtime_checkable
class OrderRepository(Protocol):
    """Orders plus the read-side aggregations used by the analytics endpoints."""

    async def place(self, order: Order, *, use_catalog_prices: bool = False) -> Order: ...
    async def get_by_id(self, order_id: int) -> Order | None: ...
    async def list_all(self) -> list[Order]: ...
    async def list_by_customer(self, customer_id: int) -> list[Order]: ...
    async def list_by_status(self, status: str) -> list[Order]: ...
    async def list_between(self, start_iso: str, end_iso: str) -> list[Order]: ...
    async def list_containing_meals(
        self, meal_ids: list[int], status: Optional[str] = None,
    ) -> list[Order]: ...
    # False when the order is gone or its status is no longer expected_status
    async def update_status(self, order_id: int, status: str, expected_status: str) -> bool: ...
    async def delete(self, order_id: int) -> bool: ...
    async def delete_by_customer(self, customer_id: int) -> int: ...
    async def total_sales(self) -> float: ...
    async def monthly_sales(self) -> list[dict]: ...


@runtime_checkable
class ReviewRepository(Protocol):

    async def save(self, review: Review) -> int: ...
    async def get_by_id(self, review_id: int) -> Review | None: ...
    async def search(
        self,
        mess_id: Optional[int] = None,
        customer_id: Optional[int] = None,
    ) -> list[Review]: ...
    async def update(self, review_id: int, fields: dict[str, Any]) -> bool: ...
    async def delete(self, review_id: int) -> bool: ...
    async def ratings_for_mess(self, mess_id: int) -> list[int]: ...


@runtime_checkable
class ContactRepository(Protocol):

    async def save(self, contact: ContactMessage) -> int: ...
    async def get_by_id(self, contact_id: int) -> ContactMessage | None: ...
    async def list_all(self) -> list[ContactMessage]: ...
    async def delete(self, contact_id: int) -> bool: ...
    async def delete_all(self) -> int: ...
