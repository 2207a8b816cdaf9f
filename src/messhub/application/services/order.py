"""
application.services.order - Order placement, lifecycle and sales analytics.

Placement validates the request shape here and delegates the per-meal
existence/availability checks and the insert to OrderRepository.place(),
which runs them in one transaction. total_amount is always recomputed
from the line items; any client-supplied total is ignored.

Status changes follow the forward-only table in domain.models unless the
factory was configured with enforce_status_transitions=False. The write
is conditional on the status that was checked, so two concurrent changes
cannot both pass the same check.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Union

from messhub.application.context import Identity
from messhub.application.dto import MealSales
from messhub.application.inputs import PlaceOrderRequest, parse
from messhub.domain.entities import Order, OrderItem
from messhub.domain.exceptions import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from messhub.domain.models import OrderStatus, PaymentStatus, Role, can_transition
from messhub.domain.ports import MealRepository, MessRepository, OrderRepository

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime]


class OrderService:
    """Creates orders, moves them through their lifecycle and reports sales."""

    def __init__(
        self,
        order_repo: OrderRepository,
        meal_repo: MealRepository,
        mess_repo: MessRepository,
        trust_client_prices: bool = True,
        enforce_status_transitions: bool = True,
    ):
        self._order_repo = order_repo
        self._meal_repo = meal_repo
        self._mess_repo = mess_repo
        self._trust_client_prices = trust_client_prices
        self._enforce_status_transitions = enforce_status_transitions

    # -- placement -----------------------------------------------------------

    async def create(self, customer_id: int, request: PlaceOrderRequest | dict[str, Any]) -> Order:
        """Place an order for *customer_id*.

        Raises:
            ValidationError: malformed lines or delivery details.
            MealNotFoundError: a line references a meal that does not exist.
            MealUnavailableError: a line references a meal switched off.
        """
        request = parse(PlaceOrderRequest, request)

        order = Order(
            customer_id=customer_id,
            items=[
                OrderItem(meal_id=line.meal_id, quantity=line.quantity, unit_price=line.price)
                for line in request.items
            ],
            delivery_address=request.delivery_address,
            delivery_phone=request.delivery_phone,
            status=request.status or OrderStatus.PLACED.value,
            payment_method=request.payment_method,
            payment_status=request.payment_status or PaymentStatus.PENDING.value,
            payment_id=request.payment_id,
            notes=request.notes,
            delivery_time=request.delivery_time,
        )
        placed = await self._order_repo.place(
            order, use_catalog_prices=not self._trust_client_prices,
        )
        logger.info(
            "Customer %d placed order %d (%d lines, total %.2f)",
            customer_id, placed.id, len(placed.items), placed.total_amount,
        )
        return placed

    # -- lookups -------------------------------------------------------------

    async def get(self, order_id: int) -> Order:
        order = await self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    async def get_visible(self, order_id: int, identity: Identity) -> Order:
        """Fetch an order; customers may only see their own."""
        order = await self.get(order_id)
        if identity.has_role(Role.CUSTOMER) and order.customer_id != identity.account_id:
            raise ForbiddenError("You can only view your own orders")
        return order

    async def get_managed(self, order_id: int, identity: Identity) -> Order:
        """Return the order if *identity* may change it.

        Admins may change any order. An owner may change an order only when
        at least one of its lines is a meal from one of the owner's messes.
        """
        order = await self.get(order_id)
        if identity.is_admin:
            return order
        mess_ids = {mess.id for mess in await self._mess_repo.list_by_owner(identity.account_id)}
        for item in order.items:
            meal = await self._meal_repo.get_by_id(item.meal_id)
            if meal is not None and meal.mess_id in mess_ids:
                return order
        raise ForbiddenError("You can only manage orders for your own mess")

    async def list_all(self) -> list[Order]:
        return await self._order_repo.list_all()

    async def get_user_orders(self, customer_id: int) -> list[Order]:
        return await self._order_repo.list_by_customer(customer_id)

    async def get_by_status(self, status: str) -> list[Order]:
        return await self._order_repo.list_by_status(_status(status).value)

    async def get_within_date_range(self, start: DateLike, end: DateLike) -> list[Order]:
        """Orders created between *start* and *end*, inclusive.

        Naive values are taken as UTC. A bare date means midnight.
        """
        return await self._order_repo.list_between(
            _to_utc_iso(start, "start"), _to_utc_iso(end, "end"),
        )

    # -- mutations -----------------------------------------------------------

    async def update_status(self, order_id: int, new_status: str) -> Order:
        """Move an order to *new_status*.

        Raises:
            ValidationError: unknown status.
            NotFoundError: no such order.
            InvalidTransitionError: the move is not allowed, or the order
                changed status while this call was checking it.
        """
        target = _status(new_status)
        order = await self.get(order_id)
        current = OrderStatus(order.status)
        if self._enforce_status_transitions and not can_transition(current, target):
            raise InvalidTransitionError(
                f"Cannot change order status from {current.value} to {target.value}"
            )

        if not await self._order_repo.update_status(order_id, target.value, current.value):
            if await self._order_repo.get_by_id(order_id) is None:
                raise NotFoundError("Order not found")
            raise InvalidTransitionError(
                f"Order {order_id} is no longer {current.value}; reload it and try again"
            )
        logger.info("Order %d: %s -> %s", order_id, current.value, target.value)
        return await self.get(order_id)

    async def delete(self, order_id: int) -> Order:
        order = await self.get(order_id)
        await self._order_repo.delete(order_id)
        logger.info("Deleted order %d", order_id)
        return order

    async def clear_user_orders(self, customer_id: int) -> int:
        deleted = await self._order_repo.delete_by_customer(customer_id)
        logger.info("Cleared %d orders of customer %d", deleted, customer_id)
        return deleted

    # -- analytics -----------------------------------------------------------

    async def total_sales(self) -> float:
        return await self._order_repo.total_sales()

    async def monthly_sales(self) -> list[dict]:
        return await self._order_repo.monthly_sales()

    async def top_selling_meals(self, limit: int = 5) -> list[MealSales]:
        """Meals ranked by total quantity sold.

        Ties keep the order in which the meals first appear in stored
        orders (oldest order first).
        """
        if limit < 1:
            raise ValidationError(["limit must be at least 1"])

        quantities: dict[int, int] = {}
        revenue: dict[int, float] = {}
        for order in reversed(await self._order_repo.list_all()):
            for item in order.items:
                quantities[item.meal_id] = quantities.get(item.meal_id, 0) + item.quantity
                revenue[item.meal_id] = revenue.get(item.meal_id, 0) + item.line_total

        ranked = sorted(quantities, key=lambda meal_id: quantities[meal_id], reverse=True)
        result = []
        for meal_id in ranked[:limit]:
            meal = await self._meal_repo.get_by_id(meal_id)
            result.append(MealSales(
                meal_id=meal_id,
                total_quantity=quantities[meal_id],
                total_revenue=revenue[meal_id],
                meal_name=meal.name if meal else None,
            ))
        return result


def _status(value) -> OrderStatus:
    try:
        return OrderStatus(getattr(value, "value", value))
    except ValueError:
        allowed = ", ".join(status.value for status in OrderStatus)
        raise ValidationError([f"status: must be one of {allowed}"])


def _to_utc_iso(value: DateLike, name: str) -> str:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError([f"{name} must be an ISO-8601 date or datetime"])
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
