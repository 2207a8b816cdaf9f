"""
application.services.owner - Owner dashboard.

Walks owner -> messes -> meals -> orders that contain those meals. An
order may mix meals of several messes, so revenue here counts only the
lines that belong to the owner's meals, never the whole order total.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Optional

from messhub.application.dto import MessStats, MessSummary, OwnerDashboard
from messhub.domain.entities import Meal, Mess, Order
from messhub.domain.exceptions import ForbiddenError, NotFoundError
from messhub.domain.ports import MealRepository, MessRepository, OrderRepository, ReviewRepository

logger = logging.getLogger(__name__)

RECENT_ORDERS = 5


def _revenue(orders: Iterable[Order], meal_ids: set[int]) -> float:
    return sum(
        item.line_total
        for order in orders
        for item in order.items
        if item.meal_id in meal_ids
    )


class OwnerService:

    def __init__(
        self,
        mess_repo: MessRepository,
        meal_repo: MealRepository,
        order_repo: OrderRepository,
        review_repo: ReviewRepository,
    ):
        self._mess_repo = mess_repo
        self._meal_repo = meal_repo
        self._order_repo = order_repo
        self._review_repo = review_repo

    async def dashboard(self, owner_id: int) -> OwnerDashboard:
        messes = await self._mess_repo.list_by_owner(owner_id)
        meals = await self._meals_of(messes)
        meal_ids = {m.id for m in meals}
        orders = await self._order_repo.list_containing_meals(sorted(meal_ids))

        this_month = datetime.now(timezone.utc).strftime("%Y-%m")
        return OwnerDashboard(
            total_sales=_revenue(orders, meal_ids),
            total_orders=len(orders),
            total_messes=len(messes),
            active_messes=sum(1 for m in messes if m.is_active),
            total_meals=len(meals),
            monthly_revenue=_revenue(
                (o for o in orders if o.created_at.startswith(this_month)), meal_ids,
            ),
            recent_orders=orders[:RECENT_ORDERS],
        )

    async def messes(self, owner_id: int) -> list[MessSummary]:
        summaries = []
        for mess in await self._mess_repo.list_by_owner(owner_id):
            meal_ids = {m.id for m in await self._meal_repo.search(mess_id=mess.id)}
            orders = await self._order_repo.list_containing_meals(sorted(meal_ids))
            summaries.append(MessSummary(
                mess=mess,
                meal_count=len(meal_ids),
                order_count=len(orders),
                revenue=_revenue(orders, meal_ids),
            ))
        return summaries

    async def mess_orders(
        self, owner_id: int, mess_id: int, status: Optional[str] = None,
    ) -> list[Order]:
        mess = await self._owned(owner_id, mess_id)
        meal_ids = [m.id for m in await self._meal_repo.search(mess_id=mess.id)]
        return await self._order_repo.list_containing_meals(meal_ids, status=status)

    async def mess_stats(self, owner_id: int, mess_id: int) -> MessStats:
        mess = await self._owned(owner_id, mess_id)
        meal_ids = {m.id for m in await self._meal_repo.search(mess_id=mess.id)}
        orders = await self._order_repo.list_containing_meals(sorted(meal_ids))
        ratings = await self._review_repo.ratings_for_mess(mess.id)
        return MessStats(
            mess_id=mess.id,
            meal_count=len(meal_ids),
            total_orders=len(orders),
            total_revenue=_revenue(orders, meal_ids),
            status_counts=dict(Counter(o.status for o in orders)),
            average_rating=round(sum(ratings) / len(ratings), 1) if ratings else 0,
            total_reviews=len(ratings),
        )

    async def _owned(self, owner_id: int, mess_id: int) -> Mess:
        mess = await self._mess_repo.get_by_id(mess_id)
        if mess is None:
            raise NotFoundError("Mess not found")
        if mess.owner_id != owner_id:
            raise ForbiddenError("You can only view your own mess")
        return mess

    async def _meals_of(self, messes: list[Mess]) -> list[Meal]:
        meals: list[Meal] = []
        for mess in messes:
            meals.extend(await self._meal_repo.search(mess_id=mess.id))
        return meals
