"""
application.services.meal - Menu items of a mess.

Ownership of a meal is the ownership of its mess; the mess check itself
lives in MessService.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from messhub.application.inputs import MealInput, MealUpdate, parse
from messhub.domain.entities import Meal
from messhub.domain.exceptions import NotFoundError
from messhub.domain.ports import MealRepository, MessRepository

logger = logging.getLogger(__name__)


class MealService:

    def __init__(self, meal_repo: MealRepository, mess_repo: MessRepository):
        self._meal_repo = meal_repo
        self._mess_repo = mess_repo

    async def create(self, mess_id: int, fields: dict[str, Any]) -> Meal:
        fields = {k: v for k, v in fields.items() if v is not None}
        data = parse(MealInput, fields)
        if await self._mess_repo.get_by_id(mess_id) is None:
            raise NotFoundError("Mess not found")

        meal = Meal(mess_id=mess_id, **data.model_dump())
        meal_id = await self._meal_repo.save(meal)
        logger.info("Added meal %d (%s) to mess %d", meal_id, meal.name, mess_id)
        return await self.get(meal_id)

    async def get(self, meal_id: int) -> Meal:
        meal = await self._meal_repo.get_by_id(meal_id)
        if meal is None:
            raise NotFoundError("Meal not found")
        return meal

    async def list(
        self,
        mess_id: Optional[int] = None,
        meal_type: Optional[str] = None,
        is_veg: Optional[bool] = None,
        is_available: Optional[bool] = None,
    ) -> list[Meal]:
        return await self._meal_repo.search(
            mess_id=mess_id,
            meal_type=getattr(meal_type, "value", meal_type),
            is_veg=is_veg,
            is_available=is_available,
        )

    async def update(self, meal_id: int, fields: dict[str, Any]) -> Meal:
        fields = {k: v for k, v in fields.items() if v is not None}
        changes = parse(MealUpdate, fields).model_dump(exclude_none=True)
        if not await self._meal_repo.update(meal_id, changes):
            raise NotFoundError("Meal not found")
        logger.info("Updated meal %d: %s", meal_id, sorted(changes))
        return await self.get(meal_id)

    async def delete(self, meal_id: int) -> Meal:
        meal = await self.get(meal_id)
        await self._meal_repo.delete(meal_id)
        logger.info("Deleted meal %d", meal_id)
        return meal

    async def verify_ownership(self, meal_id: int, mess_id: int) -> bool:
        """True if the meal belongs to *mess_id*."""
        meal = await self.get(meal_id)
        return meal.mess_id == mess_id

    async def is_available(self, meal_id: int) -> bool:
        meal = await self.get(meal_id)
        return meal.is_available
