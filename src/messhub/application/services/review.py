"""
application.services.review - Customer ratings of messes.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from messhub.application.dto import RatingSummary
from messhub.application.inputs import ReviewInput, ReviewUpdate, error_messages
from messhub.domain.entities import Review
from messhub.domain.exceptions import (
    ForbiddenError,
    InvalidRatingError,
    NotFoundError,
    ValidationError,
)
from messhub.domain.ports import MessRepository, ReviewRepository

logger = logging.getLogger(__name__)


def _review_input(model: type[BaseModel], data: dict[str, Any]):
    """Validate review fields; a bad rating on its own is InvalidRatingError."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        if all(error["loc"][:1] == ("rating",) for error in exc.errors()):
            raise InvalidRatingError() from exc
        raise ValidationError(error_messages(exc)) from exc


class ReviewService:
    """Create, list and moderate reviews. Only the author may change a review."""

    def __init__(self, review_repo: ReviewRepository, mess_repo: MessRepository):
        self._review_repo = review_repo
        self._mess_repo = mess_repo

    async def create(
        self,
        customer_id: int,
        mess_id: int,
        rating: Any,
        comment: Optional[str] = None,
    ) -> Review:
        data = _review_input(ReviewInput, {"rating": rating, "comment": comment})
        if await self._mess_repo.get_by_id(mess_id) is None:
            raise NotFoundError("Mess not found")

        review_id = await self._review_repo.save(
            Review(customer_id=customer_id, mess_id=mess_id, rating=data.rating, comment=data.comment)
        )
        logger.info("Customer %d rated mess %d with %d", customer_id, mess_id, data.rating)
        return await self.get(review_id)

    async def get(self, review_id: int) -> Review:
        review = await self._review_repo.get_by_id(review_id)
        if review is None:
            raise NotFoundError("Review not found")
        return review

    async def list(
        self,
        mess_id: Optional[int] = None,
        customer_id: Optional[int] = None,
    ) -> list[Review]:
        return await self._review_repo.search(mess_id=mess_id, customer_id=customer_id)

    async def list_for_mess(self, mess_id: int) -> list[Review]:
        return await self._review_repo.search(mess_id=mess_id)

    async def update(self, review_id: int, customer_id: int, fields: dict[str, Any]) -> Review:
        fields = {k: v for k, v in fields.items() if v is not None}
        changes = _review_input(ReviewUpdate, fields).model_dump(exclude_none=True)

        review = await self._authored(review_id, customer_id, "update")
        if changes:
            await self._review_repo.update(review.id, changes)
            logger.info("Customer %d updated review %d", customer_id, review_id)
        return await self.get(review_id)

    async def delete(self, review_id: int, customer_id: int) -> Review:
        review = await self._authored(review_id, customer_id, "delete")
        await self._review_repo.delete(review_id)
        logger.info("Customer %d deleted review %d", customer_id, review_id)
        return review

    async def average_rating(self, mess_id: int) -> RatingSummary:
        """Mean rating rounded to one decimal; (0, 0) when there are no reviews."""
        ratings = await self._review_repo.ratings_for_mess(mess_id)
        if not ratings:
            return RatingSummary(average_rating=0, total_reviews=0)
        return RatingSummary(
            average_rating=round(sum(ratings) / len(ratings), 1),
            total_reviews=len(ratings),
        )

    async def _authored(self, review_id: int, customer_id: int, action: str) -> Review:
        review = await self.get(review_id)
        if review.customer_id != customer_id:
            raise ForbiddenError(f"You can only {action} your own reviews")
        return review
