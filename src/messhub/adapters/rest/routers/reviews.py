"""Review endpoints. Only the author may change or remove a review."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from messhub.adapters.rest.dependencies import get_factory, require_roles
from messhub.adapters.rest.schemas import (
    RatingSummaryOut,
    ReviewBody,
    ReviewOut,
    ReviewUpdateBody,
    envelope,
)
from messhub.application.context import Identity
from messhub.domain.models import Role
from messhub.factory import ServiceFactory

router = APIRouter(prefix="/reviews", tags=["reviews"])

_any = require_roles()
_customer = require_roles(Role.CUSTOMER)


def _reviews(reviews) -> dict:
    return envelope(count=len(reviews), reviews=[ReviewOut.model_validate(r) for r in reviews])


@router.get("")
async def list_reviews(
    mess_id: Optional[int] = Query(None),
    customer_id: Optional[int] = Query(None),
    _: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    return _reviews(await factory.create_review_service().list(mess_id=mess_id, customer_id=customer_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewBody,
    identity: Identity = Depends(_customer),
    factory: ServiceFactory = Depends(get_factory),
):
    review = await factory.create_review_service().create(
        identity.account_id, body.mess_id, body.rating, body.comment,
    )
    return envelope(review=ReviewOut.model_validate(review))


@router.get("/mess/{mess_id}")
async def reviews_of_mess(
    mess_id: int,
    _: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    return _reviews(await factory.create_review_service().list_for_mess(mess_id))


@router.get("/mess/{mess_id}/average")
async def average_rating(
    mess_id: int,
    _: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    summary = await factory.create_review_service().average_rating(mess_id)
    return envelope(**RatingSummaryOut.model_validate(summary).model_dump())


@router.get("/{review_id}")
async def get_review(
    review_id: int,
    _: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    review = await factory.create_review_service().get(review_id)
    return envelope(review=ReviewOut.model_validate(review))


@router.put("/{review_id}")
async def update_review(
    review_id: int,
    body: ReviewUpdateBody,
    identity: Identity = Depends(_customer),
    factory: ServiceFactory = Depends(get_factory),
):
    review = await factory.create_review_service().update(
        review_id, identity.account_id, body.model_dump(exclude_none=True),
    )
    return envelope(review=ReviewOut.model_validate(review))


@router.delete("/{review_id}")
async def delete_review(
    review_id: int,
    identity: Identity = Depends(_customer),
    factory: ServiceFactory = Depends(get_factory),
):
    await factory.create_review_service().delete(review_id, identity.account_id)
    return envelope(message="Review deleted successfully")
