"""Menu (meal) endpoints. Owners manage the meals of messes they own."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from messhub.adapters.rest.dependencies import get_factory, require_roles
from messhub.adapters.rest.schemas import MealBody, MealOut, MealUpdateBody, envelope
from messhub.application.context import Identity
from messhub.domain.models import MealType, Role
from messhub.factory import ServiceFactory

router = APIRouter(prefix="/menu", tags=["menu"])

_any = require_roles()
_owner = require_roles(Role.OWNER)


@router.get("")
async def list_meals(
    mess_id: Optional[int] = Query(None),
    meal_type: Optional[MealType] = Query(None),
    is_veg: Optional[bool] = Query(None),
    is_available: Optional[bool] = Query(None),
    _: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    meals = await factory.create_meal_service().list(
        mess_id=mess_id,
        meal_type=meal_type.value if meal_type else None,
        is_veg=is_veg,
        is_available=is_available,
    )
    return envelope(count=len(meals), meals=[MealOut.model_validate(m) for m in meals])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal(
    body: MealBody,
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    await factory.create_mess_service().get_managed(body.mess_id, identity)
    fields = body.model_dump(exclude={"mess_id"})
    meal = await factory.create_meal_service().create(body.mess_id, fields)
    return envelope(meal=MealOut.model_validate(meal))


@router.get("/{meal_id}")
async def get_meal(
    meal_id: int,
    _: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    meal = await factory.create_meal_service().get(meal_id)
    return envelope(meal=MealOut.model_validate(meal))


@router.put("/{meal_id}")
async def update_meal(
    meal_id: int,
    body: MealUpdateBody,
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_meal_service()
    meal = await service.get(meal_id)
    await factory.create_mess_service().get_managed(meal.mess_id, identity)

    fields = body.model_dump(exclude_none=True)
    meal = await service.update(meal_id, fields)
    return envelope(meal=MealOut.model_validate(meal))


@router.delete("/{meal_id}")
async def delete_meal(
    meal_id: int,
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_meal_service()
    meal = await service.get(meal_id)
    await factory.create_mess_service().get_managed(meal.mess_id, identity)
    await service.delete(meal_id)
    return envelope(message="Meal deleted successfully")
