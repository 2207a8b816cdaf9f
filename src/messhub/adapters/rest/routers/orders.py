"""Order endpoints: placement, lifecycle and sales analytics."""

from fastapi import APIRouter, Depends, Query, status

from messhub.adapters.rest.dependencies import get_factory, require_roles
from messhub.adapters.rest.schemas import (
    MealSalesOut,
    MonthlySalesOut,
    OrderBody,
    OrderOut,
    OrderStatusBody,
    envelope,
)
from messhub.application.context import Identity
from messhub.domain.models import Role
from messhub.factory import ServiceFactory

router = APIRouter(prefix="/orders", tags=["orders"])

_any = require_roles()
_owner = require_roles(Role.OWNER)


def _orders(orders) -> dict:
    return envelope(count=len(orders), orders=[OrderOut.model_validate(o) for o in orders])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    body: OrderBody,
    identity: Identity = Depends(require_roles(Role.CUSTOMER)),
    factory: ServiceFactory = Depends(get_factory),
):
    order = await factory.create_order_service().create(identity.account_id, body)
    return envelope(order=OrderOut.model_validate(order))


@router.get("")
async def list_orders(
    _: Identity = Depends(require_roles(Role.OWNER, Role.ADMIN)),
    factory: ServiceFactory = Depends(get_factory),
):
    return _orders(await factory.create_order_service().list_all())


# --- The caller's own orders ---

@router.get("/mine")
async def my_orders(
    identity: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    return _orders(await factory.create_order_service().get_user_orders(identity.account_id))


@router.delete("/mine")
async def clear_my_orders(
    identity: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    deleted = await factory.create_order_service().clear_user_orders(identity.account_id)
    return envelope(message=f"Deleted {deleted} orders", deleted_count=deleted)


# --- Owner analytics ---

@router.get("/status/{order_status}")
async def orders_by_status(
    order_status: str,
    _: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    return _orders(await factory.create_order_service().get_by_status(order_status))


@router.get("/date-range")
async def orders_in_range(
    start: str = Query(..., description="ISO-8601 date or datetime"),
    end: str = Query(..., description="ISO-8601 date or datetime"),
    _: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    return _orders(await factory.create_order_service().get_within_date_range(start, end))


@router.get("/total-sales")
async def total_sales(
    _: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    return envelope(total_sales=await factory.create_order_service().total_sales())


@router.get("/monthly-sales")
async def monthly_sales(
    _: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    rows = await factory.create_order_service().monthly_sales()
    return envelope(monthly_sales=[MonthlySalesOut(**r) for r in rows])


@router.get("/top-meals")
async def top_meals(
    limit: int = Query(5, ge=1, le=100),
    _: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    meals = await factory.create_order_service().top_selling_meals(limit)
    return envelope(top_meals=[MealSalesOut.model_validate(m) for m in meals])


# --- Single order ---

@router.get("/{order_id}")
async def get_order(
    order_id: int,
    identity: Identity = Depends(_any),
    factory: ServiceFactory = Depends(get_factory),
):
    order = await factory.create_order_service().get_visible(order_id, identity)
    return envelope(order=OrderOut.model_validate(order))


@router.put("/{order_id}")
async def update_order_status(
    order_id: int,
    body: OrderStatusBody,
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_order_service()
    await service.get_managed(order_id, identity)
    order = await service.update_status(order_id, body.status.value)
    return envelope(order=OrderOut.model_validate(order))


@router.delete("/{order_id}")
async def delete_order(
    order_id: int,
    identity: Identity = Depends(_owner),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_order_service()
    await service.get_managed(order_id, identity)
    await service.delete(order_id)
    return envelope(message="Order deleted successfully")
